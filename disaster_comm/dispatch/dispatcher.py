"""
Dispatcher: broadcast and nearest-target queries over a session.

Each nearest query rebuilds the proximity graph from the current registry
snapshot and requester point, runs the Bellman-Ford relaxation from the
requester, selects the target and reconstructs the route. Nothing from a
previous query is reused.

Delivery to entities and route display are delegated to callbacks supplied
by the presentation layer.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Collection, Optional, Sequence, Union
import logging

from ..algorithms.base import RoutingConfig, Route
from ..algorithms.bellman_ford import shortest_paths
from ..algorithms.graph_builder import build_graph_from_config
from ..algorithms.selector import count_candidates, nearest_target_index, reconstruct_path
from ..models.entity import Entity, EntityType, ENTITY_TYPES
from ..models.roles import nearest_targets, visible_types
from .session import Session

logger = logging.getLogger(__name__)


class QueryStatus(Enum):
    """Outcome of a nearest query."""
    OK = "ok"
    EMPTY_REGISTRY = "empty_registry"
    NO_LOCATION = "no_location"
    NO_CANDIDATES = "no_candidates"
    UNREACHABLE = "unreachable"
    UNKNOWN_ROLE = "unknown_role"
    BUSY = "busy"


MSG_EMPTY_REGISTRY = "No entities available yet. Load a city first."
MSG_NO_LOCATION = "Set your location (map click or GPS) first."
MSG_UNKNOWN_ROLE = "Unknown role."
MSG_BUSY = "A city load is in progress; try again when it finishes."


@dataclass
class DispatchResult:
    """Result of a nearest query, successful or not."""
    status: QueryStatus
    message: str
    delivered: int = 0
    route: Optional[Route] = None

    @property
    def ok(self) -> bool:
        return self.status == QueryStatus.OK

    @property
    def target(self) -> Optional[Entity]:
        return self.route.target if self.route else None

    def __str__(self) -> str:
        return self.message

    def __int__(self) -> int:
        return self.delivered


# Callback type aliases
Notifier = Callable[[int, Entity, str], None]
RouteCallback = Callable[[Route], None]


def format_km(distance_meters: float) -> str:
    """Kilometers with two decimals, from the distance truncated to whole meters."""
    return f"{int(distance_meters) / 1000:.2f}"


class Dispatcher:
    """
    Service interface for broadcasts and nearest-target queries.

    Example:
        dispatcher = Dispatcher(session, notifier=print_delivery)
        dispatcher.broadcast_visible("Flood warning")
        result = dispatcher.find_nearest_by_role("Survivor")
        print(result.message)
    """

    def __init__(self, session: Session,
                 config: Optional[RoutingConfig] = None,
                 notifier: Optional[Notifier] = None,
                 route_callback: Optional[RouteCallback] = None):
        self.session = session
        self.config = config or RoutingConfig()
        self._notifier = notifier
        self._route_callback = route_callback

    def set_notifier(self, notifier: Optional[Notifier]) -> None:
        """Set the callback that delivers a message to one entity."""
        self._notifier = notifier

    def set_route_callback(self, callback: Optional[RouteCallback]) -> None:
        """Set the callback that displays a route."""
        self._route_callback = callback

    def _deliver(self, entity: Entity, message: str) -> None:
        if self._notifier:
            self._notifier(entity.id, entity, message)

    # ==================== Broadcasts ====================

    def broadcast_to_type(self, entity_type: Union[str, EntityType],
                          message: str = "") -> int:
        """
        Deliver to every entity of a type, or to all entities for "All".

        Visibility is ignored. Returns the delivered count.
        """
        if not entity_type or (isinstance(entity_type, str) and entity_type.lower() == "all"):
            accepted = ENTITY_TYPES
        else:
            resolved = EntityType.parse(entity_type)
            if resolved is None:
                logger.warning("Broadcast to unknown type %r delivered nothing", entity_type)
                return 0
            accepted = (resolved,)
        return self._broadcast(accepted, message)

    def broadcast_visible(self, message: str = "") -> int:
        """Deliver to entities visible under the active role."""
        return self._broadcast(visible_types(self.session.active_role), message)

    def _broadcast(self, accepted: Collection[EntityType], message: str) -> int:
        if self.session.is_busy:
            logger.warning("Broadcast ignored while a city load is in progress")
            return 0
        count = 0
        for entity in self.session.registry.snapshot():
            if entity.entity_type in accepted:
                self._deliver(entity, message)
                count += 1
        logger.info("Broadcast to %s delivered to %d target(s)",
                    sorted(t.value for t in accepted), count)
        return count

    # ==================== Nearest Queries ====================

    def find_nearest_and_highlight(self, entity_type: Union[str, EntityType],
                                   draw_route: bool = True,
                                   also_notify: bool = False) -> DispatchResult:
        """
        Find the nearest reachable entity of one type.

        Args:
            entity_type: Target type name
            draw_route: Hand the route to the route callback
            also_notify: Deliver one notification to the target

        Returns:
            DispatchResult; delivered is 1 when the target was notified
        """
        resolved = EntityType.parse(entity_type)
        if resolved is None or resolved == EntityType.USER:
            return DispatchResult(QueryStatus.NO_CANDIDATES,
                                  f"No {entity_type} known in the current area.")
        return self._find_nearest((resolved,), draw_route, also_notify)

    def find_nearest_by_role(self, role: Optional[str] = None,
                             draw_route: bool = True) -> DispatchResult:
        """
        Find the nearest counterpart for a role (defaults to the active role).

        A Survivor gets the single closest Hospital, Police or Rescuer from
        one relaxation run; the other roles look for the nearest Survivor.
        """
        role = role or self.session.active_role
        targets = nearest_targets(role)
        if targets is None:
            return DispatchResult(QueryStatus.UNKNOWN_ROLE, MSG_UNKNOWN_ROLE)
        ordered = tuple(t for t in ENTITY_TYPES if t in targets)
        return self._find_nearest(ordered, draw_route, also_notify=False)

    def relocate(self, lat: float, lon: float, draw_route: bool = True) -> DispatchResult:
        """Move the requester and search for the active role's nearest counterpart."""
        self.session.set_requester_location(lat, lon)
        return self.find_nearest_by_role(draw_route=draw_route)

    def _find_nearest(self, accepted: Sequence[EntityType],
                      draw_route: bool, also_notify: bool) -> DispatchResult:
        label = ", ".join(t.value for t in accepted)

        if self.session.is_busy:
            return DispatchResult(QueryStatus.BUSY, MSG_BUSY)

        snapshot = self.session.registry.snapshot()
        if not snapshot:
            return DispatchResult(QueryStatus.EMPTY_REGISTRY, MSG_EMPTY_REGISTRY)

        requester = self.session.requester
        if requester is None:
            return DispatchResult(QueryStatus.NO_LOCATION, MSG_NO_LOCATION)

        if count_candidates(snapshot, accepted) == 0:
            return DispatchResult(QueryStatus.NO_CANDIDATES,
                                  f"No {label} known in the current area.")

        graph = build_graph_from_config(snapshot, requester, self.config)
        nodes = [graph.nodes[i]['data'] for i in graph]
        source = len(nodes) - 1
        result = shortest_paths(graph, source)
        logger.debug("Graph: %d nodes, %d edges, %d relaxation passes",
                     graph.number_of_nodes(), graph.number_of_edges(), result.passes)

        target_index = nearest_target_index(nodes, result.dist, accepted)
        if target_index is None:
            if len(accepted) == 1:
                message = f"No reachable {label} found."
            else:
                message = f"No reachable target among: {label}."
            return DispatchResult(QueryStatus.UNREACHABLE, message)

        path = reconstruct_path(result.prev, target_index)
        target = nodes[target_index]
        route = Route(
            path=path,
            distance_meters=result.dist[target_index],
            target=target,
            positions=[nodes[i].pos for i in path]
        )

        km = format_km(route.distance_meters)
        delivered = 0
        if also_notify:
            self._deliver(target, f"Nearest target via DVR ({km} km, {route.hops} hops)")
            delivered = 1
        if draw_route and self._route_callback:
            self._route_callback(route)

        message = (f"Nearest {target.entity_type.value} → {target.display_name} | "
                   f"{km} km | hops: {route.hops}")
        logger.info(message)
        return DispatchResult(QueryStatus.OK, message, delivered=delivered, route=route)
