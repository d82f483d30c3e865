"""
Session state owned by the core.

A session holds the entity registry, the requester point and the active
role. External collaborators (city loader, map clicks, GPS) push updates
through the methods here; nothing is reachable through module globals.
"""

from contextlib import contextmanager
from typing import Any, Iterable, Iterator, Mapping, Optional, Tuple, Union
import logging

from ..models.entity import Entity, EntityType, RequesterPoint
from ..models.registry import EntityRegistry
from ..models.roles import DEFAULT_ROLE

logger = logging.getLogger(__name__)

EntityRecord = Union[Entity, Mapping[str, Any]]


class SessionBusyError(RuntimeError):
    """Raised when a registry load overlaps another one."""


def entity_from_record(record: EntityRecord) -> Entity:
    """
    Convert a loader record {lat, lon, name, type} into an Entity.

    Raises:
        ValueError: Missing coordinates or an unknown / reserved type
    """
    if isinstance(record, Entity):
        return record

    raw_type = record.get('type')
    entity_type = EntityType.parse(raw_type)
    if entity_type is None:
        raise ValueError(f"Unknown entity type: {raw_type!r}")

    try:
        lat = float(record['lat'])
        lon = float(record['lon'])
    except (KeyError, TypeError) as e:
        raise ValueError(f"Entity record without valid coordinates: {record!r}") from e

    return Entity(lat=lat, lon=lon, entity_type=entity_type,
                  name=record.get('name') or "")


class Session:
    """Registry, requester location and active role for one actor."""

    def __init__(self, registry: Optional[EntityRegistry] = None,
                 role: Optional[str] = None):
        self.registry = registry if registry is not None else EntityRegistry()
        self._requester: Optional[RequesterPoint] = None
        self._active_role: str = role or DEFAULT_ROLE.value
        self._busy = False
        self.last_center: Optional[Tuple[float, float]] = None

    # ==================== Registry ====================

    def load_entities(self, records: Iterable[EntityRecord],
                      center: Optional[Tuple[float, float]] = None) -> int:
        """
        Replace the registry with a new batch of entities.

        All records are converted before the swap, so a bad record leaves the
        previous registry in place.

        Returns:
            Number of entities loaded.
        """
        entities = [entity_from_record(r) for r in records]
        count = self.registry.replace(entities)
        if center is not None:
            self.last_center = center
        logger.info("Loaded %d entities: %s", count, self.registry.get_stats().by_type)
        return count

    @property
    def is_busy(self) -> bool:
        """True while a registry-replacing load is in flight."""
        return self._busy

    def begin_load(self) -> bool:
        """Mark a load as started; returns False if one is already running."""
        if self._busy:
            logger.warning("Load requested while another load is in progress; ignored")
            return False
        self._busy = True
        return True

    def end_load(self) -> None:
        """Mark the current load as finished."""
        self._busy = False

    @contextmanager
    def loading(self) -> Iterator['Session']:
        """
        Context manager wrapping a registry load.

        Raises:
            SessionBusyError: Another load is already running
        """
        if not self.begin_load():
            raise SessionBusyError("A load is already in progress")
        try:
            yield self
        finally:
            self.end_load()

    # ==================== Requester ====================

    @property
    def requester(self) -> Optional[RequesterPoint]:
        return self._requester

    def set_requester_location(self, lat: float, lon: float) -> RequesterPoint:
        """Set or move the requester point."""
        self._requester = RequesterPoint(lat=float(lat), lon=float(lon))
        logger.debug("Requester location set to (%.5f, %.5f)", lat, lon)
        return self._requester

    def clear_requester_location(self) -> None:
        """Forget the requester point."""
        self._requester = None

    # ==================== Role ====================

    @property
    def active_role(self) -> str:
        return self._active_role

    def set_active_role(self, role: Optional[str]) -> None:
        """Set the role used for visibility and nearest-by-role."""
        self._active_role = role or DEFAULT_ROLE.value
        logger.debug("Active role: %s", self._active_role)

    def __repr__(self) -> str:
        return (f"Session(role={self._active_role!r}, entities={len(self.registry)}, "
                f"requester={self._requester.pos if self._requester else None}, "
                f"busy={self._busy})")
