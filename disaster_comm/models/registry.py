"""
Entity registry holding the current snapshot of geolocated entities.
"""

from dataclasses import dataclass, field, replace
from typing import Dict, Iterable, Iterator, List, Tuple

from .entity import Entity, EntityType, ENTITY_TYPES, validate_coordinates


@dataclass
class RegistryStats:
    """Statistics about the registry contents."""
    total_entities: int = 0
    by_type: Dict[str, int] = field(default_factory=dict)
    unnamed: int = 0


class EntityRegistry:
    """
    Ordered store of entities for one load epoch.

    Indices are assigned in append order and stay stable until the next
    clear() or replace(). There is no single-item removal.
    """

    def __init__(self):
        """Initialize empty registry."""
        self._entities: List[Entity] = []

    # ==================== Mutation ====================

    def append(self, entity: Entity) -> int:
        """Add an entity and return its index."""
        index = len(self._entities)
        self._entities.append(self._indexed(entity, index))
        return index

    def clear(self) -> None:
        """Remove all entities; indices restart at zero."""
        self._entities = []

    def replace(self, entities: Iterable[Entity]) -> int:
        """
        Atomically replace the whole registry.

        The new contents are validated and indexed before being swapped in,
        so a bad entity leaves the previous snapshot untouched.

        Returns:
            Number of entities now in the registry.
        """
        fresh = [self._indexed(entity, i) for i, entity in enumerate(entities)]
        self._entities = fresh
        return len(fresh)

    @staticmethod
    def _indexed(entity: Entity, index: int) -> Entity:
        if entity.entity_type not in ENTITY_TYPES:
            raise ValueError(
                f"Entity type {entity.entity_type.value!r} is reserved and cannot be registered"
            )
        validate_coordinates(entity.lat, entity.lon)
        return replace(entity, id=index)

    # ==================== Access ====================

    def snapshot(self) -> Tuple[Entity, ...]:
        """Read-only view of the entities in append order."""
        return tuple(self._entities)

    def get(self, index: int) -> Entity:
        """Get an entity by index."""
        return self._entities[index]

    def count_by_type(self) -> Dict[EntityType, int]:
        """Count entities per type."""
        counts = {t: 0 for t in ENTITY_TYPES}
        for entity in self._entities:
            counts[entity.entity_type] += 1
        return counts

    def get_stats(self) -> RegistryStats:
        """Get registry statistics."""
        stats = RegistryStats()
        stats.total_entities = len(self._entities)
        stats.by_type = {t.value: c for t, c in self.count_by_type().items()}
        stats.unnamed = sum(1 for e in self._entities if not e.name)
        return stats

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[Entity]:
        return iter(tuple(self._entities))

    def __repr__(self) -> str:
        counts = ", ".join(f"{t.value.lower()}={c}" for t, c in self.count_by_type().items())
        return f"EntityRegistry(entities={len(self)}, {counts})"
