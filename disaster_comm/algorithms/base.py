"""
Shared types and configuration for the nearest-target routing algorithms.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple
import math

from ..models.entity import Entity


@dataclass
class RoutingConfig:
    """Configuration for graph construction."""
    k_neighbors: int = 4  # Out-degree cap per node
    max_edge_meters: float = 8000.0  # Longest edge allowed in the proximity graph

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'k_neighbors': self.k_neighbors,
            'max_edge_meters': self.max_edge_meters
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'RoutingConfig':
        """Create from dictionary."""
        return cls(**{k: v for k, v in data.items() if k in cls.__dataclass_fields__})


@dataclass
class ShortestPaths:
    """Output of a single-source relaxation run."""
    source: int
    dist: List[float]  # math.inf for unreachable nodes
    prev: List[Optional[int]]  # None for the source and unreachable nodes
    passes: int = 0  # Relaxation passes actually performed

    def is_reachable(self, index: int) -> bool:
        """Check whether a node was reached from the source."""
        return not math.isinf(self.dist[index])


@dataclass
class Route:
    """Multi-hop route from the requester to a chosen target."""
    path: List[int]  # Node indices, requester first
    distance_meters: float
    target: Entity
    positions: List[Tuple[float, float]] = field(default_factory=list)

    @property
    def hops(self) -> int:
        """Number of edges along the route."""
        return max(0, len(self.path) - 1)

    @property
    def distance_km(self) -> float:
        """Route length in kilometers."""
        return self.distance_meters / 1000.0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for the presentation layer."""
        return {
            'path': list(self.path),
            'positions': [list(p) for p in self.positions],
            'distance_meters': self.distance_meters,
            'hops': self.hops,
            'target': {
                'id': self.target.id,
                'type': self.target.entity_type.value,
                'name': self.target.name
            }
        }
