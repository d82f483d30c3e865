"""
Nearest-target selection and path reconstruction.
"""

import math
from typing import Collection, List, Optional, Sequence

from ..models.entity import Entity, EntityType


def nearest_target_index(nodes: Sequence[Entity],
                         dist: Sequence[float],
                         accepted_types: Collection[EntityType]) -> Optional[int]:
    """
    Index of the closest node whose type is accepted.

    Nodes are scanned in ascending index order and only a strictly smaller
    distance replaces the current best, so equal distances resolve to the
    lowest index. Unreachable nodes (infinite distance) are never chosen.

    Returns:
        Node index, or None if no accepted node is reachable.
    """
    best_index = None
    best_dist = math.inf
    for index, node in enumerate(nodes):
        if node.entity_type not in accepted_types:
            continue
        if dist[index] < best_dist:
            best_dist = dist[index]
            best_index = index
    return best_index


def count_candidates(nodes: Sequence[Entity],
                     accepted_types: Collection[EntityType]) -> int:
    """Number of nodes of an accepted type, reachable or not."""
    return sum(1 for node in nodes if node.entity_type in accepted_types)


def reconstruct_path(prev: Sequence[Optional[int]], target: int) -> List[int]:
    """Walk predecessors back from the target and return source -> target."""
    path = []
    current: Optional[int] = target
    while current is not None:
        path.append(current)
        if len(path) > len(prev):
            raise ValueError("Predecessor chain contains a cycle")
        current = prev[current]
    path.reverse()
    return path
