"""
k-nearest-neighbor proximity graph construction.

Every node (registry entities plus the requester, appended last) links to
its k nearest other nodes that lie within max_edge_meters. Each node ranks
its neighbors independently, so the graph is directed and may be
asymmetric: A -> B does not imply B -> A.
"""

from typing import List, Optional, Sequence

import networkx as nx
import numpy as np

from ..models.entity import Entity, RequesterPoint, EARTH_RADIUS_M
from .base import RoutingConfig


def haversine_matrix(lats: np.ndarray, lons: np.ndarray) -> np.ndarray:
    """
    Pairwise haversine distances in meters.

    Args:
        lats: Latitudes in degrees, shape (n,)
        lons: Longitudes in degrees, shape (n,)

    Returns:
        Array of shape (n, n).
    """
    lat_rad = np.radians(lats)
    lon_rad = np.radians(lons)
    dlat = lat_rad[None, :] - lat_rad[:, None]
    dlon = lon_rad[None, :] - lon_rad[:, None]

    a = (np.sin(dlat / 2) ** 2 +
         np.cos(lat_rad)[:, None] * np.cos(lat_rad)[None, :] * np.sin(dlon / 2) ** 2)
    a = np.clip(a, 0.0, 1.0)
    c = 2 * np.arctan2(np.sqrt(a), np.sqrt(1 - a))
    return EARTH_RADIUS_M * c


def graph_nodes(snapshot: Sequence[Entity],
                requester: Optional[RequesterPoint]) -> List[Entity]:
    """Snapshot entities followed by the synthetic requester node."""
    nodes = list(snapshot)
    if requester is not None:
        nodes.append(requester.to_entity(len(nodes)))
    return nodes


def build_graph(snapshot: Sequence[Entity],
                requester: Optional[RequesterPoint],
                k: int = 4,
                max_edge_meters: float = 8000.0) -> nx.DiGraph:
    """
    Build the directed k-NN graph for one query.

    Node i carries its Entity under the 'data' attribute; edge i -> j
    carries the distance in meters under 'weight'. Edges of a node are
    added nearest first, with equal distances kept in ascending j order.

    Args:
        snapshot: Registry entities in index order
        requester: Current actor location, appended as the last node
        k: Maximum out-degree per node
        max_edge_meters: Maximum edge length

    Returns:
        networkx DiGraph with nodes 0..n
    """
    if k < 0:
        raise ValueError(f"k must be non-negative, got {k}")
    if max_edge_meters < 0:
        raise ValueError(f"max_edge_meters must be non-negative, got {max_edge_meters}")

    nodes = graph_nodes(snapshot, requester)
    graph = nx.DiGraph()
    for index, node in enumerate(nodes):
        graph.add_node(index, data=node)

    n = len(nodes)
    if n < 2 or k == 0:
        return graph

    lats = np.array([node.lat for node in nodes], dtype=float)
    lons = np.array([node.lon for node in nodes], dtype=float)
    distances = haversine_matrix(lats, lons)

    for i in range(n):
        row = distances[i]
        added = 0
        for j in np.argsort(row, kind='stable'):
            if added >= k:
                break
            if j == i:
                continue
            d = float(row[j])
            if d > max_edge_meters:
                # Sorted ascending, nothing further can qualify
                break
            graph.add_edge(i, int(j), weight=d)
            added += 1

    return graph


def build_graph_from_config(snapshot: Sequence[Entity],
                            requester: Optional[RequesterPoint],
                            config: Optional[RoutingConfig] = None) -> nx.DiGraph:
    """Build the graph with parameters taken from a RoutingConfig."""
    config = config or RoutingConfig()
    return build_graph(snapshot, requester,
                       k=config.k_neighbors,
                       max_edge_meters=config.max_edge_meters)
