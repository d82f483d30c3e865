"""
Distance-vector style shortest paths over the proximity graph.

A Bellman-Ford relaxation from a single source:
- dist[source] = 0, every other node starts at infinity
- up to n-1 passes over all edges, relaxing dist[v] = dist[u] + w(u, v)
  on strict improvement and recording prev[v] = u
- stops early once a full pass changes nothing

Edges are enumerated by increasing source node, then in the order the
graph builder inserted them. When two edges would relax a node to the same
distance, the first one enumerated keeps the predecessor.

All weights are physical distances (non-negative), so the result matches a
priority-queue shortest-path search on the same graph.
"""

import math
from typing import List, Optional

import networkx as nx

from .base import ShortestPaths


def shortest_paths(graph: nx.DiGraph, source: int) -> ShortestPaths:
    """
    Run the relaxation from a source node.

    Args:
        graph: Graph with integer nodes 0..n-1 and 'weight' on edges
        source: Index of the source node

    Returns:
        ShortestPaths with dist and prev arrays indexed by node
    """
    n = graph.number_of_nodes()
    if not 0 <= source < n:
        raise IndexError(f"Source index {source} outside graph of {n} nodes")

    dist: List[float] = [math.inf] * n
    prev: List[Optional[int]] = [None] * n
    dist[source] = 0.0

    adjacency = graph.adj
    passes = 0
    for _ in range(n - 1):
        passes += 1
        relaxed = False
        for u in range(n):
            du = dist[u]
            if math.isinf(du):
                continue
            for v, attrs in adjacency[u].items():
                candidate = du + attrs['weight']
                if candidate < dist[v]:
                    dist[v] = candidate
                    prev[v] = u
                    relaxed = True
        if not relaxed:
            break

    return ShortestPaths(source=source, dist=dist, prev=prev, passes=passes)
