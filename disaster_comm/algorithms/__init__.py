"""
Algorithms package for nearest-target discovery.

- Graph builder: directed k-nearest-neighbor proximity graph
- Bellman-Ford relaxation: single-source shortest distances
- Selector: nearest accepted target and hop sequence
"""

from .base import RoutingConfig, ShortestPaths, Route
from .graph_builder import build_graph, build_graph_from_config, graph_nodes, haversine_matrix
from .bellman_ford import shortest_paths
from .selector import nearest_target_index, count_candidates, reconstruct_path

__all__ = [
    # Types and configuration
    'RoutingConfig', 'ShortestPaths', 'Route',
    # Graph
    'build_graph', 'build_graph_from_config', 'graph_nodes', 'haversine_matrix',
    # Routing
    'shortest_paths',
    # Selection
    'nearest_target_index', 'count_candidates', 'reconstruct_path'
]
