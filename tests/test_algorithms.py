"""
Unit tests for the algorithms module.
Tests graph construction, Bellman-Ford relaxation, selection and path
reconstruction.
"""

import math
import pytest
import sys
import os
import numpy as np
import networkx as nx

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from disaster_comm.models.entity import Entity, EntityType, RequesterPoint, haversine_distance
from disaster_comm.algorithms.base import RoutingConfig, ShortestPaths, Route
from disaster_comm.algorithms.graph_builder import (
    build_graph, build_graph_from_config, graph_nodes, haversine_matrix
)
from disaster_comm.algorithms.bellman_ford import shortest_paths
from disaster_comm.algorithms.selector import (
    nearest_target_index, count_candidates, reconstruct_path
)


# ==================== Test Fixtures ====================

def make_entity(lat, lon, entity_type=EntityType.HOSPITAL, name="", index=-1):
    return Entity(lat=lat, lon=lon, entity_type=entity_type, name=name, id=index)


def equator_line():
    """Hospital, Police, Rescuer every 0.01 degree along the equator."""
    return [
        make_entity(0.0, 0.0, EntityType.HOSPITAL, "H", 0),
        make_entity(0.0, 0.01, EntityType.POLICE, "P", 1),
        make_entity(0.0, 0.02, EntityType.RESCUER, "R", 2),
    ]


def random_city(n=40, seed=3):
    """Entities scattered over roughly 10 km around Chennai."""
    rng = np.random.default_rng(seed)
    types = [EntityType.HOSPITAL, EntityType.POLICE, EntityType.RESCUER, EntityType.SURVIVOR]
    entities = []
    for i in range(n):
        lat = 13.08 + (rng.random() - 0.5) * 0.1
        lon = 80.27 + (rng.random() - 0.5) * 0.1
        entities.append(make_entity(lat, lon, types[i % 4], f"e{i}", i))
    return entities


def manual_graph(n, edges):
    """DiGraph with nodes 0..n-1 and (u, v, weight) edges in the given order."""
    graph = nx.DiGraph()
    graph.add_nodes_from(range(n))
    for u, v, w in edges:
        graph.add_edge(u, v, weight=w)
    return graph


class TestRoutingConfig:
    """Tests for RoutingConfig."""

    def test_defaults(self):
        config = RoutingConfig()
        assert config.k_neighbors == 4
        assert config.max_edge_meters == 8000.0

    def test_dict_roundtrip_ignores_unknown_keys(self):
        config = RoutingConfig.from_dict({'k_neighbors': 2, 'max_edge_meters': 500.0, 'other': 1})
        assert config.to_dict() == {'k_neighbors': 2, 'max_edge_meters': 500.0}


class TestHaversineMatrix:
    """Tests for the vectorized distance matrix."""

    def test_matches_scalar_haversine(self):
        entities = random_city(8)
        lats = np.array([e.lat for e in entities])
        lons = np.array([e.lon for e in entities])
        matrix = haversine_matrix(lats, lons)
        for i, a in enumerate(entities):
            for j, b in enumerate(entities):
                assert matrix[i, j] == pytest.approx(
                    haversine_distance(a.lat, a.lon, b.lat, b.lon), abs=1e-6)

    def test_zero_diagonal_and_symmetric(self):
        entities = random_city(8)
        matrix = haversine_matrix(np.array([e.lat for e in entities]),
                                  np.array([e.lon for e in entities]))
        assert np.all(np.diag(matrix) == 0.0)
        assert np.allclose(matrix, matrix.T, rtol=0.0, atol=1e-9)


class TestGraphBuilder:
    """Tests for k-NN graph construction."""

    def test_requester_is_last_node(self):
        snapshot = equator_line()
        graph = build_graph(snapshot, RequesterPoint(0.0, -0.01))
        assert graph.number_of_nodes() == 4
        assert graph.nodes[3]['data'].entity_type == EntityType.USER

    def test_no_requester(self):
        graph = build_graph(equator_line(), None)
        assert graph.number_of_nodes() == 3

    def test_out_degree_and_weight_bounds(self):
        """Every node has at most k edges, each no longer than max_edge_meters."""
        snapshot = random_city(40)
        for k, max_edge in [(1, 8000.0), (4, 8000.0), (4, 1500.0), (7, 3000.0)]:
            graph = build_graph(snapshot, RequesterPoint(13.08, 80.27), k=k,
                                max_edge_meters=max_edge)
            for node in graph.nodes:
                assert graph.out_degree(node) <= k
            for _, _, w in graph.edges(data='weight'):
                assert 0.0 <= w <= max_edge

    def test_edges_link_nearest_neighbors(self):
        """Each node's edges go to its nearest others, nearest first."""
        snapshot = equator_line()
        graph = build_graph(snapshot, RequesterPoint(0.0, -0.01), k=2)
        assert list(graph.adj[3]) == [0, 1]
        assert list(graph.adj[1]) == [0, 2]
        assert graph[3][0]['weight'] == pytest.approx(1111.95, abs=0.01)

    def test_no_self_loops(self):
        graph = build_graph(random_city(20), RequesterPoint(13.08, 80.27))
        assert nx.number_of_selfloops(graph) == 0

    def test_graph_may_be_asymmetric(self):
        """A -> B without B -> A when B has a closer neighbor."""
        snapshot = [
            make_entity(0.0, 0.0, EntityType.HOSPITAL, "A", 0),
            make_entity(0.0, 0.01, EntityType.POLICE, "B", 1),
            make_entity(0.0, 0.015, EntityType.RESCUER, "C", 2),
        ]
        graph = build_graph(snapshot, None, k=1)
        assert graph.has_edge(0, 1)
        assert not graph.has_edge(1, 0)
        assert graph.has_edge(1, 2)

    def test_equal_distance_neighbors_keep_index_order(self):
        """Ties in the ranking keep ascending node order."""
        snapshot = [
            make_entity(0.0, 0.01, EntityType.HOSPITAL, "east", 0),
            make_entity(0.0, -0.01, EntityType.HOSPITAL, "west", 1),
        ]
        graph = build_graph(snapshot, RequesterPoint(0.0, 0.0), k=1)
        assert list(graph.adj[2]) == [0]

    def test_k_zero_builds_no_edges(self):
        graph = build_graph(random_city(10), RequesterPoint(13.08, 80.27), k=0)
        assert graph.number_of_edges() == 0

    def test_zero_max_edge_builds_no_edges(self):
        graph = build_graph(random_city(10), RequesterPoint(13.08, 80.27), max_edge_meters=0)
        assert graph.number_of_edges() == 0

    def test_negative_parameters_rejected(self):
        with pytest.raises(ValueError):
            build_graph(equator_line(), None, k=-1)
        with pytest.raises(ValueError):
            build_graph(equator_line(), None, max_edge_meters=-5.0)

    def test_build_from_config(self):
        graph = build_graph_from_config(random_city(12), RequesterPoint(13.08, 80.27),
                                        RoutingConfig(k_neighbors=2))
        assert max(d for _, d in graph.out_degree) <= 2

    def test_graph_nodes_helper(self):
        nodes = graph_nodes(equator_line(), RequesterPoint(0.0, -0.01))
        assert [n.id for n in nodes] == [0, 1, 2, 3]


class TestBellmanFord:
    """Tests for the relaxation engine."""

    def test_source_distance_zero(self):
        graph = build_graph(equator_line(), RequesterPoint(0.0, -0.01))
        result = shortest_paths(graph, 3)
        assert isinstance(result, ShortestPaths)
        assert result.dist[3] == 0.0
        assert result.prev[3] is None

    def test_matches_dijkstra(self):
        """Distances equal networkx Dijkstra on the same graph."""
        for seed in range(5):
            snapshot = random_city(35, seed=seed)
            graph = build_graph(snapshot, RequesterPoint(13.08, 80.27), k=3,
                                max_edge_meters=2500.0)
            source = graph.number_of_nodes() - 1
            result = shortest_paths(graph, source)
            reference = nx.single_source_dijkstra_path_length(graph, source, weight='weight')
            for node in graph.nodes:
                if node in reference:
                    assert result.dist[node] == pytest.approx(reference[node])
                else:
                    assert math.isinf(result.dist[node])
                    assert result.prev[node] is None

    def test_unreachable_distinct_from_zero(self):
        graph = manual_graph(3, [(0, 1, 0.0)])
        result = shortest_paths(graph, 0)
        assert result.dist[1] == 0.0
        assert result.prev[1] == 0
        assert math.isinf(result.dist[2])
        assert result.prev[2] is None
        assert result.is_reachable(1)
        assert not result.is_reachable(2)

    def test_multi_hop_shorter_than_direct(self):
        graph = manual_graph(3, [(0, 2, 10.0), (0, 1, 3.0), (1, 2, 3.0)])
        result = shortest_paths(graph, 0)
        assert result.dist[2] == 6.0
        assert result.prev[2] == 1

    def test_tie_keeps_first_enumerated_edge(self):
        """Equal-cost predecessors resolve to the lower source node."""
        graph = manual_graph(4, [(0, 1, 1.0), (0, 2, 2.0), (1, 3, 2.0), (2, 3, 1.0)])
        result = shortest_paths(graph, 0)
        assert result.dist[3] == 3.0
        assert result.prev[3] == 1

    def test_early_termination(self):
        """A chain relaxed in index order settles in one pass plus a check pass."""
        graph = manual_graph(5, [(0, 1, 1.0), (1, 2, 1.0), (2, 3, 1.0), (3, 4, 1.0)])
        result = shortest_paths(graph, 0)
        assert result.dist[4] == 4.0
        assert result.passes == 2

    def test_reverse_chain_needs_more_passes(self):
        graph = manual_graph(4, [(1, 0, 1.0), (2, 1, 1.0), (3, 2, 1.0)])
        result = shortest_paths(graph, 3)
        assert result.dist[0] == 3.0
        assert result.passes == 3

    def test_single_node(self):
        graph = manual_graph(1, [])
        result = shortest_paths(graph, 0)
        assert result.dist == [0.0]
        assert result.passes == 0

    def test_invalid_source(self):
        graph = manual_graph(2, [])
        with pytest.raises(IndexError):
            shortest_paths(graph, 2)


class TestSelector:
    """Tests for nearest target selection."""

    def test_picks_minimum_of_accepted_types(self):
        nodes = equator_line()
        dist = [5.0, 1.0, 3.0]
        assert nearest_target_index(nodes, dist, {EntityType.HOSPITAL}) == 0
        assert nearest_target_index(nodes, dist, {EntityType.HOSPITAL, EntityType.RESCUER}) == 2
        assert nearest_target_index(
            nodes, dist, {EntityType.HOSPITAL, EntityType.POLICE, EntityType.RESCUER}) == 1

    def test_tie_resolves_to_lowest_index(self):
        nodes = [make_entity(0, 0, EntityType.SURVIVOR, index=i) for i in range(3)]
        assert nearest_target_index(nodes, [4.0, 2.0, 2.0], {EntityType.SURVIVOR}) == 1

    def test_unreachable_not_selected(self):
        nodes = equator_line()
        dist = [math.inf, math.inf, math.inf]
        assert nearest_target_index(nodes, dist, {EntityType.HOSPITAL}) is None

    def test_no_accepted_type(self):
        assert nearest_target_index(equator_line(), [0.0, 1.0, 2.0], {EntityType.SURVIVOR}) is None

    def test_count_candidates(self):
        nodes = equator_line()
        assert count_candidates(nodes, {EntityType.POLICE, EntityType.RESCUER}) == 2
        assert count_candidates(nodes, {EntityType.SURVIVOR}) == 0


class TestPathReconstruction:
    """Tests for reconstruct_path."""

    def test_source_to_target_order(self):
        prev = [None, 0, 1, 2]
        path = reconstruct_path(prev, 3)
        assert path == [0, 1, 2, 3]

    def test_target_is_source(self):
        assert reconstruct_path([None, 0], 0) == [0]

    def test_cycle_detected(self):
        with pytest.raises(ValueError):
            reconstruct_path([1, 0], 0)

    def test_route_hops(self):
        target = make_entity(0.0, 0.0)
        route = Route(path=[3, 0], distance_meters=1111.95, target=target)
        assert route.hops == 1
        assert route.distance_km == pytest.approx(1.11195)
        assert route.to_dict()['hops'] == 1


class TestEndToEnd:
    """Graph -> relaxation -> selection -> path on the equator scenario."""

    def test_nearest_hospital_route(self):
        snapshot = equator_line()
        requester = RequesterPoint(0.0, -0.01)
        graph = build_graph(snapshot, requester)
        nodes = graph_nodes(snapshot, requester)
        result = shortest_paths(graph, 3)

        target = nearest_target_index(nodes, result.dist, {EntityType.HOSPITAL})
        assert target == 0
        path = reconstruct_path(result.prev, target)
        assert path == [3, 0]
        assert result.dist[target] == pytest.approx(1111.95, abs=0.01)

    def test_disconnected_graph_has_no_target(self):
        snapshot = equator_line()
        requester = RequesterPoint(0.0, -0.01)
        graph = build_graph(snapshot, requester, k=0)
        result = shortest_paths(graph, 3)
        nodes = graph_nodes(snapshot, requester)
        assert nearest_target_index(nodes, result.dist, {EntityType.HOSPITAL}) is None
