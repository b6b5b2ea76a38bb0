import random

import pytest

from roomcrawl.level.branches import augment_branches
from roomcrawl.level.config import GENERATION_CONFIGS
from roomcrawl.level.connectivity import reachable_from
from roomcrawl.level.paths import build_primary_paths
from roomcrawl.level.pruning import prune_connections
from roomcrawl.level.rooms import RoomGraph
from tests.level_test_utils import graph_from


def _bridge_graph():
    # start-a, a-{p,q}, p-q, a-b (only route), b-{r,s}, r-s, b-end
    positions = [(0, 0), (1, 0), (1, 1), (1, -1), (2, 0), (2, 1), (2, -1), (3, 0)]
    edges = [(0, 1), (1, 2), (1, 3), (2, 3), (1, 4), (4, 5), (4, 6), (5, 6), (4, 7)]
    return graph_from(positions, edges)


def _ladder_graph():
    # two parallel routes with a rung: start-a-b-end, start-c-d-end, a-c, b-d
    positions = [(0, 0), (1, 1), (2, 1), (1, -1), (2, -1), (3, 0)]
    edges = [(0, 1), (0, 3), (1, 2), (3, 4), (1, 3), (2, 4), (2, 5), (4, 5)]
    return graph_from(positions, edges)


def test_bridge_edge_is_never_pruned():
    for seed in range(20):
        graph = _bridge_graph()
        removed = prune_connections(graph, 1.0, random.Random(seed))
        assert (1, 4) not in removed and (4, 1) not in removed
        assert graph.end_id in reachable_from(graph, graph.start_id)


def test_redundant_edges_are_pruned_safely():
    for seed in range(20):
        graph = _ladder_graph()
        start_deg, end_deg = graph.start.degree, graph.end.degree
        removed = prune_connections(graph, 1.0, random.Random(seed))
        assert removed
        assert graph.end_id in reachable_from(graph, graph.start_id)
        assert graph.start.degree == start_deg
        assert graph.end.degree == end_deg
        for room in graph.inner_rooms():
            assert room.degree >= 2


def test_zero_prune_chance_is_noop():
    graph = _ladder_graph()
    edges = sorted(graph.edges())
    assert prune_connections(graph, 0.0, random.Random(1)) == []
    assert sorted(graph.edges()) == edges


@pytest.mark.parametrize("cfg", GENERATION_CONFIGS)
def test_zero_prune_chance_preserves_generated_edges(cfg):
    for seed in range(10):
        rng = random.Random(seed)
        graph = RoomGraph()
        layout = build_primary_paths(graph, cfg, rng)
        augment_branches(graph, layout, cfg.secondary_path_chance, rng)
        edges = sorted(graph.edges())
        assert prune_connections(graph, 0.0, rng) == []
        assert sorted(graph.edges()) == edges


def test_removed_edges_reported_and_gone():
    graph = _ladder_graph()
    removed = prune_connections(graph, 1.0, random.Random(3))
    remaining = set(graph.edges())
    for a, b in removed:
        assert (min(a, b), max(a, b)) not in remaining
