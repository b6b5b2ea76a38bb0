import random

import pytest

from roomcrawl.level.branches import augment_branches
from roomcrawl.level.config import GENERATION_CONFIGS
from roomcrawl.level.paths import build_primary_paths
from roomcrawl.level.relax import Bounds, relax_positions
from roomcrawl.level.rooms import RoomGraph
from tests.level_test_utils import graph_from


def test_coincident_rooms_are_separated_within_bounds():
    graph = graph_from(
        [(-0.5, 2.0), (1.0, 1.0), (1.0, 1.0), (3.0, 3.0), (10.5, 2.0)],
        [(0, 1), (1, 2), (2, 3), (3, 4)],
    )
    a, b = graph[1], graph[2]
    bounds = relax_positions(graph, x_margin=0.5)
    assert bounds == Bounds(1.0, 1.0, 3.0, 3.0)
    assert (a.x, a.y) != (b.x, b.y)
    for room in graph.inner_rooms():
        assert bounds.contains(room)


def test_start_and_end_never_move():
    graph = graph_from(
        [(-0.5, 2.0), (0.2, 2.0), (0.4, 2.1), (10.5, 2.0)],
        [(0, 1), (1, 2), (2, 3)],
    )
    relax_positions(graph, x_margin=0.5)
    assert graph.start.position == (-0.5, 2.0)
    assert graph.end.position == (10.5, 2.0)


def test_x_clamped_between_start_and_end():
    graph = graph_from(
        [(-0.5, 2.0), (-3.0, 2.0), (14.0, 2.0), (10.5, 2.0)],
        [(0, 1), (1, 2), (2, 3)],
    )
    relax_positions(graph, x_margin=1.0)
    assert graph[1].x == pytest.approx(0.5)
    assert graph[2].x == pytest.approx(9.5)


def test_x_clamp_includes_margin_edges_but_never_reaches_start_or_end():
    # rooms already sitting on the margin lines are left where they are
    graph = graph_from(
        [(-0.5, 2.0), (0.5, 0.0), (9.5, 4.0), (10.5, 2.0)],
        [(0, 1), (1, 2), (2, 3)],
    )
    relax_positions(graph, x_margin=1.0)
    assert graph[1].x == 0.5
    assert graph[2].x == 9.5
    for room in graph.inner_rooms():
        assert graph.start.x < room.x < graph.end.x


@pytest.mark.parametrize("cfg", GENERATION_CONFIGS)
def test_relaxed_layout_stays_in_box(cfg):
    for seed in range(15):
        rng = random.Random(seed)
        graph = RoomGraph()
        layout = build_primary_paths(graph, cfg, rng)
        augment_branches(graph, layout, cfg.secondary_path_chance, rng)
        bounds = relax_positions(graph, layout.x_margin)
        lo = graph.start.x + layout.x_margin
        hi = graph.end.x - layout.x_margin
        for room in graph.inner_rooms():
            assert bounds.contains(room)
            assert lo - 1e-9 <= room.x <= hi + 1e-9
