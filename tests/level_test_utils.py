"""Shared helpers for level tests: hand-built graphs and invariant checks."""

import random

from roomcrawl.items.catalog import ItemCatalog
from roomcrawl.level.config import GENERATION_CONFIGS
from roomcrawl.level.connectivity import reachable_from
from roomcrawl.level.pipeline import Level
from roomcrawl.level.rooms import RoomGraph


def graph_from(positions, edges, start=0, end=None):
    """Build a RoomGraph with rooms created in ``positions`` order.

    ``edges`` are index pairs; ``end`` defaults to the last room.
    """
    graph = RoomGraph()
    ids = [graph.add_room(x, y).id for x, y in positions]
    for a, b in edges:
        graph.connect(ids[a], ids[b])
    graph.start_id = ids[start]
    graph.end_id = ids[-1 if end is None else end]
    return graph


def level_from(graph, key_definitions=(), depth=0):
    level = Level(
        graph=graph,
        key_definitions=list(key_definitions),
        depth=depth,
        seed=0,
        config=GENERATION_CONFIGS[0],
    )
    level.mark_entered(graph.start)
    return level


def key_only_catalog(n=4):
    return ItemCatalog.from_records({"name": f"Key {i}", "key": f"k{i}"} for i in range(n))


class StuckChoiceRandom(random.Random):
    """Random whose choice() always returns the first element.

    In key placement the first room is the start room, so every draw is
    rejected and the attempt exhausts its budget.
    """

    def choice(self, seq):
        return seq[0]


def assert_level_invariants(level):
    graph = level.graph
    ids = list(graph.rooms)
    assert len(ids) == len(set(ids))
    assert graph.end_id in reachable_from(graph, graph.start_id)
    for room in graph:
        assert room.id not in room.neighbors, f"self edge on {room.id}"
        assert len(room.neighbors) == len(set(room.neighbors)), f"duplicate edge on {room.id}"
        for other in room.neighbors:
            assert room.id in graph[other].neighbors, "adjacency not symmetric"
    for room in graph.inner_rooms():
        assert room.degree >= 2, f"room {room.id} degree {room.degree}"
    if level.config.num_primary_paths >= 2:
        assert graph.start.degree >= 2
        assert graph.end.degree >= 2
    holders = {}
    for room in graph:
        keys = [i for i in room.items if i.definition.is_key]
        assert len(keys) <= 1, f"room {room.id} holds {len(keys)} keys"
        for key in keys:
            holders.setdefault(key.definition.slug, []).append(room.id)
    for key_def in level.key_definitions:
        assert len(holders.get(key_def.slug, [])) == 1
        assert holders[key_def.slug][0] not in (graph.start_id, graph.end_id)
    assert len(holders) == len(level.key_definitions)
