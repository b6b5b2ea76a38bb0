import random

import pytest

from roomcrawl.items.catalog import ItemCatalog
from roomcrawl.level.content import (
    ITEM_SPREAD,
    MAX_KEYS,
    choose_key_definitions,
    place_keys,
    populate_content,
    scatter_items,
)
from roomcrawl.level.errors import GenerationAttemptFailed
from tests.level_test_utils import StuckChoiceRandom, graph_from, key_only_catalog


def _chain(n_inner=6):
    # chain: start - r1 - ... - rn - end
    positions = [(0, 0)] + [(i, 1) for i in range(1, n_inner + 1)] + [(n_inner + 1, 0)]
    edges = [(i, i + 1) for i in range(n_inner + 1)]
    return graph_from(positions, edges)


def test_scatter_items_non_keys_within_spread(catalog):
    graph = _chain()
    placed = scatter_items(graph, catalog, random.Random(2))
    assert placed == sum(len(r.items) for r in graph)
    for room in graph:
        assert 0 <= len(room.items) <= 4
        for item in room.items:
            assert not item.definition.is_key
            assert -ITEM_SPREAD <= item.x <= ITEM_SPREAD
            assert -ITEM_SPREAD <= item.y <= ITEM_SPREAD


def test_scatter_skips_catalog_without_loot():
    graph = _chain()
    assert scatter_items(graph, key_only_catalog(), random.Random(1)) == 0
    assert all(not r.items for r in graph)


def test_choose_key_definitions_distinct_and_bounded():
    catalog = key_only_catalog(5)
    keys = choose_key_definitions(catalog, random.Random(7))
    assert len(keys) == MAX_KEYS
    assert len({k.slug for k in keys}) == MAX_KEYS
    assert all(k.is_key for k in keys)


def test_catalog_without_keys_places_none():
    catalog = ItemCatalog.from_records([{"name": "Rock"}, {"name": "Stick"}])
    graph = _chain()
    assert populate_content(graph, catalog, random.Random(1)) == []


def test_keys_land_in_distinct_inner_rooms(catalog):
    for seed in range(25):
        graph = _chain(4)
        keys = populate_content(graph, catalog, random.Random(seed))
        assert len(keys) == MAX_KEYS
        holders = [r.id for r in graph if r.has_key()]
        assert len(holders) == len(keys)
        assert graph.start_id not in holders and graph.end_id not in holders
        for room in graph:
            assert sum(1 for i in room.items if i.definition.is_key) <= 1


def test_key_count_limited_by_eligible_rooms(catalog):
    graph = graph_from([(0, 0), (1, 0), (2, 0)], [(0, 1), (1, 2)])
    keys = populate_content(graph, catalog, random.Random(3))
    assert len(keys) == 1
    assert graph[1].has_key()


def test_key_placement_gives_up_after_draw_budget():
    graph = _chain(3)
    keys = list(key_only_catalog(2))
    with pytest.raises(GenerationAttemptFailed) as exc:
        place_keys(graph, keys, StuckChoiceRandom(0))
    assert exc.value.reason == "key_placement_exhausted"
