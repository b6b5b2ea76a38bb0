"""Room content: scattered loot and the keys that gate the end room."""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from roomcrawl.items.catalog import Item, ItemCatalog, ItemDefinition

from .errors import GenerationAttemptFailed
from .rooms import Room, RoomGraph

MAX_ITEMS_PER_ROOM = 4
ITEM_SPREAD = 2.5
MAX_KEYS = 3
KEY_DRAWS_PER_ROOM = 20


def _place(room: Room, definition: ItemDefinition, rng: random.Random) -> Item:
    item = Item(
        definition,
        rng.uniform(-ITEM_SPREAD, ITEM_SPREAD),
        rng.uniform(-ITEM_SPREAD, ITEM_SPREAD),
    )
    room.items.append(item)
    return item


def scatter_items(graph: RoomGraph, catalog: ItemCatalog, rng: random.Random) -> int:
    """Give every room 0-4 random non-key items. Returns the number placed."""
    pool = catalog.non_keys
    if not pool:
        return 0
    placed = 0
    for room in graph:
        for _ in range(rng.randrange(0, MAX_ITEMS_PER_ROOM + 1)):
            _place(room, rng.choice(pool), rng)
            placed += 1
    return placed


def choose_key_definitions(catalog: ItemCatalog, rng: random.Random, limit: int = MAX_KEYS) -> List[ItemDefinition]:
    order = list(range(len(catalog)))
    rng.shuffle(order)
    chosen: List[ItemDefinition] = []
    for idx in order:
        if len(chosen) >= limit:
            break
        if catalog[idx].is_key:
            chosen.append(catalog[idx])
    return chosen


def place_keys(
    graph: RoomGraph,
    key_defs: List[ItemDefinition],
    rng: random.Random,
    metrics: Optional[Dict] = None,
) -> None:
    """Drop each key into a distinct inner room by rejection sampling.

    Draws are capped at ``KEY_DRAWS_PER_ROOM * len(graph)``; running out fails
    the attempt instead of spinning forever.
    """
    rooms = list(graph)
    budget = KEY_DRAWS_PER_ROOM * len(rooms)
    draws = 0
    for key_def in key_defs:
        while True:
            if draws >= budget:
                raise GenerationAttemptFailed("key_placement_exhausted", f"{draws} draws for {len(key_defs)} keys")
            draws += 1
            room = rng.choice(rooms)
            if graph.is_terminal(room.id) or room.has_key():
                continue
            _place(room, key_def, rng)
            break
    if metrics:
        metrics['key_draws'] += draws
        metrics['keys_placed'] += len(key_defs)


def populate_content(
    graph: RoomGraph,
    catalog: ItemCatalog,
    rng: random.Random,
    metrics: Optional[Dict] = None,
) -> List[ItemDefinition]:
    scattered = scatter_items(graph, catalog, rng)
    if metrics:
        metrics['items_scattered'] += scattered
    limit = min(MAX_KEYS, len(graph.inner_rooms()))
    key_defs = choose_key_definitions(catalog, rng, limit)
    place_keys(graph, key_defs, rng, metrics)
    return key_defs


__all__ = [
    "scatter_items",
    "choose_key_definitions",
    "place_keys",
    "populate_content",
    "MAX_KEYS",
    "ITEM_SPREAD",
]
