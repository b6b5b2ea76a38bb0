"""Connection pruning.

Thins out well-connected rooms so levels are less of a lattice. An edge is
only removed between two rooms that both keep more than two connections
and only if start can still reach end without it.
"""
from __future__ import annotations

import random
from typing import Dict, List, Optional

from .connectivity import edge_removal_keeps_path
from .rooms import Edge, RoomGraph


def prune_connections(
    graph: RoomGraph,
    prune_chance: float,
    rng: random.Random,
    metrics: Optional[Dict] = None,
) -> List[Edge]:
    order = list(graph.rooms)
    rng.shuffle(order)
    removed: List[Edge] = []
    for room_id in order:
        if graph.is_terminal(room_id):
            continue
        room = graph[room_id]
        if room.degree <= 2 or not rng.random() < prune_chance:
            continue
        partner = None
        for other_id in room.neighbors:
            if graph.is_terminal(other_id):
                continue
            if graph[other_id].degree > 2:
                partner = other_id
                break
        if partner is None:
            continue
        edge = (room_id, partner)
        if edge_removal_keeps_path(graph, edge):
            graph.disconnect(room_id, partner)
            removed.append(edge)
    if metrics:
        metrics['edges_pruned'] += len(removed)
    return removed


__all__ = ["prune_connections"]
