"""Reachability checks over the room graph.

``reachable_from`` is the flood fill everything else builds on; the pruner
uses it with ``ignore_edge`` to test a removal before committing it.
"""
from __future__ import annotations

from collections import deque
from typing import List, Optional, Set

from .errors import GenerationAttemptFailed
from .rooms import Edge, RoomGraph


def reachable_from(graph: RoomGraph, origin: int, ignore_edge: Optional[Edge] = None) -> Set[int]:
    skip = set()
    if ignore_edge is not None:
        a, b = ignore_edge
        skip = {(a, b), (b, a)}
    seen = {origin}
    q = deque([origin])
    while q:
        cur = q.popleft()
        for nxt in graph[cur].neighbors:
            if nxt in seen or (cur, nxt) in skip:
                continue
            seen.add(nxt)
            q.append(nxt)
    return seen


def edge_removal_keeps_path(graph: RoomGraph, edge: Edge) -> bool:
    """True when start can still reach end with ``edge`` removed."""
    return graph.end_id in reachable_from(graph, graph.start_id, ignore_edge=edge)


def validate_connectivity(graph: RoomGraph, metrics: Optional[dict] = None) -> List[int]:
    """Drop rooms stranded from the start room and re-check minimum degree.

    Raises ``GenerationAttemptFailed`` when end is unreachable or an inner
    room is left with fewer than two connections. Returns removed room ids.
    """
    reached = reachable_from(graph, graph.start_id)
    if graph.end_id not in reached:
        raise GenerationAttemptFailed("end_unreachable", "no path from start room to end room")
    stranded = [room_id for room_id in graph.rooms if room_id not in reached]
    for room_id in stranded:
        graph.remove_room(room_id)
    if metrics and stranded:
        metrics['rooms_stranded'] += len(stranded)
    for room in graph.inner_rooms():
        if room.degree < 2:
            raise GenerationAttemptFailed("min_degree", f"room {room.id} has {room.degree} connection(s)")
    return stranded


__all__ = ["reachable_from", "edge_removal_keeps_path", "validate_connectivity"]
