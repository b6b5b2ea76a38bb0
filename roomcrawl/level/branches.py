"""Secondary branch augmentation.

Each primary room may grow one extra connection: preferably to the closest
room on another path, otherwise a small loop room that rejoins its own path.
"""
from __future__ import annotations

import math
import random
from typing import Dict, List, Optional

from .paths import PATH_SPAN, PrimaryLayout, random_angle
from .rooms import Edge, Room, RoomGraph

MIN_LOOP_ANGLE = math.radians(5.0)
LOOP_DISTANCE_FACTOR = 0.5


def nearest_candidate(graph: RoomGraph, room: Room, path: List[int]) -> Optional[Room]:
    best = None
    best_dist = math.inf
    for other in graph:
        if other.id == room.id or other.id in path or graph.is_terminal(other.id):
            continue
        if other.id in room.neighbors:
            continue
        dist = room.distance_to(other)
        if dist < best_dist:
            best_dist = dist
            best = other
    return best


def loop_angle(rng: random.Random) -> float:
    angle = random_angle(rng)
    magnitude = max(MIN_LOOP_ANGLE, abs(angle))
    return magnitude if angle >= 0 else -magnitude


def add_loop_room(graph: RoomGraph, path: List[int], index: int, rng: random.Random) -> Optional[Room]:
    """Hang a room off ``path[index]`` that reconnects to its path neighbour."""
    if len(path) < 2:
        return None
    neighbor_id = path[index - 1] if index == len(path) - 1 else path[index + 1]
    primary = graph[path[index]]
    angle = loop_angle(rng)
    step = PATH_SPAN / (len(path) + 1) * LOOP_DISTANCE_FACTOR
    room = graph.add_room(primary.x + step * math.cos(angle), primary.y + step * math.sin(angle))
    graph.connect(room.id, primary.id)
    graph.connect(room.id, neighbor_id)
    return room


def augment_branches(
    graph: RoomGraph,
    layout: PrimaryLayout,
    chance: float,
    rng: random.Random,
    metrics: Optional[Dict] = None,
) -> List[Edge]:
    added: List[Edge] = []
    for path in layout.paths:
        for index, room_id in enumerate(path):
            if not rng.random() < chance:
                continue
            room = graph[room_id]
            target = nearest_candidate(graph, room, path)
            if target is not None:
                graph.connect(room.id, target.id)
                added.append((room.id, target.id))
                if metrics:
                    metrics['branch_edges_added'] += 1
                continue
            loop = add_loop_room(graph, path, index, rng)
            if loop is None:
                continue
            added.extend((loop.id, other) for other in loop.neighbors)
            if metrics:
                metrics['loop_rooms_added'] += 1
    return added


__all__ = ["augment_branches", "nearest_candidate", "add_loop_room", "MIN_LOOP_ANGLE"]
