"""Spatial relaxation: push crowded rooms apart without leaving the layout box."""
from __future__ import annotations

import math
from dataclasses import dataclass
from itertools import combinations

from .rooms import Room, RoomGraph

RELAX_STEPS = 5
MAX_PUSH_DISTANCE = 2.0
PUSH_STRENGTH = 0.05
MIN_DISTANCE = 1e-3


@dataclass(frozen=True)
class Bounds:
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @classmethod
    def of(cls, rooms) -> "Bounds":
        rooms = list(rooms)
        if not rooms:
            return cls(0.0, 0.0, 0.0, 0.0)
        return cls(
            min(r.x for r in rooms),
            min(r.y for r in rooms),
            max(r.x for r in rooms),
            max(r.y for r in rooms),
        )

    def clamp(self, room: Room) -> None:
        room.x = min(max(room.x, self.min_x), self.max_x)
        room.y = min(max(room.y, self.min_y), self.max_y)

    def contains(self, room: Room, eps: float = 1e-9) -> bool:
        return (
            self.min_x - eps <= room.x <= self.max_x + eps
            and self.min_y - eps <= room.y <= self.max_y + eps
        )


def _push_apart(a: Room, b: Room, bounds: Bounds) -> None:
    dx, dy = a.x - b.x, a.y - b.y
    dist = math.hypot(dx, dy)
    if dist > MAX_PUSH_DISTANCE:
        return
    if dist < MIN_DISTANCE:
        # coincident rooms: separate along x
        dx, dy, dist = 1.0, 0.0, MIN_DISTANCE
    else:
        dx, dy = dx / dist, dy / dist
    strength = PUSH_STRENGTH / (dist * dist)
    a.x += dx * strength
    a.y += dy * strength
    b.x -= dx * strength
    b.y -= dy * strength
    bounds.clamp(a)
    bounds.clamp(b)


def relax_positions(graph: RoomGraph, x_margin: float, steps: int = RELAX_STEPS) -> Bounds:
    """Separate inner rooms, then keep them strictly between start and end in x.

    Returns the pre-relaxation bounding box the rooms were held inside.
    """
    movable = graph.inner_rooms()
    bounds = Bounds.of(movable)
    for _ in range(steps):
        for a, b in combinations(movable, 2):
            _push_apart(a, b, bounds)
    # closed at the margins; x_margin > 0 still keeps rooms strictly inside (start.x, end.x)
    lo = graph.start.x + x_margin
    hi = graph.end.x - x_margin
    for room in movable:
        room.x = min(max(room.x, lo), hi)
    return bounds


__all__ = ["Bounds", "relax_positions", "RELAX_STEPS", "MAX_PUSH_DISTANCE"]
