"""Room graph primitives.

Rooms live in an arena (``RoomGraph.rooms``) keyed by integer id and refer to
each other only by id, so removing a room is a matter of dropping it from the
arena and stripping the id from every adjacency list.
"""
from __future__ import annotations

import enum
import itertools
import math
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Tuple

Edge = Tuple[int, int]


class VisitedState(enum.Enum):
    NOT_SEEN = "not_seen"
    SEEN = "seen"
    VISITED = "visited"


@dataclass
class Room:
    id: int
    x: float
    y: float
    neighbors: List[int] = field(default_factory=list)
    items: list = field(default_factory=list)
    visited: VisitedState = VisitedState.NOT_SEEN

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    @property
    def degree(self) -> int:
        return len(self.neighbors)

    def distance_to(self, other: "Room") -> float:
        return math.hypot(other.x - self.x, other.y - self.y)

    def angle_to(self, other: "Room") -> float:
        """Bearing (radians) from this room toward ``other``."""
        return math.atan2(other.y - self.y, other.x - self.x)

    def has_key(self) -> bool:
        return any(item.definition.is_key for item in self.items)


class RoomGraph:
    """Arena of rooms with undirected adjacency and designated start/end."""

    def __init__(self):
        self.rooms: Dict[int, Room] = {}
        self._ids = itertools.count()
        self.start_id: Optional[int] = None
        self.end_id: Optional[int] = None

    def __len__(self) -> int:
        return len(self.rooms)

    def __iter__(self) -> Iterator[Room]:
        return iter(self.rooms.values())

    def __contains__(self, room_id: int) -> bool:
        return room_id in self.rooms

    def __getitem__(self, room_id: int) -> Room:
        return self.rooms[room_id]

    @property
    def start(self) -> Room:
        return self.rooms[self.start_id]

    @property
    def end(self) -> Room:
        return self.rooms[self.end_id]

    def add_room(self, x: float, y: float) -> Room:
        room = Room(next(self._ids), float(x), float(y))
        self.rooms[room.id] = room
        return room

    def connect(self, a: int, b: int) -> bool:
        """Add an undirected edge; returns False for self-edges or existing edges."""
        if a == b:
            return False
        ra, rb = self.rooms[a], self.rooms[b]
        if b in ra.neighbors:
            return False
        ra.neighbors.append(b)
        rb.neighbors.append(a)
        return True

    def disconnect(self, a: int, b: int) -> bool:
        ra, rb = self.rooms[a], self.rooms[b]
        if b not in ra.neighbors:
            return False
        ra.neighbors.remove(b)
        rb.neighbors.remove(a)
        return True

    def remove_room(self, room_id: int) -> Room:
        room = self.rooms.pop(room_id)
        for other_id in room.neighbors:
            other = self.rooms.get(other_id)
            if other is not None and room_id in other.neighbors:
                other.neighbors.remove(room_id)
        room.neighbors = []
        return room

    def is_terminal(self, room_id: int) -> bool:
        return room_id in (self.start_id, self.end_id)

    def inner_rooms(self) -> List[Room]:
        """Rooms other than start and end, in creation order."""
        return [r for r in self.rooms.values() if not self.is_terminal(r.id)]

    def edges(self) -> List[Edge]:
        """Each undirected edge once, as (lower id, higher id)."""
        out = []
        for room in self.rooms.values():
            for other in room.neighbors:
                if room.id < other:
                    out.append((room.id, other))
        return out

    def edge_count(self) -> int:
        return sum(r.degree for r in self.rooms.values()) // 2


__all__ = ["Edge", "VisitedState", "Room", "RoomGraph"]
