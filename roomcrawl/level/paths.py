"""Primary path construction.

Primary paths are horizontal chains of rooms fanned out in bands across a
fixed 10 x 5 layout area. Every chain hangs off the start room on the left and
feeds into the single end room on the right.
"""
from __future__ import annotations

import math
import random
from dataclasses import dataclass, field
from typing import List

from .config import LevelGenConfig
from .rooms import RoomGraph

PATH_SPAN = 10.0
BAND_HEIGHT = 5.0
START_X = -0.5
ROW_OFFSET = 0.5
MAX_ANGLE_DEG = 12.0
MAX_ANGLE = math.radians(MAX_ANGLE_DEG)


@dataclass
class PrimaryLayout:
    paths: List[List[int]] = field(default_factory=list)
    path_ends: List[int] = field(default_factory=list)
    x_delta_max: float = 0.0
    center_y: float = 0.0

    @property
    def x_margin(self) -> float:
        return self.x_delta_max * 0.5

    def path_of(self, room_id: int) -> int | None:
        for idx, path in enumerate(self.paths):
            if room_id in path:
                return idx
        return None


def draw_room_count(config: LevelGenConfig, rng: random.Random) -> int:
    """Rooms in one primary path, drawn from ``[min, max)``.

    When the range is empty (min == max) the count falls back to
    ``max(1, max - 1)`` so a path always has at least one room.
    """
    if config.max_rooms_per_path > config.min_rooms_per_path:
        return rng.randrange(config.min_rooms_per_path, config.max_rooms_per_path)
    return max(1, config.max_rooms_per_path - 1)


def random_angle(rng: random.Random) -> float:
    return rng.uniform(-1.0, 1.0) * MAX_ANGLE


def build_primary_paths(graph: RoomGraph, config: LevelGenConfig, rng: random.Random) -> PrimaryLayout:
    """Create start room, one chain per primary path, and the end room."""
    num_paths = config.num_primary_paths
    y_delta = BAND_HEIGHT / num_paths
    x_delta_max = PATH_SPAN / config.max_rooms_per_path
    center_y = y_delta * num_paths / 2
    layout = PrimaryLayout(x_delta_max=x_delta_max, center_y=center_y)

    start = graph.add_room(START_X, center_y)
    graph.start_id = start.id

    for i in range(num_paths):
        count = draw_room_count(config, rng)
        x_delta = PATH_SPAN / (count + 1)
        x = x_delta
        y = y_delta * i + ROW_OFFSET
        prev_id = start.id
        path: List[int] = []
        for j in range(count):
            if j:
                angle = random_angle(rng)
                x += x_delta * math.cos(angle)
                y += x_delta * math.sin(angle)
            room = graph.add_room(x, y)
            graph.connect(prev_id, room.id)
            path.append(room.id)
            prev_id = room.id
        layout.paths.append(path)
        layout.path_ends.append(prev_id)

    end = graph.add_room(x_delta_max * config.max_rooms_per_path + ROW_OFFSET, center_y)
    graph.end_id = end.id
    for room_id in layout.path_ends:
        graph.connect(room_id, end.id)
    return layout


__all__ = ["PrimaryLayout", "build_primary_paths", "draw_room_count", "random_angle", "MAX_ANGLE", "PATH_SPAN"]
