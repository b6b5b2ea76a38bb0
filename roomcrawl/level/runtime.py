"""Per-frame level logic over a generated room graph.

The player always stands in exactly one room, in room-local coordinates with
the room centre at the origin. Each connection has a door on the room's rim
pointing toward the neighbouring room; walking into it moves the player into
that room (never straight back through the door just used). Reaching the end
room while carrying every required key finishes the level and a new one is
generated one depth deeper.
"""
from __future__ import annotations

import enum
import math
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from roomcrawl.events import LEVEL_REGENERATED, NotificationChannel
from roomcrawl.logging_utils import get_logger
from roomcrawl.player import Player

from .pipeline import Level
from .rooms import Room

log = get_logger("roomcrawl.runtime")

ROOM_RADIUS = 8.5
DOOR_INSET = 0.1
DOOR_THRESHOLD = 0.65
PICKUP_RADIUS = 0.6
ROOM_SCORE = 100
MISSING_KEY_REPORT_INTERVAL = 3.5


class RuntimeState(enum.Enum):
    IN_ROOM = "in_room"
    TRANSITIONING = "transitioning"
    COMPLETED_PENDING_KEYS = "completed_pending_keys"
    COMPLETED = "completed"


@dataclass
class TickResult:
    state: RuntimeState = RuntimeState.IN_ROOM
    entered_room: Optional[int] = None
    picked_up: List[str] = field(default_factory=list)
    rejected: List[str] = field(default_factory=list)
    missing_keys: List[str] = field(default_factory=list)
    missing_reported: bool = False
    regenerated: bool = False


def door_position(room: Room, neighbor: Room) -> Tuple[float, float]:
    """Door on ``room``'s rim facing ``neighbor``, in room-local coordinates."""
    angle = room.angle_to(neighbor)
    reach = ROOM_RADIUS - DOOR_INSET
    return (math.cos(angle) * reach, math.sin(angle) * reach)


class LevelRuntime:
    def __init__(
        self,
        level: Level,
        player: Player,
        channel: NotificationChannel,
        regenerate: Callable[[int], Level],
    ):
        self.level = level
        self.player = player
        self.channel = channel
        self.regenerate = regenerate
        self._missing_report_timer: Optional[float] = None

    def update(self, dt: float) -> TickResult:
        result = TickResult()
        self.player.update(dt)
        self.player.keep_within(ROOM_RADIUS)
        if self.check_doorways(result):
            result.state = RuntimeState.TRANSITIONING
        self.check_items(result)
        self.check_completion(dt, result)
        return result

    def check_doorways(self, result: Optional[TickResult] = None) -> bool:
        """Move through the first door the player is touching. At most one per tick."""
        level = self.level
        current = level.current_room
        for neighbor_id in current.neighbors:
            if neighbor_id == level.previous_id:
                continue
            neighbor = level.graph[neighbor_id]
            dx, dy = door_position(current, neighbor)
            if math.hypot(dx - self.player.x, dy - self.player.y) >= DOOR_THRESHOLD:
                continue
            level.previous_id = current.id
            level.current_id = neighbor_id
            level.score += ROOM_SCORE
            self.player.reset_position()
            level.mark_entered(neighbor)
            self._missing_report_timer = None
            self.channel.publish(LEVEL_REGENERATED)
            log.debug(event="room_entered", room=neighbor_id, previous=current.id, score=level.score)
            if result is not None:
                result.entered_room = neighbor_id
            return True
        return False

    def check_items(self, result: Optional[TickResult] = None) -> int:
        """Offer every item under the player to the inventory. Returns pickups."""
        room = self.level.current_room
        picked = 0
        for item in list(room.items):
            if math.hypot(item.x - self.player.x, item.y - self.player.y) >= PICKUP_RADIUS:
                continue
            inventory = self.player.inventory
            if inventory.add_item(item):
                room.items.remove(item)
                picked += 1
                self.channel.publish(LEVEL_REGENERATED)
                log.debug(event="item_picked_up", item=item.definition.slug, room=room.id)
                if result is not None:
                    result.picked_up.append(item.definition.slug)
            else:
                log.info(
                    event="inventory_full",
                    item=item.definition.slug,
                    item_weight=item.definition.weight,
                    weight=inventory.weight,
                    capacity=inventory.capacity,
                )
                if result is not None:
                    result.rejected.append(item.definition.slug)
        return picked

    def check_completion(self, dt: float = 0.0, result: Optional[TickResult] = None) -> bool:
        level = self.level
        if level.current_id != level.graph.end_id:
            return False
        inventory = self.player.inventory
        missing = inventory.missing(level.key_definitions)
        if missing:
            names = [d.name for d in missing]
            if self._missing_report_timer is None:
                reported = True
            else:
                self._missing_report_timer += dt
                reported = self._missing_report_timer >= MISSING_KEY_REPORT_INTERVAL
            if reported:
                log.info(event="missing_keys", keys=",".join(names), depth=level.depth)
                self._missing_report_timer = 0.0
            if result is not None:
                result.state = RuntimeState.COMPLETED_PENDING_KEYS
                result.missing_keys = names
                result.missing_reported = reported
            return False
        # keys are only spent once the next level exists
        next_level = self.regenerate(level.depth + 1)
        for key_def in level.key_definitions:
            inventory.remove_one(key_def)
        log.info(event="level_completed", depth=level.depth, score=level.score, seed=level.seed)
        self.level = next_level
        self.player.reset_position()
        self._missing_report_timer = None
        self.channel.publish(LEVEL_REGENERATED)
        if result is not None:
            result.state = RuntimeState.COMPLETED
            result.regenerated = True
        return True


__all__ = [
    "RuntimeState",
    "TickResult",
    "LevelRuntime",
    "door_position",
    "ROOM_RADIUS",
    "DOOR_THRESHOLD",
    "PICKUP_RADIUS",
    "ROOM_SCORE",
    "MISSING_KEY_REPORT_INTERVAL",
]
