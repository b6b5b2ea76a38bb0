"""Player state: vitals, inventory and simple top-down movement physics."""
from __future__ import annotations

import math

from roomcrawl.inventory.bag import Inventory

MAX_SPEED = 6.5
FLOOR_FRICTION = 0.65


class Player:
    def __init__(self, x: float = 0.0, y: float = 0.0):
        self.health = 10
        self.max_health = 10
        self.mana = 10
        self.max_mana = 10
        self.armor = 0
        self.carry_weight = 10
        self.x = x
        self.y = y
        self.vx = 0.0
        self.vy = 0.0
        self.max_speed = MAX_SPEED
        self.friction = FLOOR_FRICTION
        self.inventory = Inventory(self)

    @property
    def speed(self) -> float:
        return math.hypot(self.vx, self.vy)

    def update(self, dt: float) -> None:
        """Clamp velocity to max speed, integrate position, apply floor friction."""
        speed = self.speed
        if speed > self.max_speed:
            scale = self.max_speed / speed
            self.vx *= scale
            self.vy *= scale
        self.x += self.vx * dt
        self.y += self.vy * dt
        self.vx -= self.friction * self.vx
        self.vy -= self.friction * self.vy

    def keep_within(self, radius: float) -> None:
        dist = math.hypot(self.x, self.y)
        if dist > radius:
            self.x *= radius / dist
            self.y *= radius / dist

    def reset_position(self) -> None:
        self.x = self.y = 0.0
        self.vx = self.vy = 0.0

    def damage(self, amount: int) -> int:
        """Lower health by ``amount`` (never below zero). Returns the new health."""
        self.health = max(0, self.health - amount)
        return self.health

    def heal_full(self) -> None:
        self.health = self.max_health

    def to_dict(self) -> dict:
        return {
            "health": self.health,
            "max_health": self.max_health,
            "mana": self.mana,
            "max_mana": self.max_mana,
            "armor": self.armor,
            "carry_weight": self.carry_weight,
            "x": round(self.x, 3),
            "y": round(self.y, 3),
            "inventory": self.inventory.to_dict(),
        }


__all__ = ["Player", "MAX_SPEED", "FLOOR_FRICTION"]
