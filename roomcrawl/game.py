"""
project: Roomcrawl
module: game.py
License: MIT

Game logic owner and its background loop.

``GameLogic`` owns the current level, the player and the runtime. It is only
mutated from the logic thread (``GameLoop``); other threads submit commands
through a queue and read the latest immutable ``GameState`` snapshot, which
is swapped in by reference after every tick.
"""
from __future__ import annotations

import copy
import queue
import random
import threading
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

from roomcrawl.events import NotificationChannel
from roomcrawl.items.catalog import ItemCatalog, default_catalog
from roomcrawl.level.config import GeneratorSettings
from roomcrawl.level.errors import LevelGenerationError
from roomcrawl.level.pipeline import Level, LevelGenerator
from roomcrawl.level.runtime import LevelRuntime, TickResult
from roomcrawl.logging_utils import get_logger
from roomcrawl.player import Player

log = get_logger("roomcrawl.game")

COMMANDS = {
    "r": "add_random_items",
    "d": "damage",
    "h": "heal",
}
RANDOM_ITEM_GRANT = 5
COMMAND_DAMAGE = 2


@dataclass(frozen=True)
class GameState:
    tick: int
    level: Dict[str, Any]
    player: Dict[str, Any]
    state: str = "in_room"
    missing_keys: Tuple[str, ...] = field(default_factory=tuple)
    # seed/attempts/edges/metrics of the level in ``level``; served by the metrics endpoint
    generation: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "tick": self.tick,
            "state": self.state,
            "missing_keys": list(self.missing_keys),
            "level": self.level,
            "player": self.player,
        }


class GameLogic:
    def __init__(
        self,
        catalog: Optional[ItemCatalog] = None,
        settings: Optional[GeneratorSettings] = None,
        channel: Optional[NotificationChannel] = None,
        rng: Optional[random.Random] = None,
    ):
        self.catalog = catalog or default_catalog()
        self.generator = LevelGenerator(self.catalog, settings=settings)
        self.channel = channel or NotificationChannel()
        self.rng = rng or random.Random()
        self.commands: "queue.SimpleQueue[str]" = queue.SimpleQueue()
        self.player: Optional[Player] = None
        self.runtime: Optional[LevelRuntime] = None
        self._state: Optional[GameState] = None
        self.fatal_error: Optional[LevelGenerationError] = None
        self._tick = 0

    @property
    def level(self) -> Level:
        return self.runtime.level

    def initialize(self, depth: int = 0, seed: Optional[int] = None) -> Level:
        """Generate the first level and publish the initial snapshot."""
        self.player = Player()
        level = self.generator.generate(depth, seed=seed)
        self.runtime = LevelRuntime(level, self.player, self.channel, self._regenerate)
        self._publish_state(TickResult())
        self.channel.publish()
        return level

    def _regenerate(self, depth: int) -> Level:
        return self.generator.generate(depth, forced=True)

    @property
    def halted(self) -> bool:
        return self.fatal_error is not None

    def submit_command(self, command: str) -> bool:
        """Queue a command for the logic thread (safe from any thread).

        Returns False without queueing once level generation has failed for
        good, since no further tick will ever apply it.
        """
        if self.halted:
            return False
        self.commands.put(command)
        return True

    def apply_command(self, command: str) -> bool:
        player = self.player
        if command == "r":
            added = player.inventory.add_random_items(self.catalog, RANDOM_ITEM_GRANT, self.rng)
            log.info(event="command_add_items", added=added, weight=player.inventory.weight)
        elif command == "d":
            player.damage(COMMAND_DAMAGE)
            log.info(event="command_damage", health=player.health, max_health=player.max_health)
        elif command == "h":
            player.heal_full()
            log.info(event="command_heal", health=player.health, max_health=player.max_health)
        else:
            log.warn(event="unknown_command", command=command)
            return False
        return True

    def _drain_commands(self) -> int:
        applied = 0
        while True:
            try:
                command = self.commands.get_nowait()
            except queue.Empty:
                return applied
            if self.apply_command(command):
                applied += 1

    def update(self, dt: float) -> TickResult:
        if self.runtime is None:
            raise RuntimeError("GameLogic.initialize() must be called before update()")
        if self.fatal_error is not None:
            raise self.fatal_error
        self._drain_commands()
        try:
            result = self.runtime.update(dt)
        except LevelGenerationError as exc:
            self.fatal_error = exc
            raise
        self._tick += 1
        self._publish_state(result)
        return result

    def _publish_state(self, result: TickResult) -> None:
        level = self.level
        self._state = GameState(
            tick=self._tick,
            level=level.to_dict(),
            player=self.player.to_dict(),
            state=result.state.value,
            missing_keys=tuple(result.missing_keys),
            generation={
                "seed": level.seed,
                "depth": level.depth,
                "attempts": level.attempts,
                "rooms": len(level.graph),
                "edges": level.graph.edge_count(),
                "pruned_edges": [list(e) for e in level.pruned_edges],
                "metrics": copy.deepcopy(level.metrics),
            },
        )

    @property
    def ticks(self) -> int:
        return self._tick

    def get_state(self) -> Optional[GameState]:
        """Latest completed snapshot; never the one being built."""
        return self._state


class GameLoop(threading.Thread):
    """Fixed-rate logic thread driving ``GameLogic.update``."""

    def __init__(self, logic: GameLogic, tick_rate: float = 30.0):
        super().__init__(name="roomcrawl-game-loop", daemon=True)
        if tick_rate <= 0:
            raise ValueError("tick_rate must be > 0")
        self.logic = logic
        self.interval = 1.0 / tick_rate
        self._stop_event = threading.Event()

    def stop(self) -> None:
        self._stop_event.set()

    def run(self) -> None:
        log.info(event="game_loop_start", interval=round(self.interval, 4))
        last = time.perf_counter()
        while not self._stop_event.is_set():
            now = time.perf_counter()
            dt, last = now - last, now
            try:
                self.logic.update(dt)
            except LevelGenerationError as exc:
                log.error(event="game_loop_generation_failed", seed=exc.seed, attempts=exc.attempts, reason=exc.last_reason)
                break
            self._stop_event.wait(max(0.0, self.interval - (time.perf_counter() - now)))
        log.info(event="game_loop_stop", ticks=self.logic.ticks)


__all__ = ["GameState", "GameLogic", "GameLoop", "COMMANDS"]
