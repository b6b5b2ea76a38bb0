import dataclasses
import random
import time

import pytest

from roomcrawl.events import LEVEL_REGENERATED, NotificationChannel
from roomcrawl.game import GameLogic, GameLoop
from roomcrawl.items.catalog import Item
from roomcrawl.level.config import GeneratorSettings
from roomcrawl.level.errors import LevelGenerationError


@pytest.fixture()
def logic(catalog):
    g = GameLogic(catalog, settings=GeneratorSettings(overrides={"seed": 99}), rng=random.Random(0))
    g.initialize()
    g.channel.drain()
    return g


def test_initialize_publishes_snapshot(catalog):
    g = GameLogic(catalog, settings=GeneratorSettings(overrides={"seed": 7}))
    level = g.initialize(depth=1)
    assert level.depth == 1
    assert g.get_state().level["seed"] == level.seed
    assert g.channel.drain() == [LEVEL_REGENERATED]


def test_update_requires_initialize(catalog):
    with pytest.raises(RuntimeError):
        GameLogic(catalog).update(0.0)


def test_commands_apply_on_next_tick(logic):
    logic.submit_command("d")
    assert logic.player.health == 10
    logic.update(0.0)
    assert logic.player.health == 8
    assert logic.get_state().player["health"] == 8
    logic.submit_command("h")
    logic.update(0.0)
    assert logic.player.health == 10


def test_random_items_command(logic):
    logic.apply_command("r")
    assert 0 < len(logic.player.inventory) <= 5
    assert logic.player.inventory.weight <= logic.player.carry_weight


def test_unknown_command_is_ignored(logic):
    assert logic.apply_command("x") is False


def test_snapshot_is_immutable_and_swapped(logic):
    before = logic.get_state()
    logic.update(0.0)
    after = logic.get_state()
    assert after is not before
    assert after.tick == before.tick + 1
    with pytest.raises(dataclasses.FrozenInstanceError):
        after.tick = 0


def _finish_with_failing_regeneration(logic):
    def _fail(depth):
        raise LevelGenerationError(seed=1, attempts=1, reason="key_placement_exhausted")

    logic.runtime.regenerate = _fail
    level = logic.level
    logic.player.carry_weight = 100
    for key_def in level.key_definitions:
        logic.player.inventory.add_item(Item(key_def))
    level.current_id = level.graph.end_id
    return level


def test_generation_failure_halts_game(logic):
    level = _finish_with_failing_regeneration(logic)
    held = len(logic.player.inventory)
    ticks = logic.ticks
    with pytest.raises(LevelGenerationError):
        logic.update(0.0)
    assert logic.halted
    assert logic.level is level
    assert len(logic.player.inventory) == held
    assert logic.submit_command("h") is False
    assert logic.commands.empty()
    with pytest.raises(LevelGenerationError):
        logic.update(0.0)
    assert logic.ticks == ticks


def test_game_loop_exits_on_generation_failure(logic):
    _finish_with_failing_regeneration(logic)
    loop = GameLoop(logic, tick_rate=200.0)
    loop.start()
    loop.join(timeout=2.0)
    assert not loop.is_alive()
    assert logic.halted


def test_snapshot_carries_generation_details(logic):
    gen = logic.get_state().generation
    level = logic.level
    assert gen["seed"] == level.seed
    assert gen["attempts"] == level.attempts
    assert gen["edges"] == level.graph.edge_count()
    assert gen["metrics"] == level.metrics
    assert gen["metrics"] is not level.metrics


def test_notification_channel_fifo():
    ch = NotificationChannel()
    for s in ("a", "b", "c"):
        ch.publish(s)
    assert ch.drain() == ["a", "b", "c"]
    assert ch.drain() == []
    assert ch.empty()


def test_game_loop_ticks_and_stops(logic):
    loop = GameLoop(logic, tick_rate=200.0)
    loop.start()
    try:
        deadline = 200
        while logic.ticks < 3 and deadline:
            time.sleep(0.01)
            deadline -= 1
    finally:
        loop.stop()
        loop.join(timeout=2.0)
    assert logic.ticks >= 3
    assert not loop.is_alive()


def test_game_loop_rejects_bad_rate(logic):
    with pytest.raises(ValueError):
        GameLoop(logic, tick_rate=0)
