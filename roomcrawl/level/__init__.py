"""Public level package interface."""

from .config import GENERATION_CONFIGS, GeneratorSettings, LevelGenConfig, select_config
from .errors import GenerationAttemptFailed, LevelGenerationError
from .pipeline import Level, LevelGenerator
from .rooms import Room, RoomGraph, VisitedState
from .runtime import LevelRuntime, RuntimeState, TickResult

__all__ = [
    "GENERATION_CONFIGS",
    "GeneratorSettings",
    "LevelGenConfig",
    "select_config",
    "GenerationAttemptFailed",
    "LevelGenerationError",
    "Level",
    "LevelGenerator",
    "Room",
    "RoomGraph",
    "VisitedState",
    "LevelRuntime",
    "RuntimeState",
    "TickResult",
]
