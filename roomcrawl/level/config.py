"""Level generation parameters.

``LevelGenConfig`` describes the shape of one depth band (how many primary
paths, how long they are, how aggressively to prune and branch).
``GENERATION_CONFIGS`` is the default depth table and ``select_config`` picks
the entry for a given depth.

``GeneratorSettings`` holds the orchestration knobs (attempt budgets, seed,
metrics). Values resolve with the precedence defaults < environment <
Flask app config, mirroring how the server is configured.
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Optional, Sequence


@dataclass(frozen=True)
class LevelGenConfig:
    num_levels: int
    num_primary_paths: int
    min_rooms_per_path: int
    max_rooms_per_path: int
    prune_chance: float
    secondary_path_chance: float

    def __post_init__(self):
        if self.num_levels < 1:
            raise ValueError("num_levels must be >= 1")
        if self.num_primary_paths < 1:
            raise ValueError("num_primary_paths must be >= 1")
        if self.min_rooms_per_path < 1:
            raise ValueError("min_rooms_per_path must be >= 1")
        if self.max_rooms_per_path < self.min_rooms_per_path:
            raise ValueError("max_rooms_per_path must be >= min_rooms_per_path")
        for name in ("prune_chance", "secondary_path_chance"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} must be within [0, 1]")


GENERATION_CONFIGS: tuple[LevelGenConfig, ...] = (
    LevelGenConfig(1, 2, 2, 3, 0.15, 0.2),
    LevelGenConfig(1, 3, 3, 4, 0.25, 0.4),
    LevelGenConfig(1, 4, 3, 7, 0.5, 0.5),
)


def select_config(depth: int, configs: Sequence[LevelGenConfig] = GENERATION_CONFIGS) -> LevelGenConfig:
    """Return the config whose cumulative ``num_levels`` range contains ``depth``.

    Depths past the end of the table reuse the last entry.
    """
    if depth < 0:
        raise ValueError("depth must be >= 0")
    if not configs:
        raise ValueError("config table is empty")
    upper = 0
    for cfg in configs:
        upper += cfg.num_levels
        if depth < upper:
            return cfg
    return configs[-1]


_TRUE = {"1", "true", "yes", "on"}


@dataclass
class GeneratorSettings:
    attempts: int = 1000
    forced_attempts: int = 10000
    seed: Optional[int] = None
    enable_metrics: bool = True
    overrides: dict = field(default_factory=dict, repr=False)

    def __post_init__(self):
        # Environment override support (tests and the CLI set env vars rather than passing params)
        env_map = {
            "ROOMCRAWL_GENERATION_ATTEMPTS": ("attempts", int),
            "ROOMCRAWL_FORCED_ATTEMPTS": ("forced_attempts", int),
            "ROOMCRAWL_SEED": ("seed", int),
            "ROOMCRAWL_ENABLE_METRICS": ("enable_metrics", lambda v: v.lower() in _TRUE),
        }
        for env_key, (attr, conv) in env_map.items():
            raw = os.environ.get(env_key)
            if raw not in (None, ""):
                setattr(self, attr, conv(raw))
        # Flask app config overrides (highest precedence)
        from flask import current_app, has_app_context

        if has_app_context():
            cfg = current_app.config
            for env_key, (attr, _conv) in env_map.items():
                if cfg.get(env_key) is not None:
                    setattr(self, attr, cfg[env_key])
        for attr, value in self.overrides.items():
            setattr(self, attr, value)
        if self.attempts < 1 or self.forced_attempts < 1:
            raise ValueError("attempt budgets must be >= 1")


__all__ = ["LevelGenConfig", "GENERATION_CONFIGS", "select_config", "GeneratorSettings"]
