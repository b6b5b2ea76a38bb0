"""Minimal structured logging helper.

Wraps print() to emit key=value pairs (or compact JSON lines) with a
timestamp and level, so generation and runtime events stay easy to grep
and parse without configuring handlers.

Usage:
    from roomcrawl.logging_utils import get_logger
    log = get_logger("roomcrawl.level")
    log.info(event="level_generated", seed=1234, attempts=3)

Non-numeric values are str()'d with spaces replaced. Reserved keys: level, ts.
The threshold and output mode are read from ROOMCRAWL_LOG_LEVEL and
ROOMCRAWL_LOG_JSON at import time and can be changed with configure().
"""

from __future__ import annotations

import json
import os
import sys
import time

LEVELS = {"debug": 10, "info": 20, "warn": 30, "error": 40}
CURRENT_LEVEL = LEVELS.get(os.getenv("ROOMCRAWL_LOG_LEVEL", "info"), 20)
JSON_MODE = os.getenv("ROOMCRAWL_LOG_JSON", "0") in ("1", "true", "TRUE", "yes", "on")


def configure(level: str | None = None, json_mode: bool | None = None) -> None:
    """Adjust the global threshold / output mode after import (CLI flags, tests)."""
    global CURRENT_LEVEL, JSON_MODE
    if level is not None:
        if level not in LEVELS:
            raise ValueError(f"unknown log level: {level}")
        CURRENT_LEVEL = LEVELS[level]
    if json_mode is not None:
        JSON_MODE = bool(json_mode)


def _format(level: str, **fields):
    if JSON_MODE:
        rec = {k: v for k, v in fields.items() if v is not None}
        rec["level"] = level
        rec["ts"] = int(time.time())
        try:
            return json.dumps(rec, separators=(",", ":"), default=str)
        except (TypeError, ValueError):
            return json.dumps({"level": level, "ts": int(time.time()), "error": "json_encode_failed"})
    parts = [f"level={level}", f"ts={int(time.time())}"]
    for k, v in fields.items():
        if v is None:
            continue
        if isinstance(v, (int, float)):
            parts.append(f"{k}={v}")
        else:
            s = str(v).replace(" ", "_")
            parts.append(f"{k}={s}")
    return " ".join(parts)


class _Logger:
    def __init__(self, name: str | None = None):
        self.name = name or "roomcrawl"

    def _log(self, lvl: str, **fields):
        if LEVELS[lvl] < CURRENT_LEVEL:
            return
        if "logger" not in fields:
            fields["logger"] = self.name
        print(_format(lvl, **fields), file=sys.stdout if lvl != "error" else sys.stderr)

    def debug(self, **fields):
        self._log("debug", **fields)

    def info(self, **fields):
        self._log("info", **fields)

    def warn(self, **fields):
        self._log("warn", **fields)

    def error(self, **fields):
        self._log("error", **fields)


_LOGGER_CACHE = {}


def get_logger(name: str):
    if name not in _LOGGER_CACHE:
        _LOGGER_CACHE[name] = _Logger(name)
    return _LOGGER_CACHE[name]


log = get_logger("roomcrawl")
