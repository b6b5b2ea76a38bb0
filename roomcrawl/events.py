"""Notification channel from the logic thread to presentation consumers.

Producers publish opaque signals; the consumer drains the whole queue once
per frame and only cares whether anything arrived.
"""
from __future__ import annotations

import queue
from typing import List

LEVEL_REGENERATED = "LevelRegenerated"


class NotificationChannel:
    """Unbounded FIFO of structural-change signals."""

    def __init__(self):
        self._queue: "queue.SimpleQueue[str]" = queue.SimpleQueue()

    def publish(self, signal: str = LEVEL_REGENERATED) -> None:
        self._queue.put(signal)

    def drain(self) -> List[str]:
        out = []
        while True:
            try:
                out.append(self._queue.get_nowait())
            except queue.Empty:
                return out

    def empty(self) -> bool:
        return self._queue.empty()


__all__ = ["LEVEL_REGENERATED", "NotificationChannel"]
