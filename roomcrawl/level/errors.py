"""Level generation exceptions.

``GenerationAttemptFailed`` is recoverable: a stage raises it and the
orchestrator discards the attempt and retries with the next seed.
``LevelGenerationError`` is fatal and means the attempt budget ran out.
"""
from __future__ import annotations

from typing import Optional


class GenerationAttemptFailed(Exception):
    def __init__(self, reason: str, detail: Optional[str] = None):
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason
        self.detail = detail


class LevelGenerationError(RuntimeError):
    def __init__(self, seed: Optional[int], attempts: int, reason: Optional[str]):
        super().__init__(
            f"level generation failed after {attempts} attempts (last seed={seed}, reason={reason})"
        )
        self.seed = seed
        self.attempts = attempts
        self.last_reason = reason


__all__ = ["GenerationAttemptFailed", "LevelGenerationError"]
