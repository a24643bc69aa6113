"""
Breath controller — decides when an asynchronous run yields.
"""

from __future__ import annotations

import math
import time
from datetime import timedelta

from intensive._types import Breath
from intensive.policy import BreathPolicy


class BreathController:
    """
    Monotonic clock over the current burst.

    The clock starts at construction and restarts on `reset()`, which the
    run loop calls after every resumption. `check()` is consulted at each
    checkpoint and returns the breath to take, if any.
    """

    __slots__ = ("_policy", "_threshold", "_last")

    def __init__(self, policy: BreathPolicy) -> None:
        self._policy = policy
        self._threshold = policy.threshold
        self._last = time.monotonic()

    def check(self) -> Breath | None:
        elapsed = time.monotonic() - self._last
        if elapsed < self._threshold:
            return None
        if self._threshold > 0:
            lateness = elapsed / self._threshold - 1
        else:
            lateness = math.inf if elapsed > 0 else 0.0
        return Breath(interval=timedelta(seconds=elapsed), lateness=lateness)

    def is_late(self, breath: Breath) -> bool:
        return breath.lateness > self._policy.late_after

    def reset(self) -> None:
        self._last = time.monotonic()


__all__ = ("BreathController",)
