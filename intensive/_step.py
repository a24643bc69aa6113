"""
Step driver — advances a step sequence one checkpoint at a time.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any, cast

from kungfu import Ok, Error

from intensive._types import CHECKPOINT, Outcome

# ═══════════════════════════════════════════════════════════════════════════════
# Drive
# ═══════════════════════════════════════════════════════════════════════════════


class Drive[V]:
    """
    Suspendable drive over a step iterator.

    Each `advance()` resumes the iterator where it left off and returns
    one of:

        CHECKPOINT   — the steps yielded, call advance() again to resume
        Ok(value)    — the steps returned value
        Error(exc)   — the steps raised exc (the exact instance)

    Once settled, advance() keeps returning the settled outcome.
    """

    __slots__ = ("_steps", "_settled")

    def __init__(self, steps: Iterator[Any]) -> None:
        self._steps = steps
        self._settled: Outcome[V] | None = None

    @property
    def settled(self) -> bool:
        return self._settled is not None

    def advance(self) -> Outcome[V]:
        if self._settled is not None:
            return self._settled
        try:
            next(self._steps)
        except StopIteration as stop:
            self._settled = Ok(cast(V, stop.value))
        except Exception as exc:
            self._settled = Error(exc)
        else:
            return CHECKPOINT
        return self._settled

    def close(self, reason: BaseException) -> None:
        """Abandon the steps, running their cleanup (finally blocks)."""
        if not self.settled:
            self._settled = Error(reason)
        close = getattr(self._steps, "close", None)
        if close is not None:
            close()


__all__ = ("Drive",)
