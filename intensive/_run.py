"""
Run loops — synchronous and asynchronous drives of a root operation.

Both loops share a `Session`: the per-run state owning the statistics,
the embedding capability and the drive. Only the asynchronous loop has a
breath controller.
"""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import timedelta
from typing import TYPE_CHECKING, Any, cast

from kungfu import Ok, Error

from intensive._breath import BreathController
from intensive._compose import Embed, root_steps
from intensive._errors import OperationBusy
from intensive._step import Drive
from intensive._types import CHECKPOINT, Breath, Event, Outcome, Stats, Wrapper
from intensive.policy import BreathPolicy

if TYPE_CHECKING:
    from intensive._operation import Operation

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# Session — state of a single root run
# ═══════════════════════════════════════════════════════════════════════════════


class Session[V]:
    """
    State of one run of a root operation.

    Lifecycle:
        begin() → open() → advance()* → settle()
                         → abort()    → settle()
    """

    __slots__ = ("root", "embed", "checkpoint_count", "breath_count", "_started", "_drive")

    def __init__(self, root: Operation[V]) -> None:
        self.root = root
        self.embed = Embed()
        self.checkpoint_count = 0
        self.breath_count = 0
        self._started = time.monotonic()
        self._drive: Drive[V] | None = None

    @classmethod
    def begin(cls, root: Operation[V]) -> Session[V]:
        """Attach a new session to root, resetting its statistics."""
        if root._session is not None:
            raise OperationBusy(root.name)
        session = cls(root)
        root._session = session
        root._stats = Stats()
        logger.debug("Starting operation %s", root.name)
        return session

    def open(self) -> None:
        """Let `run` listeners wrap the root steps and start the drive."""
        wrappers: list[Wrapper] = []
        self.root._listeners.emit(Event.RUN, wrappers.append)
        steps: Any = root_steps(self.root, self.embed)
        for wrap in wrappers:
            steps = wrap(steps)
        self._drive = Drive(iter(steps))

    def advance(self) -> Outcome[V]:
        if self._drive is None:
            raise RuntimeError(f"Session of {self.root.name} is not open")
        outcome = self._drive.advance()
        if outcome is CHECKPOINT:
            self.checkpoint_count += 1
        return outcome

    def breathe(self, breath: Breath, late: bool = False) -> None:
        """Emit a breath on the root, then on active embedded operations."""
        self.breath_count += 1
        if late:
            logger.debug(
                "Late breath in operation %s (interval=%s, lateness=%.2f)",
                self.root.name,
                breath.interval,
                breath.lateness,
            )
        self.root._listeners.emit(Event.BREATH, breath)
        for op in self.embed.active:
            op._listeners.emit(Event.BREATH, breath)

    def abort(self, reason: BaseException) -> Outcome[V]:
        """Stop the drive from outside the steps (listener error, cancellation)."""
        if self._drive is not None:
            try:
                self._drive.close(reason)
            except Exception as exc:
                # Raised by the steps' own cleanup; it supersedes the reason.
                return Error(exc)
        return Error(reason)

    def stats(self) -> Stats:
        return Stats(
            checkpoint_count=self.checkpoint_count,
            breath_count=self.breath_count,
            runtime=timedelta(seconds=time.monotonic() - self._started),
        )

    def settle(self, outcome: Outcome[V]) -> V:
        """Detach from the root, emit `end`, then return the value or raise."""
        stats = self.stats()
        self.detach(stats)
        match outcome:
            case Ok(value):
                self._end(stats, None)
                return cast(V, value)
            case Error(err):
                self._end(stats, err)
                raise err
        raise AssertionError(f"Unsettled outcome: {outcome!r}")

    def _end(self, stats: Stats, error: BaseException | None) -> None:
        logger.debug(
            "Operation %s %s after %d checkpoint(s) and %d breath(s)",
            self.root.name,
            "completed" if error is None else "failed",
            stats.checkpoint_count,
            stats.breath_count,
        )
        self.root._listeners.emit(Event.END, stats, error)

    def detach(self, stats: Stats | None = None) -> None:
        if self.root._session is not self:
            return
        self.root._stats = stats if stats is not None else self.stats()
        self.root._session = None


# ═══════════════════════════════════════════════════════════════════════════════
# run_sync() — Drive to completion without yielding
# ═══════════════════════════════════════════════════════════════════════════════


def run_sync[V](op: Operation[V]) -> V:
    """
    Drive op to completion, holding the thread for the entire run.

    Raises the first step failure unmodified.
    """
    session = Session.begin(op)
    try:
        try:
            session.open()
            while (outcome := session.advance()) is CHECKPOINT:
                pass
        except BaseException as exc:
            outcome = session.abort(exc)
        return session.settle(outcome)
    finally:
        session.detach()


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Drive with breaths
# ═══════════════════════════════════════════════════════════════════════════════


async def run[V](op: Operation[V], policy: BreathPolicy) -> V:
    """
    Drive op, yielding to the event loop whenever a burst lasts longer
    than the policy's interval.

    Each breath emits `breath` right before yielding. Cancelling the
    awaiting task while it breathes closes the steps and raises
    CancelledError once `end` has been emitted.
    """
    session = Session.begin(op)
    try:
        try:
            session.open()
            breath = BreathController(policy)
            while (outcome := session.advance()) is CHECKPOINT:
                taken = breath.check()
                if taken is None:
                    continue
                session.breathe(taken, late=breath.is_late(taken))
                await asyncio.sleep(0)
                breath.reset()
        except BaseException as exc:
            outcome = session.abort(exc)
        return session.settle(outcome)
    finally:
        session.detach()


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = ("Session", "run_sync", "run")
