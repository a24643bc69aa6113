"""
Tracing — keep ambient context and breath metrics attached to operations.

    from intensive import tracing

    span.set(request_span)                 # any contextvars.ContextVar
    op = tracing.bind_context(build_op())  # steps see request_span, always
    op = tracing.trace(op, "build", sink=summaries.append)
    await op.run()

`bind_context` relies on the `run` event: every advance of the root steps
happens inside a copy of the captured context, so whatever the caller's
context is when (and between) breaths, steps observe the one that was
active when the operation was bound.
"""

from __future__ import annotations

import contextvars
import logging
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from datetime import timedelta
from typing import Any

from intensive._operation import Operation
from intensive._types import Breath, Event, Stats
from intensive.policy import DEFAULT_LATE_AFTER

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════════════════
# bind_context() — Static context for every advance
# ═══════════════════════════════════════════════════════════════════════════════


class _ContextBound:
    """Iterator advancing steps inside a context."""

    __slots__ = ("_context", "_steps")

    def __init__(self, context: contextvars.Context, steps: Iterator[Any]) -> None:
        self._context = context
        self._steps = steps

    def __iter__(self) -> _ContextBound:
        return self

    def __next__(self) -> Any:
        return self._context.run(next, self._steps)

    def close(self) -> None:
        close = getattr(self._steps, "close", None)
        if close is not None:
            self._context.run(close)


def bind_context[V](
    op: Operation[V],
    context: contextvars.Context | None = None,
) -> Operation[V]:
    """
    Run op's steps inside context (by default, the current one).

    Each run gets its own copy, so variables set by steps persist across
    breaths within a run but never leak into the caller or the next run.
    """
    ctx = context if context is not None else contextvars.copy_context()

    def on_run(wrap: Callable[[Callable[[Iterator[Any]], Iterator[Any]]], None]) -> None:
        wrap(lambda steps: _ContextBound(ctx.copy(), steps))

    return op.on(Event.RUN, on_run)


# ═══════════════════════════════════════════════════════════════════════════════
# trace() — Breath metrics
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class TraceSummary:
    """Breath metrics for one run."""

    name: str
    checkpoint_count: int
    breath_count: int
    late_breath_count: int
    max_interval: timedelta
    runtime: timedelta
    error: BaseException | None = None

    @property
    def breath_density(self) -> float | None:
        """Fraction of checkpoints which led to a breath."""
        if not self.checkpoint_count:
            return None
        return self.breath_count / self.checkpoint_count

    @property
    def late_breath_density(self) -> float | None:
        if not self.breath_count:
            return None
        return self.late_breath_count / self.breath_count

    @property
    def avg_breath_interval(self) -> timedelta:
        return self.runtime / (self.breath_count + 1)

    @property
    def avg_checkpoint_interval(self) -> timedelta:
        return self.runtime / (self.checkpoint_count + 1)


type Sink = Callable[[TraceSummary], object]


class _Tracer:
    __slots__ = ("name", "sink", "late_after", "breaths", "late_breaths", "max_interval")

    def __init__(self, name: str, sink: Sink | None, late_after: float) -> None:
        self.name = name
        self.sink = sink
        self.late_after = late_after
        self.breaths = 0
        self.late_breaths = 0
        self.max_interval = timedelta(0)

    def on_start(self) -> None:
        self.breaths = 0
        self.late_breaths = 0
        self.max_interval = timedelta(0)

    def on_breath(self, breath: Breath) -> None:
        if breath.lateness > self.late_after:
            self.late_breaths += 1
        self.max_interval = max(self.max_interval, breath.interval)
        self.breaths += 1

    def on_end(self, stats: Stats, error: BaseException | None) -> None:
        summary = TraceSummary(
            name=self.name,
            checkpoint_count=stats.checkpoint_count,
            breath_count=self.breaths,
            late_breath_count=self.late_breaths,
            max_interval=self.max_interval if self.breaths else stats.runtime,
            runtime=stats.runtime,
            error=error,
        )
        logger.debug(
            "Traced %s: %d checkpoint(s), %d breath(s) (%d late), max interval %s",
            summary.name,
            summary.checkpoint_count,
            summary.breath_count,
            summary.late_breath_count,
            summary.max_interval,
        )
        if self.sink is not None:
            self.sink(summary)


def trace[V](
    op: Operation[V],
    name: str | None = None,
    sink: Sink | None = None,
    late_after: float = DEFAULT_LATE_AFTER,
) -> Operation[V]:
    """
    Collect breath metrics for each root run of op.

    A summary is logged, and passed to sink, once the run ends. Runs where
    op is embedded produce no summary: embedded operations emit no `end`.
    Breaths are still counted on them, as they are forwarded while the
    operation is active.
    """
    tracer = _Tracer(name or op.name, sink, late_after)
    return (
        op.on(Event.START, tracer.on_start)
        .on(Event.BREATH, tracer.on_breath)
        .on(Event.END, tracer.on_end)
    )


__all__ = ("bind_context", "TraceSummary", "Sink", "trace")
