"""
Operation — a runnable step sequence.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Self, overload

from intensive import _run
from intensive._events import Listener, Listeners
from intensive._types import (
    OPERATION_MARKER,
    BoundDefinition,
    Definition,
    Event,
    Stats,
    Steps,
    is_operation,
)
from intensive.policy import BreathPolicy, breathe

if TYPE_CHECKING:
    from intensive._compose import Embed

# Distinguishes "no context" from an explicit None context.
_UNBOUND: Any = object()

# ═══════════════════════════════════════════════════════════════════════════════
# Operation
# ═══════════════════════════════════════════════════════════════════════════════


class Operation[V]:
    """
    A computationally expensive operation.

    Runs either aggressively (`run_sync`, fully synchronous with minimal
    overhead) or politely (`run`, releasing the event loop regularly).
    Each `yield` in the definition is a checkpoint, an opportunity for the
    run to breathe. Not every checkpoint triggers a breath, so frequent
    yields are cheap.

    Building an operation does no work. Every run calls the definition
    afresh and resets `stats`.

    Events (see `Event`):
        start()                    drive of this operation begins
        breath(breath)             run is about to yield to the event loop
        end(stats, error)          root run settled, error is None on success
        run(wrap)                  root run is starting, wrap(fn) wraps its steps
    """

    __slots__ = ("_definition", "_context", "_listeners", "_stats", "_session")

    def __init__(self, definition: Callable[..., Steps[V]], context: object = _UNBOUND) -> None:
        if not callable(definition):
            raise TypeError(f"Definition must be callable, got {type(definition).__name__}")
        self._definition = definition
        self._context = context
        self._listeners = Listeners()
        self._stats = Stats()
        self._session: _run.Session[V] | None = None

    @property
    def name(self) -> str:
        return getattr(self._definition, "__qualname__", repr(self._definition))

    @property
    def context(self) -> object | None:
        """The bound context, if any. Borrowed, never copied."""
        return None if self._context is _UNBOUND else self._context

    @property
    def running(self) -> bool:
        return self._session is not None

    @property
    def stats(self) -> Stats:
        """Statistics of the current run, or of the latest one."""
        if self._session is not None:
            return self._session.stats()
        return self._stats

    # ───────────────────────────────────────────────────────────────────────────
    # Listeners
    # ───────────────────────────────────────────────────────────────────────────

    def on(self, event: Event | str, listener: Listener) -> Self:
        """Subscribe listener to event. Chainable."""
        self._listeners.add(event, listener)
        return self

    def once(self, event: Event | str, listener: Listener) -> Self:
        """Subscribe listener to the next emission of event only."""
        self._listeners.add(event, listener, once=True)
        return self

    def off(self, event: Event | str, listener: Listener) -> Self:
        self._listeners.remove(event, listener)
        return self

    def listener_count(self, event: Event | str) -> int:
        return self._listeners.count(event)

    # ───────────────────────────────────────────────────────────────────────────
    # Running
    # ───────────────────────────────────────────────────────────────────────────

    def run_sync(self) -> V:
        """
        Run synchronously. This holds the thread (and any event loop on it)
        for the entire duration of the operation.
        """
        return _run.run_sync(self)

    async def run(self, ms: float | None = None, *, policy: BreathPolicy | None = None) -> V:
        """
        Run asynchronously, breathing every `ms` milliseconds (defaulting to
        the policy's interval). Each breath yields back to the event loop.
        """
        if policy is None:
            policy = breathe(ms=ms)
        elif ms is not None:
            policy = breathe(ms=ms, late_after=policy.late_after)
        return await _run.run(self, policy)

    def _steps(self, embed: Embed) -> Steps[V]:
        if self._context is _UNBOUND:
            return self._definition(embed)
        return self._definition(self._context, embed)

    def __repr__(self) -> str:
        state = "running" if self.running else "idle"
        return f"<Operation {self.name} ({state})>"


setattr(Operation, OPERATION_MARKER, True)

# ═══════════════════════════════════════════════════════════════════════════════
# operation() — Primary Constructor
# ═══════════════════════════════════════════════════════════════════════════════


@overload
def operation[V](definition: Definition[V], /) -> Operation[V]: ...


@overload
def operation[S, V](context: S, definition: BoundDefinition[S, V], /) -> Operation[V]: ...


def operation(arg1: Any, arg2: Any = _UNBOUND, /) -> Operation[Any]:
    """
    Create an operation from a generator function.

    Each `yield` is a checkpoint, embedded operations are delegated to with
    `yield from embed(op)`. Aim for roughly 10ms between checkpoints: much
    longer bursts delay the event loop, much shorter ones add overhead.

    Example:
        from intensive import operation

        def count(embed):
            total = 0
            for n in range(1_000_000):
                total += n
                yield
            return total

        total = await operation(count).run()

        # Bound context: the definition receives it first.
        def tick(counter, embed):
            for _ in range(3):
                counter.incr()
                yield

        operation(counter, tick).run_sync()
    """
    if arg2 is _UNBOUND:
        return Operation(arg1)
    return Operation(arg2, context=arg1)


__all__ = ("Operation", "operation", "is_operation")
