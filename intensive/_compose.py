"""
Composition — embedding operations into one another.

    def parent(embed):
        first = yield from embed(child)
        second = yield from embed(child)
        return first + second

Embedded steps are driven by the root's loop as if they were inlined:
their checkpoints are the root's checkpoints, their return value is the
value of the `yield from` expression and their errors are raised at it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from intensive._errors import NotAnOperation
from intensive._types import Event, Steps, is_operation

if TYPE_CHECKING:
    from intensive._operation import Operation

# ═══════════════════════════════════════════════════════════════════════════════
# Embed — capability handed to definitions
# ═══════════════════════════════════════════════════════════════════════════════


class Embed:
    """
    Embedding capability, one per root run.

    Every definition in the embedding tree receives the same instance, so
    the whole tree shares the root's statistics and breath clock.
    """

    __slots__ = ("_active",)

    def __init__(self) -> None:
        self._active: list[Operation[Any]] = []

    @property
    def active(self) -> tuple[Operation[Any], ...]:
        """Embedded operations currently being driven, outermost first."""
        return tuple(self._active)

    def __call__[W](self, op: Operation[W]) -> Steps[W]:
        if not is_operation(op):
            raise NotAnOperation(op)
        return self._delegate(op)

    def _delegate[W](self, op: Operation[W]) -> Steps[W]:
        op._listeners.emit(Event.START)
        self._active.append(op)
        try:
            return (yield from op._steps(self))
        finally:
            self._active.pop()


# ═══════════════════════════════════════════════════════════════════════════════
# root_steps() — Root of the embedding tree
# ═══════════════════════════════════════════════════════════════════════════════


def root_steps[V](op: Operation[V], embed: Embed) -> Steps[V]:
    """
    Steps of a root run.

    The definition is only called on the first advance, so errors raised
    while calling it are step failures like any other.
    """
    op._listeners.emit(Event.START)
    return (yield from op._steps(embed))


__all__ = ("Embed", "root_steps")
