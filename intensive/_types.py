"""
Core types for intensive.

Re-exports from kungfu + checkpoint, stats and event types.
"""

from __future__ import annotations

from collections.abc import Callable, Generator, Iterator
from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
from typing import TYPE_CHECKING, Any

# Re-export from kungfu
from kungfu import Result, Ok, Error

if TYPE_CHECKING:
    from intensive._compose import Embed

# ═══════════════════════════════════════════════════════════════════════════════
# Checkpoint
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Checkpoint:
    """
    Marks a point in a step sequence where it is safe to suspend.

    Produced by every `yield` inside a definition. Carries no payload.
    """

    def __repr__(self) -> str:
        return "CHECKPOINT"


CHECKPOINT = Checkpoint()

type Outcome[V] = Checkpoint | Result[V, BaseException]
"""What a single advance of a drive produces."""

# ═══════════════════════════════════════════════════════════════════════════════
# Operation Identity
# ═══════════════════════════════════════════════════════════════════════════════

OPERATION_MARKER = "__intensive_operation_v1__"
"""Class attribute set to True on operations."""


def is_operation(value: object) -> bool:
    """Check whether value is an operation built by `operation()`."""
    return getattr(type(value), OPERATION_MARKER, False) is True


# ═══════════════════════════════════════════════════════════════════════════════
# Definitions
# ═══════════════════════════════════════════════════════════════════════════════

type Steps[V] = Generator[Any, Any, V]
"""A step sequence: each yield is a checkpoint, the return value is the result."""

type Definition[V] = Callable[[Embed], Steps[V]]
"""Unbound definition, called as `definition(embed)`."""

type BoundDefinition[S, V] = Callable[[S, Embed], Steps[V]]
"""Definition with a receiver, called as `definition(context, embed)`."""

type Wrapper = Callable[[Iterator[Any]], Iterator[Any]]
"""Transforms the root step iterator (see `Event.RUN`)."""

# ═══════════════════════════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════════════════════════


class Event(str, Enum):
    """
    Lifecycle events emitted by operations.

    START   — an operation's drive begins (root or embedded)
    BREATH  — the run is about to yield to the event loop
    END     — the root run settled, successfully or not
    RUN     — a root run is about to start, listeners may wrap its steps
    """

    START = "start"
    BREATH = "breath"
    END = "end"
    RUN = "run"


# ═══════════════════════════════════════════════════════════════════════════════
# Measurements
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class Breath:
    """
    A single breath.

    interval: time since the previous breath (or the start of the run)
    lateness: `interval / threshold - 1`, above 0 means the burst overran
    """

    interval: timedelta
    lateness: float


@dataclass(frozen=True, slots=True)
class Stats:
    """Statistics for one run, aggregated across all embedded operations."""

    checkpoint_count: int = 0
    breath_count: int = 0
    runtime: timedelta = timedelta(0)


# ═══════════════════════════════════════════════════════════════════════════════
# Exports
# ═══════════════════════════════════════════════════════════════════════════════

__all__ = (
    # Re-exports from kungfu
    "Result",
    "Ok",
    "Error",
    # Checkpoints
    "Checkpoint",
    "CHECKPOINT",
    "Outcome",
    # Identity
    "OPERATION_MARKER",
    "is_operation",
    # Definitions
    "Steps",
    "Definition",
    "BoundDefinition",
    "Wrapper",
    # Events
    "Event",
    # Measurements
    "Breath",
    "Stats",
)
