"""
Breath policy.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

DEFAULT_BREATH_INTERVAL = timedelta(milliseconds=50)
"""How long a burst may run before the operation yields to the event loop."""

DEFAULT_LATE_AFTER = 0.25
"""Lateness over which a breath is considered late."""


@dataclass(frozen=True, slots=True)
class BreathPolicy:
    """When an asynchronous run yields to the event loop."""

    interval: timedelta = DEFAULT_BREATH_INTERVAL
    late_after: float = DEFAULT_LATE_AFTER

    def __post_init__(self) -> None:
        if self.interval < timedelta(0):
            raise ValueError(f"Negative breath interval: {self.interval}")
        if self.late_after < 0:
            raise ValueError(f"Negative late_after: {self.late_after}")

    @property
    def threshold(self) -> float:
        """Interval in seconds."""
        return self.interval.total_seconds()


def breathe(
    ms: float | None = None,
    seconds: float | None = None,
    duration: timedelta | None = None,
    late_after: float = DEFAULT_LATE_AFTER,
) -> BreathPolicy:
    """
    Set the breath interval.

    Without arguments, returns the default policy.

    Example:
        await op.run(policy=I.policy.breathe(ms=10))
        await op.run(policy=I.policy.breathe(duration=timedelta(milliseconds=5)))
    """
    if ms is not None:
        return BreathPolicy(timedelta(milliseconds=ms), late_after)
    if duration is not None:
        return BreathPolicy(duration, late_after)
    if seconds is not None:
        return BreathPolicy(timedelta(seconds=seconds), late_after)
    return BreathPolicy(late_after=late_after)


__all__ = ("DEFAULT_BREATH_INTERVAL", "DEFAULT_LATE_AFTER", "BreathPolicy", "breathe")
