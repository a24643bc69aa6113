"""
Run policies.

Namespace: I.policy.*

Examples:
    await op.run(policy=I.policy.breathe(ms=10))
    await op.run(policy=I.policy.breathe(seconds=0.5, late_after=1.0))
"""

from __future__ import annotations

from intensive.policy._breath import (
    DEFAULT_BREATH_INTERVAL,
    DEFAULT_LATE_AFTER,
    BreathPolicy,
    breathe,
)

__all__ = (
    "DEFAULT_BREATH_INTERVAL",
    "DEFAULT_LATE_AFTER",
    "BreathPolicy",
    "breathe",
)
