"""Shared pytest fixtures for intensive tests."""

from dataclasses import dataclass, field

import pytest

from intensive import Operation, operation


@dataclass
class Recorder:
    """Collects emitted events in order."""

    events: list[tuple[str, tuple]] = field(default_factory=list)

    def listen(self, op: Operation, *names: str) -> Operation:
        for name in names:
            op.on(name, lambda *args, name=name: self.events.append((name, args)))
        return op

    def names(self) -> list[str]:
        return [name for name, _ in self.events]

    def of(self, name: str) -> list[tuple]:
        return [args for n, args in self.events if n == name]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


def counting(n: int, value=None):
    """Definition with n checkpoints returning value."""

    def definition(embed):
        for _ in range(n):
            yield
        return value

    return definition


@pytest.fixture
def make_counting():
    """Build an operation with n checkpoints returning value."""

    def make(n: int, value=None) -> Operation:
        return operation(counting(n, value))

    return make
