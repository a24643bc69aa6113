"""
Errors raised by intensive itself.

Step failures are never wrapped: whatever a step raises is what the
caller receives. These only cover misuse of the API.
"""

from __future__ import annotations


class OperationError(Exception):
    """Base class for errors raised by the intensive core."""


class NotAnOperation(OperationError, TypeError):
    """Raised when embedding something that is not an operation."""

    def __init__(self, value: object) -> None:
        super().__init__(f"Invalid embed argument: {type(value).__name__} is not an operation")
        self.value = value


class OperationBusy(OperationError, RuntimeError):
    """Raised when running an operation which is already running."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Operation {name} is already running")
        self.name = name


__all__ = ("OperationError", "NotAnOperation", "OperationBusy")
