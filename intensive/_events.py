"""
Listener registry — ordered multi-subscriber broadcast.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from intensive._types import Event

type Listener = Callable[..., object]


@dataclass(slots=True, eq=False)
class _Subscription:
    listener: Listener
    once: bool


@dataclass(slots=True)
class Listeners:
    """
    Listeners per event, invoked synchronously in subscription order.

    Listener exceptions are not caught here: they propagate to whoever
    emitted the event.
    """

    _subscriptions: dict[Event, list[_Subscription]] = field(default_factory=dict)

    def add(self, event: Event | str, listener: Listener, *, once: bool = False) -> None:
        if not callable(listener):
            raise TypeError(f"Listener must be callable, got {type(listener).__name__}")
        self._subscriptions.setdefault(Event(event), []).append(_Subscription(listener, once))

    def remove(self, event: Event | str, listener: Listener) -> bool:
        """Remove the first subscription of listener. Returns whether one was found."""
        subs = self._subscriptions.get(Event(event), [])
        for ix, sub in enumerate(subs):
            if sub.listener == listener:
                del subs[ix]
                return True
        return False

    def count(self, event: Event | str) -> int:
        return len(self._subscriptions.get(Event(event), ()))

    def emit(self, event: Event, *args: Any) -> bool:
        """Call every listener of event. Returns whether there were any."""
        subs = self._subscriptions.get(event)
        if not subs:
            return False
        # Snapshot: listeners may subscribe or unsubscribe while being called.
        snapshot = tuple(subs)
        for sub in snapshot:
            if sub.once:
                try:
                    subs.remove(sub)
                except ValueError:
                    continue
            sub.listener(*args)
        return True


__all__ = ("Listener", "Listeners")
