"""Lifecycle hook channels bracketing every render."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, List

from markup_engine.errors import UnknownEventError

BEFORE_RENDER = "beforerender"
RENDER = "render"
CHANGE = "change"

EVENTS: tuple[str, ...] = (BEFORE_RENDER, RENDER, CHANGE)

Callback = Callable[..., None]


@dataclass(slots=True, eq=False)
class Subscription:
    callback: Callback
    once: bool = False


class LifecycleHub:
    """Ordered subscriptions per channel.

    ``beforerender`` and ``render`` callbacks take no arguments; ``change``
    callbacks receive the new content.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscription]] = {name: [] for name in EVENTS}

    def _channel(self, event: str) -> List[Subscription]:
        try:
            return self._subscribers[event]
        except KeyError:
            raise UnknownEventError(event) from None

    def on(self, event: str, callback: Callback) -> None:
        self._channel(event).append(Subscription(callback))

    def once(self, event: str, callback: Callback) -> None:
        self._channel(event).append(Subscription(callback, once=True))

    def off(self, event: str, callback: Callback) -> None:
        """Remove the first subscription registered with ``callback``."""

        channel = self._channel(event)
        for position, subscription in enumerate(channel):
            if subscription.callback == callback:
                del channel[position]
                return

    def emit(self, event: str, *args: Any) -> None:
        channel = self._channel(event)
        for subscription in list(channel):
            if subscription.once and subscription in channel:
                channel.remove(subscription)
            subscription.callback(*args)

    def count(self, event: str) -> int:
        return len(self._channel(event))

    def clear(self) -> None:
        for channel in self._subscribers.values():
            channel.clear()


__all__ = [
    "BEFORE_RENDER",
    "CHANGE",
    "EVENTS",
    "LifecycleHub",
    "RENDER",
    "Subscription",
]
