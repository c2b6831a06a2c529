"""
In-process publish/subscribe for realtime push.

The presentation layer owns the bus and subscribes; services publish
`login_credited` and `milestone_earned` after their writes commit. Nothing in
the core requires a subscriber.
"""
from __future__ import annotations

import logging
from collections import defaultdict
from typing import Any, Callable

logger = logging.getLogger(__name__)

Callback = Callable[[str, dict[str, Any]], None]


class EventType:
    LOGIN_CREDITED   = "login_credited"
    MILESTONE_EARNED = "milestone_earned"


class Subscription:
    """Handle returned by EventBus.subscribe; call unsubscribe() to stop delivery."""

    def __init__(self, bus: "EventBus", event_type: str, callback: Callback):
        self._bus = bus
        self.event_type = event_type
        self.callback = callback
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self._bus._remove(self)
            self.active = False


class EventBus:
    def __init__(self) -> None:
        self._subscribers: dict[str, list[Subscription]] = defaultdict(list)

    def subscribe(self, event_type: str, callback: Callback) -> Subscription:
        sub = Subscription(self, event_type, callback)
        self._subscribers[event_type].append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        subs = self._subscribers.get(sub.event_type, [])
        if sub in subs:
            subs.remove(sub)

    def publish(self, event_type: str, payload: dict[str, Any]) -> int:
        """Deliver to every subscriber; a failing subscriber does not stop the rest."""
        delivered = 0
        for sub in list(self._subscribers.get(event_type, [])):
            try:
                sub.callback(event_type, payload)
                delivered += 1
            except Exception:
                logger.exception("Subscriber for %s failed", event_type)
        return delivered


bus = EventBus()
