"""
In-process publish/subscribe channel.

The worker host publishes its outbound protocol messages here and the
match tracker announces game events. Delivery is synchronous: handlers run
on the publisher's turn, which keeps the cooperative worker single-threaded.
"""

import logging
from collections import defaultdict, deque
from collections.abc import Callable

from .events import Event, EventType


logger = logging.getLogger(__name__)

Handler = Callable[[Event], None]


class EventBus:
    """
    Synchronous event dispatcher with a bounded history.

    Usage:
        bus = EventBus()
        bus.subscribe(EventType.BEST_MOVE, send_to_client)
        bus.publish(Event(type=EventType.BEST_MOVE, data=message))

    A failing handler is logged and skipped; the remaining handlers still
    receive the event.
    """

    def __init__(self, history_size: int = 100) -> None:
        self._subscribers: dict[EventType, list[Handler]] = defaultdict(list)
        self._history: deque[Event] = deque(maxlen=history_size)

    def subscribe(self, event_type: EventType, handler: Handler) -> None:
        subscribers = self._subscribers[event_type]
        if handler not in subscribers:
            subscribers.append(handler)

    def unsubscribe(self, event_type: EventType, handler: Handler) -> None:
        subscribers = self._subscribers[event_type]
        if handler in subscribers:
            subscribers.remove(handler)

    def publish(self, event: Event) -> None:
        """Record the event and hand it to every subscriber of its type."""
        self._history.append(event)

        # Snapshot: a handler may unsubscribe itself
        for handler in list(self._subscribers[event.type]):
            try:
                handler(event)
            except Exception:
                logger.exception("Subscriber %r failed on %s", handler, event.type.name)

    def get_event_log(self, limit: int = 20) -> list[Event]:
        """Most recent events, oldest first."""
        return list(self._history)[-limit:]

    def clear_log(self) -> None:
        self._history.clear()


# ─────────────────────────────────────────────────────────────
# SINGLETON ACCESS
# ─────────────────────────────────────────────────────────────

_bus: EventBus | None = None


def get_event_bus() -> EventBus:
    """Shared bus used when a component is not given its own."""
    global _bus
    if _bus is None:
        _bus = EventBus()
    return _bus


def reset_event_bus() -> None:
    """Drop the shared bus (for testing)."""
    global _bus
    _bus = None
