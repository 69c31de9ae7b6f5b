"""Notifications from the generation pipeline.

The core never touches score, inventory or spawn state directly. It publishes
events on a bus handed to ``generate`` and gameplay code subscribes to the
names it cares about.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass
from threading import Lock
from typing import Any, Callable, Dict, List, Mapping

logger = logging.getLogger(__name__)


class EventType:
    # payload: kind, x, y, room
    ENTITY_PLACED = "entity.placed"
    # payload: kind, room, requested, placed
    ENTITY_SHORTFALL = "entity.shortfall"
    # payload: rooms, floor_cells, signature
    DUNGEON_GENERATED = "dungeon.generated"


@dataclass(frozen=True)
class Event:
    name: str
    payload: Mapping[str, Any]


Subscriber = Callable[[Event], None]


def _label(callback: Subscriber) -> str:
    return getattr(callback, "__qualname__", repr(callback))


class EventBus:
    """Synchronous publish/subscribe keyed by event name.

    Subscribers run on the publishing thread in the order they subscribed.
    A subscriber that raises is logged and skipped; the remaining subscribers
    and the publisher carry on. Buses are created by the caller and passed
    in, there is no process-wide instance.
    """

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[Subscriber]] = defaultdict(list)
        self._lock = Lock()

    def subscribe(self, event_name: str, callback: Subscriber) -> None:
        if not callable(callback):
            raise TypeError(f"Subscriber for '{event_name}' must be callable, got {type(callback).__name__}")
        with self._lock:
            self._subscribers[event_name].append(callback)
        logger.debug("%s subscribed to '%s'", _label(callback), event_name)

    def unsubscribe(self, event_name: str, callback: Subscriber) -> None:
        """Remove ``callback``; unknown callbacks are ignored."""
        with self._lock:
            listeners = self._subscribers.get(event_name)
            if not listeners or callback not in listeners:
                return
            listeners.remove(callback)
        logger.debug("%s unsubscribed from '%s'", _label(callback), event_name)

    def subscriber_count(self, event_name: str) -> int:
        with self._lock:
            return len(self._subscribers.get(event_name, ()))

    def publish(self, event_name: str, payload: Mapping[str, Any]) -> Event:
        event = Event(name=event_name, payload=dict(payload))
        with self._lock:
            listeners = list(self._subscribers.get(event_name, ()))
        if not listeners:
            return event
        logger.debug("'%s' -> %d subscriber(s): %s", event_name, len(listeners), event.payload)
        for callback in listeners:
            try:
                callback(event)
            except Exception:
                logger.exception("Subscriber %s failed while handling '%s'", _label(callback), event_name)
        return event
