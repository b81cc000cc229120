"""
Event publishing for realtime clients.

Services never talk to the transport directly. They call publish_on_commit(),
which defers the broadcast until the surrounding transaction has committed and
then hands the event to the configured EventPublisher:

- ChannelsEventPublisher: broadcasts on the Channels group POS_EVENTS_GROUP.
- InMemoryEventPublisher: records events, used by the test-suite.

The implementation is chosen by settings.POS_EVENT_PUBLISHER and can be
swapped at runtime with set_event_publisher().
"""
from typing import Any, Dict, List, Optional, Tuple
import logging
import threading

from asgiref.sync import async_to_sync
from channels.layers import get_channel_layer
from django.conf import settings
from django.db import transaction
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


# Event names
ORDERS_UPDATED = "orders_updated"
ORDER_READY = "order_ready"
ORDER_DELIVERED = "order_delivered"
ORDER_CONFIRMED = "order_confirmed"
STOCK_UPDATED = "stock_updated"
STOCK_LOW = "stock_low"
KITCHEN_TIMERS_UPDATED = "kitchen_timers_updated"


class EventPublisher:
    """Broadcasts a named event with a JSON-serializable payload."""

    def publish(self, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class ChannelsEventPublisher(EventPublisher):
    """Sends events to every websocket client joined to the POS events group"""

    def __init__(self, group_name: Optional[str] = None):
        self.group_name = group_name or getattr(settings, "POS_EVENTS_GROUP", "pos_events")

    def publish(self, event, payload):
        channel_layer = get_channel_layer()
        if not channel_layer:
            logger.warning("No channel layer available for notifications")
            return

        logger.debug(f"Sending {event} to group {self.group_name}")
        async_to_sync(channel_layer.group_send)(
            self.group_name,
            {
                "type": "pos_event",
                "event": event,
                "data": payload,
            },
        )


class InMemoryEventPublisher(EventPublisher):
    """Keeps every published event in order of publication."""

    def __init__(self):
        self._lock = threading.Lock()
        self.events: List[Tuple[str, Dict[str, Any]]] = []

    def publish(self, event, payload):
        with self._lock:
            self.events.append((event, payload))

    def names(self) -> List[str]:
        return [name for name, _ in self.events]

    def payloads(self, event: str) -> List[Dict[str, Any]]:
        return [payload for name, payload in self.events if name == event]

    def clear(self):
        with self._lock:
            self.events.clear()


_publisher: Optional[EventPublisher] = None
_publisher_lock = threading.Lock()


def get_event_publisher() -> EventPublisher:
    global _publisher
    if _publisher is None:
        with _publisher_lock:
            if _publisher is None:
                _publisher = import_string(settings.POS_EVENT_PUBLISHER)()
    return _publisher


def set_event_publisher(publisher: Optional[EventPublisher]) -> Optional[EventPublisher]:
    """Install a publisher and return the previous one. None restores the configured default."""
    global _publisher
    with _publisher_lock:
        previous, _publisher = _publisher, publisher
    return previous


def _send(event, payload):
    try:
        get_event_publisher().publish(event, payload)
    except Exception as e:
        logger.error(f"Error publishing {event} event: {e}")


def publish_on_commit(event: str, payload: Optional[Dict[str, Any]] = None) -> None:
    """
    Publish an event once the current transaction commits.

    Outside a transaction the event is sent immediately. If the transaction
    rolls back, the event is dropped. Publisher failures are logged and never
    reach the caller: the data is already committed at that point.
    """
    payload = dict(payload or {})
    if transaction.get_connection().in_atomic_block:
        logger.debug(f"Still in atomic block, deferring {event}")
        transaction.on_commit(lambda: _send(event, payload))
    else:
        _send(event, payload)
