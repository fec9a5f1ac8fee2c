"""
Event bus for domain events.

Synchronous in-process pub/sub. Handlers run in the publisher's thread, in
subscription order. A failing handler is logged and skipped; the write that
produced the event has already committed.
"""

import logging
from typing import Callable, Dict, List

from core.events import DomainEvent

logger = logging.getLogger(__name__)


class EventBus:
    """
    In-process event bus.

    Subscribe by event class name, publish by event instance. Subscribing to
    a base class name ("InvoiceEvent") also receives its subclasses.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable]] = {}

    def subscribe(self, event_type: str, callback: Callable):
        """
        Register a handler.

        Args:
            event_type: Event class name (e.g. 'InvoicePaid' or 'InvoiceEvent')
            callback: Called with the event instance
        """
        self._subscribers.setdefault(event_type, []).append(callback)

    def publish(self, event: DomainEvent):
        """Deliver an event to every handler subscribed to its class or a base class."""
        event_type = event.__class__.__name__

        for cls in type(event).__mro__:
            for callback in self._subscribers.get(cls.__name__, []):
                try:
                    callback(event)
                except Exception:
                    logger.exception(
                        "Handler %s failed for %s (event_id=%s)",
                        getattr(callback, "__name__", repr(callback)),
                        event_type,
                        event.event_id,
                    )
