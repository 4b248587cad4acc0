"""In-memory event bus implementation."""

import logging
from collections import defaultdict, deque
from collections.abc import Callable

from sujood.domain.events import DomainEvent
from sujood.services.ports import EventBusPort

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


class InMemoryEventBus(EventBusPort):
    """Synchronous in-process event bus."""

    def __init__(self, history_size: int = 100) -> None:
        """
        Initialize event bus.

        Args:
            history_size: Most recent events kept for inspection (0 keeps none)
        """
        self._handlers: dict[type[DomainEvent], list[Handler]] = defaultdict(list)
        self._history: deque[DomainEvent] = deque(maxlen=history_size)

    @property
    def history(self) -> list[DomainEvent]:
        """Most recent events, oldest first."""
        return list(self._history)

    def publish(self, event: DomainEvent) -> None:
        """
        Deliver an event to handlers of its type and of its base types.

        A failing handler is logged and does not stop delivery to the others.
        """
        self._history.append(event)
        handlers = [
            handler
            for event_type in type(event).__mro__
            if isinstance(event_type, type) and issubclass(event_type, DomainEvent)
            for handler in self._handlers.get(event_type, [])
        ]
        logger.debug(f"Event published: {type(event).__name__} ({len(handlers)} handlers)")

        for handler in handlers:
            try:
                handler(event)
            except Exception:
                logger.exception(f"Event handler failed for {type(event).__name__}")

    def subscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Subscribe to an event type."""
        self._handlers[event_type].append(handler)
        logger.debug(f"Subscribed to {event_type.__name__}")

    def unsubscribe(self, event_type: type[DomainEvent], handler: Handler) -> None:
        """Remove a subscription."""
        if handler in self._handlers[event_type]:
            self._handlers[event_type].remove(handler)
            logger.debug(f"Unsubscribed from {event_type.__name__}")

    def clear_all(self) -> None:
        """Drop all subscriptions."""
        self._handlers.clear()
