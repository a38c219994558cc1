"""
Message Bus

Routes domain events to the handlers subscribed to their type. Handlers
are side channels (audit trail, logging); they never decide the outcome
of the operation that emitted the event.
"""

from typing import Callable, Dict, Iterable, List, Type
import logging

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class MessageBus:
    """
    In-process event bus

    Events: multiple handlers per event type (1:N). Handlers registered
    for a base class also receive events of its subclasses.
    """

    def __init__(self):
        self._event_handlers: Dict[Type[DomainEvent], List[EventHandler]] = {}

    def subscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        """Register ``handler`` for ``event_type``, ignoring duplicates"""
        handlers = self._event_handlers.setdefault(event_type, [])
        if handler in handlers:
            return
        handlers.append(handler)
        logger.debug(f"Subscribed {handler.__name__} to {event_type.__name__}")

    def unsubscribe(self, event_type: Type[DomainEvent], handler: EventHandler):
        handlers = self._event_handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def handlers_for(self, event: DomainEvent) -> List[EventHandler]:
        matched: List[EventHandler] = []
        for event_type, handlers in self._event_handlers.items():
            if isinstance(event, event_type):
                matched.extend(handlers)
        return matched

    def publish(self, event: DomainEvent):
        """
        Deliver one event to every matching handler

        Errors in handlers are logged but never raised, so one failing
        handler neither stops the others nor the caller.
        """
        handlers = self.handlers_for(event)
        if not handlers:
            logger.debug(f"No handlers registered for event {event.event_type}")
            return

        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(
                    f"Error in event handler {handler.__name__} "
                    f"for event {event.event_type} ({event.event_id}): {e}",
                    exc_info=True
                )

    def publish_events(self, events: Iterable[DomainEvent]):
        for event in events:
            self.publish(event)


# Global message bus instance
message_bus = MessageBus()
