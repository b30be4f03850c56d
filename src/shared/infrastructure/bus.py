"""In-memory event bus implementation."""

from __future__ import annotations

from typing import Dict, List, Type

import structlog

from shared.domain.bus import IEventBus, IEventHandler
from shared.domain.events import DomainEvent

logger = structlog.get_logger(__name__)


class InMemoryEventBus(IEventBus):
    """Simple in-process event bus.

    Handlers run synchronously in subscription order.  A handler error
    propagates to the publisher.
    """

    def __init__(self) -> None:
        self._handlers: Dict[Type[DomainEvent], List[IEventHandler]] = {}

    def subscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.setdefault(event_class, [])
        if handler not in handlers:
            handlers.append(handler)

    def unsubscribe(self, event_class: Type[DomainEvent], handler: IEventHandler) -> None:
        handlers = self._handlers.get(event_class, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: DomainEvent) -> None:
        handlers = self._handlers.get(type(event), [])
        logger.debug(
            "event_bus.publish",
            event_name=event.event_name,
            aggregate_id=str(event.aggregate_id),
            handler_count=len(handlers),
        )
        for handler in list(handlers):
            handler.handle(event)


# Global bus instance (singleton)

event_bus = InMemoryEventBus()
