"""Event handlers for Orders domain events.

These are the in-process tracking subscribers: they record every
placement and status change in the structured log.
"""

from __future__ import annotations

import structlog

from modules.orders.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderPlacedHandler(IEventHandler[OrderPlaced]):
    def handle(self, event: OrderPlaced) -> None:
        logger.info(
            "order.event.placed",
            order_id=str(event.aggregate_id),
            order_number=event.order_number,
            total=str(event.total),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            order_number=event.order_number,
            reason=event.reason,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


order_placed_handler = OrderPlacedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_status_changed_handler = OrderStatusChangedHandler()

# (event class, handler) pairs wired onto the global bus by ``OrdersConfig.ready``
SUBSCRIPTIONS = (
    (OrderPlaced, order_placed_handler),
    (OrderStatusChanged, order_status_changed_handler),
    (OrderCancelled, order_cancelled_handler),
)
