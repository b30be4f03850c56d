"""Event handlers for Cart domain events."""

from __future__ import annotations

import structlog

from modules.cart.events import CartUpdated
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class CartUpdatedHandler(IEventHandler[CartUpdated]):
    def handle(self, event: CartUpdated) -> None:
        logger.info(
            "cart.event.updated",
            cart_id=str(event.aggregate_id),
            session_id=event.session_id,
            change=event.change,
            item_count=event.item_count,
            subtotal=str(event.subtotal),
        )


cart_updated_handler = CartUpdatedHandler()

# (event class, handler) pairs wired onto the global bus by ``CartConfig.ready``
SUBSCRIPTIONS = ((CartUpdated, cart_updated_handler),)
