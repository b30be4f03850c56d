"""Cart service layer (CartAggregator use cases).

Every command loads the session's cart under the repository's unit of
work, applies a pure transition on the immutable ``Cart`` record and
persists the new version together with a ``CartUpdated`` event.  Events
are published on the bus only after the unit of work commits; a rejected
command saves and publishes nothing.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Optional
from uuid import UUID

import structlog

from modules.cart.domain import Cart
from modules.cart.events import CartUpdated
from modules.cart.exceptions import CatalogItemNotFound, OriginConflict
from modules.cart.repositories.interfaces import ICartRepository
from modules.catalog.repositories.interfaces import ICatalog
from modules.core.context import SessionContext
from shared.domain.bus import IEventBus

logger = structlog.get_logger(__name__)


class CartService:
    """Application service for the session cart.

    Receives its collaborators via constructor injection.
    ``max_quantity_per_line`` of 0 means quantities are not capped.
    """

    def __init__(
        self,
        cart_repository: ICartRepository,
        catalog: ICatalog,
        event_bus: IEventBus,
        max_quantity_per_line: int = 0,
    ) -> None:
        self._cart_repo = cart_repository
        self._catalog = catalog
        self._event_bus = event_bus
        self._max_quantity = max_quantity_per_line

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def add_item(
        self,
        ctx: SessionContext,
        item_id: UUID,
        options: Optional[Mapping[UUID, Iterable[UUID]]] = None,
        special_instructions: Optional[str] = None,
    ) -> Cart:
        """Add one unit of a catalog item to the session's cart.

        Raises:
            CatalogItemNotFound: the catalog does not know *item_id*.
            OriginConflict: the cart holds items from another origin.
            InvalidOption: the selected options do not fit the item.
            InvalidQuantity: the matching line is already at the cap.
        """
        log = logger.bind(item_id=str(item_id), **ctx.log_context)
        item = self._catalog.get_item(item_id)
        if item is None:
            raise CatalogItemNotFound(f"Catalog item {item_id} not found.")

        try:
            cart = self._mutate(
                ctx,
                "item_added",
                lambda current: current.with_item_added(
                    item, options, special_instructions, self._max_quantity
                ),
            )
        except OriginConflict as exc:
            log.warning(
                "cart.origin_conflict",
                current_origin=str(exc.current_origin),
                requested_origin=str(exc.requested_origin),
            )
            raise

        log.info("cart.item_added", item_count=cart.item_count())
        return cart

    def update_quantity(
        self, ctx: SessionContext, line_item_id: UUID, quantity: int
    ) -> Cart:
        """Set a line's quantity; zero or less removes the line.

        Raises:
            LineItemNotFound: the line is not in the cart.
            InvalidQuantity: *quantity* exceeds the configured cap.
        """
        cart = self._mutate(
            ctx,
            "quantity_updated" if quantity > 0 else "item_removed",
            lambda current: current.with_quantity(
                line_item_id, quantity, self._max_quantity
            ),
        )
        logger.info(
            "cart.quantity_updated",
            line_item_id=str(line_item_id),
            quantity=quantity,
            **ctx.log_context,
        )
        return cart

    def remove_item(self, ctx: SessionContext, line_item_id: UUID) -> Cart:
        """Remove a line.  Removing an absent line is a no-op."""
        cart = self._mutate(
            ctx, "item_removed", lambda current: current.without_line(line_item_id)
        )
        logger.info(
            "cart.item_removed", line_item_id=str(line_item_id), **ctx.log_context
        )
        return cart

    def clear(self, ctx: SessionContext) -> Cart:
        cart = self._mutate(ctx, "cleared", lambda current: current.cleared())
        logger.info("cart.cleared", **ctx.log_context)
        return cart

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_cart(self, ctx: SessionContext) -> Cart:
        return self._cart_repo.get_for_session(ctx.session_id)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _mutate(self, ctx: SessionContext, change: str, transition) -> Cart:
        with self._cart_repo.atomic():
            current = self._cart_repo.get_for_session(ctx.session_id, for_update=True)
            cart = transition(current)
            if cart is current:
                return current
            event = CartUpdated(
                aggregate_id=cart.id,
                session_id=cart.session_id,
                change=change,
                item_count=cart.item_count(),
                subtotal=cart.subtotal(),
            )
            self._cart_repo.save(cart, events=[event])

        self._event_bus.publish(event)
        return cart
