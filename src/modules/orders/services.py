"""Order service layer (Use Cases).

Orchestrates checkout into an order and the order lifecycle.  All write
operations are atomic: the service defines the unit-of-work boundary and
publishes domain events only after it commits.

Business rules enforced:
- The checkout is priced once, with the origin restaurant's fees, and the
  order never re-prices it.
- Placing an order clears the cart in the same unit of work.
- Status transitions are validated by the lifecycle state machine.
- History is appended on every status change.
- The same idempotency key returns the existing order.
"""

from __future__ import annotations

from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence
from uuid import UUID

import structlog

from modules.cart.events import CartUpdated
from modules.cart.pricing import DEFAULT_SERVICE_FEE, FeeSchedule, TipPolicy, price
from modules.cart.repositories.interfaces import ICartRepository
from modules.catalog.repositories.interfaces import ICatalog
from modules.core.context import SessionContext
from modules.orders import lifecycle
from modules.orders.constants import DEFAULT_ETA_MINUTES, ORDER_NUMBER_MAX_RETRIES
from modules.orders.dispatch import IDispatchGateway
from modules.orders.domain import DeliveryAddress, Order
from modules.orders.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    OrderNotFound,
    OrderNumberUnavailable,
    RestaurantClosed,
    RestaurantNotFound,
)
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.bus import IEventBus
from shared.domain.events import DomainEvent
from shared.domain.exceptions import InvalidTransition

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories and collaborators via constructor injection (DIP).
    The cart and order repositories must share one snapshot store so that
    ``place_order`` commits both in a single unit of work.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        cart_repository: ICartRepository,
        catalog: ICatalog,
        event_bus: IEventBus,
        dispatch_gateway: IDispatchGateway,
        service_fee: Decimal = DEFAULT_SERVICE_FEE,
        default_eta_minutes: int = DEFAULT_ETA_MINUTES,
    ) -> None:
        self._order_repo = order_repository
        self._cart_repo = cart_repository
        self._catalog = catalog
        self._event_bus = event_bus
        self._dispatch = dispatch_gateway
        self._service_fee = service_fee
        self._default_eta = default_eta_minutes

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def place_order(
        self,
        ctx: SessionContext,
        address: DeliveryAddress,
        payment_method_ref: str,
        tip_policy: Optional[TipPolicy] = None,
        idempotency_key: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Order:
        """Turn the session's cart into a placed order.

        Steps:
        1. Return the existing order when the idempotency key was used.
        2. Lock the cart and resolve its origin restaurant.
        3. Price the cart with the restaurant's fee schedule.
        4. Create the order, save it and clear the cart atomically.
        5. After commit: publish events; dispatch is notified on commit.

        Raises:
            EmptyCart: the cart has no items.
            RestaurantNotFound: the cart's origin is unknown to the catalog.
            RestaurantClosed: the origin restaurant is not taking orders.
            MinimumOrderNotMet: the subtotal is below the restaurant minimum.
        """
        log = logger.bind(**ctx.log_context)
        log.info("order.placement_started")
        now = now or datetime.now(timezone.utc)

        with self._order_repo.atomic():
            if idempotency_key:
                existing = self._order_repo.get_by_idempotency_key(
                    ctx.session_id, idempotency_key
                )
                if existing:
                    log.info(
                        "order.idempotency_hit",
                        order_id=str(existing.id),
                        key=idempotency_key,
                    )
                    return existing

            cart = self._cart_repo.get_for_session(ctx.session_id, for_update=True)
            restaurant = (
                self._catalog.get_restaurant(cart.origin_id) if cart.origin_id else None
            )
            if cart.origin_id and restaurant is None:
                raise RestaurantNotFound(f"Restaurant {cart.origin_id} not found.")
            if restaurant is not None and not restaurant.is_open:
                log.warning("order.restaurant_closed", restaurant_id=str(restaurant.id))
                raise RestaurantClosed(f"{restaurant.name} is not taking orders.")

            fees = (
                FeeSchedule.for_restaurant(restaurant, self._service_fee)
                if restaurant
                else FeeSchedule(service_fee=self._service_fee)
            )
            checkout = price(cart, fees, tip_policy, now=now)

            order = lifecycle.create(
                checkout,
                address,
                payment_method_ref,
                session_id=ctx.session_id,
                order_number=self._unique_order_number(now),
                eta_minutes=restaurant.delivery_minutes if restaurant else self._default_eta,
                idempotency_key=idempotency_key,
                now=now,
            )
            placed = OrderPlaced(
                aggregate_id=order.id,
                order_number=order.order_number,
                session_id=order.session_id,
                origin_id=str(order.origin_id),
                total=checkout.total,
            )
            self._order_repo.save(order, events=[placed])

            cleared = cart.cleared()
            cart_event = CartUpdated(
                aggregate_id=cleared.id,
                session_id=cleared.session_id,
                change="checked_out",
                item_count=0,
                subtotal=cleared.subtotal(),
            )
            self._cart_repo.save(cleared, events=[cart_event])
            self._dispatch.order_placed(order)

        log.info(
            "order.placed",
            order_id=str(order.id),
            order_number=order.order_number,
            total=str(checkout.total),
        )
        self._publish([placed, cart_event])
        return order

    def advance(self, order_id: UUID, notes: str = "") -> Order:
        """Move an order one step forward along its lifecycle.

        Raises:
            OrderNotFound: order does not exist.
            InvalidTransition: the order is in a terminal state.
        """
        with self._order_repo.atomic():
            order = self._get_for_update(order_id)
            log = logger.bind(order_id=str(order_id), current_status=order.status)
            try:
                updated = lifecycle.advance(order, notes)
            except InvalidTransition:
                log.warning("order.invalid_transition")
                raise
            changed = self._status_changed(order, updated)
            self._order_repo.save(updated, events=[changed])

        log.info("order.status_advanced", new_status=updated.status)
        self._publish([changed])
        return updated

    def cancel(
        self,
        order_id: UUID,
        reason: str = "",
        ctx: Optional[SessionContext] = None,
    ) -> Order:
        """Cancel an order from any non-terminal status.

        When *ctx* is given, only the owning session may cancel.

        Raises:
            OrderNotFound: order does not exist or belongs to another session.
            InvalidTransition: the order is already delivered or cancelled.
        """
        with self._order_repo.atomic():
            order = self._owned(self._get_for_update(order_id), ctx)
            log = logger.bind(order_id=str(order_id), current_status=order.status)
            try:
                updated = lifecycle.cancel(order, reason)
            except InvalidTransition:
                log.warning("order.cancel_not_allowed")
                raise
            events: List[DomainEvent] = [
                self._status_changed(order, updated),
                OrderCancelled(
                    aggregate_id=order.id,
                    order_number=order.order_number,
                    reason=reason,
                ),
            ]
            self._order_repo.save(updated, events=events)

        log.info("order.cancelled", reason=reason)
        self._publish(events)
        return updated

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(
        self, order_id: UUID, ctx: Optional[SessionContext] = None
    ) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist, or *ctx* is given
                and the order belongs to another session.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return self._owned(order, ctx)

    def list_orders(
        self, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Order]:
        """Return orders, oldest first, optionally filtered."""
        return self._order_repo.list(session_id=session_id, status=status)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_for_update(self, order_id: UUID) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    @staticmethod
    def _owned(order: Order, ctx: Optional[SessionContext]) -> Order:
        # A foreign order reads as missing.
        if ctx is not None and order.session_id != ctx.session_id:
            raise OrderNotFound(f"Order {order.id} not found.")
        return order

    def _unique_order_number(self, now: datetime) -> str:
        for _ in range(ORDER_NUMBER_MAX_RETRIES):
            candidate = lifecycle.generate_order_number(now)
            if not self._order_repo.order_number_exists(candidate):
                return candidate
        raise OrderNumberUnavailable(
            f"Failed to generate unique order_number after "
            f"{ORDER_NUMBER_MAX_RETRIES} attempts"
        )

    @staticmethod
    def _status_changed(before: Order, after: Order) -> OrderStatusChanged:
        return OrderStatusChanged(
            aggregate_id=after.id,
            order_number=after.order_number,
            old_status=before.status,
            new_status=after.status,
        )

    def _publish(self, events: Sequence[DomainEvent]) -> None:
        for event in events:
            self._event_bus.publish(event)
