"""Unit tests for OrderService.

The order and cart repositories share one in-memory snapshot store so
``place_order`` commits the order and the cleared cart together.  The
dispatch gateway is a mock.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from decimal import Decimal
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from freezegun import freeze_time

from modules.cart.domain import Cart
from modules.cart.events import CartUpdated
from modules.cart.exceptions import EmptyCart, MinimumOrderNotMet
from modules.cart.pricing import TipPolicy
from modules.cart.repositories import CartSnapshotRepository
from modules.catalog.dtos import CatalogItem
from modules.core.context import SessionContext
from modules.orders.constants import OrderStatus
from modules.orders.dispatch import IDispatchGateway
from modules.orders.domain import DeliveryAddress
from modules.orders.events import OrderCancelled, OrderPlaced, OrderStatusChanged
from modules.orders.exceptions import (
    OrderNotFound,
    OrderNumberUnavailable,
    RestaurantClosed,
    RestaurantNotFound,
)
from modules.orders.repositories import OrderSnapshotRepository
from modules.orders.services import OrderService
from shared.domain.exceptions import InvalidTransition
from tests.catalog_ids import BURGER_PALACE, CLASSIC_BURGER, FRIES

pytestmark = pytest.mark.unit

ADDRESS = DeliveryAddress(street="1 Main St", city="Springfield", zip_code="12345")


@pytest.fixture()
def cart_repo(store):
    return CartSnapshotRepository(store)


@pytest.fixture()
def order_repo(store):
    return OrderSnapshotRepository(store)


@pytest.fixture()
def dispatch():
    return MagicMock(spec=IDispatchGateway)


@pytest.fixture()
def service(order_repo, cart_repo, catalog, bus, dispatch, recorder):
    for event_class in (OrderPlaced, OrderStatusChanged, OrderCancelled, CartUpdated):
        bus.subscribe(event_class, recorder)
    return OrderService(order_repo, cart_repo, catalog, bus, dispatch)


@pytest.fixture()
def filled_cart(cart_repo, catalog, ctx):
    """Two classic burgers and one fries for ``ctx``."""
    burger = catalog.get_item(CLASSIC_BURGER)
    cart = Cart.empty(ctx.session_id).with_item_added(burger).with_item_added(burger)
    cart = cart.with_item_added(catalog.get_item(FRIES))
    return cart_repo.save(cart)


def _event_names(recorder):
    return [event.event_name for event in recorder.events]


# ---------------------------------------------------------------------------
# place_order
# ---------------------------------------------------------------------------


class TestPlaceOrder:
    def test_creates_placed_order_and_clears_cart(
        self, service, cart_repo, order_repo, filled_cart, ctx
    ):
        order = service.place_order(ctx, ADDRESS, "pm_card_visa")

        assert order.status == OrderStatus.PLACED
        assert order.checkout.total == Decimal("35.95")
        assert order.checkout.item_count == 3
        assert order_repo.get_by_id(order.id) == order
        assert cart_repo.get_for_session(ctx.session_id).is_empty

    def test_publishes_after_commit(self, service, filled_cart, ctx, recorder):
        order = service.place_order(ctx, ADDRESS, "pm_card_visa")

        assert _event_names(recorder) == ["OrderPlaced", "CartUpdated"]
        placed = recorder.events[0]
        assert placed.order_number == order.order_number
        assert placed.total == Decimal("35.95")
        assert recorder.events[1].change == "checked_out"

    def test_notifies_dispatch(self, service, dispatch, filled_cart, ctx):
        order = service.place_order(ctx, ADDRESS, "pm_card_visa")

        dispatch.order_placed.assert_called_once_with(order)

    def test_tip_is_priced_in(self, service, filled_cart, ctx):
        order = service.place_order(ctx, ADDRESS, "pm", TipPolicy.percentage(20))

        assert order.checkout.tip == Decimal("6.19")
        assert order.checkout.total == Decimal("42.14")

    @freeze_time("2026-03-02 12:00:00")
    def test_eta_uses_restaurant_delivery_minutes(self, service, filled_cart, ctx):
        order = service.place_order(ctx, ADDRESS, "pm")

        now = datetime(2026, 3, 2, 12, 0, tzinfo=timezone.utc)
        assert order.created_at == now
        assert order.estimated_completion_at == now + timedelta(minutes=35)
        assert order.order_number.startswith("ORD-20260302-")

    def test_idempotency_key_returns_existing_order(
        self, service, order_repo, dispatch, filled_cart, ctx, recorder
    ):
        first = service.place_order(ctx, ADDRESS, "pm", idempotency_key="key-1")
        second = service.place_order(ctx, ADDRESS, "pm", idempotency_key="key-1")

        assert second.id == first.id
        assert len(order_repo.list(session_id=ctx.session_id)) == 1
        assert dispatch.order_placed.call_count == 1
        assert _event_names(recorder).count("OrderPlaced") == 1

    def test_empty_cart(self, service, dispatch, ctx, recorder):
        with pytest.raises(EmptyCart):
            service.place_order(ctx, ADDRESS, "pm")

        dispatch.order_placed.assert_not_called()
        assert recorder.events == []

    def test_minimum_order_keeps_cart(self, service, cart_repo, catalog, ctx, recorder):
        cart = Cart.empty(ctx.session_id).with_item_added(catalog.get_item(FRIES))
        cart_repo.save(cart)

        with pytest.raises(MinimumOrderNotMet):
            service.place_order(ctx, ADDRESS, "pm")

        assert cart_repo.get_for_session(ctx.session_id) == cart
        assert recorder.events == []

    def test_unknown_restaurant(self, service, cart_repo, ctx):
        orphan = CatalogItem(
            id=uuid4(), origin_id=uuid4(), name="Ghost dish", unit_price="20.00"
        )
        cart_repo.save(Cart.empty(ctx.session_id).with_item_added(orphan))

        with pytest.raises(RestaurantNotFound):
            service.place_order(ctx, ADDRESS, "pm")

    def test_closed_restaurant_keeps_cart(
        self, service, catalog, cart_repo, order_repo, filled_cart, ctx, monkeypatch
    ):
        closed = catalog.get_restaurant(BURGER_PALACE).model_copy(
            update={"is_open": False}
        )
        monkeypatch.setattr(catalog, "get_restaurant", lambda restaurant_id: closed)

        with pytest.raises(RestaurantClosed):
            service.place_order(ctx, ADDRESS, "pm")

        assert order_repo.list() == []
        assert cart_repo.get_for_session(ctx.session_id) == filled_cart

    def test_dispatch_failure_rolls_back(
        self, service, dispatch, cart_repo, order_repo, filled_cart, ctx, recorder
    ):
        dispatch.order_placed.side_effect = RuntimeError("broker down")

        with pytest.raises(RuntimeError):
            service.place_order(ctx, ADDRESS, "pm")

        assert order_repo.list() == []
        assert cart_repo.get_for_session(ctx.session_id) == filled_cart
        assert recorder.events == []

    def test_order_number_retries_exhausted(
        self, service, order_repo, filled_cart, ctx, monkeypatch
    ):
        monkeypatch.setattr(order_repo, "order_number_exists", lambda number: True)

        with pytest.raises(OrderNumberUnavailable):
            service.place_order(ctx, ADDRESS, "pm")


# ---------------------------------------------------------------------------
# advance / cancel
# ---------------------------------------------------------------------------


class TestLifecycleCommands:
    @pytest.fixture()
    def order(self, service, filled_cart, ctx, recorder):
        order = service.place_order(ctx, ADDRESS, "pm")
        recorder.events.clear()
        return order

    def test_advance_persists_and_publishes(self, service, order_repo, order, recorder):
        updated = service.advance(order.id, "accepted")

        assert updated.status == OrderStatus.CONFIRMED
        assert order_repo.get_by_id(order.id).status == OrderStatus.CONFIRMED
        event = recorder.events[0]
        assert isinstance(event, OrderStatusChanged)
        assert (event.old_status, event.new_status) == ("PLACED", "CONFIRMED")

    def test_full_delivery(self, service, order):
        for _ in range(6):
            current = service.advance(order.id)

        assert current.status == OrderStatus.DELIVERED
        assert len(current.history) == 7
        with pytest.raises(InvalidTransition):
            service.advance(order.id)

    def test_cancel_publishes_both_events(self, service, order, recorder):
        cancelled = service.cancel(order.id, "too slow")

        assert cancelled.status == OrderStatus.CANCELLED
        assert _event_names(recorder) == ["OrderStatusChanged", "OrderCancelled"]
        assert recorder.events[1].reason == "too slow"

    def test_cancel_twice(self, service, order, recorder):
        service.cancel(order.id)
        recorder.events.clear()

        with pytest.raises(InvalidTransition):
            service.cancel(order.id)

        assert recorder.events == []

    def test_unknown_order(self, service):
        with pytest.raises(OrderNotFound):
            service.advance(uuid4())
        with pytest.raises(OrderNotFound):
            service.get_order(uuid4())

    def test_foreign_session_cannot_read_or_cancel(self, service, order, ctx, recorder):
        intruder = SessionContext(session_id="someone-else")

        with pytest.raises(OrderNotFound):
            service.get_order(order.id, ctx=intruder)
        with pytest.raises(OrderNotFound):
            service.cancel(order.id, "not mine", ctx=intruder)

        assert service.get_order(order.id, ctx=ctx).status == OrderStatus.PLACED
        assert recorder.events == []


class TestQueries:
    def test_list_filters_by_session_and_status(
        self, service, cart_repo, catalog, filled_cart, ctx
    ):
        first = service.place_order(ctx, ADDRESS, "pm")
        cart_repo.save(filled_cart)
        second = service.place_order(ctx, ADDRESS, "pm")
        service.advance(second.id)

        assert [o.id for o in service.list_orders(session_id=ctx.session_id)] == [
            first.id,
            second.id,
        ]
        placed = service.list_orders(session_id=ctx.session_id, status="PLACED")
        assert [o.id for o in placed] == [first.id]
        assert service.list_orders(session_id="someone-else") == []
