"""Unit tests for CartService.

Run against the in-memory snapshot store: commands are atomic, events go
to the bus only after commit, and a rejected command leaves both the
stored cart and the bus untouched.
"""

from __future__ import annotations

from decimal import Decimal
from uuid import uuid4

import pytest

from modules.cart.events import CartUpdated
from modules.cart.exceptions import (
    CatalogItemNotFound,
    InvalidQuantity,
    LineItemNotFound,
    OriginConflict,
)
from modules.cart.repositories import CartSnapshotRepository
from modules.cart.services import CartService
from modules.core.context import SessionContext
from tests.catalog_ids import CLASSIC_BURGER, FRIES, SALMON_ROLL

pytestmark = pytest.mark.unit


@pytest.fixture()
def repo(store):
    return CartSnapshotRepository(store)


@pytest.fixture()
def service(repo, catalog, bus, recorder):
    bus.subscribe(CartUpdated, recorder)
    return CartService(repo, catalog, bus, max_quantity_per_line=5)


class TestAddItem:
    def test_persists_and_publishes(self, service, repo, ctx, recorder):
        cart = service.add_item(ctx, CLASSIC_BURGER)

        assert repo.get_for_session(ctx.session_id) == cart
        assert len(recorder.events) == 1
        event = recorder.events[0]
        assert event.change == "item_added"
        assert event.item_count == 1
        assert event.subtotal == Decimal("12.99")

    def test_unknown_item(self, service, ctx, recorder):
        with pytest.raises(CatalogItemNotFound):
            service.add_item(ctx, uuid4())

        assert recorder.events == []

    def test_origin_conflict_changes_nothing(self, service, repo, ctx, recorder):
        cart = service.add_item(ctx, CLASSIC_BURGER)

        with pytest.raises(OriginConflict):
            service.add_item(ctx, SALMON_ROLL)

        assert repo.get_for_session(ctx.session_id) == cart
        assert len(recorder.events) == 1

    def test_quantity_cap(self, service, ctx):
        for _ in range(5):
            service.add_item(ctx, FRIES)

        with pytest.raises(InvalidQuantity):
            service.add_item(ctx, FRIES)

    def test_sessions_are_isolated(self, service, ctx):
        service.add_item(ctx, CLASSIC_BURGER)
        other = SessionContext(session_id="session-2")

        assert service.get_cart(other).is_empty


class TestUpdateAndRemove:
    def test_update_quantity(self, service, ctx, recorder):
        line_id = service.add_item(ctx, FRIES).items[0].id

        cart = service.update_quantity(ctx, line_id, 3)

        assert cart.item_count() == 3
        assert recorder.events[-1].change == "quantity_updated"

    def test_zero_quantity_removes(self, service, ctx, recorder):
        line_id = service.add_item(ctx, FRIES).items[0].id

        cart = service.update_quantity(ctx, line_id, 0)

        assert cart.is_empty
        assert recorder.events[-1].change == "item_removed"

    def test_update_unknown_line(self, service, ctx):
        with pytest.raises(LineItemNotFound):
            service.update_quantity(ctx, uuid4(), 2)

    def test_remove_absent_line_publishes_nothing(self, service, ctx, recorder):
        service.add_item(ctx, FRIES)

        service.remove_item(ctx, uuid4())

        assert len(recorder.events) == 1

    def test_clear(self, service, repo, ctx, recorder):
        service.add_item(ctx, FRIES)
        service.add_item(ctx, CLASSIC_BURGER)

        cart = service.clear(ctx)

        assert cart.is_empty
        assert repo.get_for_session(ctx.session_id).is_empty
        assert recorder.events[-1].change == "cleared"

    def test_clear_then_other_origin_allowed(self, service, ctx):
        service.add_item(ctx, CLASSIC_BURGER)
        service.clear(ctx)

        cart = service.add_item(ctx, SALMON_ROLL)

        assert len(cart.items) == 1
