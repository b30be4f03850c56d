"""Fixtures shared by the integration tests."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from modules.cart.domain import Cart
from modules.cart.repositories import CartSnapshotRepository
from modules.catalog.provider import get_catalog
from modules.core.context import SessionContext
from modules.core.repositories import SnapshotDjangoRepository
from modules.orders.dispatch import IDispatchGateway
from modules.orders.domain import DeliveryAddress
from modules.orders.repositories import OrderSnapshotRepository
from modules.orders.services import OrderService
from shared.infrastructure.bus import InMemoryEventBus
from tests.catalog_ids import CLASSIC_BURGER, FRIES


@pytest.fixture()
def placed_order(db):
    """An order persisted through the Django store (dispatch mocked)."""
    store = SnapshotDjangoRepository()
    catalog = get_catalog()
    cart_repo = CartSnapshotRepository(store)
    ctx = SessionContext(session_id="integration-session")
    cart = Cart.empty(ctx.session_id).with_item_added(catalog.get_item(CLASSIC_BURGER))
    cart_repo.save(cart.with_item_added(catalog.get_item(FRIES)))
    service = OrderService(
        OrderSnapshotRepository(store),
        cart_repo,
        catalog,
        InMemoryEventBus(),
        MagicMock(spec=IDispatchGateway),
    )
    return service.place_order(
        ctx,
        DeliveryAddress(street="1 Main St", city="Springfield", zip_code="12345"),
        "pm_card_visa",
    )
