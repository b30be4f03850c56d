"""Unit tests for domain event primitives and the in-memory bus."""

from __future__ import annotations

from dataclasses import FrozenInstanceError
from uuid import uuid4

import pytest

from modules.cart.events import CartUpdated
from modules.orders.events import OrderCancelled
from shared.domain.events import DomainEvent
from shared.domain.exceptions import DomainError, InvalidTransition
from shared.infrastructure.bus import InMemoryEventBus

pytestmark = pytest.mark.unit


def _cart_event(**overrides) -> CartUpdated:
    fields = {
        "aggregate_id": uuid4(),
        "session_id": "s-1",
        "change": "item_added",
        "item_count": 1,
        "subtotal": "4.99",
    }
    fields.update(overrides)
    return CartUpdated(**fields)


class TestDomainEvent:
    def test_event_name_is_class_name(self):
        assert _cart_event().event_name == "CartUpdated"
        assert DomainEvent(aggregate_id=uuid4()).event_name == "DomainEvent"

    def test_events_are_immutable(self):
        event = _cart_event()
        with pytest.raises(FrozenInstanceError):
            event.change = "cleared"

    def test_each_event_gets_its_own_id(self):
        assert _cart_event().event_id != _cart_event().event_id


class TestInMemoryEventBus:
    def test_publish_reaches_subscribed_handler(self, recorder):
        bus = InMemoryEventBus()
        bus.subscribe(CartUpdated, recorder)
        event = _cart_event()

        bus.publish(event)

        assert recorder.events == [event]

    def test_handlers_only_receive_their_event_class(self, recorder):
        bus = InMemoryEventBus()
        bus.subscribe(OrderCancelled, recorder)

        bus.publish(_cart_event())

        assert recorder.events == []

    def test_subscribe_is_idempotent(self, recorder):
        bus = InMemoryEventBus()
        bus.subscribe(CartUpdated, recorder)
        bus.subscribe(CartUpdated, recorder)

        bus.publish(_cart_event())

        assert len(recorder.events) == 1

    def test_unsubscribe_stops_delivery(self, recorder):
        bus = InMemoryEventBus()
        bus.subscribe(CartUpdated, recorder)
        bus.unsubscribe(CartUpdated, recorder)

        bus.publish(_cart_event())

        assert recorder.events == []

    def test_handler_error_propagates(self):
        class Exploding:
            def handle(self, event):
                raise RuntimeError("boom")

        bus = InMemoryEventBus()
        bus.subscribe(CartUpdated, Exploding())

        with pytest.raises(RuntimeError, match="boom"):
            bus.publish(_cart_event())


class TestInvalidTransition:
    def test_carries_current_and_target(self):
        exc = InvalidTransition("DELIVERED", "CANCELLED", "order is in a terminal state")

        assert isinstance(exc, DomainError)
        assert exc.current == "DELIVERED"
        assert exc.target == "CANCELLED"
        assert str(exc) == (
            "Cannot transition from DELIVERED to CANCELLED: order is in a terminal state."
        )
