"""Integration tests for the Django snapshot store.

Covers snapshot upsert/versioning, denormalised query columns, outbox rows
written in the same transaction, and rollback of the whole unit of work.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from modules.cart.events import CartUpdated
from modules.core.models import AggregateSnapshot, EventStatus, OutboxEvent
from modules.core.repositories import SnapshotDjangoRepository

pytestmark = [pytest.mark.integration, pytest.mark.django_db]


@pytest.fixture()
def django_store():
    return SnapshotDjangoRepository()


def _event(aggregate_id=None):
    return CartUpdated(
        aggregate_id=aggregate_id or uuid4(),
        session_id="s",
        change="item_added",
        item_count=1,
        subtotal="4.99",
    )


class TestSnapshotRows:
    def test_insert_then_update_bumps_version(self, django_store):
        django_store.save("cart:s", "cart", {"v": 1}, session_id="s", status="open")
        django_store.save("cart:s", "cart", {"v": 2}, session_id="s", status="empty")

        row = AggregateSnapshot.objects.get(key="cart:s")
        assert row.version == 2
        assert row.status == "empty"
        assert django_store.load("cart:s") == {"v": 2}

    def test_load_for_update_inside_atomic(self, django_store):
        django_store.save("order:1", "order", {"n": 1})

        with django_store.atomic():
            assert django_store.load_for_update("order:1") == {"n": 1}

    def test_list_and_reference_lookup(self, django_store):
        django_store.save("order:1", "order", {"n": 1}, session_id="a", status="PLACED", reference="ORD-1")
        django_store.save("order:2", "order", {"n": 2}, session_id="b", status="PLACED", reference="ORD-2")
        django_store.save("booking:1", "booking", {"n": 3}, session_id="a")

        assert django_store.list("order", session_id="a") == [{"n": 1}]
        assert django_store.list("order", status="PLACED") == [{"n": 1}, {"n": 2}]
        assert django_store.find_by_reference("order", "ORD-2") == {"n": 2}
        assert django_store.find_by_reference("booking", "ORD-2") is None

    def test_delete(self, django_store):
        django_store.save("cart:s", "cart", {})

        assert django_store.delete("cart:s") is True
        assert django_store.load("cart:s") is None


class TestOutbox:
    def test_events_written_with_snapshot(self, django_store):
        event = _event()

        django_store.save("cart:s", "cart", {"v": 1}, events=[event], topic="carts")

        row = OutboxEvent.objects.get()
        assert row.event_type == "CartUpdated"
        assert row.aggregate_id == str(event.aggregate_id)
        assert row.topic == "carts"
        assert row.status == EventStatus.PENDING
        assert row.payload["subtotal"] == "4.99"
        assert row.payload["change"] == "item_added"

    def test_topic_defaults_to_kind(self, django_store):
        django_store.save("cart:s", "cart", {}, events=[_event()])

        assert OutboxEvent.objects.get().topic == "cart"

    def test_rollback_discards_snapshot_and_events(self, django_store):
        with pytest.raises(RuntimeError):
            with django_store.atomic():
                django_store.save("cart:s", "cart", {"v": 1}, events=[_event()])
                raise RuntimeError("abort")

        assert django_store.load("cart:s") is None
        assert OutboxEvent.objects.count() == 0
