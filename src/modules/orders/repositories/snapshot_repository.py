"""Snapshot-store implementation of ``IOrderRepository``."""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import UUID

from modules.core.repositories.snapshot_repository import SnapshotRepository
from modules.orders.domain import Order
from modules.orders.repositories.interfaces import IOrderRepository
from shared.domain.events import DomainEvent


class OrderSnapshotRepository(SnapshotRepository[Order], IOrderRepository):
    """Stores orders under ``order:<id>``; ``reference`` holds the order number."""

    kind = "order"
    record_class = Order

    def get_by_id(self, id: UUID) -> Optional[Order]:
        return self._load(self.key_for(id))

    def get_for_update(self, id: UUID) -> Optional[Order]:
        return self._load(self.key_for(id), for_update=True)

    def get_by_idempotency_key(self, session_id: str, key: str) -> Optional[Order]:
        if not key:
            return None
        return next(
            (o for o in self._list(session_id=session_id) if o.idempotency_key == key),
            None,
        )

    def order_number_exists(self, order_number: str) -> bool:
        return self._find_by_reference(order_number) is not None

    def list(
        self, *, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Order]:
        return self._list(session_id=session_id, status=status)

    def save(self, order: Order, events: Sequence[DomainEvent] = ()) -> Order:
        return self._write(
            self.key_for(order.id),
            order,
            session_id=order.session_id,
            status=order.status,
            reference=order.order_number,
            events=events,
        )
