"""Order repository interface.

Persistence contract for the Order aggregate: snapshot save/load, row
locking for transitions, idempotency-key and order-number look-ups.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, List, Optional, Sequence
from uuid import UUID

from modules.orders.domain import Order
from shared.domain.events import DomainEvent


class IOrderRepository(ABC):
    """Repository contract for the Order aggregate root."""

    @abstractmethod
    def atomic(self) -> ContextManager[Any]:
        """Unit of work: the order, its events and any other save commit together."""

    @abstractmethod
    def get_by_id(self, id: UUID) -> Optional[Order]:
        """Retrieve an order by its identifier."""

    @abstractmethod
    def get_for_update(self, id: UUID) -> Optional[Order]:
        """Retrieve an order with a row-level lock.

        Must be called inside ``atomic()``.
        """

    @abstractmethod
    def get_by_idempotency_key(self, session_id: str, key: str) -> Optional[Order]:
        """Retrieve the session's order created with *key*."""

    @abstractmethod
    def order_number_exists(self, order_number: str) -> bool:
        """Return ``True`` if *order_number* is already in use."""

    @abstractmethod
    def list(
        self, *, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Order]:
        """List orders, oldest first, with optional filters."""

    @abstractmethod
    def save(self, order: Order, events: Sequence[DomainEvent] = ()) -> Order:
        """Persist the order version and record *events* in the outbox."""
