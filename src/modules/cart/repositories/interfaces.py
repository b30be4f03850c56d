"""Cart repository interface.

One cart per session.  The service layer depends on this contract and
never on the snapshot store directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, ContextManager, Sequence

from modules.cart.domain import Cart
from shared.domain.events import DomainEvent


class ICartRepository(ABC):
    @abstractmethod
    def atomic(self) -> ContextManager[Any]:
        """Unit of work for a cart mutation."""

    @abstractmethod
    def get_for_session(self, session_id: str, *, for_update: bool = False) -> Cart:
        """Return the session's cart, or a fresh empty cart when none is stored."""

    @abstractmethod
    def save(self, cart: Cart, events: Sequence[DomainEvent] = ()) -> Cart:
        """Persist *cart* as the session's current cart."""
