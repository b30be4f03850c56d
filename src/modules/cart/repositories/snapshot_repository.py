"""Snapshot-store implementation of ``ICartRepository``."""

from __future__ import annotations

from typing import Sequence

from modules.cart.domain import Cart
from modules.cart.repositories.interfaces import ICartRepository
from modules.core.repositories.snapshot_repository import SnapshotRepository
from shared.domain.events import DomainEvent


class CartSnapshotRepository(SnapshotRepository[Cart], ICartRepository):
    """Stores the cart under ``cart:<session_id>``."""

    kind = "cart"
    record_class = Cart

    def get_for_session(self, session_id: str, *, for_update: bool = False) -> Cart:
        cart = self._load(self.key_for(session_id), for_update=for_update)
        return cart if cart is not None else Cart.empty(session_id)

    def save(self, cart: Cart, events: Sequence[DomainEvent] = ()) -> Cart:
        return self._write(
            self.key_for(cart.session_id),
            cart,
            session_id=cart.session_id,
            status="empty" if cart.is_empty else "open",
            reference=str(cart.origin_id or ""),
            events=events,
        )
