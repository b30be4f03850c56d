"""Domain events for the Cart bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class CartUpdated(DomainEvent):
    """Raised after every cart mutation with the new totals."""

    session_id: str
    change: str
    item_count: int
    subtotal: Decimal
