"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderPlaced(DomainEvent):
    """Raised when a checkout becomes an order."""

    order_number: str
    session_id: str
    origin_id: str
    total: Decimal


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every status transition, cancellations included."""

    order_number: str
    old_status: Optional[str]
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    """Raised when an order is cancelled."""

    order_number: str
    reason: str = ""
