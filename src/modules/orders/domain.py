"""Order aggregate.

An order wraps the priced checkout it was created from and never
re-prices it.  ``history`` is append-only: every transition appends one
``StatusChange`` and never rewrites older entries.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional, Tuple
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field

from modules.cart.pricing import PricedCheckout
from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus


class DeliveryAddress(BaseModel):
    """Address supplied by the address collaborator; only its shape is checked."""

    model_config = ConfigDict(frozen=True)

    label: str = "Home"
    street: str = Field(min_length=1)
    apartment: Optional[str] = None
    city: str = Field(min_length=1)
    zip_code: str = Field(min_length=1)
    instructions: Optional[str] = None

    @property
    def full_address(self) -> str:
        street = f"{self.street}, {self.apartment}" if self.apartment else self.street
        return f"{street}, {self.city} {self.zip_code}"


class StatusChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old_status: Optional[OrderStatus] = None
    new_status: OrderStatus
    notes: str = ""
    changed_at: datetime


class Order(BaseModel):
    """Order aggregate root (immutable; transitions return new versions)."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    order_number: str
    session_id: str
    checkout: PricedCheckout
    delivery_address: DeliveryAddress
    payment_method_ref: str
    status: OrderStatus = OrderStatus.PLACED
    history: Tuple[StatusChange, ...] = ()
    cancellation_reason: Optional[str] = None
    idempotency_key: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    estimated_completion_at: datetime

    @property
    def origin_id(self) -> UUID:
        return self.checkout.origin_id

    @property
    def is_terminal(self) -> bool:
        """Return ``True`` if the order is in a terminal state."""
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        """Check whether transitioning to *new_status* is valid."""
        return new_status in VALID_TRANSITIONS.get(self.status, set())
