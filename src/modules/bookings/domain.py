"""Booking aggregate.

A booking is the travel counterpart of an order: it is priced once when
it is made (per passenger for flights, per night for hotels) and keeps
that breakdown.  The confirmation code never changes after creation.
"""

from __future__ import annotations

from datetime import datetime
from typing import Literal, Optional, Tuple, Union
from uuid import UUID

import uuid6
from pydantic import BaseModel, ConfigDict, Field

from modules.bookings.constants import (
    ITINERARY_ENTRY_KIND,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    BookingKind,
    BookingStatus,
    ItineraryCategory,
)
from modules.core.money import Money


class PriceBreakdown(BaseModel):
    """``total = unit_price * units``."""

    model_config = ConfigDict(frozen=True)

    unit_price: Money
    units: int = Field(ge=1)
    unit_label: str
    total: Money


class BookingStatusChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    old_status: Optional[BookingStatus] = None
    new_status: BookingStatus
    notes: str = ""
    changed_at: datetime


class Booking(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    session_id: str
    kind: BookingKind
    reference_id: UUID
    room_type_id: Optional[UUID] = None
    title: str
    price: PriceBreakdown
    guest_count: int = Field(ge=1)
    starts_at: datetime
    ends_at: datetime
    status: BookingStatus = BookingStatus.CONFIRMED
    confirmation_code: str
    cancellation_reason: Optional[str] = None
    history: Tuple[BookingStatusChange, ...] = ()
    created_at: datetime
    updated_at: datetime

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())


class ItineraryEntry(BaseModel):
    """A plan the traveller adds to the itinerary by hand (a tour, a dinner)."""

    model_config = ConfigDict(frozen=True)

    id: UUID = Field(default_factory=uuid6.uuid7)
    session_id: str
    kind: Literal["ENTRY"] = ITINERARY_ENTRY_KIND
    title: str = Field(min_length=1, max_length=200)
    description: str = ""
    location: str = ""
    category: ItineraryCategory = ItineraryCategory.ACTIVITY
    starts_at: datetime
    notes: str = ""
    created_at: datetime


ItineraryItem = Union[Booking, ItineraryEntry]
