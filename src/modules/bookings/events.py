"""Domain events for the Bookings bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class BookingCreated(DomainEvent):
    session_id: str
    kind: str
    confirmation_code: str
    total: Decimal


@dataclass(frozen=True, kw_only=True)
class BookingStatusChanged(DomainEvent):
    confirmation_code: str
    old_status: str
    new_status: str


@dataclass(frozen=True, kw_only=True)
class ItineraryEntryAdded(DomainEvent):
    session_id: str
    title: str
    category: str
    starts_at: datetime


@dataclass(frozen=True, kw_only=True)
class ItineraryEntryRemoved(DomainEvent):
    session_id: str
