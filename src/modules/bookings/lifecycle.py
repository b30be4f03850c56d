"""Booking lifecycle transitions.

``PENDING -> {CONFIRMED, CANCELLED}``, ``CONFIRMED -> {COMPLETED, CANCELLED}``;
``CANCELLED`` and ``COMPLETED`` are terminal.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from modules.bookings.constants import BookingStatus
from modules.bookings.domain import Booking, BookingStatusChange
from shared.domain.exceptions import InvalidTransition


def transition(
    booking: Booking,
    target: BookingStatus,
    notes: str = "",
    now: Optional[datetime] = None,
    **changes,
) -> Booking:
    if not booking.can_transition_to(target):
        raise InvalidTransition(
            booking.status,
            target,
            "booking is in a terminal state" if booking.is_terminal else "",
        )
    now = now or datetime.now(timezone.utc)
    change = BookingStatusChange(
        old_status=booking.status, new_status=target, notes=notes, changed_at=now
    )
    return booking.model_copy(
        update={
            "status": target,
            "history": booking.history + (change,),
            "updated_at": now,
            **changes,
        }
    )


def confirm(booking: Booking, now: Optional[datetime] = None) -> Booking:
    return transition(booking, BookingStatus.CONFIRMED, "Booking confirmed", now)


def complete(booking: Booking, now: Optional[datetime] = None) -> Booking:
    return transition(booking, BookingStatus.COMPLETED, "Trip completed", now)


def cancel(booking: Booking, reason: str = "", now: Optional[datetime] = None) -> Booking:
    return transition(
        booking,
        BookingStatus.CANCELLED,
        reason or "Booking cancelled",
        now,
        cancellation_reason=reason or None,
    )
