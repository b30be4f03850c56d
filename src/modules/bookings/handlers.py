"""Event handlers for Bookings domain events."""

from __future__ import annotations

import structlog

from modules.bookings.events import BookingCreated, BookingStatusChanged
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class BookingCreatedHandler(IEventHandler[BookingCreated]):
    def handle(self, event: BookingCreated) -> None:
        logger.info(
            "booking.event.created",
            booking_id=str(event.aggregate_id),
            kind=str(event.kind),
            confirmation_code=event.confirmation_code,
        )


class BookingStatusChangedHandler(IEventHandler[BookingStatusChanged]):
    def handle(self, event: BookingStatusChanged) -> None:
        logger.info(
            "booking.event.status_changed",
            booking_id=str(event.aggregate_id),
            old_status=str(event.old_status),
            new_status=str(event.new_status),
        )


booking_created_handler = BookingCreatedHandler()
booking_status_changed_handler = BookingStatusChangedHandler()

# (event class, handler) pairs wired onto the global bus by ``BookingsConfig.ready``
SUBSCRIPTIONS = (
    (BookingCreated, booking_created_handler),
    (BookingStatusChanged, booking_status_changed_handler),
)
