"""Booking repositories package."""

from modules.bookings.repositories.interfaces import (
    IBookingRepository,
    IItineraryRepository,
)
from modules.bookings.repositories.snapshot_repository import (
    BookingSnapshotRepository,
    ItinerarySnapshotRepository,
)

__all__ = [
    "IBookingRepository",
    "IItineraryRepository",
    "BookingSnapshotRepository",
    "ItinerarySnapshotRepository",
]
