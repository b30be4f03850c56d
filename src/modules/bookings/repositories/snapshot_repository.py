"""Snapshot-store implementations of the booking repositories."""

from __future__ import annotations

from typing import List, Optional, Sequence
from uuid import UUID

from modules.bookings.domain import Booking, ItineraryEntry
from modules.bookings.repositories.interfaces import (
    IBookingRepository,
    IItineraryRepository,
)
from modules.core.repositories.snapshot_repository import SnapshotRepository
from shared.domain.events import DomainEvent


class BookingSnapshotRepository(SnapshotRepository[Booking], IBookingRepository):
    """Stores bookings under ``booking:<id>``; ``reference`` holds the confirmation code."""

    kind = "booking"
    record_class = Booking

    def get_by_id(self, id: UUID) -> Optional[Booking]:
        return self._load(self.key_for(id))

    def get_for_update(self, id: UUID) -> Optional[Booking]:
        return self._load(self.key_for(id), for_update=True)

    def confirmation_code_exists(self, code: str) -> bool:
        return self._find_by_reference(code) is not None

    def list(
        self, *, session_id: Optional[str] = None, status: Optional[str] = None
    ) -> List[Booking]:
        return self._list(session_id=session_id, status=status)

    def save(self, booking: Booking, events: Sequence[DomainEvent] = ()) -> Booking:
        return self._write(
            self.key_for(booking.id),
            booking,
            session_id=booking.session_id,
            status=booking.status,
            reference=booking.confirmation_code,
            events=events,
        )


class ItinerarySnapshotRepository(
    SnapshotRepository[ItineraryEntry], IItineraryRepository
):
    """Stores user-added entries under ``itinerary_entry:<id>``."""

    kind = "itinerary_entry"
    topic = "itinerary"
    record_class = ItineraryEntry

    def get_by_id(self, id: UUID) -> Optional[ItineraryEntry]:
        return self._load(self.key_for(id))

    def list_for_session(self, session_id: str) -> List[ItineraryEntry]:
        return self._list(session_id=session_id)

    def save(
        self, entry: ItineraryEntry, events: Sequence[DomainEvent] = ()
    ) -> ItineraryEntry:
        return self._write(
            self.key_for(entry.id), entry, session_id=entry.session_id, events=events
        )

    def delete(self, id: UUID) -> bool:
        return self._delete(self.key_for(id))
