"""Booking service layer (Use Cases).

Resolves flights and hotels through the catalog, lets the
``BookingFactory`` price and confirm the booking, and persists it
together with its domain events.  Events are published after commit.

The itinerary merges the session's bookings with the entries the
traveller adds by hand, ordered by start time.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional
from uuid import UUID

import structlog

from modules.bookings import lifecycle
from modules.bookings.constants import ItineraryCategory
from modules.bookings.domain import Booking, ItineraryEntry, ItineraryItem
from modules.bookings.events import (
    BookingCreated,
    BookingStatusChanged,
    ItineraryEntryAdded,
    ItineraryEntryRemoved,
)
from modules.bookings.exceptions import (
    BookingNotFound,
    FlightNotFound,
    HotelNotFound,
    ItineraryEntryNotFound,
    RoomTypeNotFound,
)
from modules.bookings.factory import BookingFactory
from modules.bookings.repositories.interfaces import (
    IBookingRepository,
    IItineraryRepository,
)
from modules.catalog.repositories.interfaces import ICatalog
from modules.core.context import SessionContext
from shared.domain.bus import IEventBus
from shared.domain.exceptions import InvalidTransition

logger = structlog.get_logger(__name__)


class BookingService:
    """Application service for travel bookings."""

    def __init__(
        self,
        booking_repository: IBookingRepository,
        itinerary_repository: IItineraryRepository,
        catalog: ICatalog,
        event_bus: IEventBus,
        factory: Optional[BookingFactory] = None,
    ) -> None:
        self._booking_repo = booking_repository
        self._itinerary_repo = itinerary_repository
        self._catalog = catalog
        self._event_bus = event_bus
        self._factory = factory or BookingFactory(
            is_code_taken=booking_repository.confirmation_code_exists
        )

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def book_flight(
        self, ctx: SessionContext, flight_id: UUID, passengers: int
    ) -> Booking:
        """Raises ``FlightNotFound`` or ``InvalidGuestCount``."""
        flight = self._catalog.get_flight(flight_id)
        if flight is None:
            raise FlightNotFound(f"Flight {flight_id} not found.")
        with self._booking_repo.atomic():
            booking = self._factory.book_flight(
                flight, passengers, session_id=ctx.session_id
            )
            event = self._created(booking)
            self._booking_repo.save(booking, events=[event])

        logger.info(
            "booking.flight_booked",
            booking_id=str(booking.id),
            confirmation_code=booking.confirmation_code,
            passengers=passengers,
            total=str(booking.price.total),
            **ctx.log_context,
        )
        self._event_bus.publish(event)
        return booking

    def book_hotel(
        self,
        ctx: SessionContext,
        hotel_id: UUID,
        room_type_id: UUID,
        check_in: date,
        check_out: date,
        guests: int,
    ) -> Booking:
        """Book a hotel stay.

        Raises:
            HotelNotFound: the hotel is unknown to the catalog.
            RoomTypeNotFound: the hotel does not offer *room_type_id*.
            InvalidDateRange: check-out is not after check-in.
            InvalidGuestCount: too many (or zero) guests for the room.
        """
        hotel = self._catalog.get_hotel(hotel_id)
        if hotel is None:
            raise HotelNotFound(f"Hotel {hotel_id} not found.")
        room_type = hotel.room_type(room_type_id)
        if room_type is None:
            raise RoomTypeNotFound(f"{hotel.name} has no room type {room_type_id}.")

        with self._booking_repo.atomic():
            booking = self._factory.book_hotel(
                hotel,
                room_type,
                check_in,
                check_out,
                guests,
                session_id=ctx.session_id,
            )
            event = self._created(booking)
            self._booking_repo.save(booking, events=[event])

        logger.info(
            "booking.hotel_booked",
            booking_id=str(booking.id),
            confirmation_code=booking.confirmation_code,
            nights=booking.price.units,
            total=str(booking.price.total),
            **ctx.log_context,
        )
        self._event_bus.publish(event)
        return booking

    def cancel(
        self,
        booking_id: UUID,
        reason: str = "",
        ctx: Optional[SessionContext] = None,
    ) -> Booking:
        return self._transition(
            booking_id, "booking.cancelled", lambda b: lifecycle.cancel(b, reason), ctx
        )

    def complete(
        self, booking_id: UUID, ctx: Optional[SessionContext] = None
    ) -> Booking:
        return self._transition(booking_id, "booking.completed", lifecycle.complete, ctx)

    def add_itinerary_entry(
        self,
        ctx: SessionContext,
        title: str,
        starts_at: datetime,
        category: str = ItineraryCategory.ACTIVITY,
        description: str = "",
        location: str = "",
        notes: str = "",
    ) -> ItineraryEntry:
        """Add a hand-made entry to the session's itinerary.

        A naive *starts_at* is taken as UTC.
        """
        if starts_at.tzinfo is None:
            starts_at = starts_at.replace(tzinfo=timezone.utc)
        entry = ItineraryEntry(
            session_id=ctx.session_id,
            title=title,
            description=description,
            location=location,
            category=category,
            starts_at=starts_at,
            notes=notes,
            created_at=datetime.now(timezone.utc),
        )
        event = ItineraryEntryAdded(
            aggregate_id=entry.id,
            session_id=entry.session_id,
            title=entry.title,
            category=entry.category,
            starts_at=entry.starts_at,
        )
        with self._itinerary_repo.atomic():
            self._itinerary_repo.save(entry, events=[event])

        logger.info(
            "booking.itinerary_entry_added",
            entry_id=str(entry.id),
            category=str(entry.category),
            **ctx.log_context,
        )
        self._event_bus.publish(event)
        return entry

    def remove_itinerary_entry(self, ctx: SessionContext, entry_id: UUID) -> None:
        """Raises ``ItineraryEntryNotFound``, also for another session's entry."""
        with self._itinerary_repo.atomic():
            entry = self._itinerary_repo.get_by_id(entry_id)
            if entry is None or entry.session_id != ctx.session_id:
                raise ItineraryEntryNotFound(f"Itinerary entry {entry_id} not found.")
            self._itinerary_repo.delete(entry_id)

        logger.info(
            "booking.itinerary_entry_removed", entry_id=str(entry_id), **ctx.log_context
        )
        self._event_bus.publish(
            ItineraryEntryRemoved(aggregate_id=entry_id, session_id=ctx.session_id)
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_booking(
        self, booking_id: UUID, ctx: Optional[SessionContext] = None
    ) -> Booking:
        """Raises ``BookingNotFound``, also for another session's booking."""
        booking = self._booking_repo.get_by_id(booking_id)
        if booking is None:
            raise BookingNotFound(f"Booking {booking_id} not found.")
        return self._owned(booking, ctx)

    def itinerary(self, session_id: str) -> List[ItineraryItem]:
        """The session's bookings and hand-made entries ordered by start time."""
        items: List[ItineraryItem] = [
            *self._booking_repo.list(session_id=session_id),
            *self._itinerary_repo.list_for_session(session_id),
        ]
        return sorted(items, key=lambda item: (item.starts_at, item.created_at))

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _created(booking: Booking) -> BookingCreated:
        return BookingCreated(
            aggregate_id=booking.id,
            session_id=booking.session_id,
            kind=booking.kind,
            confirmation_code=booking.confirmation_code,
            total=booking.price.total,
        )

    @staticmethod
    def _owned(booking: Booking, ctx: Optional[SessionContext]) -> Booking:
        if ctx is not None and booking.session_id != ctx.session_id:
            raise BookingNotFound(f"Booking {booking.id} not found.")
        return booking

    def _transition(
        self,
        booking_id: UUID,
        log_event: str,
        apply,
        ctx: Optional[SessionContext] = None,
    ) -> Booking:
        """Load under lock, apply *apply*, save and publish.

        Raises:
            BookingNotFound: booking does not exist, or belongs to a
                session other than *ctx*.
            InvalidTransition: the booking is already terminal.
        """
        with self._booking_repo.atomic():
            booking = self._booking_repo.get_for_update(booking_id)
            if booking is None:
                raise BookingNotFound(f"Booking {booking_id} not found.")
            booking = self._owned(booking, ctx)
            log = logger.bind(booking_id=str(booking_id), current_status=booking.status)
            try:
                updated = apply(booking)
            except InvalidTransition:
                log.warning("booking.invalid_transition")
                raise
            event = BookingStatusChanged(
                aggregate_id=updated.id,
                confirmation_code=updated.confirmation_code,
                old_status=booking.status,
                new_status=updated.status,
            )
            self._booking_repo.save(updated, events=[event])

        log.info(log_event, new_status=updated.status)
        self._event_bus.publish(event)
        return updated
