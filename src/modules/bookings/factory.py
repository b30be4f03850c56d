"""Booking factory.

Creates priced, confirmed bookings for flights and hotel stays.

Business rules implemented:
- Flight price is ``flight.price * passengers``; 1 to 9 passengers.
- Hotel price is ``room_type.price_per_night * nights`` where
  ``nights = max(1, days between check-in and check-out)``.
- Check-out must be after check-in; guests must fit the room type.
- Confirmation codes are 8 uppercase hex characters taken from a random
  UUID and retried while ``is_code_taken`` reports a collision.
"""

from __future__ import annotations

import uuid
from datetime import date, datetime, time, timezone
from typing import Callable, Optional

import structlog

from modules.bookings.constants import (
    CONFIRMATION_CODE_LENGTH,
    CONFIRMATION_CODE_MAX_RETRIES,
    MAX_PASSENGERS,
    MIN_PASSENGERS,
    UNIT_NIGHT,
    UNIT_PASSENGER,
    BookingKind,
    BookingStatus,
)
from modules.bookings.domain import Booking, BookingStatusChange, PriceBreakdown
from modules.bookings.exceptions import (
    ConfirmationCodeUnavailable,
    InvalidDateRange,
    InvalidGuestCount,
    RoomTypeNotFound,
)
from modules.catalog.dtos import Flight, Hotel, RoomType
from modules.core.money import to_money

logger = structlog.get_logger(__name__)

CodePredicate = Callable[[str], bool]


def generate_confirmation_code() -> str:
    return uuid.uuid4().hex[:CONFIRMATION_CODE_LENGTH].upper()


def _never_taken(code: str) -> bool:
    return False


class BookingFactory:
    """Builds new ``Booking`` records.

    ``is_code_taken`` is consulted for every candidate confirmation code;
    the default accepts the first one.
    """

    def __init__(
        self,
        is_code_taken: Optional[CodePredicate] = None,
        code_generator: Callable[[], str] = generate_confirmation_code,
    ) -> None:
        self._is_code_taken = is_code_taken or _never_taken
        self._generate_code = code_generator

    def book_flight(
        self,
        flight: Flight,
        passenger_count: int,
        *,
        session_id: str,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Raises ``InvalidGuestCount`` outside 1..9 passengers."""
        if not MIN_PASSENGERS <= passenger_count <= MAX_PASSENGERS:
            raise InvalidGuestCount(
                f"Passengers must be between {MIN_PASSENGERS} and {MAX_PASSENGERS}."
            )
        price = PriceBreakdown(
            unit_price=flight.price,
            units=passenger_count,
            unit_label=UNIT_PASSENGER,
            total=to_money(flight.price * passenger_count),
        )
        return self._build(
            session_id=session_id,
            kind=BookingKind.FLIGHT,
            reference_id=flight.id,
            title=(
                f"{flight.airline} {flight.flight_number} "
                f"{flight.departure_code}-{flight.arrival_code}"
            ),
            price=price,
            guest_count=passenger_count,
            starts_at=flight.departure_time,
            ends_at=flight.arrival_time,
            now=now,
        )

    def book_hotel(
        self,
        hotel: Hotel,
        room_type: RoomType,
        check_in: date,
        check_out: date,
        guest_count: int,
        *,
        session_id: str,
        now: Optional[datetime] = None,
    ) -> Booking:
        """Book *room_type* at *hotel* for the nights between the two dates.

        Raises:
            RoomTypeNotFound: the room type is not offered by *hotel*.
            InvalidDateRange: ``check_out <= check_in``.
            InvalidGuestCount: guests outside ``1..room_type.max_guests``.
        """
        if hotel.room_type(room_type.id) is None:
            raise RoomTypeNotFound(f"{hotel.name} has no room type {room_type.id}.")
        if check_out <= check_in:
            raise InvalidDateRange("Check-out must be after check-in.")
        if not 1 <= guest_count <= room_type.max_guests:
            raise InvalidGuestCount(
                f"{room_type.name} accepts between 1 and {room_type.max_guests} guests."
            )

        nights = max(1, (check_out - check_in).days)
        price = PriceBreakdown(
            unit_price=room_type.price_per_night,
            units=nights,
            unit_label=UNIT_NIGHT,
            total=to_money(room_type.price_per_night * nights),
        )
        return self._build(
            session_id=session_id,
            kind=BookingKind.HOTEL,
            reference_id=hotel.id,
            room_type_id=room_type.id,
            title=f"{hotel.name} - {room_type.name}",
            price=price,
            guest_count=guest_count,
            starts_at=datetime.combine(check_in, time.min, tzinfo=timezone.utc),
            ends_at=datetime.combine(check_out, time.min, tzinfo=timezone.utc),
            now=now,
        )

    def confirmation_code(self) -> str:
        """Return a code for which ``is_code_taken`` is false.

        Raises:
            ConfirmationCodeUnavailable: every attempt collided.
        """
        for attempt in range(CONFIRMATION_CODE_MAX_RETRIES):
            candidate = self._generate_code()
            if not self._is_code_taken(candidate):
                return candidate
            logger.warning("booking.confirmation_code_collision", attempt=attempt + 1)
        raise ConfirmationCodeUnavailable(
            f"Failed to generate unique confirmation code after "
            f"{CONFIRMATION_CODE_MAX_RETRIES} attempts"
        )

    def _build(self, *, now: Optional[datetime], **fields) -> Booking:
        now = now or datetime.now(timezone.utc)
        return Booking(
            status=BookingStatus.CONFIRMED,
            confirmation_code=self.confirmation_code(),
            history=(
                BookingStatusChange(
                    new_status=BookingStatus.CONFIRMED,
                    notes="Booking confirmed",
                    changed_at=now,
                ),
            ),
            created_at=now,
            updated_at=now,
            **fields,
        )
