"""Booking domain exceptions.

Raised by the booking factory and the Service Layer when business rules
are violated.  The API layer (Views) translates them into HTTP responses.
"""

from __future__ import annotations

from shared.domain.exceptions import DomainError


class BookingNotFound(DomainError):
    """The requested booking does not exist."""


class FlightNotFound(DomainError):
    """The catalog collaborator does not know the requested flight."""


class HotelNotFound(DomainError):
    """The catalog collaborator does not know the requested hotel."""


class RoomTypeNotFound(DomainError):
    """The room type is not offered by the hotel."""


class InvalidDateRange(DomainError):
    """Check-out is not after check-in."""


class InvalidGuestCount(DomainError):
    """Passenger or guest count is outside the allowed range."""


class ConfirmationCodeUnavailable(DomainError):
    """No unused confirmation code could be generated within the retry budget."""


class ItineraryEntryNotFound(DomainError):
    """The itinerary entry does not exist or belongs to another session."""
