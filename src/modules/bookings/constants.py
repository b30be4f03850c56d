"""Booking domain constants.

Bookings have a looser lifecycle than food orders: a booking is created
``CONFIRMED`` and can only be completed or cancelled.
"""

from django.db import models


class BookingKind(models.TextChoices):
    FLIGHT = "FLIGHT", "Flight"
    HOTEL = "HOTEL", "Hotel"


class ItineraryCategory(models.TextChoices):
    FLIGHT = "FLIGHT", "Flight"
    HOTEL = "HOTEL", "Hotel"
    ACTIVITY = "ACTIVITY", "Activity"
    RESTAURANT = "RESTAURANT", "Restaurant"
    TRANSPORT = "TRANSPORT", "Transport"


class BookingStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    CONFIRMED = "CONFIRMED", "Confirmed"
    CANCELLED = "CANCELLED", "Cancelled"
    COMPLETED = "COMPLETED", "Completed"


VALID_TRANSITIONS: dict[str, set[str]] = {
    BookingStatus.PENDING: {BookingStatus.CONFIRMED, BookingStatus.CANCELLED},
    BookingStatus.CONFIRMED: {BookingStatus.COMPLETED, BookingStatus.CANCELLED},
    BookingStatus.CANCELLED: set(),
    BookingStatus.COMPLETED: set(),
}

TERMINAL_STATES: set[str] = {BookingStatus.CANCELLED, BookingStatus.COMPLETED}

CONFIRMATION_CODE_LENGTH = 8
CONFIRMATION_CODE_MAX_RETRIES = 5

MIN_PASSENGERS = 1
MAX_PASSENGERS = 9

UNIT_PASSENGER = "passenger"
UNIT_NIGHT = "night"

# ``kind`` of a user-added itinerary entry, next to the booking kinds
ITINERARY_ENTRY_KIND = "ENTRY"
