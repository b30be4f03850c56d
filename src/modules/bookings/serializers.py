"""Booking DRF serializers for API input/output."""

from __future__ import annotations

from rest_framework import serializers

from modules.bookings.constants import (
    MAX_PASSENGERS,
    MIN_PASSENGERS,
    ItineraryCategory,
)
from modules.bookings.domain import Booking

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class BookFlightSerializer(serializers.Serializer):
    flight_id = serializers.UUIDField()
    passengers = serializers.IntegerField(
        min_value=MIN_PASSENGERS, max_value=MAX_PASSENGERS, default=1
    )


class BookHotelSerializer(serializers.Serializer):
    """Date-range and guest rules are checked by the booking factory."""

    hotel_id = serializers.UUIDField()
    room_type_id = serializers.UUIDField()
    check_in = serializers.DateField()
    check_out = serializers.DateField()
    guests = serializers.IntegerField(default=1)


class CancelBookingSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, default="", allow_blank=True)


class AddItineraryEntrySerializer(serializers.Serializer):
    title = serializers.CharField(max_length=200)
    starts_at = serializers.DateTimeField()
    category = serializers.ChoiceField(
        choices=ItineraryCategory.choices, default=ItineraryCategory.ACTIVITY
    )
    description = serializers.CharField(required=False, default="", allow_blank=True)
    location = serializers.CharField(required=False, default="", allow_blank=True)
    notes = serializers.CharField(required=False, default="", allow_blank=True)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class PriceBreakdownSerializer(serializers.Serializer):
    unit_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    units = serializers.IntegerField(read_only=True)
    unit_label = serializers.CharField(read_only=True)
    total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)


class BookingStatusChangeSerializer(serializers.Serializer):
    old_status = serializers.CharField(read_only=True, allow_null=True)
    new_status = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True)
    changed_at = serializers.DateTimeField(read_only=True)


class BookingSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    session_id = serializers.CharField(read_only=True)
    kind = serializers.CharField(read_only=True)
    reference_id = serializers.UUIDField(read_only=True)
    room_type_id = serializers.UUIDField(read_only=True, allow_null=True)
    title = serializers.CharField(read_only=True)
    price = PriceBreakdownSerializer(read_only=True)
    guest_count = serializers.IntegerField(read_only=True)
    starts_at = serializers.DateTimeField(read_only=True)
    ends_at = serializers.DateTimeField(read_only=True)
    status = serializers.CharField(read_only=True)
    confirmation_code = serializers.CharField(read_only=True)
    cancellation_reason = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    history = BookingStatusChangeSerializer(many=True, read_only=True)


class ItineraryEntrySerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    session_id = serializers.CharField(read_only=True)
    kind = serializers.CharField(read_only=True)
    title = serializers.CharField(read_only=True)
    description = serializers.CharField(read_only=True)
    location = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True)
    starts_at = serializers.DateTimeField(read_only=True)
    notes = serializers.CharField(read_only=True)
    created_at = serializers.DateTimeField(read_only=True)


def serialize_itinerary(items) -> list:
    """Bookings and hand-made entries share ``id``, ``kind``, ``title`` and ``starts_at``."""
    return [
        BookingSerializer(item).data
        if isinstance(item, Booking)
        else ItineraryEntrySerializer(item).data
        for item in items
    ]
