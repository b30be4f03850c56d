"""Booking API views.

Exposes the ``BookingService`` via HTTP.  Domain exceptions are
translated into HTTP status codes explicitly.
"""

from __future__ import annotations

from uuid import UUID

from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.bookings.exceptions import (
    BookingNotFound,
    FlightNotFound,
    HotelNotFound,
    ItineraryEntryNotFound,
    RoomTypeNotFound,
)
from modules.bookings.repositories import (
    BookingSnapshotRepository,
    ItinerarySnapshotRepository,
)
from modules.bookings.serializers import (
    AddItineraryEntrySerializer,
    BookFlightSerializer,
    BookHotelSerializer,
    BookingSerializer,
    CancelBookingSerializer,
    ItineraryEntrySerializer,
    serialize_itinerary,
)
from modules.bookings.services import BookingService
from modules.catalog.provider import get_catalog
from modules.core.repositories import SnapshotDjangoRepository
from modules.core.views import SessionContextMixin, domain_error_response
from shared.domain.exceptions import DomainError
from shared.infrastructure.bus import event_bus

BOOKING_ERROR_STATUS = {
    BookingNotFound: status.HTTP_404_NOT_FOUND,
    FlightNotFound: status.HTTP_404_NOT_FOUND,
    HotelNotFound: status.HTTP_404_NOT_FOUND,
    ItineraryEntryNotFound: status.HTTP_404_NOT_FOUND,
    RoomTypeNotFound: status.HTTP_404_NOT_FOUND,
}


def build_booking_service() -> BookingService:
    store = SnapshotDjangoRepository()
    return BookingService(
        booking_repository=BookingSnapshotRepository(store),
        itinerary_repository=ItinerarySnapshotRepository(store),
        catalog=get_catalog(),
        event_bus=event_bus,
    )


class BookingViewSet(SessionContextMixin, ViewSet):
    """Flight and hotel bookings plus the session itinerary."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_booking_service()

    def list(self, request: Request) -> Response:
        """GET /api/v1/bookings/

        The session's itinerary (bookings and hand-made entries), ordered
        by start time.
        """
        ctx = self.get_session_context(request)
        return Response(serialize_itinerary(self._service.itinerary(ctx.session_id)))

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/bookings/{pk}/"""
        ctx = self.get_session_context(request)
        try:
            booking = self._service.get_booking(self._booking_id(pk), ctx=ctx)
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(BookingSerializer(booking).data)

    @action(detail=False, methods=["post"])
    def flights(self, request: Request) -> Response:
        """POST /api/v1/bookings/flights/"""
        ctx = self.get_session_context(request)
        serializer = BookFlightSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            booking = self._service.book_flight(ctx, data["flight_id"], data["passengers"])
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"])
    def hotels(self, request: Request) -> Response:
        """POST /api/v1/bookings/hotels/"""
        ctx = self.get_session_context(request)
        serializer = BookHotelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            booking = self._service.book_hotel(
                ctx,
                data["hotel_id"],
                data["room_type_id"],
                data["check_in"],
                data["check_out"],
                data["guests"],
            )
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["post"], url_path="itinerary")
    def add_itinerary_entry(self, request: Request) -> Response:
        """POST /api/v1/bookings/itinerary/"""
        ctx = self.get_session_context(request)
        serializer = AddItineraryEntrySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        entry = self._service.add_itinerary_entry(ctx, **serializer.validated_data)
        return Response(
            ItineraryEntrySerializer(entry).data, status=status.HTTP_201_CREATED
        )

    @action(
        detail=False,
        methods=["delete"],
        url_path=r"itinerary/(?P<entry_id>[^/.]+)",
    )
    def remove_itinerary_entry(
        self, request: Request, entry_id: str | None = None
    ) -> Response:
        """DELETE /api/v1/bookings/itinerary/{entry_id}/"""
        ctx = self.get_session_context(request)
        try:
            self._service.remove_itinerary_entry(ctx, self._entry_id(entry_id))
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/bookings/{pk}/cancel/"""
        ctx = self.get_session_context(request)
        serializer = CancelBookingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            booking = self._service.cancel(
                self._booking_id(pk),
                reason=serializer.validated_data["reason"],
                ctx=ctx,
            )
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(BookingSerializer(booking).data)

    @action(detail=True, methods=["post"])
    def complete(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/bookings/{pk}/complete/"""
        ctx = self.get_session_context(request)
        try:
            booking = self._service.complete(self._booking_id(pk), ctx=ctx)
        except DomainError as exc:
            return domain_error_response(exc, BOOKING_ERROR_STATUS)
        return Response(BookingSerializer(booking).data)

    @staticmethod
    def _booking_id(pk: str | None) -> UUID:
        try:
            return UUID(str(pk))
        except ValueError:
            raise BookingNotFound(f"Booking {pk} not found.") from None

    @staticmethod
    def _entry_id(entry_id: str | None) -> UUID:
        try:
            return UUID(str(entry_id))
        except ValueError:
            raise ItineraryEntryNotFound(f"Itinerary entry {entry_id} not found.") from None
