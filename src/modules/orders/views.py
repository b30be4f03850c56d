"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.
Domain exceptions are caught and translated into appropriate
HTTP status codes; the view never swallows generic exceptions.
"""

from __future__ import annotations

from uuid import UUID

from django.conf import settings
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.cart.exceptions import CatalogItemNotFound
from modules.cart.repositories import CartSnapshotRepository
from modules.catalog.provider import get_catalog
from modules.core.pagination import StandardResultsSetPagination
from modules.core.repositories import SnapshotDjangoRepository
from modules.core.views import SessionContextMixin, domain_error_response
from modules.orders.dispatch import CeleryDispatchGateway
from modules.orders.exceptions import (
    OrderNotFound,
    RestaurantClosed,
    RestaurantNotFound,
)
from modules.orders.repositories import OrderSnapshotRepository
from modules.orders.serializers import (
    CancelOrderSerializer,
    OrderFilterSerializer,
    OrderListSerializer,
    OrderNotesSerializer,
    OrderSerializer,
    PlaceOrderSerializer,
)
from modules.orders.services import OrderService
from shared.domain.exceptions import DomainError
from shared.infrastructure.bus import event_bus

ORDER_ERROR_STATUS = {
    OrderNotFound: status.HTTP_404_NOT_FOUND,
    RestaurantNotFound: status.HTTP_404_NOT_FOUND,
    CatalogItemNotFound: status.HTTP_404_NOT_FOUND,
    RestaurantClosed: status.HTTP_409_CONFLICT,
}


def build_order_service() -> OrderService:
    store = SnapshotDjangoRepository()
    return OrderService(
        order_repository=OrderSnapshotRepository(store),
        cart_repository=CartSnapshotRepository(store),
        catalog=get_catalog(),
        event_bus=event_bus,
        dispatch_gateway=CeleryDispatchGateway(),
        service_fee=settings.CHECKOUT_SERVICE_FEE,
        default_eta_minutes=settings.ORDER_DEFAULT_ETA_MINUTES,
    )


class OrderViewSet(SessionContextMixin, GenericViewSet):
    """ViewSet for Order operations.

    All reads and writes go through ``OrderService``; there is no ORM
    queryset behind this ViewSet.
    """

    pagination_class = StandardResultsSetPagination

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_order_service()

    # ------------------------------------------------------------------
    # Create (checkout)
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/

        Places an order from the session's cart.  Supports idempotency via
        the ``Idempotency-Key`` header.
        """
        ctx = self.get_session_context(request)
        serializer = PlaceOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        address, payment_ref, tip_policy = serializer.to_domain()

        try:
            order = self._service.place_order(
                ctx,
                address,
                payment_ref,
                tip_policy=tip_policy,
                idempotency_key=request.headers.get("Idempotency-Key"),
            )
        except DomainError as exc:
            return domain_error_response(exc, ORDER_ERROR_STATUS)

        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Lists the session's orders, optionally filtered by ``status``.
        """
        ctx = self.get_session_context(request)
        filters = OrderFilterSerializer(data=request.query_params)
        filters.is_valid(raise_exception=True)
        orders = self._service.list_orders(
            session_id=ctx.session_id,
            status=filters.validated_data.get("status"),
        )
        page = self.paginate_queryset(orders)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        ctx = self.get_session_context(request)
        try:
            order = self._service.get_order(self._order_id(pk), ctx=ctx)
        except DomainError as exc:
            return domain_error_response(exc, ORDER_ERROR_STATUS)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Lifecycle actions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def advance(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/advance/"""
        serializer = OrderNotesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = self._service.advance(
                self._order_id(pk), notes=serializer.validated_data["notes"]
            )
        except DomainError as exc:
            return domain_error_response(exc, ORDER_ERROR_STATUS)
        return Response(OrderSerializer(order).data)

    @action(detail=True, methods=["post"])
    def cancel(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/cancel/"""
        ctx = self.get_session_context(request)
        serializer = CancelOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            order = self._service.cancel(
                self._order_id(pk),
                reason=serializer.validated_data["reason"],
                ctx=ctx,
            )
        except DomainError as exc:
            return domain_error_response(exc, ORDER_ERROR_STATUS)
        return Response(OrderSerializer(order).data)

    @staticmethod
    def _order_id(pk: str | None) -> UUID:
        try:
            return UUID(str(pk))
        except ValueError:
            raise OrderNotFound(f"Order {pk} not found.") from None
