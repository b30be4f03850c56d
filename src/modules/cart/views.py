"""Cart API views.

Exposes the ``CartService`` over HTTP.  The session is taken from the
``X-Session-ID`` header; domain exceptions are translated explicitly.
"""

from __future__ import annotations

from uuid import UUID

from django.conf import settings
from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import ViewSet

from modules.cart.exceptions import (
    CatalogItemNotFound,
    LineItemNotFound,
    OriginConflict,
)
from modules.cart.repositories import CartSnapshotRepository
from modules.cart.serializers import (
    AddCartItemSerializer,
    CartSerializer,
    UpdateQuantitySerializer,
)
from modules.cart.services import CartService
from modules.catalog.provider import get_catalog
from modules.core.repositories import SnapshotDjangoRepository
from modules.core.views import SessionContextMixin, domain_error_response
from shared.domain.exceptions import DomainError
from shared.infrastructure.bus import event_bus

CART_ERROR_STATUS = {
    CatalogItemNotFound: status.HTTP_404_NOT_FOUND,
    LineItemNotFound: status.HTTP_404_NOT_FOUND,
    OriginConflict: status.HTTP_409_CONFLICT,
}


def build_cart_service() -> CartService:
    return CartService(
        cart_repository=CartSnapshotRepository(SnapshotDjangoRepository()),
        catalog=get_catalog(),
        event_bus=event_bus,
        max_quantity_per_line=settings.CART_MAX_QUANTITY_PER_LINE,
    )


class CartViewSet(SessionContextMixin, ViewSet):
    """The session's single cart and its line items."""

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = build_cart_service()

    def retrieve(self, request: Request) -> Response:
        """GET /api/v1/cart/"""
        cart = self._service.get_cart(self.get_session_context(request))
        return Response(CartSerializer(cart).data)

    def clear(self, request: Request) -> Response:
        """DELETE /api/v1/cart/"""
        cart = self._service.clear(self.get_session_context(request))
        return Response(CartSerializer(cart).data)

    def add_item(self, request: Request) -> Response:
        """POST /api/v1/cart/items/"""
        ctx = self.get_session_context(request)
        serializer = AddCartItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        try:
            cart = self._service.add_item(
                ctx,
                data["item_id"],
                options=data["options"],
                special_instructions=data["special_instructions"],
            )
        except DomainError as exc:
            return domain_error_response(exc, CART_ERROR_STATUS)
        return Response(CartSerializer(cart).data, status=status.HTTP_201_CREATED)

    def update_quantity(self, request: Request, line_id: UUID) -> Response:
        """PATCH /api/v1/cart/items/{line_id}/

        A quantity of zero or less removes the line.
        """
        ctx = self.get_session_context(request)
        serializer = UpdateQuantitySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            cart = self._service.update_quantity(
                ctx, line_id, serializer.validated_data["quantity"]
            )
        except DomainError as exc:
            return domain_error_response(exc, CART_ERROR_STATUS)
        return Response(CartSerializer(cart).data)

    def remove_item(self, request: Request, line_id: UUID) -> Response:
        """DELETE /api/v1/cart/items/{line_id}/"""
        cart = self._service.remove_item(self.get_session_context(request), line_id)
        return Response(CartSerializer(cart).data)
