"""Cart URL configuration."""

from __future__ import annotations

from django.urls import path

from modules.cart.views import CartViewSet

cart_detail = CartViewSet.as_view({"get": "retrieve", "delete": "clear"})
cart_items = CartViewSet.as_view({"post": "add_item"})
cart_item_detail = CartViewSet.as_view(
    {"patch": "update_quantity", "delete": "remove_item"}
)

urlpatterns = [
    path("cart/", cart_detail, name="cart-detail"),
    path("cart/items/", cart_items, name="cart-items"),
    path("cart/items/<uuid:line_id>/", cart_item_detail, name="cart-item-detail"),
]
