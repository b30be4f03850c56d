"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the lifecycle and the Service Layer, which
receive domain values (``DeliveryAddress``, ``TipPolicy``).
"""

from __future__ import annotations

from rest_framework import serializers

from modules.cart.pricing import TipKind, TipPolicy
from modules.orders.constants import OrderStatus
from modules.orders.domain import DeliveryAddress

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class DeliveryAddressSerializer(serializers.Serializer):
    label = serializers.CharField(required=False, default="Home")
    street = serializers.CharField()
    apartment = serializers.CharField(required=False, allow_blank=True, allow_null=True, default=None)
    city = serializers.CharField()
    zip_code = serializers.CharField()
    instructions = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )


class TipSerializer(serializers.Serializer):
    kind = serializers.ChoiceField(choices=TipKind.choices, default=TipKind.FLAT)
    value = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=0)


class PlaceOrderSerializer(serializers.Serializer):
    """Validates the checkout request payload."""

    delivery_address = DeliveryAddressSerializer()
    payment_method_ref = serializers.CharField()
    tip = TipSerializer(required=False, allow_null=True, default=None)

    def to_domain(self) -> tuple[DeliveryAddress, str, TipPolicy | None]:
        data = self.validated_data
        tip = data.get("tip")
        tip_policy = None
        if tip:
            tip_policy = (
                TipPolicy.percentage(tip["value"])
                if tip["kind"] == TipKind.PERCENTAGE
                else TipPolicy.flat(tip["value"])
            )
        return (
            DeliveryAddress(**data["delivery_address"]),
            data["payment_method_ref"],
            tip_policy,
        )


class OrderNotesSerializer(serializers.Serializer):
    notes = serializers.CharField(required=False, default="", allow_blank=True)


class CancelOrderSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, default="", allow_blank=True)


class OrderFilterSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=OrderStatus.choices, required=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------

_money = dict(max_digits=12, decimal_places=2, read_only=True)


class PricedLineSerializer(serializers.Serializer):
    line_item_id = serializers.UUIDField(read_only=True)
    item_id = serializers.UUIDField(read_only=True)
    name = serializers.CharField(read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    option_names = serializers.ListField(child=serializers.CharField(), read_only=True)
    special_instructions = serializers.CharField(read_only=True, allow_null=True)
    unit_total = serializers.DecimalField(**_money)
    line_total = serializers.DecimalField(**_money)


class CheckoutSerializer(serializers.Serializer):
    origin_id = serializers.UUIDField(read_only=True)
    items = PricedLineSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(**_money)
    delivery_fee = serializers.DecimalField(**_money)
    service_fee = serializers.DecimalField(**_money)
    tip = serializers.DecimalField(**_money)
    total = serializers.DecimalField(**_money)
    priced_at = serializers.DateTimeField(read_only=True)


class StatusChangeSerializer(serializers.Serializer):
    old_status = serializers.CharField(read_only=True, allow_null=True)
    new_status = serializers.CharField(read_only=True)
    notes = serializers.CharField(read_only=True)
    changed_at = serializers.DateTimeField(read_only=True)


class OrderSerializer(serializers.Serializer):
    """Read serializer for orders with the priced checkout and history."""

    id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    session_id = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    is_terminal = serializers.BooleanField(read_only=True)
    checkout = CheckoutSerializer(read_only=True)
    delivery_address = serializers.CharField(
        source="delivery_address.full_address", read_only=True
    )
    payment_method_ref = serializers.CharField(read_only=True)
    cancellation_reason = serializers.CharField(read_only=True, allow_null=True)
    created_at = serializers.DateTimeField(read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
    estimated_completion_at = serializers.DateTimeField(read_only=True)
    history = StatusChangeSerializer(many=True, read_only=True)


class OrderListSerializer(serializers.Serializer):
    """Lightweight serializer for order list (no nested relations)."""

    id = serializers.UUIDField(read_only=True)
    order_number = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    total = serializers.DecimalField(source="checkout.total", **_money)
    created_at = serializers.DateTimeField(read_only=True)
