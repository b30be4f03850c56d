"""Cart DRF serializers for API input/output.

Output serializers read straight from the immutable domain records;
``subtotal``/``item_count`` are computed on the record, never stored.
"""

from __future__ import annotations

from uuid import UUID

from rest_framework import serializers

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class AddCartItemSerializer(serializers.Serializer):
    """Validates a request to add one unit of a catalog item."""

    item_id = serializers.UUIDField()
    options = serializers.DictField(
        child=serializers.ListField(child=serializers.UUIDField()),
        required=False,
        default=dict,
    )
    special_instructions = serializers.CharField(
        required=False, allow_blank=True, allow_null=True, default=None
    )

    def validate_options(self, value):
        try:
            return {UUID(str(group_id)): ids for group_id, ids in value.items()}
        except ValueError as exc:
            raise serializers.ValidationError("Option group ids must be UUIDs.") from exc


class UpdateQuantitySerializer(serializers.Serializer):
    quantity = serializers.IntegerField()


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class LineItemSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    item_id = serializers.UUIDField(source="item.id", read_only=True)
    name = serializers.CharField(source="item.name", read_only=True)
    quantity = serializers.IntegerField(read_only=True)
    selected_options = serializers.SerializerMethodField()
    special_instructions = serializers.CharField(read_only=True, allow_null=True)
    unit_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    line_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    def get_selected_options(self, line) -> dict:
        return {
            str(group_id): [str(option_id) for option_id in option_ids]
            for group_id, option_ids in line.selected_options.items()
        }


class CartSerializer(serializers.Serializer):
    id = serializers.UUIDField(read_only=True)
    session_id = serializers.CharField(read_only=True)
    origin_id = serializers.UUIDField(read_only=True, allow_null=True)
    items = LineItemSerializer(many=True, read_only=True)
    item_count = serializers.IntegerField(read_only=True)
    subtotal = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    updated_at = serializers.DateTimeField(read_only=True)
