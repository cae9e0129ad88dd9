"""
Stock — Serializers

Read serializers for movements and adjustments, and input serializers
for the ledger write endpoints. Quantities are accepted as raw text or
numbers and validated by the service layer, which owns the rules.

@file stock/serializers.py
"""

from rest_framework import serializers

from core.constants import UNDO_NOTE_PREFIX

from .models import StockAdjustment, StockMovement


# ---------------------------------------------------------------------------
# StockMovement
# ---------------------------------------------------------------------------

class MovementReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.__str__', read_only=True)
    sku_code = serializers.CharField(source='product.sku_code', read_only=True)
    direction_display = serializers.CharField(source='get_direction_display', read_only=True)
    entered_by_name = serializers.CharField(source='entered_by.display_name', read_only=True)
    is_undo = serializers.SerializerMethodField()

    class Meta:
        model = StockMovement
        fields = [
            'id', 'product', 'product_name', 'sku_code',
            'direction', 'direction_display',
            'quantity', 'balance_after', 'note',
            'entered_by', 'entered_by_name',
            'idempotency_key', 'is_undo',
            'created_at',
        ]
        read_only_fields = fields

    def get_is_undo(self, obj):
        return obj.note.startswith(UNDO_NOTE_PREFIX)


class MovementCreateSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    direction = serializers.ChoiceField(choices=StockMovement.Direction.choices)
    quantity = serializers.CharField()
    idempotency_key = serializers.CharField(max_length=100)
    note = serializers.CharField(required=False, allow_blank=True, default='')


# ---------------------------------------------------------------------------
# StockAdjustment
# ---------------------------------------------------------------------------

class AdjustmentReadSerializer(serializers.ModelSerializer):
    product_name = serializers.CharField(source='product.__str__', read_only=True)
    adjusted_by_name = serializers.CharField(source='adjusted_by.display_name', read_only=True)
    difference = serializers.DecimalField(max_digits=15, decimal_places=3, read_only=True)

    class Meta:
        model = StockAdjustment
        fields = [
            'id', 'product', 'product_name',
            'old_balance', 'new_balance', 'difference',
            'reason', 'adjusted_by', 'adjusted_by_name',
            'created_at',
        ]
        read_only_fields = fields


class AdjustmentCreateSerializer(serializers.Serializer):
    product = serializers.UUIDField()
    new_balance = serializers.CharField()
    reason = serializers.CharField(allow_blank=True)
