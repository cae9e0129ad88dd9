"""
Catalog — Serializers

Lookup serializers plus read and write serializers for Product. The
read serializer expects ``stock_balance`` to have been attached by
ProductService.with_balances.

@file catalog/serializers.py
"""

from rest_framework import serializers

from stock.services import stock_status

from .models import Category, Color, Product, Unit


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class CategorySerializer(serializers.ModelSerializer):
    class Meta:
        model = Category
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


class ColorSerializer(serializers.ModelSerializer):
    class Meta:
        model = Color
        fields = ['id', 'name', 'hex_code', 'created_at']
        read_only_fields = ['id', 'created_at']

    def validate_hex_code(self, value):
        value = value.strip().upper()
        if value and (len(value) != 7 or not value.startswith('#')):
            raise serializers.ValidationError('Hex code must look like #RRGGBB.')
        return value


class UnitSerializer(serializers.ModelSerializer):
    class Meta:
        model = Unit
        fields = ['id', 'name', 'created_at']
        read_only_fields = ['id', 'created_at']


# ---------------------------------------------------------------------------
# Product
# ---------------------------------------------------------------------------

class ProductReadSerializer(serializers.ModelSerializer):
    category_name = serializers.CharField(source='category.name', read_only=True)
    color_name = serializers.CharField(source='color.name', read_only=True)
    color_hex = serializers.CharField(source='color.hex_code', read_only=True)
    unit_name = serializers.CharField(source='unit.name', read_only=True)
    display_name = serializers.CharField(read_only=True)
    stock_balance = serializers.SerializerMethodField()
    stock_status = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            'id', 'sku_code',
            'category', 'category_name',
            'color', 'color_name', 'color_hex',
            'size_label',
            'unit', 'unit_name',
            'display_name', 'is_active',
            'stock_balance', 'stock_status',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields

    def get_stock_balance(self, obj):
        balance = getattr(obj, 'stock_balance', None)
        return None if balance is None else float(balance)

    def get_stock_status(self, obj):
        balance = getattr(obj, 'stock_balance', None)
        return None if balance is None else stock_status(balance)


class ProductCreateSerializer(serializers.Serializer):
    category = serializers.UUIDField()
    color = serializers.UUIDField()
    unit = serializers.UUIDField()
    size_label = serializers.CharField(max_length=60)
    skip_duplicate_check = serializers.BooleanField(required=False, default=False)


class ProductUpdateSerializer(serializers.Serializer):
    size_label = serializers.CharField(max_length=60, required=False)
    is_active = serializers.BooleanField(required=False)
