"""
Catalog — Django Admin Configuration

Admin for lookups and product variants. Products show their live
balance as a color-coded badge; deletion is disabled everywhere since
the ledger references every row.

@file catalog/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from core.constants import STOCK_STATUS_NEGATIVE, STOCK_STATUS_ZERO
from stock.services import BalanceService, stock_status

from .models import Category, Color, Product, Unit


class NoDeleteAdmin(admin.ModelAdmin):
    readonly_fields = ('id', 'created_at', 'updated_at', 'created_by', 'updated_by')
    show_full_result_count = False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Category)
class CategoryAdmin(NoDeleteAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)
    ordering = ('name',)


@admin.register(Color)
class ColorAdmin(NoDeleteAdmin):
    list_display = ('name', 'swatch', 'hex_code')
    search_fields = ('name',)
    ordering = ('name',)

    @admin.display(description=_('Swatch'))
    def swatch(self, obj):
        if not obj.hex_code:
            return '—'
        return format_html(
            '<span style="display:inline-block;width:16px;height:16px;'
            'border:1px solid #d1d5db;border-radius:3px;background:{};"></span>',
            obj.hex_code,
        )


@admin.register(Unit)
class UnitAdmin(NoDeleteAdmin):
    list_display = ('name', 'created_at')
    search_fields = ('name',)
    ordering = ('name',)


@admin.action(description=_('Deactivate selected products'))
def deactivate_products(modeladmin, request, queryset):
    updated = queryset.filter(is_active=True).update(is_active=False)
    modeladmin.message_user(request, f'{updated} product(s) deactivated.')


@admin.register(Product)
class ProductAdmin(NoDeleteAdmin):
    list_display = (
        'sku_code', 'category', 'color', 'size_label', 'unit',
        'balance_badge', 'is_active', 'created_at',
    )
    list_filter = ('is_active', 'category', 'color', 'unit')
    search_fields = ('sku_code', 'size_label', 'category__name', 'color__name', 'unit__name')
    list_select_related = ('category', 'color', 'unit')
    list_per_page = 30
    ordering = ('category__name', 'color__name', 'size_label')
    actions = [deactivate_products]

    fieldsets = (
        (_('Variant'), {
            'fields': ('id', 'sku_code', 'category', 'color', 'size_label', 'unit'),
        }),
        (_('Status'), {
            'fields': ('is_active',),
        }),
        (_('Audit'), {
            'fields': ('created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    @admin.display(description=_('Balance'))
    def balance_badge(self, obj):
        balance = BalanceService.balance_of(obj.pk)
        colors = {STOCK_STATUS_NEGATIVE: '#dc2626', STOCK_STATUS_ZERO: '#6b7280'}
        color = colors.get(stock_status(balance), '#22c55e')
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            color, balance.normalize(),
        )
