"""
Stock — Django Admin Configuration

Read-only views of StockMovement and StockAdjustment. No add, edit or
delete: the ledger is insert-only and only the service layer writes it.

@file stock/admin.py
"""

from django.contrib import admin
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import StockAdjustment, StockMovement


class LedgerAdmin(admin.ModelAdmin):
    show_full_result_count = False
    list_per_page = 50
    date_hierarchy = 'created_at'
    ordering = ('-created_at',)

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(StockMovement)
class StockMovementAdmin(LedgerAdmin):
    list_display = (
        'created_at', 'product', 'direction_badge', 'quantity',
        'balance_after', 'entered_by', 'note',
    )
    list_filter = ('direction', 'created_at')
    search_fields = ('note', 'idempotency_key', 'product__sku_code', 'entered_by__name')
    readonly_fields = (
        'id', 'product', 'direction', 'quantity', 'balance_after',
        'note', 'entered_by', 'idempotency_key', 'created_at',
    )
    list_select_related = ('product__category', 'product__color', 'product__unit', 'entered_by')

    fieldsets = (
        (_('Movement'), {
            'fields': ('id', 'product', 'direction', 'quantity', 'balance_after', 'note'),
        }),
        (_('Submission'), {
            'fields': ('entered_by', 'idempotency_key', 'created_at'),
        }),
    )

    @admin.display(description=_('Direction'), ordering='direction')
    def direction_badge(self, obj):
        color = '#22c55e' if obj.direction == StockMovement.Direction.IN else '#f97316'
        return format_html(
            '<span style="background:{};color:#fff;padding:2px 8px;'
            'border-radius:4px;font-size:11px;font-weight:600;">{}</span>',
            color, obj.get_direction_display(),
        )


@admin.register(StockAdjustment)
class StockAdjustmentAdmin(LedgerAdmin):
    list_display = ('created_at', 'product', 'old_balance', 'new_balance', 'adjusted_by', 'reason')
    search_fields = ('reason', 'product__sku_code', 'adjusted_by__name')
    readonly_fields = (
        'id', 'product', 'old_balance', 'new_balance', 'reason', 'adjusted_by', 'created_at',
    )
    list_select_related = ('product__category', 'product__color', 'product__unit', 'adjusted_by')
