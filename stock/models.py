"""
Stock — Models

Movement-based, immutable stock tracking. Stock is never stored as a
balance; it is computed as SUM(in) - SUM(out) per product. Each row also
stamps the balance right after it was applied, for reporting.
Records are INSERT ONLY — never update or delete.

@file stock/models.py
"""

import uuid

from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _

QUANTITY_FIELD_OPTIONS = {'max_digits': 14, 'decimal_places': 3}


class InsertOnlyModel(models.Model):
    """Rows may be created once and never changed or removed."""

    class Meta:
        abstract = True

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise NotImplementedError(f'{type(self).__name__} is insert-only; updates are not allowed.')
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise NotImplementedError(f'{type(self).__name__} records cannot be deleted.')


class StockMovement(InsertOnlyModel):
    """
    A single immutable stock movement (insert only).

    direction ``in`` adds quantity to the product's balance, ``out``
    removes it. Corrections are new movements (adjustments, undos),
    never edits.
    """

    class Direction(models.TextChoices):
        IN = 'in', _('Stock in')
        OUT = 'out', _('Stock out')

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='movements',
        verbose_name=_('product'),
    )
    direction = models.CharField(
        _('direction'), max_length=3,
        choices=Direction.choices, db_index=True,
    )
    quantity = models.DecimalField(_('quantity'), **QUANTITY_FIELD_OPTIONS)
    balance_after = models.DecimalField(
        _('balance after'), **QUANTITY_FIELD_OPTIONS,
        help_text=_('Product balance immediately after this movement was applied'),
    )
    note = models.TextField(_('note'), blank=True, default='')
    entered_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='stock_movements',
        verbose_name=_('entered by'),
    )
    idempotency_key = models.CharField(
        _('idempotency key'), max_length=100, unique=True,
        help_text=_('Client-generated key; a resubmission with the same key is rejected'),
    )
    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )
    # No updated_at: immutable record.

    class Meta:
        verbose_name = _('stock movement')
        verbose_name_plural = _('stock movements')
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['product', 'created_at'], name='stock_product_created_idx'),
            models.Index(fields=['entered_by', 'created_at'], name='stock_entered_by_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name='stock_movement_quantity_positive',
            ),
        ]

    def __str__(self):
        return f'{self.direction} {self.quantity} product={self.product_id}'

    @property
    def signed_quantity(self):
        return self.quantity if self.direction == self.Direction.IN else -self.quantity


class StockAdjustment(InsertOnlyModel):
    """
    Audit record of an administrative balance correction. The ledger
    change itself is the corrective movement written alongside it.
    """

    id = models.UUIDField(
        primary_key=True, default=uuid.uuid4, editable=False,
    )
    product = models.ForeignKey(
        'catalog.Product',
        on_delete=models.PROTECT,
        related_name='adjustments',
        verbose_name=_('product'),
    )
    old_balance = models.DecimalField(_('old balance'), **QUANTITY_FIELD_OPTIONS)
    new_balance = models.DecimalField(_('new balance'), **QUANTITY_FIELD_OPTIONS)
    reason = models.TextField(_('reason'))
    adjusted_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='stock_adjustments',
        verbose_name=_('adjusted by'),
    )
    created_at = models.DateTimeField(
        _('created at'), auto_now_add=True, db_index=True,
    )

    class Meta:
        verbose_name = _('stock adjustment')
        verbose_name_plural = _('stock adjustments')
        ordering = ['-created_at']

    def __str__(self):
        return f'{self.product_id}: {self.old_balance} -> {self.new_balance}'

    @property
    def difference(self):
        return self.new_balance - self.old_balance
