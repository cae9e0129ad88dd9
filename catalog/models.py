"""
Catalog — Models

The product catalog: lookup tables (category, color, unit) and the
product variants stock is tracked against. A product is one
(category, color, size label, unit) combination. Products carry no
stock figure; balances are always derived from the stock ledger.

@file catalog/models.py
"""

from django.db import models
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel


class Category(BaseModel):
    name = models.CharField(_('name'), max_length=100, unique=True)

    class Meta:
        verbose_name = _('category')
        verbose_name_plural = _('categories')
        ordering = ['name']

    def __str__(self):
        return self.name


class Color(BaseModel):
    name = models.CharField(_('name'), max_length=60, unique=True)
    hex_code = models.CharField(
        _('hex code'), max_length=7, blank=True,
        help_text=_('Swatch shown next to the color name, e.g. #2563EB'),
    )

    class Meta:
        verbose_name = _('color')
        verbose_name_plural = _('colors')
        ordering = ['name']

    def __str__(self):
        return self.name


class Unit(BaseModel):
    name = models.CharField(_('name'), max_length=60, unique=True)

    class Meta:
        verbose_name = _('unit')
        verbose_name_plural = _('units')
        ordering = ['name']

    def __str__(self):
        return self.name


class Product(BaseModel):
    """
    A stockable variant.

    Never physically deleted: historical movements must stay valid, so a
    product is retired by clearing is_active. The variant tuple is unique
    across active and inactive products alike.
    """

    category = models.ForeignKey(
        Category,
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name=_('category'),
    )
    color = models.ForeignKey(
        Color,
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name=_('color'),
    )
    size_label = models.CharField(
        _('size label'), max_length=60,
        help_text=_('Free text, normalized on entry (e.g. "9 mm", "1.5 m")'),
    )
    unit = models.ForeignKey(
        Unit,
        on_delete=models.PROTECT,
        related_name='products',
        verbose_name=_('unit'),
    )
    sku_code = models.CharField(
        _('SKU code'), max_length=40, unique=True, null=True, blank=True,
    )
    is_active = models.BooleanField(_('active'), default=True, db_index=True)

    class Meta:
        verbose_name = _('product')
        verbose_name_plural = _('products')
        ordering = ['category__name', 'color__name', 'size_label']
        indexes = [
            models.Index(fields=['is_active', 'category']),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['category', 'color', 'size_label', 'unit'],
                name='unique_product_variant',
            ),
        ]

    def __str__(self):
        return f'{self.category.name} - {self.color.name} {self.size_label} ({self.unit.name})'

    @property
    def display_name(self) -> str:
        return f'{self.category.name} {self.color.name} {self.size_label} {self.unit.name}'

    def delete(self, *args, **kwargs):
        raise NotImplementedError('Products cannot be deleted; deactivate them instead.')
