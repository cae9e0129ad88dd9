"""
Catalog — Service Layer

Business logic for the product catalog: lookup creation, product
creation with size-label normalization, duplicate detection and SKU
generation, product updates, search, and attaching live balances.

@file catalog/services.py
"""

import logging
import re

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import Q

from core.constants import AUDIT_ACTION_STATUS_CHANGE
from core.exceptions import (
    DuplicateResourceError,
    InvalidInputError,
    NearDuplicateError,
    ResourceNotFoundError,
)
from core.services import AuditService

from .models import Category, Color, Product, Unit

logger = logging.getLogger('waretrack')

SIZE_UNIT_REGEX = re.compile(r'(\d)(mm|cm|m|in|ft|kg|g|lb|oz)\b', re.IGNORECASE)
WHITESPACE_REGEX = re.compile(r'\s+')


# ---------------------------------------------------------------------------
# Size labels & SKU codes
# ---------------------------------------------------------------------------

def normalize_size_label(raw: str) -> str:
    """
    Trim, collapse whitespace and separate a number from its unit suffix
    ("9mm" -> "9 mm", "1.5m" -> "1.5 m").
    """
    label = WHITESPACE_REGEX.sub(' ', (raw or '').strip())
    return SIZE_UNIT_REGEX.sub(r'\1 \2', label)


def size_label_matches(a: str, b: str) -> bool:
    return normalize_size_label(a).lower() == normalize_size_label(b).lower()


def _compact_label(label: str) -> str:
    return re.sub(r'[\W_]+', '', label.lower())


def generate_sku_code(category: str, color: str, size: str, unit: str) -> str:
    """CATE-COL-SIZE-UNIT, e.g. ("PVC Pipe", "Blue", "9 mm", "Piece") -> "PVCP-BLU-9MM-PIE"."""
    def abbr(text: str, length: int = 3) -> str:
        words = re.sub(r'[^a-zA-Z0-9 ]', '', text).split(' ')
        return ''.join(word[:length].upper() for word in words)

    parts = [
        abbr(category)[:4],
        abbr(color)[:3],
        WHITESPACE_REGEX.sub('', size).upper()[:6],
        abbr(unit)[:4],
    ]
    return '-'.join(parts)


def _unique_sku(base: str) -> str:
    if not Product.objects.filter(sku_code=base).exists():
        return base
    suffix = 2
    while Product.objects.filter(sku_code=f'{base}-{suffix}').exists():
        suffix += 1
    return f'{base}-{suffix}'


# ---------------------------------------------------------------------------
# Lookups
# ---------------------------------------------------------------------------

class LookupService:
    """Category / color / unit creation with case-insensitive duplicate checks."""

    @staticmethod
    def _create(model, *, name: str, actor=None, **fields):
        name = (name or '').strip()
        if not name:
            raise InvalidInputError(detail=f'{model._meta.verbose_name.capitalize()} name is required.')
        existing = model.objects.filter(name__iexact=name).first()
        if existing:
            raise DuplicateResourceError(
                detail=f'{model._meta.verbose_name.capitalize()} "{existing.name}" already exists.',
            )
        obj = model(name=name, created_by=actor, **fields)
        obj.save()
        return obj

    @staticmethod
    @transaction.atomic
    def create_category(*, name: str, actor=None) -> Category:
        return LookupService._create(Category, name=name, actor=actor)

    @staticmethod
    @transaction.atomic
    def create_color(*, name: str, hex_code: str = '', actor=None) -> Color:
        return LookupService._create(Color, name=name, actor=actor, hex_code=hex_code)

    @staticmethod
    @transaction.atomic
    def create_unit(*, name: str, actor=None) -> Unit:
        return LookupService._create(Unit, name=name, actor=actor)


# ---------------------------------------------------------------------------
# Products
# ---------------------------------------------------------------------------

class ProductService:
    """Product variant lifecycle: create, update, deactivate, search."""

    @staticmethod
    @transaction.atomic
    def create_product(
        *,
        category_id,
        color_id,
        size_label: str,
        unit_id,
        skip_duplicate_check: bool = False,
        actor=None,
    ) -> Product:
        """
        Create a product variant. Exact duplicates (same normalized size
        label) are refused; near duplicates ("Size 10" vs "size-10") raise
        NearDuplicateError unless skip_duplicate_check is set.
        """
        size_label = normalize_size_label(size_label)
        if not size_label:
            raise InvalidInputError(detail='Size label is required.')

        try:
            category = Category.objects.get(pk=category_id)
            color = Color.objects.get(pk=color_id)
            unit = Unit.objects.get(pk=unit_id)
        except (Category.DoesNotExist, Color.DoesNotExist, Unit.DoesNotExist):
            raise ResourceNotFoundError(
                detail='Invalid category, color, or unit selection. Please refresh and try again.',
            )

        siblings = list(
            Product.objects.filter(category=category, color=color, unit=unit)
            .values_list('size_label', flat=True)
        )
        for existing in siblings:
            if size_label_matches(existing, size_label):
                raise DuplicateResourceError(
                    detail=f'This product variant already exists (size "{existing}").',
                )

        if not skip_duplicate_check:
            for existing in siblings:
                if _compact_label(existing) == _compact_label(size_label):
                    raise NearDuplicateError(detail={
                        'detail': (
                            f'A similar product already exists with size "{existing}". '
                            f'Your entry "{size_label}" looks like a duplicate. '
                            'If this is intentional, confirm to proceed.'
                        ),
                        'existing_size_label': existing,
                    })

        sku_code = _unique_sku(
            generate_sku_code(category.name, color.name, size_label, unit.name),
        )
        product = Product(
            category=category,
            color=color,
            size_label=size_label,
            unit=unit,
            sku_code=sku_code,
            is_active=True,
            created_by=actor,
        )
        product._current_user = actor
        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            raise DuplicateResourceError(detail='This product variant already exists.')

        logger.info('Product %s created (%s) by %s', product.pk, sku_code, actor)
        return product

    @staticmethod
    @transaction.atomic
    def update_product(
        *,
        product_id,
        size_label: str | None = None,
        is_active: bool | None = None,
        actor=None,
    ) -> Product:
        try:
            product = Product.objects.select_for_update().get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail='Product not found.')

        old_active = product.is_active
        if size_label:
            product.size_label = normalize_size_label(size_label)
        if is_active is not None:
            product.is_active = is_active

        product.updated_by = actor
        product._current_user = actor
        try:
            with transaction.atomic():
                product.save()
        except IntegrityError:
            raise DuplicateResourceError(detail='Another product already uses this variant.')

        if old_active != product.is_active:
            AuditService.log(
                actor=actor,
                action=AUDIT_ACTION_STATUS_CHANGE,
                model_name='Product',
                object_id=str(product.pk),
                old_values={'is_active': old_active},
                new_values={'is_active': product.is_active},
            )
            logger.info(
                'Product %s %s by %s',
                product.pk, 'activated' if product.is_active else 'deactivated', actor,
            )
        return product

    @staticmethod
    def get_product(product_id) -> Product:
        try:
            return Product.objects.select_related('category', 'color', 'unit').get(pk=product_id)
        except Product.DoesNotExist:
            raise ResourceNotFoundError(detail='Product not found.')

    @staticmethod
    def search_products(query: str, limit: int | None = None):
        """Active products whose category, color, size, unit or SKU contains the query."""
        limit = limit or settings.SEARCH_RESULTS_LIMIT
        query = (query or '').strip()
        qs = Product.objects.filter(is_active=True).select_related('category', 'color', 'unit')
        if query:
            qs = qs.filter(
                Q(category__name__icontains=query)
                | Q(color__name__icontains=query)
                | Q(size_label__icontains=query)
                | Q(unit__name__icontains=query)
                | Q(sku_code__icontains=query)
            )
        return qs.order_by('category__name', 'color__name', 'size_label')[:limit]

    @staticmethod
    def with_balances(products) -> list[Product]:
        """
        Attach ``stock_balance`` to each product from a single balance-map
        pass over the ledger.
        """
        from stock.services import BalanceService

        products = list(products)
        balances = BalanceService.balance_map_of([p.pk for p in products])
        for product in products:
            product.stock_balance = balances[product.pk]
        return products
