"""
Reports — Service Layer

Read-only views over the ledger: daily summaries, large dispatches,
movements that left a balance negative, products currently negative
and the dashboard counters. Calendar days are taken in
REPORTING_TIME_ZONE, not the server's zone.

@file reports/services.py
"""

import logging
import re
from datetime import date, datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal
from zoneinfo import ZoneInfo

from django.conf import settings
from django.db.models import Count, Sum
from django.utils import timezone

from catalog.models import Product
from core.exceptions import InvalidInputError
from stock.models import StockMovement
from stock.services import BalanceService, StockService

logger = logging.getLogger('waretrack')

DATE_REGEX = re.compile(r'^\d{4}-\d{2}-\d{2}$')
TWO_PLACES = Decimal('0.01')


def reporting_zone() -> ZoneInfo:
    return ZoneInfo(settings.REPORTING_TIME_ZONE)


def reporting_today() -> date:
    return timezone.now().astimezone(reporting_zone()).date()


def day_bounds(day: date) -> tuple[datetime, datetime]:
    """[start, end) of ``day`` in the reporting zone, as aware datetimes."""
    tz = reporting_zone()
    start = datetime.combine(day, time.min, tzinfo=tz)
    end = datetime.combine(day + timedelta(days=1), time.min, tzinfo=tz)
    return start, end


def parse_report_date(date_str: str) -> date:
    if not isinstance(date_str, str) or not DATE_REGEX.match(date_str):
        raise InvalidInputError(detail='Date must be in YYYY-MM-DD format.')
    try:
        return date.fromisoformat(date_str)
    except ValueError:
        raise InvalidInputError(detail=f'{date_str} is not a valid calendar date.')


class ReportService:
    """Aggregations for the admin reports and the home dashboard."""

    @staticmethod
    def daily_summary(date_str: str) -> dict:
        """
        Totals per direction for one reporting day plus that day's
        movements, newest first. Directions with no movements report
        a zero total and count.
        """
        day = parse_report_date(date_str)
        start, end = day_bounds(day)
        movements = StockService.movement_queryset().filter(
            created_at__gte=start, created_at__lt=end,
        )

        totals = {
            direction: {'total': Decimal('0'), 'count': 0}
            for direction in StockMovement.Direction.values
        }
        rows = (
            movements.order_by()
            .values('direction')
            .annotate(total=Sum('quantity'), count=Count('id'))
        )
        for row in rows:
            totals[row['direction']] = {'total': row['total'], 'count': row['count']}

        return {
            'date': day,
            'totals': totals,
            'movements': movements,
        }

    @staticmethod
    def large_dispatches(threshold=None, limit: int | None = None):
        """Dispatches with quantity strictly above ``threshold``, newest first."""
        if threshold is None:
            threshold = settings.LARGE_DISPATCH_ADMIN_FLAG_THRESHOLD
        return StockService.movement_queryset().filter(
            direction=StockMovement.Direction.OUT,
            quantity__gt=Decimal(str(threshold)),
        )[:limit or settings.REPORT_ROW_LIMIT]

    @staticmethod
    def negative_balance_movements(limit: int | None = None):
        """Movements whose stamped balance_after is below zero, newest first."""
        return StockService.movement_queryset().filter(
            balance_after__lt=0,
        )[:limit or settings.REPORT_ROW_LIMIT]

    @staticmethod
    def negative_stock_products() -> list[Product]:
        """Active products whose live balance is below zero, most negative first."""
        products = Product.objects.filter(is_active=True).select_related('category', 'color', 'unit')
        balances = BalanceService.balance_map_of([p.pk for p in products])
        negatives = []
        for product in products:
            if balances[product.pk] < 0:
                product.stock_balance = balances[product.pk]
                negatives.append(product)
        negatives.sort(key=lambda p: p.stock_balance)
        return negatives

    @staticmethod
    def dashboard_stats() -> dict:
        products = list(
            Product.objects.filter(is_active=True).select_related('category', 'color', 'unit')
        )
        balances = BalanceService.balance_map_of([p.pk for p in products])

        total_in_stock = Decimal('0')
        negative_items = []
        for product in products:
            balance = balances[product.pk]
            total_in_stock += balance
            if balance < 0:
                negative_items.append({
                    'id': product.pk,
                    'name': str(product),
                    'balance': balance,
                })

        start, end = day_bounds(reporting_today())
        movements_today = StockMovement.objects.filter(
            created_at__gte=start, created_at__lt=end,
        ).count()

        return {
            'total_skus': len(products),
            'total_in_stock': total_in_stock.quantize(TWO_PLACES, rounding=ROUND_HALF_UP),
            'negative_stock_count': len(negative_items),
            'movements_today': movements_today,
            'negative_stock_items': negative_items,
        }
