"""
Tests — ReportService: daily summary in the reporting zone, large
dispatches, negative balances and dashboard counters.

@file reports/tests/test_services.py
"""

import uuid
from datetime import datetime
from decimal import Decimal
from zoneinfo import ZoneInfo

import pytest

from core.exceptions import InvalidInputError
from reports.services import ReportService, day_bounds, parse_report_date
from stock.models import StockMovement
from stock.services import AdjustmentService, StockService
from tests.factories import ProductFactory, StockMovementFactory


pytestmark = pytest.mark.django_db

KOLKATA = ZoneInfo('Asia/Kolkata')


def _record(product, direction, quantity, user):
    return StockService.record_movement(
        product_id=product.pk,
        direction=direction,
        quantity=quantity,
        entered_by=user,
        idempotency_key=str(uuid.uuid4()),
    ).movement


def _stamp(movement, when):
    StockMovement.objects.filter(pk=movement.pk).update(created_at=when)


class TestDates:

    @pytest.mark.parametrize('value', ['2024-1-5', '05/01/2024', '', 'today', '2024-02-30'])
    def test_bad_dates_refused(self, value):
        with pytest.raises(InvalidInputError):
            parse_report_date(value)

    def test_day_bounds_use_reporting_zone(self):
        start, end = day_bounds(parse_report_date('2024-03-10'))
        assert start == datetime(2024, 3, 10, tzinfo=KOLKATA)
        assert (end - start).total_seconds() == 24 * 3600


class TestDailySummary:

    def test_totals_per_direction(self, product, user):
        for movement in (
            _record(product, 'in', 10, user),
            _record(product, 'in', 5, user),
            _record(product, 'out', 3, user),
        ):
            _stamp(movement, datetime(2024, 3, 10, 12, 0, tzinfo=KOLKATA))

        summary = ReportService.daily_summary('2024-03-10')
        assert summary['totals']['in'] == {'total': Decimal('15'), 'count': 2}
        assert summary['totals']['out'] == {'total': Decimal('3'), 'count': 1}
        assert len(summary['movements']) == 3

    def test_day_boundary_follows_reporting_zone(self, product, user):
        # 23:30 on the 9th in UTC is already 05:00 on the 10th in Kolkata.
        late = _record(product, 'in', 1, user)
        _stamp(late, datetime(2024, 3, 9, 23, 30, tzinfo=ZoneInfo('UTC')))
        # 23:59 Kolkata on the 10th still belongs to the 10th.
        edge = _record(product, 'in', 2, user)
        _stamp(edge, datetime(2024, 3, 10, 23, 59, tzinfo=KOLKATA))
        # Midnight Kolkata starts the 11th.
        next_day = _record(product, 'in', 4, user)
        _stamp(next_day, datetime(2024, 3, 11, 0, 0, tzinfo=KOLKATA))

        summary = ReportService.daily_summary('2024-03-10')
        assert summary['totals']['in'] == {'total': Decimal('3'), 'count': 2}

    def test_empty_day(self):
        summary = ReportService.daily_summary('2024-03-10')
        assert summary['totals']['in'] == {'total': Decimal('0'), 'count': 0}
        assert list(summary['movements']) == []


class TestLargeDispatches:

    def test_only_dispatches_above_threshold(self, product, user):
        _record(product, 'in', 100, user)
        big = _record(product, 'out', 21, user)
        _record(product, 'out', 20, user)
        assert [m.pk for m in ReportService.large_dispatches()] == [big.pk]

    def test_custom_threshold(self, product, user):
        _record(product, 'in', 100, user)
        _record(product, 'out', 6, user)
        assert len(ReportService.large_dispatches(threshold=5)) == 1

    def test_limit(self, product, user):
        _record(product, 'in', 500, user)
        for _ in range(3):
            _record(product, 'out', 30, user)
        assert len(ReportService.large_dispatches(limit=2)) == 2


class TestNegativeBalances:

    def test_negative_balance_movements(self, product, admin_user):
        AdjustmentService.adjust_balance(
            product_id=product.pk, new_balance=-4, reason='Count', adjusted_by=admin_user,
        )
        StockMovementFactory(balance_after=Decimal('3'))
        rows = list(ReportService.negative_balance_movements())
        assert len(rows) == 1
        assert rows[0].balance_after == Decimal('-4')

    def test_negative_stock_products_sorted(self, admin_user):
        slightly, badly, fine = ProductFactory(), ProductFactory(), ProductFactory()
        for product, value in ((slightly, -1), (badly, -9), (fine, 3)):
            AdjustmentService.adjust_balance(
                product_id=product.pk, new_balance=value, reason='Count', adjusted_by=admin_user,
            )
        result = ReportService.negative_stock_products()
        assert [p.pk for p in result] == [badly.pk, slightly.pk]
        assert result[0].stock_balance == Decimal('-9')

    def test_inactive_products_excluded(self, admin_user):
        product = ProductFactory(is_active=False)
        AdjustmentService.adjust_balance(
            product_id=product.pk, new_balance=-1, reason='Count', adjusted_by=admin_user,
        )
        assert ReportService.negative_stock_products() == []


class TestDashboard:

    def test_stats(self, user, admin_user):
        stocked, negative = ProductFactory(), ProductFactory()
        ProductFactory(is_active=False)
        _record(stocked, 'in', Decimal('10.125'), user)
        AdjustmentService.adjust_balance(
            product_id=negative.pk, new_balance=-2, reason='Count', adjusted_by=admin_user,
        )

        stats = ReportService.dashboard_stats()
        assert stats['total_skus'] == 2
        assert stats['total_in_stock'] == Decimal('8.13')
        assert stats['negative_stock_count'] == 1
        assert stats['negative_stock_items'] == [{
            'id': negative.pk, 'name': str(negative), 'balance': Decimal('-2'),
        }]
        assert stats['movements_today'] == 2

    def test_movements_from_other_days_not_counted(self, product, user):
        old = _record(product, 'in', 1, user)
        _stamp(old, datetime(2020, 1, 1, tzinfo=KOLKATA))
        assert ReportService.dashboard_stats()['movements_today'] == 0
