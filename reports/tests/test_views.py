"""
Tests — Reports API endpoints and the negative-stock scan task.

@file reports/tests/test_views.py
"""

import uuid

import pytest
from django.urls import reverse

from reports.tasks import scan_negative_stock_task
from stock.services import AdjustmentService, StockService
from tests.factories import ProductFactory


pytestmark = pytest.mark.django_db


class TestDashboardEndpoint:

    def test_requires_auth(self, api_client):
        resp = api_client.get(reverse('api-v1:reports:dashboard'))
        assert resp.status_code == 401

    def test_operator_can_view(self, authenticated_client, user):
        product = ProductFactory()
        StockService.record_movement(
            product_id=product.pk, direction='in', quantity=3,
            entered_by=user, idempotency_key=str(uuid.uuid4()),
        )
        resp = authenticated_client.get(reverse('api-v1:reports:dashboard'))
        assert resp.status_code == 200
        assert resp.data['data']['total_skus'] == 1
        assert resp.data['data']['movements_today'] == 1


class TestAdminReports:

    @pytest.mark.parametrize('name', ['daily', 'large-dispatches', 'negative-movements'])
    def test_operator_forbidden(self, authenticated_client, name):
        resp = authenticated_client.get(reverse(f'api-v1:reports:{name}'))
        assert resp.status_code == 403

    def test_daily_defaults_to_today(self, admin_client):
        resp = admin_client.get(reverse('api-v1:reports:daily'))
        assert resp.status_code == 200
        assert set(resp.data['data']['totals']) == {'in', 'out'}

    def test_daily_bad_date(self, admin_client):
        resp = admin_client.get(reverse('api-v1:reports:daily'), {'date': '10/03/2024'})
        assert resp.status_code == 400
        assert resp.data['code'] == 'VALIDATION_ERROR'

    def test_large_dispatches(self, admin_client, admin_user):
        product = ProductFactory()
        for direction, quantity in (('in', 100), ('out', 25), ('out', 5)):
            StockService.record_movement(
                product_id=product.pk, direction=direction, quantity=quantity,
                entered_by=admin_user, idempotency_key=str(uuid.uuid4()),
            )
        resp = admin_client.get(reverse('api-v1:reports:large-dispatches'))
        assert len(resp.data['data']) == 1
        resp = admin_client.get(reverse('api-v1:reports:large-dispatches'), {'threshold': 4})
        assert len(resp.data['data']) == 2

    def test_large_dispatches_bad_threshold(self, admin_client):
        resp = admin_client.get(reverse('api-v1:reports:large-dispatches'), {'threshold': 'big'})
        assert resp.status_code == 400


class TestNegativeStock:

    def test_operator_sees_negative_products(self, authenticated_client, admin_user):
        product = ProductFactory()
        AdjustmentService.adjust_balance(
            product_id=product.pk, new_balance=-3, reason='Count', adjusted_by=admin_user,
        )
        resp = authenticated_client.get(reverse('api-v1:reports:negative-stock'))
        assert resp.status_code == 200
        [row] = resp.data['data']
        assert row['id'] == str(product.pk)
        assert row['stock_status'] == 'negative'

    def test_scan_task_reports_negative_products(self, admin_user):
        product = ProductFactory()
        AdjustmentService.adjust_balance(
            product_id=product.pk, new_balance=-1, reason='Count', adjusted_by=admin_user,
        )
        result = scan_negative_stock_task()
        assert result == {'negative_count': 1, 'product_ids': [str(product.pk)]}
