"""
Core — Model Tests

Tests for AuditLog, the audit service helpers, the error envelope
and the success envelope renderer.

@file core/tests/test_models.py
"""

import json
import uuid
from decimal import Decimal

import pytest
from django.core.exceptions import ValidationError
from django.http import Http404
from rest_framework.response import Response

from core.exceptions import (
    InsufficientStockError,
    InvalidQuantityError,
    NearDuplicateError,
    standard_exception_handler,
)
from core.models import AuditLog
from core.renderers import StandardJSONRenderer
from core.services import AuditService
from tests.factories import AuditLogFactory, UserFactory


@pytest.mark.django_db
class TestAuditLog:
    def test_create_audit_log(self):
        user = UserFactory()
        log = AuditService.log(
            actor=user,
            action=AuditLog.ActionChoices.ADMIN_FLAG,
            model_name='StockMovement',
            object_id=uuid.uuid4(),
            new_values={'quantity': Decimal('12.500'), 'product_id': uuid.UUID(int=1)},
        )
        log.refresh_from_db()
        assert log.action == 'ADMIN_FLAG'
        assert log.new_values == {
            'quantity': '12.500',
            'product_id': '00000000-0000-0000-0000-000000000001',
        }
        assert log.old_values is None

    def test_factory(self):
        log = AuditLogFactory()
        assert log.pk is not None
        assert str(log).startswith('CREATE User:')

    def test_snapshot(self):
        user = UserFactory(name='Ravi')
        snapshot = AuditService.snapshot(user, fields=['name', 'role', 'is_active'])
        assert snapshot == {'name': 'Ravi', 'role': 'operator', 'is_active': True}

    def test_user_create_triggers_audit(self):
        before = AuditLog.objects.count()
        UserFactory()
        assert AuditLog.objects.count() > before


class TestJsonable:
    def test_none_passthrough(self):
        assert AuditService.jsonable(None) is None

    def test_plain_values_untouched(self):
        assert AuditService.jsonable({'a': 1, 'b': 'x', 'c': True}) == {'a': 1, 'b': 'x', 'c': True}


@pytest.mark.django_db
class TestExceptionHandler:
    def test_domain_exception_envelope(self):
        response = standard_exception_handler(InsufficientStockError(detail='Only 3 in stock.'), {})
        assert response.status_code == 409
        assert response.data['success'] is False
        assert response.data['code'] == 'INSUFFICIENT_STOCK'
        assert response.data['errors'] == {'detail': 'Only 3 in stock.'}

    def test_structured_detail_kept(self):
        exc = NearDuplicateError(detail={'detail': 'Looks similar.', 'existing_size_label': '9 mm'})
        response = standard_exception_handler(exc, {})
        assert response.status_code == 409
        assert response.data['code'] == 'NEAR_DUPLICATE'
        assert response.data['errors']['existing_size_label'] == '9 mm'

    def test_default_detail(self):
        response = standard_exception_handler(InvalidQuantityError(), {})
        assert response.status_code == 400
        assert response.data['code'] == 'INVALID_QUANTITY'

    def test_http404(self):
        response = standard_exception_handler(Http404(), {})
        assert response.status_code == 404
        assert response.data['code'] == 'RESOURCE_NOT_FOUND'

    def test_django_validation_error(self):
        response = standard_exception_handler(ValidationError({'name': ['Required.']}), {})
        assert response.status_code == 400
        assert response.data['errors'] == {'name': ['Required.']}
        assert response.data['code'] == 'VALIDATION_ERROR'

    def test_unhandled_exception(self):
        response = standard_exception_handler(RuntimeError('boom'), {})
        assert response.status_code == 500
        assert response.data['code'] == 'INTERNAL_ERROR'


class TestRenderer:
    def _render(self, data, status_code=200):
        context = {'response': Response(status=status_code)}
        return json.loads(StandardJSONRenderer().render(data, renderer_context=context))

    def test_wraps_plain_payload(self):
        assert self._render({'balance': 3}) == {'success': True, 'data': {'balance': 3}}

    def test_page_meta(self):
        body = self._render({'count': 1, 'next': None, 'previous': None, 'results': [{'id': 1}]})
        assert body['data'] == [{'id': 1}]
        assert body['meta'] == {'count': 1, 'next': None, 'previous': None}

    def test_cursor_page_meta(self):
        body = self._render({'next': 'http://x/?cursor=a', 'previous': None, 'results': []})
        assert body['meta'] == {'next': 'http://x/?cursor=a', 'previous': None}

    def test_existing_envelope_untouched(self):
        assert self._render({'success': True, 'data': []}) == {'success': True, 'data': []}

    def test_error_untouched(self):
        body = self._render({'success': False, 'code': 'X', 'errors': {}}, status_code=409)
        assert body['code'] == 'X'
