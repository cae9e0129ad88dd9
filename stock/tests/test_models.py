"""
Tests — StockMovement / StockAdjustment: insert-only behaviour and
the positive-quantity constraint.

@file stock/tests/test_models.py
"""

from decimal import Decimal

import pytest
from django.db import IntegrityError, transaction

from stock.models import StockMovement
from tests.factories import StockAdjustmentFactory, StockMovementFactory


pytestmark = pytest.mark.django_db


class TestStockMovementModel:

    def test_create(self):
        movement = StockMovementFactory(quantity=Decimal('4.5'))
        movement.refresh_from_db()
        assert movement.quantity == Decimal('4.500')
        assert movement.direction == StockMovement.Direction.IN

    def test_update_raises(self):
        movement = StockMovementFactory()
        movement.note = 'edited'
        with pytest.raises(NotImplementedError):
            movement.save()

    def test_delete_raises(self):
        movement = StockMovementFactory()
        with pytest.raises(NotImplementedError):
            movement.delete()
        assert StockMovement.objects.filter(pk=movement.pk).exists()

    def test_zero_quantity_rejected_by_database(self):
        with pytest.raises(IntegrityError), transaction.atomic():
            StockMovementFactory(quantity=Decimal('0'))

    def test_idempotency_key_unique(self):
        StockMovementFactory(idempotency_key='k-1')
        with pytest.raises(IntegrityError), transaction.atomic():
            StockMovementFactory(idempotency_key='k-1')

    def test_signed_quantity(self):
        out = StockMovementFactory(direction=StockMovement.Direction.OUT, quantity=Decimal('3'))
        assert out.signed_quantity == Decimal('-3')


class TestStockAdjustmentModel:

    def test_difference(self):
        adjustment = StockAdjustmentFactory(old_balance=Decimal('20'), new_balance=Decimal('15'))
        assert adjustment.difference == Decimal('-5')

    def test_update_raises(self):
        adjustment = StockAdjustmentFactory()
        adjustment.reason = 'changed'
        with pytest.raises(NotImplementedError):
            adjustment.save()

    def test_delete_raises(self):
        adjustment = StockAdjustmentFactory()
        with pytest.raises(NotImplementedError):
            adjustment.delete()
