"""
WareTrack — Test Factories

Factory Boy factories for generating test data. Used across all test
modules. Ledger rows are normally written through the services; the
movement factory exists for report and admin tests that need history
with specific timestamps or stamped balances.

@file tests/factories.py
"""

import uuid
from decimal import Decimal

import factory

from catalog.models import Category, Color, Product, Unit
from core.models import AuditLog
from stock.models import StockAdjustment, StockMovement
from users.models import User

DEFAULT_PIN = '1234'


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------

class UserFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = User
        skip_postgeneration_save = True

    name = factory.Sequence(lambda n: f'staff-{n}')
    role = User.RoleChoices.OPERATOR
    is_active = True

    @factory.post_generation
    def pin(self, create, extracted, **kwargs):
        self.set_password(extracted or DEFAULT_PIN)
        if create:
            self.save(update_fields=['password'])


class AdminUserFactory(UserFactory):
    name = factory.Sequence(lambda n: f'admin-{n}')
    role = User.RoleChoices.ADMIN


class SuperuserFactory(AdminUserFactory):
    name = factory.Sequence(lambda n: f'root-{n}')
    is_staff = True
    is_superuser = True


# ---------------------------------------------------------------------------
# Catalog
# ---------------------------------------------------------------------------

class CategoryFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Category

    name = factory.Sequence(lambda n: f'Category-{n}')


class ColorFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Color

    name = factory.Sequence(lambda n: f'Color-{n}')
    hex_code = '#2563EB'


class UnitFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Unit

    name = factory.Sequence(lambda n: f'Unit-{n}')


class ProductFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = Product

    category = factory.SubFactory(CategoryFactory)
    color = factory.SubFactory(ColorFactory)
    unit = factory.SubFactory(UnitFactory)
    size_label = factory.Sequence(lambda n: f'{n + 1} mm')
    sku_code = factory.Sequence(lambda n: f'SKU-{n:05d}')
    is_active = True


# ---------------------------------------------------------------------------
# Stock
# ---------------------------------------------------------------------------

class StockMovementFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StockMovement

    product = factory.SubFactory(ProductFactory)
    direction = StockMovement.Direction.IN
    quantity = factory.LazyFunction(lambda: Decimal('10'))
    balance_after = factory.LazyAttribute(lambda o: o.quantity)
    note = ''
    entered_by = factory.SubFactory(UserFactory)
    idempotency_key = factory.LazyFunction(lambda: str(uuid.uuid4()))


class StockAdjustmentFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = StockAdjustment

    product = factory.SubFactory(ProductFactory)
    old_balance = factory.LazyFunction(lambda: Decimal('0'))
    new_balance = factory.LazyFunction(lambda: Decimal('5'))
    reason = 'Physical count'
    adjusted_by = factory.SubFactory(AdminUserFactory)


# ---------------------------------------------------------------------------
# Audit
# ---------------------------------------------------------------------------

class AuditLogFactory(factory.django.DjangoModelFactory):
    class Meta:
        model = AuditLog

    actor = factory.SubFactory(UserFactory)
    action = AuditLog.ActionChoices.CREATE
    model_name = 'User'
    object_id = factory.LazyFunction(lambda: str(uuid.uuid4()))
