"""
Tests — UserService (create, activate/deactivate, PIN reset) and the
name + PIN authentication backend.

@file users/tests/test_services.py
"""

import uuid

import pytest
from django.contrib.auth import authenticate

from core.exceptions import DuplicateResourceError, InvalidInputError, ResourceNotFoundError
from core.models import AuditLog
from tests.factories import UserFactory
from users.models import User
from users.services import UserService


pytestmark = pytest.mark.django_db


class TestCreateUser:

    def test_create_operator(self, admin_user):
        user = UserService.create_user(name=' Ravi ', pin='4321', actor=admin_user)
        assert user.name == 'Ravi'
        assert user.role == User.RoleChoices.OPERATOR
        assert user.check_password('4321')
        assert not user.is_admin
        assert AuditLog.objects.filter(model_name='User', object_id=str(user.pk), action='CREATE').exists()

    def test_create_admin(self, admin_user):
        user = UserService.create_user(name='Meera', pin='1111', role='admin', actor=admin_user)
        assert user.is_admin

    def test_unknown_role_falls_back_to_operator(self):
        user = UserService.create_user(name='Sam', pin='1111', role='owner')
        assert user.role == User.RoleChoices.OPERATOR

    def test_duplicate_name_case_insensitive(self):
        UserFactory(name='Ravi')
        with pytest.raises(DuplicateResourceError):
            UserService.create_user(name='ravi', pin='1234')

    @pytest.mark.parametrize('pin', ['', '123', '12345', 'abcd'])
    def test_bad_pin(self, pin):
        with pytest.raises(InvalidInputError):
            UserService.create_user(name='Ravi', pin=pin)


class TestSetActive:

    def test_deactivate(self, user, admin_user):
        updated = UserService.set_active(user_id=user.pk, is_active=False, actor=admin_user)
        assert updated.is_active is False
        entry = AuditLog.objects.get(action='STATUS_CHANGE', object_id=str(user.pk))
        assert entry.old_values == {'is_active': True}
        assert entry.new_values == {'is_active': False}

    def test_missing_user(self, admin_user):
        with pytest.raises(ResourceNotFoundError):
            UserService.set_active(user_id=uuid.uuid4(), is_active=False, actor=admin_user)


class TestResetPin:

    def test_reset(self, user, admin_user):
        UserService.reset_pin(user_id=user.pk, pin='9876', actor=admin_user)
        user.refresh_from_db()
        assert user.check_password('9876')
        assert not user.check_password('1234')

    def test_reset_bad_pin(self, user, admin_user):
        with pytest.raises(InvalidInputError):
            UserService.reset_pin(user_id=user.pk, pin='98', actor=admin_user)


class TestPinBackend:

    def test_authenticate(self):
        user = UserFactory(name='Ravi', pin='2468')
        assert authenticate(name='Ravi', pin='2468') == user

    def test_wrong_pin(self):
        UserFactory(name='Ravi', pin='2468')
        assert authenticate(name='Ravi', pin='0000') is None

    def test_inactive_user(self):
        UserFactory(name='Ravi', pin='2468', is_active=False)
        assert authenticate(name='Ravi', pin='2468') is None

    def test_unknown_name(self):
        assert authenticate(name='Nobody', pin='2468') is None

