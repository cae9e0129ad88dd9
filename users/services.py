"""
Users — Service Layer

User administration (create, activate/deactivate, PIN reset) and login
audit. No HTTP context — services receive plain Python arguments and
raise typed exceptions.

@file users/services.py
"""

import logging

from django.conf import settings
from django.db import transaction

from core.constants import AUDIT_ACTION_STATUS_CHANGE, AUDIT_ACTION_UPDATE
from core.exceptions import DuplicateResourceError, InvalidInputError, ResourceNotFoundError
from core.services import AuditService

from .models import User

logger = logging.getLogger('waretrack')


def _validate_pin(pin: str) -> None:
    if not pin or len(pin) != settings.PIN_LENGTH or not pin.isdigit():
        raise InvalidInputError(detail=f'PIN must be exactly {settings.PIN_LENGTH} digits.')


# ---------------------------------------------------------------------------
# User service
# ---------------------------------------------------------------------------

class UserService:
    """Account administration for warehouse staff."""

    @staticmethod
    @transaction.atomic
    def create_user(
        *,
        name: str,
        pin: str,
        role: str = User.RoleChoices.OPERATOR,
        actor=None,
    ) -> User:
        name = (name or '').strip()
        if not name:
            raise InvalidInputError(detail='Name is required.')
        _validate_pin(pin)
        if User.objects.filter(name__iexact=name).exists():
            raise DuplicateResourceError(detail=f'User "{name}" already exists.')

        if role != User.RoleChoices.ADMIN:
            role = User.RoleChoices.OPERATOR

        user = User(name=name, role=role, created_by=actor)
        user._current_user = actor
        user.set_password(pin)
        user.save()
        logger.info('User %s (%s) created by %s', user.pk, role, actor)
        return user

    @staticmethod
    @transaction.atomic
    def set_active(*, user_id, is_active: bool, actor=None) -> User:
        try:
            user = User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise ResourceNotFoundError(detail='User not found.')

        old_active = user.is_active
        user.is_active = is_active
        user.updated_by = actor
        user._current_user = actor
        user.save(update_fields=['is_active', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_STATUS_CHANGE,
            model_name='User',
            object_id=str(user.pk),
            old_values={'is_active': old_active},
            new_values={'is_active': is_active},
        )
        return user

    @staticmethod
    @transaction.atomic
    def reset_pin(*, user_id, pin: str, actor=None) -> User:
        _validate_pin(pin)
        try:
            user = User.objects.select_for_update().get(pk=user_id)
        except User.DoesNotExist:
            raise ResourceNotFoundError(detail='User not found.')

        user.set_password(pin)
        user.updated_by = actor
        user.save(update_fields=['password', 'updated_by', 'updated_at'])

        AuditService.log(
            actor=actor,
            action=AUDIT_ACTION_UPDATE,
            model_name='User',
            object_id=str(user.pk),
            new_values={'pin_reset': True},
        )
        return user


# ---------------------------------------------------------------------------
# Auth service
# ---------------------------------------------------------------------------

class AuthService:
    """Login audit trail."""

    @staticmethod
    def log_auth_event(*, action: str, user=None, ip_address=None, user_agent=''):
        AuditService.log(
            actor=user,
            action=action,
            model_name='User',
            object_id=str(user.pk) if user else '',
            ip_address=ip_address,
            user_agent=user_agent,
        )
