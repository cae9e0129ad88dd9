"""
Users — Models

Warehouse staff accounts. An operator records receipts and dispatches;
an admin additionally corrects balances, manages the catalog and
manages users. Login is name + numeric PIN; the PIN is stored with
Django's password hashers, never in clear.

@file users/models.py
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from core.models import BaseModel
from users.managers import UserManager


class User(AbstractBaseUser, PermissionsMixin, BaseModel):
    """
    Custom user for WareTrack.

    Movements and adjustments reference the user as the entering /
    adjusting actor, so users are deactivated rather than deleted.
    """

    class RoleChoices(models.TextChoices):
        OPERATOR = 'operator', _('Operator')
        ADMIN = 'admin', _('Admin')

    name = models.CharField(_('name'), max_length=100, unique=True)
    role = models.CharField(
        _('role'), max_length=10,
        choices=RoleChoices.choices, default=RoleChoices.OPERATOR,
        db_index=True,
    )

    is_staff = models.BooleanField(_('staff status'), default=False)
    is_active = models.BooleanField(_('active'), default=True, db_index=True)
    date_joined = models.DateTimeField(_('date joined'), default=timezone.now)

    objects = UserManager()

    USERNAME_FIELD = 'name'
    REQUIRED_FIELDS = []

    class Meta:
        verbose_name = _('user')
        verbose_name_plural = _('users')
        ordering = ['name']
        indexes = [
            models.Index(fields=['role', 'is_active']),
        ]

    def __str__(self):
        return self.name

    def get_full_name(self):
        return self.name

    def get_short_name(self):
        return self.name

    @property
    def is_admin(self) -> bool:
        return self.is_superuser or self.role == self.RoleChoices.ADMIN

    @property
    def display_name(self) -> str:
        # Shared counter logins are named "operator"; shown with a courtesy title.
        return 'Madam' if self.name.strip().lower() == 'operator' else self.name
