"""
Users — Custom Managers

UserManager keyed on the unique ``name`` login handle; the PIN goes
through set_password like any Django password.

@file users/managers.py
"""

from django.contrib.auth.models import BaseUserManager
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):
    """create_user / create_superuser with name as identifier and PIN as password."""

    def _create_user(self, name, pin=None, **extra_fields):
        if not name or not name.strip():
            raise ValueError(_('Name is required.'))
        user = self.model(name=name.strip(), **extra_fields)
        user.set_password(pin)
        user.save(using=self._db)
        return user

    def create_user(self, name, pin=None, **extra_fields):
        extra_fields.setdefault('is_staff', False)
        extra_fields.setdefault('is_superuser', False)
        return self._create_user(name, pin, **extra_fields)

    def create_superuser(self, name, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('role', 'admin')

        if extra_fields.get('is_staff') is not True:
            raise ValueError(_('Superuser must have is_staff=True.'))
        if extra_fields.get('is_superuser') is not True:
            raise ValueError(_('Superuser must have is_superuser=True.'))

        return self._create_user(name, password, **extra_fields)

    def active(self):
        return self.filter(is_active=True)
