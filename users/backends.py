"""
Users — Authentication Backend

Name + PIN authentication backend for Django's auth system.

@file users/backends.py
"""

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import ModelBackend

User = get_user_model()


class PinBackend(ModelBackend):
    """Authenticate using name + PIN instead of username + password."""

    def authenticate(self, request, name=None, pin=None, password=None, **kwargs):
        # The admin login form posts username/password.
        name = name or kwargs.get(User.USERNAME_FIELD) or kwargs.get('username')
        pin = pin or password
        if name is None or pin is None:
            return None
        try:
            user = User.objects.get(name=name.strip())
        except User.DoesNotExist:
            User().set_password(pin)
            return None

        if user.check_password(pin) and self.user_can_authenticate(user):
            return user
        return None
