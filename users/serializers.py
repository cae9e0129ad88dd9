"""
Users — Serializers

Read and write serializers for User, PIN administration, and the
name + PIN JWT login.

@file users/serializers.py
"""

from django.conf import settings
from django.contrib.auth import authenticate
from django.contrib.auth.models import update_last_login
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer
from rest_framework_simplejwt.settings import api_settings

from .models import User


# ---------------------------------------------------------------------------
# JWT: name + PIN login
# ---------------------------------------------------------------------------

class PinTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Exchange name + PIN for a JWT pair carrying the user's role."""

    username_field = 'name'

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.fields.pop('password', None)
        self.fields['pin'] = serializers.CharField(write_only=True)

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token['name'] = user.name
        token['role'] = user.role
        return token

    def validate(self, attrs):
        user = authenticate(
            request=self.context.get('request'),
            name=attrs.get('name'),
            pin=attrs.get('pin'),
        )
        if user is None:
            raise serializers.ValidationError(
                {'detail': 'Invalid name or PIN, or account inactive.'},
                code='authentication_failed',
            )

        refresh = self.get_token(user)
        if api_settings.UPDATE_LAST_LOGIN:
            update_last_login(None, user)

        self.user = user
        return {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
            'user': UserReadSerializer(user).data,
        }


# ---------------------------------------------------------------------------
# User serializers
# ---------------------------------------------------------------------------

class UserReadSerializer(serializers.ModelSerializer):
    """Read-only user representation — returned in list / detail views."""

    role_display = serializers.CharField(source='get_role_display', read_only=True)
    display_name = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'name', 'display_name', 'role', 'role_display',
            'is_active', 'date_joined', 'last_login', 'created_at',
        ]
        read_only_fields = fields


class UserCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    pin = serializers.CharField(
        write_only=True,
        min_length=settings.PIN_LENGTH, max_length=settings.PIN_LENGTH,
    )
    role = serializers.ChoiceField(
        choices=User.RoleChoices.choices, default=User.RoleChoices.OPERATOR,
    )

    def validate_pin(self, value):
        if not value.isdigit():
            raise serializers.ValidationError('PIN must be numeric.')
        return value


class SetActiveSerializer(serializers.Serializer):
    is_active = serializers.BooleanField()


class ResetPinSerializer(serializers.Serializer):
    pin = serializers.CharField(
        write_only=True,
        min_length=settings.PIN_LENGTH, max_length=settings.PIN_LENGTH,
    )

    def validate_pin(self, value):
        if not value.isdigit():
            raise serializers.ValidationError('PIN must be numeric.')
        return value
