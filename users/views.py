"""
Users — Views

Auth endpoints (login, refresh, me) and the admin-only user
management ViewSet.

@file users/views.py
"""

import logging

from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenRefreshView

from core.constants import AUDIT_ACTION_LOGIN, AUDIT_ACTION_LOGIN_FAILED
from core.services import AuditService

from .models import User
from .permissions import IsActiveUser, IsAdmin
from .serializers import (
    PinTokenObtainPairSerializer,
    ResetPinSerializer,
    SetActiveSerializer,
    UserCreateSerializer,
    UserReadSerializer,
)
from .services import AuthService, UserService

logger = logging.getLogger('waretrack')


# ---------------------------------------------------------------------------
# Auth views
# ---------------------------------------------------------------------------

class LoginView(APIView):
    """POST /v1/auth/login — Authenticate with name + PIN and obtain a JWT pair."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = PinTokenObtainPairSerializer(
            data=request.data, context={'request': request},
        )
        ip_address = AuditService.get_client_ip(request)
        user_agent = request.META.get('HTTP_USER_AGENT', '')

        if not serializer.is_valid():
            AuthService.log_auth_event(
                action=AUDIT_ACTION_LOGIN_FAILED,
                user=User.objects.filter(name=request.data.get('name', '')).first(),
                ip_address=ip_address,
                user_agent=user_agent,
            )
            logger.info('Failed login for name=%r', request.data.get('name'))
            serializer.is_valid(raise_exception=True)

        AuthService.log_auth_event(
            action=AUDIT_ACTION_LOGIN,
            user=serializer.user,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        return Response({
            'success': True,
            'data': serializer.validated_data,
        })


class TokenRefreshAPIView(TokenRefreshView):
    """POST /v1/auth/refresh — Rotate refresh token."""
    pass


class MeView(APIView):
    """GET /v1/auth/me — Return the current authenticated user."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response({
            'success': True,
            'data': UserReadSerializer(request.user).data,
        })


# ---------------------------------------------------------------------------
# User management ViewSet
# ---------------------------------------------------------------------------

class UserViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Admin-only user management. Users are never deleted (movements
    reference them); they are deactivated instead.
    """

    permission_classes = [IsActiveUser, IsAdmin]
    filterset_fields = ['role', 'is_active']
    search_fields = ['name']
    ordering_fields = ['name', 'created_at']
    ordering = ['name']

    def get_queryset(self):
        return User.objects.all()

    def get_serializer_class(self):
        if self.action == 'create':
            return UserCreateSerializer
        return UserReadSerializer

    def create(self, request, *args, **kwargs):
        serializer = UserCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.create_user(actor=request.user, **serializer.validated_data)
        return Response(UserReadSerializer(user).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='set-active')
    def set_active(self, request, pk=None):
        serializer = SetActiveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = UserService.set_active(
            user_id=self.get_object().pk,
            is_active=serializer.validated_data['is_active'],
            actor=request.user,
        )
        return Response({'success': True, 'data': UserReadSerializer(user).data})

    @action(detail=True, methods=['post'], url_path='reset-pin')
    def reset_pin(self, request, pk=None):
        serializer = ResetPinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        UserService.reset_pin(
            user_id=self.get_object().pk,
            pin=serializer.validated_data['pin'],
            actor=request.user,
        )
        return Response({'success': True, 'data': {'message': 'PIN reset successfully.'}})
