"""
Users — DRF Permission Classes

Role checks for ViewSets: any active staff member may record stock;
only admins correct balances, run reports and manage catalog/users.

@file users/permissions.py
"""

from rest_framework.permissions import SAFE_METHODS, BasePermission


class IsActiveUser(BasePermission):
    """Requires user to be authenticated and active."""

    def has_permission(self, request, view):
        return bool(
            request.user
            and request.user.is_authenticated
            and request.user.is_active
        )


class IsAdmin(BasePermission):
    """Admin role or superuser."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        return user.is_admin


class IsAdminOrReadOnly(BasePermission):
    """Read is open to authenticated users; write requires the admin role."""

    def has_permission(self, request, view):
        user = request.user
        if not user or not user.is_authenticated:
            return False
        if request.method in SAFE_METHODS:
            return True
        return user.is_admin
