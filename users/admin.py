"""
Users — Django Admin Configuration

Admin panel for warehouse staff accounts. Accounts are deactivated,
never deleted, because the ledger references them.

@file users/admin.py
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.contrib.auth.forms import BaseUserCreationForm
from django.utils.html import format_html
from django.utils.translation import gettext_lazy as _

from .models import User


class UserCreationForm(BaseUserCreationForm):
    class Meta:
        model = User
        fields = ('name', 'role')
        field_classes = {}


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """Staff accounts with role badge; the password field holds the hashed PIN."""

    add_form = UserCreationForm
    list_display = ('name', 'role_badge', 'is_active', 'is_staff', 'last_login', 'date_joined')
    list_filter = ('role', 'is_active', 'is_staff', 'is_superuser')
    search_fields = ('name',)
    readonly_fields = (
        'id', 'created_at', 'updated_at', 'created_by', 'updated_by',
        'date_joined', 'last_login',
    )
    date_hierarchy = 'created_at'
    show_full_result_count = False
    list_per_page = 30
    ordering = ('name',)

    fieldsets = (
        (None, {
            'fields': ('id', 'name', 'password'),
        }),
        (_('Role'), {
            'fields': ('role',),
        }),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Audit'), {
            'fields': ('date_joined', 'last_login', 'created_at', 'updated_at', 'created_by', 'updated_by'),
            'classes': ('collapse',),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('name', 'role', 'password1', 'password2'),
        }),
    )

    def has_delete_permission(self, request, obj=None):
        return False

    @admin.display(description=_('Role'))
    def role_badge(self, obj):
        color = '#7c3aed' if obj.role == User.RoleChoices.ADMIN else '#3b82f6'
        return format_html(
            '<span style="background:{}; color:#fff; padding:2px 8px; '
            'border-radius:4px; font-size:11px; font-weight:600;">{}</span>',
            color, obj.get_role_display(),
        )
