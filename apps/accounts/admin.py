"""
Admin configuration for accounts app.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from django.utils.translation import gettext_lazy as _
from django.utils.html import format_html

from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    """
    User admin with email authentication and role management.
    """

    list_display = (
        'email', 'name', 'role_display', 'city', 'phone',
        'approved', 'is_active', 'created_at'
    )
    list_filter = ('role', 'approved', 'is_active', 'is_staff', 'city')
    search_fields = ('email', 'name', 'phone')
    ordering = ('name',)
    list_per_page = 25

    fieldsets = (
        (None, {'fields': ('email', 'password')}),
        (_('Profile'), {'fields': ('name', 'city', 'phone')}),
        (_('Organization'), {'fields': ('role', 'approved')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
            'classes': ('collapse',),
        }),
        (_('Important dates'), {
            'fields': ('last_login', 'created_at', 'updated_at'),
        }),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': (
                'email', 'name', 'password1', 'password2',
                'role', 'city', 'phone'
            ),
        }),
    )

    readonly_fields = ('created_at', 'updated_at', 'last_login')

    actions = ['approve_users', 'revoke_approval']

    def role_display(self, obj):
        """Display role with color coding."""
        colors = {
            'owner': '#7C3AED',    # Purple
            'manager': '#2563EB',  # Blue
            'doer': '#059669',     # Green
            'auditor': '#EA580C',  # Orange
        }
        color = colors.get(obj.role, '#6B7280')
        return format_html(
            '<span style="background-color: {}; color: white; padding: 2px 8px; '
            'border-radius: 4px; font-size: 11px; font-weight: 500;">{}</span>',
            color, obj.get_role_display()
        )
    role_display.short_description = 'Role'
    role_display.admin_order_field = 'role'

    def approve_users(self, request, queryset):
        count = queryset.update(approved=True)
        self.message_user(request, f'{count} user(s) approved.')
    approve_users.short_description = 'Approve selected users'

    def revoke_approval(self, request, queryset):
        count = queryset.update(approved=False)
        self.message_user(request, f'{count} user(s) can no longer log in.')
    revoke_approval.short_description = 'Revoke approval for selected users'
