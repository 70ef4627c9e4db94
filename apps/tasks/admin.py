"""
Admin configuration for tasks app.
"""

from django.contrib import admin
from django.utils.html import format_html
from .models import Task, RemovalRequest


class InstanceInline(admin.TabularInline):
    """Dated instances generated from a recurring template."""
    model = Task
    fk_name = 'parent_task'
    extra = 0
    fields = ('due_date', 'status', 'assigned_to_name', 'completed_at')
    readonly_fields = fields
    can_delete = False
    show_change_link = True

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Task)
class TaskAdmin(admin.ModelAdmin):
    """Admin for Task model."""

    list_display = (
        'title', 'assigned_to_name', 'assigned_by_name',
        'status_display', 'priority_display', 'due_date', 'recurring',
        'is_overdue_display', 'is_holiday', 'audit_status'
    )
    list_filter = (
        'status', 'priority', 'recurring', 'audit_status',
        'attachment_required', 'is_holiday', 'due_date'
    )
    search_fields = ('title', 'description', 'assigned_to_name', 'assigned_by_name')
    ordering = ('-updated_at',)
    date_hierarchy = 'due_date'
    raw_id_fields = ('assigned_to', 'assigned_by', 'parent_task')

    readonly_fields = ('created_at', 'updated_at', 'completed_at', 'audited_at')

    fieldsets = (
        (None, {
            'fields': ('title', 'description')
        }),
        ('Assignment', {
            'fields': (
                'assigned_to', 'assigned_to_name', 'assigned_to_city',
                'assigned_by', 'assigned_by_name'
            )
        }),
        ('Status & Priority', {
            'fields': ('status', 'priority', 'start_date', 'due_date', 'is_holiday')
        }),
        ('Recurrence', {
            'fields': ('recurring', 'recurring_days', 'parent_task'),
            'classes': ('collapse',),
        }),
        ('Attachment', {
            'fields': (
                'attachment_required', 'attachment_type', 'attachment_description',
                'attachment_url', 'attachment_text'
            ),
        }),
        ('Audit', {
            'fields': ('audit_status', 'audited_at', 'audited_by'),
        }),
        ('Timestamps', {
            'fields': ('created_at', 'updated_at', 'completed_at'),
            'classes': ('collapse',),
        }),
    )

    inlines = [InstanceInline]

    def get_queryset(self, request):
        """Optimize with select_related."""
        return super().get_queryset(request).select_related(
            'assigned_to', 'assigned_by', 'parent_task'
        )

    def status_display(self, obj):
        """Display status with color coding."""
        colors = {
            'pending': '#FFA500',      # Orange
            'in_progress': '#3498db',  # Blue
            'completed': '#27ae60',    # Green
            'overdue': '#e74c3c',      # Red
            'cancelled': '#95a5a6',    # Gray
        }
        color = colors.get(obj.status, '#000')
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color, obj.get_status_display()
        )
    status_display.short_description = 'Status'
    status_display.admin_order_field = 'status'

    def priority_display(self, obj):
        """Display priority with color coding."""
        colors = {
            'low': '#95a5a6',
            'medium': '#3498db',
            'high': '#e67e22',
            'urgent': '#e74c3c',
        }
        color = colors.get(obj.priority, '#000')
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            color, obj.get_priority_display()
        )
    priority_display.short_description = 'Priority'
    priority_display.admin_order_field = 'priority'

    def is_overdue_display(self, obj):
        """Display computed overdue status."""
        if obj.is_overdue:
            return format_html('<span style="color: red;">{}</span>', 'OVERDUE')
        return ''
    is_overdue_display.short_description = 'Overdue'


@admin.register(RemovalRequest)
class RemovalRequestAdmin(admin.ModelAdmin):
    list_display = ('task_title', 'requested_by_name', 'status', 'created_at', 'resolved_by', 'resolved_at')
    list_filter = ('status', 'created_at')
    search_fields = ('task_title', 'requested_by_name', 'reason')
    ordering = ('-created_at',)
    raw_id_fields = ('task', 'requested_by')
    readonly_fields = ('created_at', 'resolved_at')
