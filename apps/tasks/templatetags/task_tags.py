"""
Custom template tags and filters for tasks app.

Usage in templates:
    {% load task_tags %}

    {# Filters #}
    {{ task|is_overdue }}
    {{ task.status|status_class }}
    {{ task.priority|priority_class }}
    {{ task.audit_status|audit_class }}
    {{ task|task_row_class }}
    {{ task|weekdays }}

    {# Tags #}
    {% overdue_badge task %}
    {% priority_badge task %}
    {% status_badge task %}
    {% holiday_badge task %}
"""

from django import template
from django.utils import timezone
from django.utils.html import format_html

register = template.Library()

BADGE = 'inline-flex items-center px-2 py-0.5 rounded text-xs font-medium {}'

STATUS_COLORS = {
    'pending': 'bg-gray-100 text-gray-800',
    'in_progress': 'bg-blue-100 text-blue-800',
    'completed': 'bg-green-100 text-green-800',
    'overdue': 'bg-red-100 text-red-800',
    'cancelled': 'bg-gray-200 text-gray-500',
}

PRIORITY_COLORS = {
    'low': 'bg-gray-100 text-gray-800',
    'medium': 'bg-blue-100 text-blue-800',
    'high': 'bg-amber-100 text-amber-800',
    'urgent': 'bg-red-100 text-red-800',
}

AUDIT_COLORS = {
    'pending': 'bg-gray-100 text-gray-700',
    'audited': 'bg-green-100 text-green-800',
    'bogus': 'bg-red-100 text-red-800',
    'unclear': 'bg-amber-100 text-amber-800',
}


# =============================================================================
# FILTERS
# =============================================================================

@register.filter
def is_overdue(task):
    """
    Open task past its due date (computed, not the stored status).

    Usage: {{ task|is_overdue }}
    """
    if not task:
        return False
    return task.is_overdue_on(timezone.localdate())


@register.filter
def status_class(status):
    return STATUS_COLORS.get(status, 'bg-gray-100 text-gray-800')


@register.filter
def priority_class(priority):
    return PRIORITY_COLORS.get(priority, 'bg-gray-100 text-gray-800')


@register.filter
def audit_class(audit_status):
    return AUDIT_COLORS.get(audit_status or 'pending', AUDIT_COLORS['pending'])


@register.filter
def task_row_class(task):
    """
    Row background for the task table.

    Usage: <tr class="{{ task|task_row_class }}">
    """
    if not task:
        return ''
    if is_overdue(task):
        return 'bg-red-50'
    if task.is_holiday:
        return 'bg-amber-50'
    return ''


@register.filter
def weekdays(task):
    """Weekday labels of a daily recurring task, e.g. "Mon, Wed"."""
    if not task or not task.is_template:
        return ''
    return task.get_recurring_days_display()


# =============================================================================
# SIMPLE TAGS - Badge Generation
# =============================================================================

@register.simple_tag
def overdue_badge(task):
    if not is_overdue(task):
        return ''
    days = (timezone.localdate() - task.due_date).days
    return format_html(
        '<span class="' + BADGE + '" title="{} day(s) overdue">OVERDUE</span>',
        'bg-red-100 text-red-800', days
    )


@register.simple_tag
def priority_badge(task):
    if not task or not task.priority:
        return ''
    return format_html(
        '<span class="' + BADGE + '">{}</span>',
        priority_class(task.priority), task.get_priority_display()
    )


@register.simple_tag
def status_badge(task):
    if not task:
        return ''
    return format_html(
        '<span class="' + BADGE + '">{}</span>',
        status_class(task.status), task.get_status_display()
    )


@register.simple_tag
def holiday_badge(task):
    if not task or not task.is_holiday:
        return ''
    return format_html(
        '<span class="' + BADGE + '" title="Due on a holiday">HOLIDAY</span>',
        'bg-amber-100 text-amber-800'
    )
