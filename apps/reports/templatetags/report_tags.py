"""
Template tags and filters for reports app.

Filters:
- days_overdue: Format days as "1 day" or "N days"
- overdue_severity_class: Row background by days overdue
- format_percentage: Format an integer percentage as "X%"

Usage:
    {% load report_tags %}

    {{ row.days_overdue|days_overdue }}
    {{ row.days_overdue|overdue_severity_class }}
    {{ metrics.overdue_percent|format_percentage }}
"""

from django import template

register = template.Library()


@register.filter
def days_overdue(days):
    """
    Format days overdue as a human-readable string.

    Examples:
        1 -> "1 day"
        9 -> "9 days"
        None -> "N/A"
    """
    if days is None:
        return "N/A"

    try:
        days = int(days)
    except (ValueError, TypeError):
        return "N/A"

    if days < 0:
        return "0 days"
    day_label = "day" if days == 1 else "days"
    return f"{days} {day_label}"


@register.filter
def overdue_severity_class(days):
    """
    Return CSS class based on how overdue a task is.
    """
    try:
        days = int(days)
    except (ValueError, TypeError):
        return ""

    if days >= 7:
        return "bg-red-100"  # A week or more
    elif days >= 3:
        return "bg-orange-100"
    elif days >= 1:
        return "bg-yellow-100"
    return ""


@register.filter
def format_percentage(value):
    """
    Format a percentage value as "X%".

    Examples:
        33 -> "33%"
        None -> "0%"
    """
    if value is None:
        return "0%"

    try:
        value = int(value)
    except (ValueError, TypeError):
        return "0%"

    return f"{value}%"
