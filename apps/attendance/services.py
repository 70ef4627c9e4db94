"""
Attendance rules and services.

The two predicates decide whether a (user, day) pair is excluded from KPI
counting. They operate on snapshot lists fetched once per page view or
job run, so they accept model instances or any objects carrying the same
attributes (``date`` for holidays; ``user_id``, ``from_date`` and
``to_date`` for absences).
"""

import logging
from datetime import date, datetime

from django.db import transaction
from django.core.exceptions import PermissionDenied, ValidationError

from .models import Holiday, Absence

logger = logging.getLogger(__name__)


def as_date(value):
    """
    Normalize a date-ish value to a ``datetime.date``.

    Accepts dates, datetimes and ISO strings; any time component is
    truncated ("2024-01-05T10:30:00" becomes 2024-01-05). Returns None for
    empty values.
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value).split('T')[0].strip())


def is_holiday(day, holidays) -> bool:
    """True iff some holiday falls exactly on ``day``."""
    day = as_date(day)
    if day is None:
        return False
    return any(as_date(holiday.date) == day for holiday in holidays)


def is_user_absent(user_id, day, absences) -> bool:
    """True iff ``user_id`` logged an absence covering ``day`` (inclusive)."""
    day = as_date(day)
    if day is None or user_id is None:
        return False
    for absence in absences:
        if absence.user_id != user_id:
            continue
        if as_date(absence.from_date) <= day <= as_date(absence.to_date):
            return True
    return False


# =============================================================================
# Holidays
# =============================================================================

def add_holiday(created_by, day, name):
    if not created_by.can_manage_holidays():
        raise PermissionDenied("Only owners and managers can manage holidays.")

    day = as_date(day)
    if day is None:
        raise ValidationError("Holiday date is required.")
    if not name or not name.strip():
        raise ValidationError("Holiday name is required.")
    if Holiday.objects.filter(date=day).exists():
        raise ValidationError(f"A holiday already exists on {day.isoformat()}.")

    with transaction.atomic():
        holiday = Holiday.objects.create(date=day, name=name.strip())

    logger.info("Holiday %s added by %s", holiday, created_by.email)
    return holiday


def delete_holiday(deleted_by, holiday):
    if not deleted_by.can_manage_holidays():
        raise PermissionDenied("Only owners and managers can manage holidays.")

    with transaction.atomic():
        holiday.delete()

    logger.info("Holiday %s deleted by %s", holiday, deleted_by.email)


# =============================================================================
# Absences
# =============================================================================

def mark_absent(user, from_date, to_date, reason=''):
    """Log an absence for ``user`` over the inclusive range [from_date, to_date]."""
    from_date = as_date(from_date)
    to_date = as_date(to_date)

    if from_date is None or to_date is None:
        raise ValidationError("Both from and to dates are required.")
    if from_date > to_date:
        raise ValidationError("From date cannot be after to date.")

    with transaction.atomic():
        absence = Absence.objects.create(
            user=user,
            user_name=user.get_full_name(),
            from_date=from_date,
            to_date=to_date,
            reason=(reason or '').strip(),
        )

    logger.info("Absence logged for %s: %s to %s", user.email, from_date, to_date)
    return absence
