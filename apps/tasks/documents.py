"""
Decoding of exported documents into model instances.

Exported records are loosely typed: keys may be missing, dates are ISO
strings (sometimes with a time part) and timestamps may be ISO strings or
``{"seconds": ..., "nanoseconds": ...}`` objects. Every default applied to
a missing field lives here, so the rest of the code can rely on fully
populated models.

Decoders return unsaved instances. Foreign keys are resolved through
``ids`` mappings (document id -> primary key); unknown ids decode to None.
"""

from datetime import datetime, time, timezone as dt_timezone

from django.contrib.auth import get_user_model
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from apps.attendance.models import Holiday, Absence
from apps.attendance.services import as_date
from .models import Task, RemovalRequest


def parse_timestamp(value):
    """
    Aware datetime from an exported timestamp, or None when absent.

    Raises:
        ValueError: unrecognized value
    """
    if value is None or value == '':
        return None

    if isinstance(value, dict):
        seconds = value.get('seconds', value.get('_seconds'))
        if seconds is None:
            raise ValueError(f"Unrecognized timestamp object: {value!r}")
        nanos = value.get('nanoseconds', value.get('_nanoseconds', 0)) or 0
        return datetime.fromtimestamp(seconds + nanos / 1e9, tz=dt_timezone.utc)

    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(str(value))
        if parsed is None:
            # Date-only values mean local midnight
            parsed = datetime.combine(as_date(value), time.min)

    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


def _lookup(ids, doc_id):
    if not doc_id or not ids:
        return None
    return ids.get(doc_id)


def _choice(value, choices, default):
    return value if value in choices.values else default


def decode_user(doc):
    User = get_user_model()
    user = User(
        email=(doc.get('email') or '').lower().strip(),
        name=doc.get('name') or '',
        role=_choice(doc.get('role'), User.Role, User.Role.DOER),
        phone=doc.get('phone') or '',
        city=doc.get('city') or '',
        approved=doc.get('approved', True) is not False,
    )
    if doc.get('password'):
        user.set_password(doc['password'])
    else:
        user.set_unusable_password()
    user.created_at = parse_timestamp(doc.get('created_at'))
    return user


def decode_holiday(doc):
    holiday = Holiday(date=as_date(doc.get('date')), name=doc.get('name') or '')
    holiday.created_at = parse_timestamp(doc.get('created_at'))
    return holiday


def decode_absence(doc, user_ids=None):
    absence = Absence(
        user_id=_lookup(user_ids, doc.get('user_id')),
        user_name=doc.get('user_name') or '',
        from_date=as_date(doc.get('from_date')),
        to_date=as_date(doc.get('to_date')),
        reason=doc.get('reason') or '',
    )
    absence.created_at = parse_timestamp(doc.get('created_at'))
    return absence


def decode_task(doc, user_ids=None, task_ids=None):
    """
    Task from an exported task document.

    Defaults: empty title/description, medium priority, pending status,
    no recurrence, no attachment required, no weekdays, not a holiday,
    pending audit.
    """
    task = Task(
        title=doc.get('title') or '',
        description=doc.get('description') or '',
        start_date=as_date(doc.get('start_date')),
        due_date=as_date(doc.get('due_date')),
        priority=doc.get('priority') or Task.Priority.MEDIUM,
        status=doc.get('status') or Task.Status.PENDING,
        recurring=doc.get('recurring') or Task.Recurring.NONE,
        recurring_days=[int(day) for day in doc.get('recurring_days') or []],
        attachment_required=bool(doc.get('attachment_required') or False),
        attachment_type=doc.get('attachment_type') or '',
        attachment_description=doc.get('attachment_description') or '',
        attachment_url=doc.get('attachment_url') or '',
        attachment_text=doc.get('attachment_text') or '',
        assigned_to_id=_lookup(user_ids, doc.get('assigned_to_id')),
        assigned_to_name=doc.get('assigned_to_name') or '',
        assigned_to_city=doc.get('assigned_to_city') or '',
        assigned_by_id=_lookup(user_ids, doc.get('assigned_by_id')),
        assigned_by_name=doc.get('assigned_by_name') or '',
        parent_task_id=_lookup(task_ids, doc.get('parent_task_id')),
        is_holiday=bool(doc.get('is_holiday') or False),
        audit_status=doc.get('audit_status') or Task.AuditStatus.PENDING,
        audited_at=parse_timestamp(doc.get('audited_at')),
        audited_by=doc.get('audited_by') or '',
        completed_at=parse_timestamp(doc.get('completed_at')),
    )
    task.created_at = parse_timestamp(doc.get('created_at'))
    task.updated_at = parse_timestamp(doc.get('updated_at'))
    return task


def decode_removal_request(doc, user_ids=None, task_ids=None):
    removal_request = RemovalRequest(
        task_id=_lookup(task_ids, doc.get('task_id')),
        task_title=doc.get('task_title') or '',
        requested_by_id=_lookup(user_ids, doc.get('requested_by_id')),
        requested_by_name=doc.get('requested_by_name') or '',
        reason=doc.get('reason') or '',
        status=doc.get('status') or RemovalRequest.Status.PENDING,
        resolved_at=parse_timestamp(doc.get('resolved_at')),
        resolved_by=doc.get('resolved_by') or '',
    )
    removal_request.created_at = parse_timestamp(doc.get('created_at'))
    return removal_request
