"""
Service layer for tasks app.

All business logic for task operations is centralized here.
Views call these functions; they raise PermissionDenied for role
violations and ValidationError for bad input.

Services:
- create_task: Assign a new task (or daily recurring template)
- complete_task: Assignee marks a task completed with its evidence
- set_audit_status: Audit the evidence of a completed task
- create_removal_request: Ask an owner to delete one of your tasks
- resolve_removal_request: Owner approves (deletes the task) or rejects
"""

import logging

from django.utils import timezone
from django.db import transaction
from django.core.exceptions import PermissionDenied, ValidationError

from apps.attendance.services import as_date
from apps.notifications.services import notify_task_assigned
from .models import Task, RemovalRequest, WEEKDAY_CHOICES
from .permissions import can_complete_task, can_resolve_removal
from .store import TaskStore

logger = logging.getLogger(__name__)

VALID_WEEKDAYS = {day for day, _ in WEEKDAY_CHOICES}


def _clean_recurring_days(recurring, recurring_days):
    if recurring != Task.Recurring.DAILY:
        return []

    try:
        days = sorted({int(day) for day in recurring_days or []})
    except (TypeError, ValueError):
        raise ValidationError("Recurring days must be weekday numbers.")

    if not days:
        raise ValidationError("Select at least one weekday for a daily recurring task.")
    if not set(days) <= VALID_WEEKDAYS:
        raise ValidationError("Recurring days must be between 0 (Mon) and 6 (Sun).")
    return days


def create_task(
    assigned_by,
    assigned_to,
    title: str,
    due_date,
    description: str = '',
    start_date=None,
    priority: str = Task.Priority.MEDIUM,
    recurring: str = Task.Recurring.NONE,
    recurring_days=None,
    attachment_required: bool = False,
    attachment_type: str = '',
    attachment_description: str = '',
):
    """
    Central task creation function.

    Args:
        assigned_by: User creating the task (not an auditor)
        assigned_to: User who will do the task
        title: Task title (required)
        due_date: Date the task is due (required)
        description: Task description (optional)
        start_date: Optional start date, not after due_date
        priority: low/medium/high/urgent (default: medium)
        recurring: Recurrence kind; daily templates need recurring_days
        recurring_days: Weekday codes 0=Mon..6=Sun
        attachment_required: Whether completion needs evidence
        attachment_type: media (URL) or text
        attachment_description: What the evidence should show

    Returns:
        Created Task instance

    Raises:
        PermissionDenied: If the creator cannot assign tasks
        ValidationError: If required fields are missing or invalid
    """
    if not assigned_by.can_assign_tasks():
        raise PermissionDenied("Auditors cannot assign tasks.")

    if not title or not title.strip():
        raise ValidationError("Task title is required.")

    due_date = as_date(due_date)
    if due_date is None:
        raise ValidationError("Due date is required.")

    start_date = as_date(start_date)
    if start_date and start_date > due_date:
        raise ValidationError("Start date cannot be after the due date.")

    if assigned_to is None:
        raise ValidationError("Assignee is required.")
    if not assigned_to.is_active or not assigned_to.approved:
        raise ValidationError("Cannot assign task to an inactive member.")

    if priority not in Task.Priority.values:
        raise ValidationError(f"Invalid priority: {priority}")
    if recurring not in Task.Recurring.values:
        raise ValidationError(f"Invalid recurrence: {recurring}")

    recurring_days = _clean_recurring_days(recurring, recurring_days)

    if attachment_required:
        attachment_type = attachment_type or Task.AttachmentType.MEDIA
        if attachment_type not in Task.AttachmentType.values:
            raise ValidationError(f"Invalid attachment type: {attachment_type}")
        attachment_description = (attachment_description or '').strip()
    else:
        # Attachment settings only apply when evidence is required
        attachment_type = ''
        attachment_description = ''

    with transaction.atomic():
        task = Task.objects.create(
            title=title.strip(),
            description=description.strip() if description else '',
            start_date=start_date,
            due_date=due_date,
            priority=priority,
            status=Task.Status.PENDING,
            recurring=recurring,
            recurring_days=recurring_days,
            attachment_required=attachment_required,
            attachment_type=attachment_type,
            attachment_description=attachment_description,
            assigned_to=assigned_to,
            assigned_to_name=assigned_to.name,
            assigned_to_city=assigned_to.city,
            assigned_by=assigned_by,
            assigned_by_name=assigned_by.name,
            is_holiday=TaskStore().is_holiday(due_date),
        )

        notify_task_assigned(task)

    logger.info("Task %s assigned to %s by %s", task.pk, assigned_to.email, assigned_by.email)
    return task


def complete_task(task, user, attachment_url: str = '', attachment_text: str = ''):
    """
    Mark ``task`` completed by its assignee.

    When the task requires an attachment, media tasks need a URL and text
    tasks need the text.

    Raises:
        PermissionDenied: If user is not the assignee or the task is closed
        ValidationError: If required evidence is missing
    """
    if not can_complete_task(user, task):
        raise PermissionDenied("Only the assignee can complete this task.")

    attachment_url = (attachment_url or '').strip()
    attachment_text = (attachment_text or '').strip()

    if task.attachment_required:
        if task.attachment_type == Task.AttachmentType.TEXT:
            if not attachment_text:
                raise ValidationError("This task requires a text attachment.")
        elif not attachment_url:
            raise ValidationError("This task requires an attachment link.")

    with transaction.atomic():
        task.status = Task.Status.COMPLETED
        task.completed_at = timezone.now()
        if attachment_url:
            task.attachment_url = attachment_url
        if attachment_text:
            task.attachment_text = attachment_text
        task.save()

    logger.info("Task %s completed by %s", task.pk, user.email)
    return task


def set_audit_status(task, user, audit_status: str):
    """
    Record the audit verdict for a completed task's attachment.

    Only pending audits can be changed.
    """
    if not user.can_audit_tasks():
        raise PermissionDenied("You don't have permission to audit tasks.")

    verdicts = [Task.AuditStatus.AUDITED, Task.AuditStatus.BOGUS, Task.AuditStatus.UNCLEAR]
    if audit_status not in verdicts:
        raise ValidationError(f"Invalid audit status: {audit_status}")

    if not task.is_completed or not task.attachment_required:
        raise ValidationError("Only completed tasks with a required attachment can be audited.")
    if task.audit_status != Task.AuditStatus.PENDING:
        raise ValidationError("This task has already been audited.")

    with transaction.atomic():
        task.audit_status = audit_status
        task.audited_at = timezone.now()
        task.audited_by = user.name
        task.save()

    logger.info("Task %s audited as %s by %s", task.pk, audit_status, user.email)
    return task


# =============================================================================
# Removal Requests
# =============================================================================

def create_removal_request(task, user, reason: str):
    if task.assigned_to_id != user.pk:
        raise PermissionDenied("You can only request removal of your own tasks.")
    if task.is_completed:
        raise ValidationError("Completed tasks cannot be removed.")
    if not reason or not reason.strip():
        raise ValidationError("A reason is required.")
    if task.removal_requests.filter(status=RemovalRequest.Status.PENDING).exists():
        raise ValidationError("A removal request for this task is already pending.")

    with transaction.atomic():
        removal_request = RemovalRequest.objects.create(
            task=task,
            task_title=task.title,
            requested_by=user,
            requested_by_name=user.name,
            reason=reason.strip(),
        )

    logger.info("Removal of task %s requested by %s", task.pk, user.email)
    return removal_request


def resolve_removal_request(removal_request, user, approve: bool):
    """
    Approve or reject a pending removal request.

    Approval deletes the task; the request keeps its title.
    """
    if not user.can_resolve_removal_requests():
        raise PermissionDenied("Only the owner can resolve removal requests.")
    if not can_resolve_removal(user, removal_request):
        raise ValidationError("This removal request has already been resolved.")

    task = removal_request.task

    with transaction.atomic():
        removal_request.status = (
            RemovalRequest.Status.APPROVED if approve else RemovalRequest.Status.REJECTED
        )
        removal_request.resolved_at = timezone.now()
        removal_request.resolved_by = user.name
        removal_request.save()

        if approve and task is not None:
            task.delete()
            removal_request.task = None

    logger.info(
        "Removal request %s %s by %s",
        removal_request.pk, removal_request.status, user.email,
    )
    return removal_request
