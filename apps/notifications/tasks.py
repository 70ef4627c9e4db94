"""
Scheduled and background tasks for notifications app.

Entry points run by the django-q2 cluster:
- create_recurring_task_instances: daily, before the workday starts
- send_daily_due_date_reminders: daily, after instances exist
- notify_task_assigned: queued when a task is assigned

Schedules are created by ``python manage.py setup_schedules``.
"""

import logging

from django.conf import settings
from django.urls import reverse
from django.utils import timezone

from apps.tasks.models import Task
from apps.tasks.recurrence import RecurringTaskInstantiator
from apps.tasks.store import TaskStore
from .reminders import DailyReminderDispatcher
from .whatsapp import NotificationError, WhatsAppNotifier

logger = logging.getLogger(__name__)


def create_recurring_task_instances():
    today = timezone.localdate()
    created = RecurringTaskInstantiator(TaskStore()).run(today)
    return f"{today.isoformat()}: created {len(created)} recurring task instance(s)"


def send_daily_due_date_reminders():
    today = timezone.localdate()
    dispatcher = DailyReminderDispatcher(
        TaskStore(),
        WhatsAppNotifier.from_settings(),
        settings.WHATSAPP_TEMPLATE_DAILY_REMINDER,
    )
    result = dispatcher.run(today)
    return (
        f"{today.isoformat()}: {result.sent} sent, "
        f"{result.skipped} skipped, {result.failed} failed"
    )


def notify_task_assigned(task_id):
    """
    Send the 'task assigned' template to the task's assignee.

    Missing token, task or phone skip silently; send failures are logged.
    """
    notifier = WhatsAppNotifier.from_settings()
    if not notifier.is_configured:
        logger.debug("WhatsApp not configured; not notifying for task %s", task_id)
        return

    task = Task.objects.select_related('assigned_to').filter(pk=task_id).first()
    if task is None or task.assigned_to is None or not task.assigned_to.phone:
        logger.info("Skipping assignment notification for task %s: no recipient phone", task_id)
        return

    link = settings.SITE_URL.rstrip('/') + reverse('tasks:task_detail', args=[task.pk])
    try:
        notifier.send_template(
            task.assigned_to.phone,
            settings.WHATSAPP_TEMPLATE_TASK_ASSIGNED,
            body_params=[
                task.title,
                task.due_date.isoformat(),
                task.get_priority_display(),
                task.assigned_by_name or 'Someone',
                link,
            ],
        )
    except NotificationError:
        logger.exception("Assignment notification for task %s failed", task_id)
