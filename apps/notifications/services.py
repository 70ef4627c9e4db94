"""
Service layer for notifications app.

Interactive code paths queue notifications here instead of calling the
WhatsApp API inline; the django-q2 cluster sends them.
"""

import logging

from django.db import transaction
from django_q.tasks import async_task

logger = logging.getLogger(__name__)


def notify_task_assigned(task):
    """
    Queue the 'task assigned' message for ``task``.

    Queued after the surrounding transaction commits so the worker sees
    the task row.
    """
    task_id = task.pk

    def _enqueue():
        async_task('apps.notifications.tasks.notify_task_assigned', task_id)
        logger.debug("Queued assignment notification for task %s", task_id)

    transaction.on_commit(_enqueue)
