"""
Store handle for tasks, users, holidays and absences.

Jobs and page views construct one TaskStore and pass it to the components
they run, so every query of a run goes to the same database alias.

Two queries are split into a server-side filter and a local refinement:
- tasks(): assignee or assigner combined with status filters status locally
- overdue_tasks(): the assignee is applied locally by get_overdue_tasks

Daily recurring templates are left out of both overdue_tasks() and
tasks_due_on(); only their dated instances are returned.
"""

import logging

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.attendance.models import Holiday, Absence
from apps.attendance.services import is_holiday
from apps.reports.services import get_overdue_tasks
from .models import Task

logger = logging.getLogger(__name__)


class TaskStore:

    def __init__(self, using='default'):
        self.using = using

    def _tasks(self):
        return Task.objects.using(self.using)

    # ==========================================================================
    # Recurring instances
    # ==========================================================================

    def daily_templates(self):
        return list(self._tasks().filter(recurring=Task.Recurring.DAILY).order_by('id'))

    def instance_exists(self, template_id, due_date):
        return self._tasks().filter(parent_task_id=template_id, due_date=due_date).exists()

    def create_instances(self, tasks):
        """Insert ``tasks`` as one all-or-nothing batch; no write when empty."""
        tasks = list(tasks)
        if not tasks:
            return []
        with transaction.atomic(using=self.using):
            created = Task.objects.using(self.using).bulk_create(tasks)
        logger.info("Created %d task instance(s)", len(created))
        return created

    # ==========================================================================
    # Snapshots
    # ==========================================================================

    def tasks_due_on(self, day, statuses):
        """Dated tasks due on ``day``; daily templates are excluded."""
        return list(
            self._tasks()
            .filter(due_date=day, status__in=statuses)
            .exclude(recurring=Task.Recurring.DAILY)
            .order_by('id')
        )

    def users(self):
        return list(get_user_model().objects.using(self.using).order_by('name'))

    def users_by_id(self, ids):
        users = get_user_model().objects.using(self.using).filter(pk__in=set(ids))
        return {user.pk: user for user in users}

    def holidays(self):
        return list(Holiday.objects.using(self.using).order_by('date'))

    def absences(self):
        return list(Absence.objects.using(self.using).order_by('from_date'))

    def is_holiday(self, day):
        return is_holiday(day, Holiday.objects.using(self.using).filter(date=day))

    # ==========================================================================
    # Two-phase queries
    # ==========================================================================

    def tasks(self, assigned_to_id=None, assigned_by_id=None, status=None):
        """
        Tasks, most recently updated first.

        Only one predicate goes to the database, in the order assignee,
        assigner, status. A status given together with an assignee or
        assigner is applied to the fetched rows.
        """
        queryset = self._tasks()
        if assigned_to_id is not None:
            queryset = queryset.filter(assigned_to_id=assigned_to_id)
        elif assigned_by_id is not None:
            queryset = queryset.filter(assigned_by_id=assigned_by_id)
        elif status is not None:
            queryset = queryset.filter(status=status)

        tasks = list(queryset.order_by('-updated_at'))

        if status is not None and (assigned_to_id is not None or assigned_by_id is not None):
            tasks = [task for task in tasks if task.status == status]
        return tasks

    def overdue_tasks(self, today, assigned_to_id=None):
        """Red Zone rows as OverdueTask, oldest due date first."""
        candidates = list(
            self._tasks()
            .filter(status__in=Task.OVERDUE_STATUSES, due_date__lt=today)
            .exclude(recurring=Task.Recurring.DAILY)
            .order_by('due_date')
        )
        return get_overdue_tasks(candidates, today, assigned_to_id=assigned_to_id)
