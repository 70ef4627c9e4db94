"""
Daily due-date reminders.

Every assignee with open tasks due today gets one WhatsApp digest. A
failed send is logged and the run moves on to the next assignee.
"""

import logging
from dataclasses import dataclass

from apps.tasks.models import Task
from .whatsapp import NotificationError, normalize_phone

logger = logging.getLogger(__name__)

NO_TASKS_MESSAGE = 'No tasks due today.'


@dataclass
class ReminderRunResult:
    sent: int = 0
    skipped: int = 0
    failed: int = 0


def render_digest(tasks):
    """One line per task, or the fixed message when there are none."""
    if not tasks:
        return NO_TASKS_MESSAGE
    return '\n'.join(
        f"{task.title} (Due: {task.due_date.isoformat()}, {task.priority})"
        for task in tasks
    )


def group_by_assignee(tasks):
    """Tasks keyed by assigned_to_id; unassigned tasks are dropped."""
    groups = {}
    for task in tasks:
        if task.assigned_to_id is None:
            logger.info("Skipping task %s: no assignee", task.pk)
            continue
        groups.setdefault(task.assigned_to_id, []).append(task)
    return groups


class DailyReminderDispatcher:

    def __init__(self, store, notifier, template_name):
        self.store = store
        self.notifier = notifier
        self.template_name = template_name

    def run(self, today):
        result = ReminderRunResult()

        if not self.notifier.is_configured:
            logger.warning("WhatsApp auth token not configured; skipping daily reminders")
            return result

        tasks = self.store.tasks_due_on(today, Task.OPEN_STATUSES)
        groups = group_by_assignee(tasks)
        users = self.store.users_by_id(groups.keys())

        logger.info(
            "Daily reminders for %s: %d task(s), %d assignee(s)",
            today.isoformat(), len(tasks), len(groups),
        )

        for user_id, user_tasks in groups.items():
            user = users.get(user_id)
            if user is None or not user.phone:
                logger.info("Skipping user %s: no phone on file", user_id)
                result.skipped += 1
                continue

            phone = normalize_phone(user.phone)
            if not phone:
                logger.info("Skipping user %s: phone %r has no digits", user_id, user.phone)
                result.skipped += 1
                continue

            try:
                self.notifier.send_template(
                    phone,
                    self.template_name,
                    body_params=[today.isoformat(), render_digest(user_tasks)],
                )
            except NotificationError:
                logger.exception("Daily reminder to user %s failed", user_id)
                result.failed += 1
                continue

            result.sent += 1

        logger.info(
            "Daily reminders for %s: %d sent, %d skipped, %d failed",
            today.isoformat(), result.sent, result.skipped, result.failed,
        )
        return result
