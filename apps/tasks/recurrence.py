"""
Recurring task instantiation.

Once a day the scheduler turns every daily template whose weekday set
contains today into a dated task instance. Re-running on the same day is
a no-op: existing instances are skipped, and the (parent_task, due_date)
unique constraint backs that check.
"""

import logging

from django.db import DatabaseError

from .models import Task

logger = logging.getLogger(__name__)


def app_weekday(day):
    """Weekday code of ``day`` with Monday = 0 through Sunday = 6."""
    return day.weekday()


def recurring_weekdays(template):
    """
    The template's weekday codes as a set of ints.

    Raises:
        ValueError, TypeError: malformed recurring_days
    """
    days = template.recurring_days
    if days is None:
        return set()
    if isinstance(days, (str, bytes, dict)):
        raise TypeError(f"recurring_days must be a list, got {type(days).__name__}")
    return {int(day) for day in days}


def build_instance(template, today, is_holiday=False):
    """Unsaved instance of ``template`` due ``today``."""
    return Task(
        title=template.title,
        description=template.description,
        priority=template.priority,
        attachment_required=template.attachment_required,
        attachment_type=template.attachment_type,
        attachment_description=template.attachment_description,
        assigned_to_id=template.assigned_to_id,
        assigned_to_name=template.assigned_to_name,
        assigned_to_city=template.assigned_to_city,
        assigned_by_id=template.assigned_by_id,
        assigned_by_name=template.assigned_by_name,
        start_date=today,
        due_date=today,
        status=Task.Status.PENDING,
        recurring=Task.Recurring.NONE,
        recurring_days=[],
        parent_task_id=template.pk,
        is_holiday=is_holiday,
    )


class RecurringTaskInstantiator:
    """
    Materializes today's instances of daily recurring templates.

    A template whose weekday set is malformed, or whose duplicate check
    fails, is logged and skipped. Failure to list templates or to write
    the batch propagates and nothing is written.
    """

    def __init__(self, store):
        self.store = store

    def run(self, today):
        weekday = app_weekday(today)
        templates = self.store.daily_templates()
        holiday = self.store.is_holiday(today)

        logger.info(
            "Recurring run for %s (weekday %d): %d daily template(s)",
            today.isoformat(), weekday, len(templates),
        )

        instances = []
        for template in templates:
            try:
                if weekday not in recurring_weekdays(template):
                    continue
                if self.store.instance_exists(template.pk, today):
                    logger.info(
                        "Skipping template %s: instance for %s already exists",
                        template.pk, today.isoformat(),
                    )
                    continue
            except (DatabaseError, ValueError, TypeError):
                logger.exception("Skipping template %s", template.pk)
                continue

            instances.append(build_instance(template, today, is_holiday=holiday))

        created = self.store.create_instances(instances)
        logger.info("Recurring run for %s created %d instance(s)", today.isoformat(), len(created))
        return created
