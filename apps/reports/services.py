"""
Service layer for reports app.

KPI aggregation and Red Zone (overdue) selection over task snapshots.
Every function takes ``today`` explicitly so a page view or job computes
the as-of date once and all numbers agree with each other.

Tasks may be model instances or any objects with the same attributes.
"""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

from django.utils import timezone

from apps.attendance.services import as_date, is_holiday, is_user_absent
from apps.tasks.models import Task


@dataclass(frozen=True)
class KpiMetrics:
    total_assigned: int = 0
    on_time_completed: int = 0
    late_completed: int = 0
    overdue_count: int = 0
    late_completion_percent: int = 0
    overdue_percent: int = 0

    @property
    def completed_count(self):
        return self.on_time_completed + self.late_completed

    @property
    def pending_count(self):
        """Countable tasks that are neither completed nor overdue."""
        return max(0, self.total_assigned - self.completed_count - self.overdue_count)


@dataclass(frozen=True)
class MemberKpiRow:
    user_id: int
    name: str
    city: str
    total_assigned: int
    on_time_completed: int
    late_completed: int
    overdue_count: int
    late_completion_percent: int
    overdue_percent: int


@dataclass(frozen=True)
class OverdueTask:
    task: object
    days_overdue: int


def _percent(part, whole):
    """Integer percentage, rounded half up; 0 when ``whole`` is 0."""
    if not whole:
        return 0
    value = Decimal(100 * part) / Decimal(whole)
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def completion_date(task):
    """Calendar day (organization timezone) on which ``task`` was completed."""
    completed_at = task.completed_at
    if not completed_at:
        return None
    if isinstance(completed_at, datetime):
        if timezone.is_aware(completed_at):
            return timezone.localdate(completed_at)
        return completed_at.date()
    return as_date(completed_at)


def is_countable(task, holidays, absences) -> bool:
    """
    Whether ``task`` counts towards KPI.

    Daily recurring templates never count; their dated instances do.
    Tasks flagged as holiday at creation, due on a holiday, or due while
    the assignee was absent neither credit nor penalize anyone.
    """
    if task.recurring == Task.Recurring.DAILY:
        return False
    if task.is_holiday:
        return False
    if is_holiday(task.due_date, holidays):
        return False
    if is_user_absent(task.assigned_to_id, task.due_date, absences):
        return False
    return True


def _tally(tasks, today):
    total = on_time = late = overdue = 0

    for task in tasks:
        total += 1
        due_date = as_date(task.due_date)

        if task.status == Task.Status.COMPLETED:
            # A completed task without a timestamp counts only in the total
            completed_on = completion_date(task)
            if completed_on is None:
                continue
            if completed_on <= due_date:
                on_time += 1
            else:
                late += 1
        elif task.status in Task.OVERDUE_STATUSES and due_date < today:
            overdue += 1

    return KpiMetrics(
        total_assigned=total,
        on_time_completed=on_time,
        late_completed=late,
        overdue_count=overdue,
        late_completion_percent=_percent(late, on_time + late),
        overdue_percent=_percent(overdue, total),
    )


def compute_kpi(tasks, holidays, absences, today, user_id=None) -> KpiMetrics:
    """
    KPI for one member (``user_id``) or the whole team.

    Args:
        tasks: Task snapshot
        holidays: Holiday snapshot
        absences: Absence snapshot
        today: As-of date
        user_id: Restrict to tasks assigned to this user

    Returns:
        KpiMetrics over the countable tasks
    """
    today = as_date(today)
    if user_id is not None:
        tasks = [task for task in tasks if task.assigned_to_id == user_id]
    countable = [task for task in tasks if is_countable(task, holidays, absences)]
    return _tally(countable, today)


def compute_kpi_by_member(tasks, holidays, absences, users, today):
    """
    One KPI row per user, busiest first.

    Rows with equal ``total_assigned`` keep the order of ``users``.
    """
    today = as_date(today)
    tasks_by_user = {}
    for task in tasks:
        tasks_by_user.setdefault(task.assigned_to_id, []).append(task)

    rows = []
    for user in users:
        metrics = compute_kpi(tasks_by_user.get(user.id, []), holidays, absences, today)
        rows.append(MemberKpiRow(
            user_id=user.id,
            name=user.name,
            city=user.city or '',
            total_assigned=metrics.total_assigned,
            on_time_completed=metrics.on_time_completed,
            late_completed=metrics.late_completed,
            overdue_count=metrics.overdue_count,
            late_completion_percent=metrics.late_completion_percent,
            overdue_percent=metrics.overdue_percent,
        ))

    return sorted(rows, key=lambda row: row.total_assigned, reverse=True)


# =============================================================================
# Red Zone
# =============================================================================

def days_overdue(due_date, today) -> int:
    """Whole calendar days between ``due_date`` and ``today``."""
    return (as_date(today) - as_date(due_date)).days


def get_overdue_tasks(tasks, today, assigned_to_id=None):
    """
    Open tasks past their due date, optionally for one assignee.

    Daily recurring templates are skipped. Holidays and absences are not
    excluded here, unlike KPI.
    """
    today = as_date(today)
    overdue = []
    for task in tasks:
        if task.recurring == Task.Recurring.DAILY:
            continue
        if assigned_to_id is not None and task.assigned_to_id != assigned_to_id:
            continue
        if task.status not in Task.OVERDUE_STATUSES:
            continue
        due_date = as_date(task.due_date)
        if due_date < today:
            overdue.append(OverdueTask(task=task, days_overdue=days_overdue(due_date, today)))
    return overdue
