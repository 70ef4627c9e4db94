"""
Tests for KPI aggregation and Red Zone selection.

Snapshots are plain namespaces; the functions only read attributes.
"""

from datetime import date, datetime, timezone as dt_timezone
from types import SimpleNamespace

import pytest

from apps.reports.services import (
    compute_kpi, compute_kpi_by_member, days_overdue, get_overdue_tasks, is_countable,
)

TODAY = date(2024, 3, 10)


def task(due, status='pending', assigned_to_id=1, completed_at=None, is_holiday=False,
         recurring='none', **extra):
    return SimpleNamespace(
        due_date=due,
        status=status,
        assigned_to_id=assigned_to_id,
        completed_at=completed_at,
        is_holiday=is_holiday,
        recurring=recurring,
        **extra,
    )


def done(due, completed_on, **extra):
    completed_at = datetime(
        completed_on.year, completed_on.month, completed_on.day, 6, 0, tzinfo=dt_timezone.utc
    )
    return task(due, status='completed', completed_at=completed_at, **extra)


def user(pk, name):
    return SimpleNamespace(id=pk, name=name, city='')


# =============================================================================
# Countable set
# =============================================================================

class TestCountable:

    def test_due_on_holiday_is_excluded_regardless_of_status(self):
        holidays = [SimpleNamespace(date=date(2024, 1, 5))]
        pending = task(date(2024, 1, 5))
        completed = done(date(2024, 1, 5), date(2024, 1, 5))

        assert not is_countable(pending, holidays, [])
        assert not is_countable(completed, holidays, [])

        metrics = compute_kpi([pending, completed], holidays, [], TODAY)
        assert metrics.total_assigned == 0
        assert metrics.overdue_count == 0

    def test_holiday_flag_excludes(self):
        assert not is_countable(task(date(2024, 1, 6), is_holiday=True), [], [])

    def test_assignee_absence_excludes(self):
        absences = [SimpleNamespace(user_id=1, from_date=date(2024, 1, 4), to_date=date(2024, 1, 8))]
        assert not is_countable(task(date(2024, 1, 6), assigned_to_id=1), [], absences)
        assert is_countable(task(date(2024, 1, 6), assigned_to_id=2), [], absences)

    def test_daily_template_is_excluded(self):
        template = task(date(2024, 1, 1), recurring='daily')
        instance = task(date(2024, 1, 1))
        assert not is_countable(template, [], [])
        assert is_countable(instance, [], [])

        metrics = compute_kpi([template, instance], [], [], TODAY)
        assert metrics.total_assigned == 1
        assert metrics.overdue_count == 1


# =============================================================================
# Aggregate metrics
# =============================================================================

class TestComputeKpi:

    def test_empty(self):
        metrics = compute_kpi([], [], [], TODAY)
        assert metrics.total_assigned == 0
        assert metrics.late_completion_percent == 0
        assert metrics.overdue_percent == 0

    def test_on_time_late_and_overdue(self):
        tasks = [
            done(date(2024, 3, 5), date(2024, 3, 5)),
            done(date(2024, 3, 5), date(2024, 3, 4)),
            done(date(2024, 3, 5), date(2024, 3, 7)),
            task(date(2024, 3, 1)),
            task(date(2024, 3, 2), status='overdue'),
            task(date(2024, 3, 20)),
        ]
        metrics = compute_kpi(tasks, [], [], TODAY)

        assert metrics.total_assigned == 6
        assert metrics.on_time_completed == 2
        assert metrics.late_completed == 1
        assert metrics.overdue_count == 2
        assert metrics.late_completion_percent == 33
        assert metrics.overdue_percent == 33
        assert metrics.completed_count == 3
        assert metrics.pending_count == 1

    def test_due_today_is_not_overdue(self):
        metrics = compute_kpi([task(TODAY)], [], [], TODAY)
        assert metrics.overdue_count == 0

    def test_in_progress_past_due_is_not_counted_overdue(self):
        metrics = compute_kpi([task(date(2024, 3, 1), status='in_progress')], [], [], TODAY)
        assert metrics.overdue_count == 0

    def test_stored_overdue_status_not_yet_due_is_not_overdue(self):
        metrics = compute_kpi([task(date(2024, 3, 15), status='overdue')], [], [], TODAY)
        assert metrics.overdue_count == 0

    def test_percentages_round_half_up(self):
        tasks = [task(date(2024, 3, 1))] + [task(date(2024, 3, 20)) for _ in range(7)]
        metrics = compute_kpi(tasks, [], [], TODAY)
        # 1 of 8 is 12.5%
        assert metrics.overdue_percent == 13

    def test_completed_without_timestamp_counts_only_in_total(self):
        metrics = compute_kpi([task(date(2024, 3, 1), status='completed')], [], [], TODAY)
        assert metrics.total_assigned == 1
        assert metrics.on_time_completed == 0
        assert metrics.late_completed == 0
        assert metrics.overdue_count == 0

    def test_completion_day_is_local_calendar_day(self):
        # 20:00 UTC on the 5th is 01:30 IST on the 6th
        late = task(
            date(2024, 1, 5),
            status='completed',
            completed_at=datetime(2024, 1, 5, 20, 0, tzinfo=dt_timezone.utc),
        )
        metrics = compute_kpi([late], [], [], TODAY)
        assert metrics.late_completed == 1

    def test_string_dates_are_accepted(self):
        tasks = [task('2024-03-01'), done('2024-03-01', date(2024, 2, 28))]
        metrics = compute_kpi(tasks, [], [], '2024-03-10')
        assert metrics.overdue_count == 1
        assert metrics.on_time_completed == 1

    def test_restricted_to_one_member(self):
        tasks = [task(date(2024, 3, 1), assigned_to_id=1), task(date(2024, 3, 1), assigned_to_id=2)]
        metrics = compute_kpi(tasks, [], [], TODAY, user_id=2)
        assert metrics.total_assigned == 1

    @pytest.mark.parametrize('statuses', [
        ['completed', 'pending', 'overdue', 'in_progress'],
        ['completed'] * 5,
        ['pending'] * 3,
    ])
    def test_invariants(self, statuses):
        tasks = []
        for index, status in enumerate(statuses):
            due = date(2024, 3, 1 + index)
            if status == 'completed':
                tasks.append(done(due, date(2024, 3, 3)))
            else:
                tasks.append(task(due, status=status))
        metrics = compute_kpi(tasks, [], [], TODAY)

        assert metrics.on_time_completed + metrics.late_completed <= metrics.total_assigned
        assert 0 <= metrics.overdue_percent <= 100
        assert 0 <= metrics.late_completion_percent <= 100
        assert isinstance(metrics.overdue_percent, int)


class TestComputeKpiByMember:

    def test_one_row_per_user_busiest_first(self):
        users = [user(1, 'Asha'), user(2, 'Bala'), user(3, 'Chetan')]
        tasks = [
            task(date(2024, 3, 1), assigned_to_id=2),
            task(date(2024, 3, 2), assigned_to_id=2),
            task(date(2024, 3, 20), assigned_to_id=3),
        ]
        rows = compute_kpi_by_member(tasks, [], [], users, TODAY)

        assert [row.name for row in rows] == ['Bala', 'Chetan', 'Asha']
        assert rows[0].overdue_count == 2
        assert rows[0].overdue_percent == 100
        assert rows[2].total_assigned == 0

    def test_ties_keep_user_order(self):
        users = [user(1, 'Asha'), user(2, 'Bala')]
        tasks = [task(date(2024, 3, 20), assigned_to_id=2), task(date(2024, 3, 20), assigned_to_id=1)]
        rows = compute_kpi_by_member(tasks, [], [], users, TODAY)
        assert [row.user_id for row in rows] == [1, 2]

    def test_member_absence_only_affects_that_member(self):
        users = [user(1, 'Asha'), user(2, 'Bala')]
        absences = [SimpleNamespace(user_id=1, from_date=date(2024, 3, 1), to_date=date(2024, 3, 1))]
        tasks = [task(date(2024, 3, 1), assigned_to_id=1), task(date(2024, 3, 1), assigned_to_id=2)]
        rows = {row.user_id: row for row in compute_kpi_by_member(tasks, [], absences, users, TODAY)}
        assert rows[1].total_assigned == 0
        assert rows[2].total_assigned == 1


# =============================================================================
# Red Zone
# =============================================================================

class TestOverdueTasks:

    def test_days_overdue_is_calendar_difference(self):
        overdue = get_overdue_tasks([task(date(2024, 3, 1))], TODAY)
        assert len(overdue) == 1
        assert overdue[0].days_overdue == 9

    def test_string_dates(self):
        overdue = get_overdue_tasks([task('2024-03-01')], '2024-03-10')
        assert overdue[0].days_overdue == 9

    def test_completed_in_progress_and_future_excluded(self):
        tasks = [
            done(date(2024, 3, 1), date(2024, 3, 5)),
            task(date(2024, 3, 1), status='in_progress'),
            task(date(2024, 3, 1), status='cancelled'),
            task(TODAY),
            task(date(2024, 3, 11)),
        ]
        assert get_overdue_tasks(tasks, TODAY) == []

    def test_holidays_do_not_exclude(self):
        overdue = get_overdue_tasks([task(date(2024, 1, 5), is_holiday=True)], TODAY)
        assert len(overdue) == 1

    def test_daily_template_excluded(self):
        tasks = [task(date(2023, 12, 14), recurring='daily'), task(date(2024, 3, 1))]
        overdue = get_overdue_tasks(tasks, TODAY)
        assert [row.task.recurring for row in overdue] == ['none']

    def test_assignee_filter(self):
        tasks = [task(date(2024, 3, 1), assigned_to_id=1), task(date(2024, 3, 1), assigned_to_id=2)]
        overdue = get_overdue_tasks(tasks, TODAY, assigned_to_id=2)
        assert [row.task.assigned_to_id for row in overdue] == [2]

    def test_days_overdue_helper(self):
        assert days_overdue(date(2024, 2, 28), date(2024, 3, 1)) == 2
