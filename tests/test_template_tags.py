"""
Tests for task and report template tags.
"""

from datetime import timedelta

import pytest
from django.template import Context, Template
from django.utils import timezone

from apps.reports.templatetags import report_tags
from apps.tasks.models import Task
from apps.tasks.templatetags import task_tags


class TestReportTags:

    @pytest.mark.parametrize('days, expected', [
        (1, '1 day'), (9, '9 days'), (0, '0 days'), (-2, '0 days'), (None, 'N/A'), ('x', 'N/A'),
    ])
    def test_days_overdue(self, days, expected):
        assert report_tags.days_overdue(days) == expected

    @pytest.mark.parametrize('days, expected', [
        (0, ''), (1, 'bg-yellow-100'), (3, 'bg-orange-100'), (7, 'bg-red-100'), (None, ''),
    ])
    def test_overdue_severity_class(self, days, expected):
        assert report_tags.overdue_severity_class(days) == expected

    def test_format_percentage(self):
        assert report_tags.format_percentage(33) == '33%'
        assert report_tags.format_percentage(None) == '0%'


class TestTaskTags:

    def test_status_and_priority_classes(self):
        assert task_tags.status_class('completed') == 'bg-green-100 text-green-800'
        assert task_tags.priority_class('urgent') == 'bg-red-100 text-red-800'
        assert task_tags.status_class('unknown') == 'bg-gray-100 text-gray-800'
        assert task_tags.audit_class('') == task_tags.AUDIT_COLORS['pending']

    def test_overdue_is_computed_from_due_date(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        assert task_tags.is_overdue(Task(due_date=yesterday, status=Task.Status.PENDING))
        assert not task_tags.is_overdue(Task(due_date=yesterday, status=Task.Status.COMPLETED))
        assert not task_tags.is_overdue(Task(due_date=timezone.localdate(), status=Task.Status.OVERDUE))
        assert not task_tags.is_overdue(
            Task(due_date=yesterday, status=Task.Status.PENDING, recurring=Task.Recurring.DAILY)
        )

    def test_row_class(self):
        yesterday = timezone.localdate() - timedelta(days=1)
        tomorrow = timezone.localdate() + timedelta(days=1)
        assert task_tags.task_row_class(Task(due_date=yesterday)) == 'bg-red-50'
        assert task_tags.task_row_class(Task(due_date=tomorrow, is_holiday=True)) == 'bg-amber-50'
        assert task_tags.task_row_class(Task(due_date=tomorrow)) == ''

    def test_weekdays(self):
        template = Task(recurring=Task.Recurring.DAILY, recurring_days=[4, 0, 2])
        assert task_tags.weekdays(template) == 'Mon, Wed, Fri'
        assert task_tags.weekdays(Task(recurring=Task.Recurring.NONE, recurring_days=[1])) == ''

    def test_badges_render(self):
        task = Task(
            due_date=timezone.localdate() - timedelta(days=3),
            priority=Task.Priority.HIGH,
            is_holiday=True,
        )
        rendered = Template(
            '{% load task_tags %}{% overdue_badge task %}{% priority_badge task %}'
            '{% status_badge task %}{% holiday_badge task %}'
        ).render(Context({'task': task}))

        assert 'OVERDUE' in rendered
        assert 'title="3 day(s) overdue"' in rendered
        assert '>High<' in rendered
        assert '>Pending<' in rendered
        assert 'HOLIDAY' in rendered
