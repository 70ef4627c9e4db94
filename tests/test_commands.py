"""
Tests for management commands: import_documents, setup_schedules, seed_demo_users.
"""

import json
from datetime import date, datetime, timezone as dt_timezone
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django_q.models import Schedule

from apps.accounts.models import User
from apps.attendance.models import Absence, Holiday
from apps.tasks.models import RemovalRequest, Task

EXPORT = {
    'users': [
        {'id': 'u-owner', 'email': 'owner@whiterock.co.in', 'name': 'Olivia', 'role': 'owner',
         'phone': '9876543210', 'city': 'Mumbai'},
        {'id': 'u-doer', 'email': 'doer@whiterock.co.in', 'name': 'Dev', 'role': 'doer'},
    ],
    'holidays': [
        {'id': 'h-1', 'date': '2024-01-26', 'name': 'Republic Day'},
    ],
    'absences': [
        {'id': 'a-1', 'user_id': 'u-doer', 'from_date': '2024-02-10', 'to_date': '2024-02-12'},
        {'id': 'a-2', 'user_id': 'u-gone', 'from_date': '2024-02-10', 'to_date': '2024-02-12'},
    ],
    'tasks': [
        {'id': 't-instance', 'title': 'Count till', 'due_date': '2024-03-06',
         'assigned_to_id': 'u-doer', 'assigned_by_id': 'u-owner', 'parent_task_id': 't-template',
         'created_at': {'seconds': 1709683200, 'nanoseconds': 0}},
        {'id': 't-template', 'title': 'Count till', 'due_date': '2024-03-01',
         'recurring': 'daily', 'recurring_days': [2], 'assigned_to_id': 'u-doer'},
    ],
    'removal_requests': [
        {'id': 'r-1', 'task_id': 't-instance', 'task_title': 'Count till',
         'requested_by_id': 'u-doer', 'reason': 'Shop closed'},
    ],
}


@pytest.fixture
def export_file(tmp_path):
    path = tmp_path / 'export.json'
    path.write_text(json.dumps(EXPORT), encoding='utf-8')
    return path


@pytest.mark.django_db
class TestImportDocuments:

    def test_imports_every_collection(self, export_file):
        out = StringIO()
        call_command('import_documents', str(export_file), stdout=out)

        assert User.objects.count() == 2
        assert Holiday.objects.get().name == 'Republic Day'
        assert Absence.objects.count() == 1
        assert RemovalRequest.objects.get().requested_by.email == 'doer@whiterock.co.in'
        assert 'Imported 2 tasks' in out.getvalue()

    def test_links_instances_to_templates(self, export_file):
        call_command('import_documents', str(export_file), stdout=StringIO())

        template = Task.objects.get(recurring=Task.Recurring.DAILY)
        instance = Task.objects.get(due_date=date(2024, 3, 6))
        assert instance.parent_task_id == template.pk
        assert instance.assigned_to.email == 'doer@whiterock.co.in'
        assert template.recurring_days == [2]

    def test_keeps_exported_created_at(self, export_file):
        call_command('import_documents', str(export_file), stdout=StringIO())
        instance = Task.objects.get(due_date=date(2024, 3, 6))
        assert instance.created_at == datetime(2024, 3, 6, tzinfo=dt_timezone.utc)

    def test_existing_user_is_reused(self, export_file, doer):
        doer.email = 'doer@whiterock.co.in'
        doer.save()

        call_command('import_documents', str(export_file), stdout=StringIO())

        assert User.objects.filter(email='doer@whiterock.co.in').count() == 1
        assert Task.objects.filter(assigned_to=doer).count() == 2

    def test_existing_holiday_date_is_skipped(self, export_file):
        Holiday.objects.create(date=date(2024, 1, 26), name='Republic Day')
        out = StringIO()

        call_command('import_documents', str(export_file), stdout=out)

        assert Holiday.objects.count() == 1
        assert 'Imported 0 holidays' in out.getvalue()
        assert Task.objects.count() == 2

    def test_repeated_holiday_date_in_one_file(self, tmp_path):
        path = tmp_path / 'holidays.json'
        path.write_text(json.dumps({'holidays': [
            {'id': 'h-1', 'date': '2024-08-15', 'name': 'Independence Day'},
            {'id': 'h-2', 'date': '2024-08-15', 'name': 'Independence Day (dup)'},
        ]}), encoding='utf-8')

        call_command('import_documents', str(path), stdout=StringIO())

        assert Holiday.objects.get().name == 'Independence Day'

    def test_unreadable_file(self, tmp_path):
        with pytest.raises(CommandError):
            call_command('import_documents', str(tmp_path / 'missing.json'))


@pytest.mark.django_db
class TestSetupSchedules:

    def test_creates_both_schedules(self, settings):
        settings.RECURRING_TASKS_CRON = '30 4 * * *'
        call_command('setup_schedules', stdout=StringIO())

        schedules = {schedule.name: schedule for schedule in Schedule.objects.all()}
        assert set(schedules) == {'Recurring Task Instances', 'Daily Due Date Reminders'}
        recurring = schedules['Recurring Task Instances']
        assert recurring.func == 'apps.notifications.tasks.create_recurring_task_instances'
        assert recurring.schedule_type == Schedule.CRON
        assert recurring.cron == '30 4 * * *'

    def test_rerun_updates_in_place(self, settings):
        call_command('setup_schedules', stdout=StringIO())
        settings.DAILY_REMINDER_CRON = '0 9 * * *'
        out = StringIO()
        call_command('setup_schedules', stdout=out)

        assert Schedule.objects.count() == 2
        assert Schedule.objects.get(name='Daily Due Date Reminders').cron == '0 9 * * *'
        assert '2 schedule(s) updated' in out.getvalue()


@pytest.mark.django_db
def test_seed_demo_users_is_idempotent():
    call_command('seed_demo_users', password='demo-pass-123', stdout=StringIO())
    call_command('seed_demo_users', password='demo-pass-123', stdout=StringIO())
    assert set(User.objects.values_list('role', flat=True)) == {'owner', 'manager', 'doer', 'auditor'}
    assert User.objects.count() == 4
