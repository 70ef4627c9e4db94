"""
Tests for the tasks service layer and role rules.
"""

from datetime import date

import pytest
import requests
from django.core.exceptions import PermissionDenied, ValidationError

from apps.attendance.models import Holiday
from apps.notifications import services as notification_services
from apps.notifications.tasks import notify_task_assigned
from apps.tasks.models import RemovalRequest, Task
from apps.tasks.permissions import (
    can_complete_task, can_view_task, get_visible_tasks, red_zone_scope,
)
from apps.tasks.services import (
    complete_task, create_removal_request, create_task, resolve_removal_request,
    set_audit_status,
)

DUE = date(2024, 3, 6)


@pytest.fixture
def queued(monkeypatch):
    calls = []
    monkeypatch.setattr(
        notification_services, 'async_task', lambda func, *args: calls.append((func, args))
    )
    return calls


# =============================================================================
# create_task
# =============================================================================

@pytest.mark.django_db
class TestCreateTask:

    def test_creates_pending_task_with_denormalized_names(self, owner, doer, queued):
        task = create_task(owner, doer, '  Pay rent ', DUE, priority=Task.Priority.HIGH)

        assert task.title == 'Pay rent'
        assert task.status == Task.Status.PENDING
        assert task.assigned_to_name == 'Dev Doer'
        assert task.assigned_to_city == 'Pune'
        assert task.assigned_by_name == 'Olivia Owner'
        assert task.recurring_days == []
        assert not task.is_holiday

    def test_doer_can_assign(self, doer, other_doer, queued):
        assert create_task(doer, other_doer, 'Send invoice', DUE).assigned_by == doer

    def test_auditor_cannot_assign(self, auditor, doer):
        with pytest.raises(PermissionDenied):
            create_task(auditor, doer, 'Anything', DUE)

    @pytest.mark.parametrize('kwargs', [
        {'title': ''},
        {'due_date': None},
        {'start_date': date(2024, 3, 7)},
        {'priority': 'critical'},
        {'recurring': 'hourly'},
        {'recurring': Task.Recurring.DAILY},
        {'recurring': Task.Recurring.DAILY, 'recurring_days': [7]},
        {'recurring': Task.Recurring.DAILY, 'recurring_days': ['wed']},
    ])
    def test_invalid_input(self, owner, doer, kwargs):
        params = {'title': 'Pay rent', 'due_date': DUE, **kwargs}
        with pytest.raises(ValidationError):
            create_task(owner, doer, **params)

    def test_inactive_assignee(self, owner, doer):
        doer.is_active = False
        doer.save()
        with pytest.raises(ValidationError):
            create_task(owner, doer, 'Pay rent', DUE)

    def test_daily_template_weekdays_are_sorted_and_unique(self, owner, doer, queued):
        task = create_task(
            owner, doer, 'Count till', DUE,
            recurring=Task.Recurring.DAILY, recurring_days=['4', 0, 4],
        )
        assert task.recurring_days == [0, 4]
        assert task.is_template

    def test_attachment_fields_cleared_when_not_required(self, owner, doer, queued):
        task = create_task(
            owner, doer, 'Pay rent', DUE,
            attachment_type=Task.AttachmentType.TEXT, attachment_description='Receipt',
        )
        assert task.attachment_type == ''
        assert task.attachment_description == ''

    def test_required_attachment_defaults_to_media(self, owner, doer, queued):
        task = create_task(owner, doer, 'Pay rent', DUE, attachment_required=True)
        assert task.attachment_type == Task.AttachmentType.MEDIA

    def test_due_on_holiday_is_flagged(self, owner, doer, queued):
        Holiday.objects.create(date=DUE, name='Holi')
        assert create_task(owner, doer, 'Pay rent', DUE).is_holiday

    def test_notification_queued_after_commit(self, owner, doer, queued, django_capture_on_commit_callbacks):
        with django_capture_on_commit_callbacks(execute=True):
            task = create_task(owner, doer, 'Pay rent', DUE)

        assert queued == [('apps.notifications.tasks.notify_task_assigned', (task.pk,))]


# =============================================================================
# Assignment notification job
# =============================================================================

@pytest.mark.django_db
class TestNotifyTaskAssigned:

    @pytest.fixture
    def posts(self, monkeypatch, settings):
        settings.WHATSAPP_AUTH_TOKEN = 'secret'
        settings.WHATSAPP_TEMPLATE_TASK_ASSIGNED = 'task_assigned'
        settings.WHATSAPP_ORIGIN_WEBSITE = 'https://whiterock.co.in/'
        calls = []

        class Response:
            status_code = 200
            text = 'ok'

        def fake_post(url, **kwargs):
            calls.append(kwargs['json'])
            return Response()

        monkeypatch.setattr(requests, 'post', fake_post)
        return calls

    def test_sends_assignment_template(self, posts, make_task, doer, owner):
        task = make_task(assigned_to=doer, assigned_by=owner, title='Pay rent', due_date=DUE)

        notify_task_assigned(task.pk)

        assert posts == [{
            'phone': '919876543210',
            'templateName': 'task_assigned',
            'originWebsite': 'https://whiterock.co.in/',
            'bodyParams': [
                'Pay rent', '2024-03-06', 'Medium', 'Olivia Owner',
                f'http://testserver/tasks/{task.pk}/',
            ],
        }]

    def test_assignee_without_phone_is_skipped(self, posts, make_task, other_doer):
        task = make_task(assigned_to=other_doer)
        notify_task_assigned(task.pk)
        assert posts == []

    def test_missing_task_is_skipped(self, posts):
        notify_task_assigned(12345)
        assert posts == []

    def test_no_token_sends_nothing(self, posts, settings, make_task, doer):
        settings.WHATSAPP_AUTH_TOKEN = ''
        notify_task_assigned(make_task(assigned_to=doer).pk)
        assert posts == []


# =============================================================================
# Completion and audit
# =============================================================================

@pytest.mark.django_db
class TestCompleteTask:

    def test_assignee_completes(self, make_task, doer):
        task = complete_task(make_task(assigned_to=doer), doer)
        assert task.status == Task.Status.COMPLETED
        assert task.completed_at is not None

    def test_only_assignee(self, make_task, doer, owner):
        with pytest.raises(PermissionDenied):
            complete_task(make_task(assigned_to=doer), owner)

    def test_templates_cannot_be_completed(self, make_task, doer):
        template = make_task(assigned_to=doer, recurring=Task.Recurring.DAILY, recurring_days=[1])
        assert not can_complete_task(doer, template)

    def test_media_evidence_required(self, make_task, doer):
        task = make_task(assigned_to=doer, attachment_required=True, attachment_type='media')
        with pytest.raises(ValidationError):
            complete_task(task, doer, attachment_text='I did it')
        complete_task(task, doer, attachment_url='https://drive.example.com/receipt')
        assert task.attachment_url == 'https://drive.example.com/receipt'

    def test_text_evidence_required(self, make_task, doer):
        task = make_task(assigned_to=doer, attachment_required=True, attachment_type='text')
        with pytest.raises(ValidationError):
            complete_task(task, doer)


@pytest.mark.django_db
class TestAudit:

    @pytest.fixture
    def completed(self, make_task, doer):
        task = make_task(assigned_to=doer, attachment_required=True, attachment_type='media')
        return complete_task(task, doer, attachment_url='https://drive.example.com/1')

    def test_auditor_marks_bogus(self, completed, auditor):
        task = set_audit_status(completed, auditor, Task.AuditStatus.BOGUS)
        assert task.audit_status == Task.AuditStatus.BOGUS
        assert task.audited_by == 'Anu Auditor'
        assert task.audited_at is not None

    def test_doer_cannot_audit(self, completed, doer):
        with pytest.raises(PermissionDenied):
            set_audit_status(completed, doer, Task.AuditStatus.AUDITED)

    def test_only_once(self, completed, manager):
        set_audit_status(completed, manager, Task.AuditStatus.UNCLEAR)
        with pytest.raises(ValidationError):
            set_audit_status(completed, manager, Task.AuditStatus.AUDITED)

    def test_pending_is_not_a_verdict(self, completed, auditor):
        with pytest.raises(ValidationError):
            set_audit_status(completed, auditor, Task.AuditStatus.PENDING)

    def test_open_task_cannot_be_audited(self, make_task, doer, auditor):
        task = make_task(assigned_to=doer, attachment_required=True, attachment_type='media')
        with pytest.raises(ValidationError):
            set_audit_status(task, auditor, Task.AuditStatus.AUDITED)


# =============================================================================
# Removal requests
# =============================================================================

@pytest.mark.django_db
class TestRemovalRequests:

    def test_request_and_approve_deletes_task(self, make_task, doer, owner):
        task = make_task(assigned_to=doer, title='Visit bank')
        removal_request = create_removal_request(task, doer, 'Bank closed for the week')

        resolve_removal_request(removal_request, owner, approve=True)

        removal_request.refresh_from_db()
        assert removal_request.status == RemovalRequest.Status.APPROVED
        assert removal_request.task is None
        assert removal_request.task_title == 'Visit bank'
        assert removal_request.resolved_by == 'Olivia Owner'
        assert not Task.objects.filter(title='Visit bank').exists()

    def test_reject_keeps_task(self, make_task, doer, owner):
        task = make_task(assigned_to=doer)
        removal_request = create_removal_request(task, doer, 'Not mine')

        resolve_removal_request(removal_request, owner, approve=False)

        assert Task.objects.filter(pk=task.pk).exists()
        assert removal_request.status == RemovalRequest.Status.REJECTED

    def test_only_own_tasks(self, make_task, doer, other_doer):
        with pytest.raises(PermissionDenied):
            create_removal_request(make_task(assigned_to=doer), other_doer, 'Please')

    def test_one_pending_request_per_task(self, make_task, doer):
        task = make_task(assigned_to=doer)
        create_removal_request(task, doer, 'First')
        with pytest.raises(ValidationError):
            create_removal_request(task, doer, 'Second')

    def test_manager_cannot_resolve(self, make_task, doer, manager):
        removal_request = create_removal_request(make_task(assigned_to=doer), doer, 'Reason')
        with pytest.raises(PermissionDenied):
            resolve_removal_request(removal_request, manager, approve=True)

    def test_resolved_request_cannot_be_resolved_again(self, make_task, doer, owner):
        removal_request = create_removal_request(make_task(assigned_to=doer), doer, 'Reason')
        resolve_removal_request(removal_request, owner, approve=False)
        with pytest.raises(ValidationError):
            resolve_removal_request(removal_request, owner, approve=True)


# =============================================================================
# Visibility
# =============================================================================

@pytest.mark.django_db
class TestVisibility:

    @pytest.fixture
    def tasks(self, make_task, doer, other_doer, owner):
        return {
            'mine': make_task(assigned_to=doer, assigned_by=owner),
            'assigned_by_me': make_task(assigned_to=other_doer, assigned_by=doer),
            'others': make_task(assigned_to=other_doer, assigned_by=owner),
            'completed': make_task(assigned_to=other_doer, assigned_by=owner, status=Task.Status.COMPLETED),
        }

    def test_manager_sees_everything(self, tasks, manager):
        assert get_visible_tasks(manager).count() == 4

    def test_doer_sees_own_and_assigned_by_them(self, tasks, doer):
        assert set(get_visible_tasks(doer)) == {tasks['mine'], tasks['assigned_by_me']}
        assert not can_view_task(doer, tasks['others'])

    def test_auditor_sees_completed_only(self, tasks, auditor):
        assert list(get_visible_tasks(auditor)) == [tasks['completed']]

    def test_red_zone_scope(self, owner, manager, doer, auditor):
        assert red_zone_scope(owner) == (True, None)
        assert red_zone_scope(manager) == (True, None)
        assert red_zone_scope(doer) == (True, doer.pk)
        assert red_zone_scope(auditor) == (False, None)
