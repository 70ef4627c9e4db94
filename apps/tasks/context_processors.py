"""
Context processors for tasks app.

Provides task counts and permission flags for navigation badges.
"""

from django.db.models import Q
from django.utils import timezone


def user_permissions(request):
    """
    Context processor to provide user permission flags for templates.
    """
    context = {
        'can_assign_tasks': False,
        'can_view_all_tasks': False,
        'can_audit_tasks': False,
        'can_view_team_kpi': False,
        'can_view_red_zone': False,
        'can_manage_members': False,
        'can_manage_holidays': False,
        'can_resolve_removal_requests': False,
    }

    if not request.user.is_authenticated:
        return context

    user = request.user
    context['can_assign_tasks'] = user.can_assign_tasks()
    context['can_view_all_tasks'] = user.can_view_all_tasks()
    context['can_audit_tasks'] = user.can_audit_tasks()
    context['can_view_team_kpi'] = user.can_view_team_kpi()
    context['can_view_red_zone'] = not user.is_auditor()
    context['can_manage_members'] = user.can_manage_members()
    context['can_manage_holidays'] = user.can_manage_holidays()
    context['can_resolve_removal_requests'] = user.can_resolve_removal_requests()

    return context


def task_counts(request):
    """
    Context processor to provide task counts for navigation badges.

    Returns:
        dict with:
        - pending_task_count: Open tasks assigned to current user
        - overdue_task_count: Those of them past their due date
        - pending_audit_count: Completed tasks awaiting audit (auditors and up)
        - pending_removal_count: Removal requests awaiting the owner
    """
    context = {
        'pending_task_count': 0,
        'overdue_task_count': 0,
        'pending_audit_count': 0,
        'pending_removal_count': 0,
    }

    if not request.user.is_authenticated:
        return context

    from apps.tasks.models import Task, RemovalRequest

    user = request.user
    today = timezone.localdate()

    my_tasks = Task.objects.filter(
        assigned_to=user, status__in=Task.OPEN_STATUSES
    ).exclude(recurring=Task.Recurring.DAILY)
    context['pending_task_count'] = my_tasks.count()
    context['overdue_task_count'] = my_tasks.filter(
        Q(status__in=Task.OVERDUE_STATUSES) & Q(due_date__lt=today)
    ).count()

    if user.can_audit_tasks():
        context['pending_audit_count'] = Task.objects.filter(
            status=Task.Status.COMPLETED,
            attachment_required=True,
            audit_status=Task.AuditStatus.PENDING,
        ).count()

    if user.can_resolve_removal_requests():
        context['pending_removal_count'] = RemovalRequest.objects.filter(
            status=RemovalRequest.Status.PENDING
        ).count()

    return context
