"""
Permission helpers for tasks app.

Role-based access control for task operations:
- Owner: All tasks, resolves removal requests, team KPI
- Manager: All tasks
- Doer: Tasks assigned to or by them
- Auditor: Completed tasks only; audits attachments, cannot assign
"""

from django.db.models import Q

from .models import Task, RemovalRequest


# =============================================================================
# View Permissions
# =============================================================================

def get_visible_tasks(user):
    """
    Get queryset of tasks visible to this user based on their role.
    """
    base_qs = Task.objects.all()

    if user.can_view_all_tasks():
        return base_qs

    if user.is_auditor():
        return base_qs.filter(status=Task.Status.COMPLETED)

    return base_qs.filter(Q(assigned_to=user) | Q(assigned_by=user))


def can_view_task(user, task):
    if not user.is_authenticated:
        return False
    if user.can_view_all_tasks():
        return True
    if user.is_auditor():
        return task.is_completed
    return user.pk in (task.assigned_to_id, task.assigned_by_id)


# =============================================================================
# Action Permissions
# =============================================================================

def can_complete_task(user, task):
    """Only the assignee completes a task, and only once."""
    if task.is_template:
        return False
    if task.status in [Task.Status.COMPLETED, Task.Status.CANCELLED]:
        return False
    return task.assigned_to_id == user.pk


def can_audit_task(user, task):
    return user.can_audit_tasks() and task.needs_audit


def can_request_removal(user, task):
    """Members may ask to remove their own incomplete tasks."""
    if task.is_completed:
        return False
    if task.removal_requests.filter(status=RemovalRequest.Status.PENDING).exists():
        return False
    return task.assigned_to_id == user.pk


def can_resolve_removal(user, removal_request):
    return user.can_resolve_removal_requests() and removal_request.is_pending


def red_zone_scope(user):
    """
    Which overdue tasks ``user`` may see.

    Returns:
        (visible, assigned_to_id): visible is False for auditors;
        assigned_to_id is None when every assignee is visible.
    """
    if user.is_auditor():
        return False, None
    if user.is_manager_or_owner():
        return True, None
    return True, user.pk
