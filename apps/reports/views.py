"""
Views for reports app.

- KPI: team-wide metrics and per-member rows for owners; everyone else
  sees their own metrics and row
- Red Zone: overdue tasks; owners and managers see everyone's, doers
  their own, auditors none
"""

from django.shortcuts import render, redirect
from django.contrib import messages
from django.contrib.auth.decorators import login_required
from django.utils import timezone

from apps.tasks.permissions import red_zone_scope
from apps.tasks.store import TaskStore
from .services import compute_kpi, compute_kpi_by_member


@login_required
def kpi_view(request):
    user = request.user
    store = TaskStore()
    today = timezone.localdate()

    holidays = store.holidays()
    absences = store.absences()

    if user.can_view_team_kpi():
        tasks = store.tasks()
        metrics = compute_kpi(tasks, holidays, absences, today)
        rows = compute_kpi_by_member(tasks, holidays, absences, store.users(), today)
    else:
        tasks = store.tasks(assigned_to_id=user.pk)
        metrics = compute_kpi(tasks, holidays, absences, today, user_id=user.pk)
        rows = compute_kpi_by_member(tasks, holidays, absences, [user], today)

    return render(request, 'reports/kpi.html', {
        'metrics': metrics,
        'rows': rows,
        'today': today,
        'is_team_view': user.can_view_team_kpi(),
    })


@login_required
def red_zone_view(request):
    visible, assigned_to_id = red_zone_scope(request.user)
    if not visible:
        messages.error(request, 'The Red Zone is not available for your role.')
        return redirect('tasks:task_list')

    today = timezone.localdate()
    overdue = TaskStore().overdue_tasks(today, assigned_to_id=assigned_to_id)

    return render(request, 'reports/red_zone.html', {
        'overdue': overdue,
        'today': today,
    })
