"""
Views for tasks app.

Includes:
- Task table with filtering (HTMX partial refresh)
- Assign task
- Task detail and completion
- Bogus attachment audit queue
- Removal requests
"""

from django.shortcuts import render, redirect, get_object_or_404
from django.contrib.auth.decorators import login_required
from django.contrib import messages
from django.core.exceptions import PermissionDenied, ValidationError
from django.core.paginator import Paginator, EmptyPage, PageNotAnInteger
from django.views.decorators.http import require_POST

from .filters import TaskFilter
from .forms import TaskForm, TaskCompleteForm, AuditForm, RemovalRequestForm
from .models import Task, RemovalRequest
from .permissions import (
    get_visible_tasks, can_view_task, can_complete_task, can_audit_task,
    can_request_removal,
)
from .services import (
    create_task, complete_task, set_audit_status,
    create_removal_request, resolve_removal_request,
)


def _paginate(request, queryset, per_page=20):
    paginator = Paginator(queryset, per_page)
    page = request.GET.get('page', 1)
    try:
        return paginator.page(page)
    except PageNotAnInteger:
        return paginator.page(1)
    except EmptyPage:
        return paginator.page(paginator.num_pages)


# =============================================================================
# Task Table
# =============================================================================

@login_required
def task_list(request):
    """
    Task table, filtered by role:
    - Owner/Manager: all tasks
    - Doer: tasks assigned to or by them
    - Auditor: completed tasks
    """
    user = request.user
    queryset = get_visible_tasks(user)

    task_filter = TaskFilter(request.GET, queryset=queryset, request=request)
    tasks = _paginate(request, task_filter.qs.order_by('-updated_at'))

    context = {
        'tasks': tasks,
        'page_obj': tasks,
        'total_count': tasks.paginator.count,
        'filter': task_filter,
        'show_assignee_filter': user.can_view_all_tasks(),
        'has_active_filters': any([
            request.GET.get('search'),
            request.GET.getlist('status'),
            request.GET.getlist('priority'),
            request.GET.get('assigned_to'),
            request.GET.get('due_from'),
            request.GET.get('due_to'),
        ]),
        'selected_statuses': request.GET.getlist('status'),
        'selected_priorities': request.GET.getlist('priority'),
    }

    # Handle HTMX requests - return only the task list content
    if request.htmx:
        return render(request, 'tasks/partials/task_list_content.html', context)

    return render(request, 'tasks/task_list.html', context)


# =============================================================================
# Assign / Detail / Complete
# =============================================================================

@login_required
def task_create(request):
    """Assign a new task. Auditors cannot assign."""
    if not request.user.can_assign_tasks():
        messages.error(request, 'Auditors cannot assign tasks.')
        return redirect('tasks:task_list')

    if request.method == 'POST':
        form = TaskForm(request.POST, user=request.user)
        if form.is_valid():
            data = form.cleaned_data
            try:
                task = create_task(
                    assigned_by=request.user,
                    assigned_to=data['assigned_to'],
                    title=data['title'],
                    due_date=data['due_date'],
                    description=data.get('description', ''),
                    start_date=data.get('start_date'),
                    priority=data.get('priority') or Task.Priority.MEDIUM,
                    recurring=data.get('recurring') or Task.Recurring.NONE,
                    recurring_days=data.get('recurring_days'),
                    attachment_required=data.get('attachment_required', False),
                    attachment_type=data.get('attachment_type', ''),
                    attachment_description=data.get('attachment_description', ''),
                )
                messages.success(request, 'Task assigned successfully!')
                if task.is_holiday:
                    messages.warning(request, 'The due date is a holiday.')
                return redirect('tasks:task_detail', pk=task.pk)

            except PermissionDenied as e:
                messages.error(request, str(e))
            except ValidationError as e:
                form.add_error(None, e)
    else:
        form = TaskForm(user=request.user)

    return render(request, 'tasks/task_form.html', {'form': form})


@login_required
def task_detail(request, pk):
    task = get_object_or_404(
        Task.objects.select_related('assigned_to', 'assigned_by', 'parent_task'),
        pk=pk
    )

    if not can_view_task(request.user, task):
        messages.error(request, 'You do not have permission to view this task.')
        return redirect('tasks:task_list')

    return render(request, 'tasks/task_detail.html', {
        'task': task,
        'complete_form': TaskCompleteForm(task=task),
        'audit_form': AuditForm(),
        'can_complete': can_complete_task(request.user, task),
        'can_audit': can_audit_task(request.user, task),
        'can_request_removal': can_request_removal(request.user, task),
    })


@login_required
@require_POST
def task_complete(request, pk):
    task = get_object_or_404(Task, pk=pk)
    form = TaskCompleteForm(request.POST, task=task)

    if form.is_valid():
        try:
            complete_task(
                task,
                request.user,
                attachment_url=form.cleaned_data.get('attachment_url', ''),
                attachment_text=form.cleaned_data.get('attachment_text', ''),
            )
            messages.success(request, f'"{task.title}" marked as completed.')
        except PermissionDenied as e:
            messages.error(request, str(e))
        except ValidationError as e:
            messages.error(request, e.messages[0])
    else:
        for error in form.non_field_errors() or ['Please enter a valid attachment.']:
            messages.error(request, error)

    if request.htmx:
        return render(request, 'tasks/partials/task_row.html', {'task': task})
    return redirect('tasks:task_detail', pk=task.pk)


# =============================================================================
# Bogus Attachment Audit
# =============================================================================

@login_required
def audit_list(request):
    """Completed tasks with a required attachment, newest first."""
    if not request.user.can_audit_tasks():
        messages.error(request, 'You do not have permission to audit tasks.')
        return redirect('tasks:task_list')

    queryset = Task.objects.filter(
        status=Task.Status.COMPLETED,
        attachment_required=True,
    ).order_by('-updated_at')

    tasks = _paginate(request, queryset)
    return render(request, 'tasks/audit_list.html', {
        'tasks': tasks,
        'page_obj': tasks,
        'audit_form': AuditForm(),
    })


@login_required
@require_POST
def task_audit(request, pk):
    task = get_object_or_404(Task, pk=pk)
    form = AuditForm(request.POST)

    if form.is_valid():
        try:
            set_audit_status(task, request.user, form.cleaned_data['audit_status'])
            messages.success(request, f'"{task.title}" marked {task.get_audit_status_display()}.')
        except PermissionDenied as e:
            messages.error(request, str(e))
        except ValidationError as e:
            messages.error(request, e.messages[0])
    else:
        messages.error(request, 'Invalid audit status.')

    if request.htmx:
        return render(request, 'tasks/partials/audit_row.html', {'task': task, 'audit_form': AuditForm()})
    return redirect('tasks:audit_list')


# =============================================================================
# Removal Requests
# =============================================================================

@login_required
def removal_request_list(request):
    """Everyone sees the requests; owners resolve the pending ones."""
    if request.method == 'POST':
        form = RemovalRequestForm(request.POST, user=request.user)
        if form.is_valid():
            try:
                create_removal_request(form.cleaned_data['task'], request.user, form.cleaned_data['reason'])
                messages.success(request, 'Removal request submitted.')
                return redirect('tasks:removal_request_list')
            except PermissionDenied as e:
                messages.error(request, str(e))
            except ValidationError as e:
                form.add_error(None, e)
    else:
        form = RemovalRequestForm(user=request.user)

    requests_page = _paginate(request, RemovalRequest.objects.select_related('task'))
    return render(request, 'tasks/removal_requests.html', {
        'removal_requests': requests_page,
        'page_obj': requests_page,
        'form': form,
        'can_resolve': request.user.can_resolve_removal_requests(),
    })


@login_required
@require_POST
def removal_request_resolve(request, pk):
    removal_request = get_object_or_404(RemovalRequest, pk=pk)
    approve = request.POST.get('decision') == 'approve'

    try:
        resolve_removal_request(removal_request, request.user, approve=approve)
        if approve:
            messages.success(request, f'"{removal_request.task_title}" removed.')
        else:
            messages.success(request, 'Removal request rejected.')
    except PermissionDenied as e:
        messages.error(request, str(e))
    except ValidationError as e:
        messages.error(request, e.messages[0])

    return redirect('tasks:removal_request_list')
