"""
Task filters using django-filter.

Provides filtering capabilities for the task table:
- Search (title, description, assignee and assigner names)
- Status filter (multi-select)
- Priority filter (multi-select)
- Assignee filter (owners and managers only)
- Due date range
"""

import django_filters
from django import forms
from django.contrib.auth import get_user_model
from django.db.models import Q

from .models import Task

User = get_user_model()

SELECT_CLASS = (
    'block w-full rounded-md border-gray-300 shadow-sm '
    'focus:border-teal-500 focus:ring-teal-500 sm:text-sm'
)
CHECKBOX_CLASS = 'h-4 w-4 rounded border-gray-300 text-teal-600 focus:ring-teal-500'

HTMX_ATTRS = {
    'hx-get': '',
    'hx-target': '#task-list-container',
    'hx-push-url': 'true',
    'hx-include': '[name]',
}


class TaskFilter(django_filters.FilterSet):
    """
    Task table filter.

    Usage in views:
        filterset = TaskFilter(request.GET, queryset=queryset, request=request)
        tasks = filterset.qs
    """

    search = django_filters.CharFilter(
        method='filter_search',
        label='Search',
        widget=forms.TextInput(attrs={
            'placeholder': 'Search tasks...',
            'class': SELECT_CLASS,
            'hx-trigger': 'keyup changed delay:300ms',
            **HTMX_ATTRS,
        })
    )

    status = django_filters.MultipleChoiceFilter(
        choices=Task.Status.choices,
        widget=forms.CheckboxSelectMultiple(attrs={'class': CHECKBOX_CLASS}),
        label='Status'
    )

    priority = django_filters.MultipleChoiceFilter(
        choices=Task.Priority.choices,
        widget=forms.CheckboxSelectMultiple(attrs={'class': CHECKBOX_CLASS}),
        label='Priority'
    )

    assigned_to = django_filters.ModelChoiceFilter(
        queryset=User.objects.filter(is_active=True),
        label='Assignee',
        empty_label='All Assignees',
        widget=forms.Select(attrs={'class': SELECT_CLASS, 'hx-trigger': 'change', **HTMX_ATTRS})
    )

    due_from = django_filters.DateFilter(
        field_name='due_date',
        lookup_expr='gte',
        label='Due From',
        widget=forms.DateInput(attrs={'type': 'date', 'class': SELECT_CLASS})
    )

    due_to = django_filters.DateFilter(
        field_name='due_date',
        lookup_expr='lte',
        label='Due To',
        widget=forms.DateInput(attrs={'type': 'date', 'class': SELECT_CLASS})
    )

    class Meta:
        model = Task
        fields = ['status', 'priority', 'assigned_to']

    def __init__(self, data=None, queryset=None, *, request=None, **kwargs):
        super().__init__(data, queryset, request=request, **kwargs)

        # Only owners and managers filter by assignee
        if request and request.user.is_authenticated:
            if request.user.can_view_all_tasks():
                self.filters['assigned_to'].queryset = User.objects.filter(
                    is_active=True
                ).order_by('name')
            else:
                self.filters['assigned_to'].queryset = User.objects.none()

    def filter_search(self, queryset, name, value):
        """Case-insensitive partial match on title, description and names."""
        if not value:
            return queryset

        return queryset.filter(
            Q(title__icontains=value) |
            Q(description__icontains=value) |
            Q(assigned_to_name__icontains=value) |
            Q(assigned_by_name__icontains=value)
        )
