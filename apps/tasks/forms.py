"""
Forms for tasks app.

Includes:
- TaskForm: Assign a task (one-off or daily recurring template)
- TaskCompleteForm: Completion evidence
- AuditForm: Audit verdict for a completed task
- RemovalRequestForm: Ask an owner to remove one of your tasks
"""

from django import forms
from django.contrib.auth import get_user_model
from django.core.exceptions import ValidationError

from .models import Task, WEEKDAY_CHOICES

User = get_user_model()

FIELD_CLASS = (
    'block w-full rounded-md border-gray-300 shadow-sm '
    'focus:border-teal-500 focus:ring-teal-500 sm:text-sm'
)


class TaskForm(forms.ModelForm):
    """
    Form for assigning tasks.

    Anyone who may assign can pick any approved, active member. Weekdays
    are only meaningful for daily recurrence; attachment details only
    when an attachment is required.
    """

    recurring_days = forms.TypedMultipleChoiceField(
        choices=WEEKDAY_CHOICES,
        coerce=int,
        required=False,
        widget=forms.CheckboxSelectMultiple,
        label='Repeat on',
    )

    class Meta:
        model = Task
        fields = [
            'title', 'description', 'assigned_to', 'start_date', 'due_date',
            'priority', 'recurring', 'recurring_days',
            'attachment_required', 'attachment_type', 'attachment_description',
        ]
        widgets = {
            'title': forms.TextInput(attrs={
                'class': FIELD_CLASS,
                'placeholder': 'Enter task title',
            }),
            'description': forms.Textarea(attrs={
                'class': FIELD_CLASS,
                'rows': 4,
                'placeholder': 'Describe the task...',
            }),
            'assigned_to': forms.Select(attrs={'class': FIELD_CLASS}),
            'start_date': forms.DateInput(attrs={'type': 'date', 'class': FIELD_CLASS}),
            'due_date': forms.DateInput(attrs={'type': 'date', 'class': FIELD_CLASS}),
            'priority': forms.Select(attrs={'class': FIELD_CLASS}),
            'recurring': forms.Select(attrs={'class': FIELD_CLASS}),
            'attachment_type': forms.Select(attrs={'class': FIELD_CLASS}),
            'attachment_description': forms.TextInput(attrs={
                'class': FIELD_CLASS,
                'placeholder': 'What should the attachment show?',
            }),
        }
        labels = {
            'assigned_to': 'Assign to',
        }

    def __init__(self, *args, user=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.user = user

        self.fields['assigned_to'].queryset = User.objects.filter(
            is_active=True, approved=True
        ).order_by('name')
        self.fields['assigned_to'].required = True
        self.fields['assigned_to'].label_from_instance = lambda obj: (
            f"{obj.name} ({obj.city})" if obj.city else obj.name
        )
        self.fields['attachment_type'].required = False

    def clean(self):
        cleaned_data = super().clean()
        start_date = cleaned_data.get('start_date')
        due_date = cleaned_data.get('due_date')

        if start_date and due_date and start_date > due_date:
            self.add_error('start_date', 'Start date cannot be after the due date.')

        if cleaned_data.get('recurring') == Task.Recurring.DAILY and not cleaned_data.get('recurring_days'):
            self.add_error('recurring_days', 'Select at least one weekday.')

        return cleaned_data


class TaskCompleteForm(forms.Form):
    attachment_url = forms.URLField(
        required=False,
        max_length=500,
        widget=forms.URLInput(attrs={'class': FIELD_CLASS, 'placeholder': 'https://...'}),
        label='Attachment link',
    )
    attachment_text = forms.CharField(
        required=False,
        widget=forms.Textarea(attrs={'class': FIELD_CLASS, 'rows': 3}),
        label='Attachment text',
    )

    def __init__(self, *args, task=None, **kwargs):
        super().__init__(*args, **kwargs)
        self.task = task

    def clean(self):
        cleaned_data = super().clean()
        task = self.task
        if task is not None and task.attachment_required:
            if task.attachment_type == Task.AttachmentType.TEXT:
                if not cleaned_data.get('attachment_text'):
                    raise ValidationError('This task requires a text attachment.')
            elif not cleaned_data.get('attachment_url'):
                raise ValidationError('This task requires an attachment link.')
        return cleaned_data


class AuditForm(forms.Form):
    audit_status = forms.ChoiceField(
        choices=[
            (Task.AuditStatus.AUDITED, 'Audited'),
            (Task.AuditStatus.BOGUS, 'Bogus'),
            (Task.AuditStatus.UNCLEAR, 'Unclear'),
        ],
    )


class RemovalRequestForm(forms.Form):
    task = forms.ModelChoiceField(
        queryset=Task.objects.none(),
        widget=forms.Select(attrs={'class': FIELD_CLASS}),
        empty_label='Select a task',
    )
    reason = forms.CharField(
        widget=forms.Textarea(attrs={'class': FIELD_CLASS, 'rows': 3}),
    )

    def __init__(self, *args, user=None, **kwargs):
        super().__init__(*args, **kwargs)
        if user is not None:
            # Own incomplete tasks only
            self.fields['task'].queryset = Task.objects.filter(
                assigned_to=user
            ).exclude(
                status=Task.Status.COMPLETED
            ).order_by('due_date')
