"""
Task management models.

Models:
- Task: One unit of work; recurring templates and their dated instances
  are both Task rows, linked through parent_task
- RemovalRequest: A member's request to delete one of their own tasks
"""

from django.db import models
from django.conf import settings
from django.utils import timezone


WEEKDAY_CHOICES = [
    (0, 'Mon'),
    (1, 'Tue'),
    (2, 'Wed'),
    (3, 'Thu'),
    (4, 'Fri'),
    (5, 'Sat'),
    (6, 'Sun'),
]


class Task(models.Model):
    """
    Main Task model.

    A task with recurring=daily is a template: it is never completed
    itself, the scheduler creates one instance per matching weekday with
    parent_task pointing back at it.

    Status is advisory. Whether a task is overdue is decided from
    due_date against today, never from the stored 'overdue' value.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        IN_PROGRESS = 'in_progress', 'In Progress'
        COMPLETED = 'completed', 'Completed'
        OVERDUE = 'overdue', 'Overdue'
        CANCELLED = 'cancelled', 'Cancelled'

    class Priority(models.TextChoices):
        LOW = 'low', 'Low'
        MEDIUM = 'medium', 'Medium'
        HIGH = 'high', 'High'
        URGENT = 'urgent', 'Urgent'

    class Recurring(models.TextChoices):
        NONE = 'none', 'None'
        DAILY = 'daily', 'Daily'
        WEEKLY = 'weekly', 'Weekly'
        FORTNIGHTLY = 'fortnightly', 'Fortnightly'
        MONTHLY = 'monthly', 'Monthly'
        QUARTERLY = 'quarterly', 'Quarterly'
        HALF_YEARLY = 'half_yearly', 'Half Yearly'
        YEARLY = 'yearly', 'Yearly'

    class AttachmentType(models.TextChoices):
        MEDIA = 'media', 'Media'
        TEXT = 'text', 'Text'

    class AuditStatus(models.TextChoices):
        PENDING = 'pending', 'Pending'
        AUDITED = 'audited', 'Audited'
        BOGUS = 'bogus', 'Bogus'
        UNCLEAR = 'unclear', 'Unclear'

    # Statuses that still need work
    OPEN_STATUSES = [Status.PENDING, Status.IN_PROGRESS, Status.OVERDUE]
    # Statuses that can become overdue
    OVERDUE_STATUSES = [Status.PENDING, Status.OVERDUE]

    # Core fields
    title = models.CharField(max_length=255)
    description = models.TextField(blank=True)

    start_date = models.DateField(null=True, blank=True)
    due_date = models.DateField(db_index=True)

    priority = models.CharField(
        max_length=10,
        choices=Priority.choices,
        default=Priority.MEDIUM,
        db_index=True,
    )
    status = models.CharField(
        max_length=15,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )

    # Recurrence
    recurring = models.CharField(
        max_length=15,
        choices=Recurring.choices,
        default=Recurring.NONE,
        db_index=True,
    )
    recurring_days = models.JSONField(
        default=list,
        blank=True,
        help_text='Weekday codes 0=Mon..6=Sun; used when recurring is daily'
    )

    # Attachment requirement and completion evidence
    attachment_required = models.BooleanField(default=False)
    attachment_type = models.CharField(
        max_length=10,
        choices=AttachmentType.choices,
        blank=True,
    )
    attachment_description = models.CharField(max_length=255, blank=True)
    attachment_url = models.URLField(max_length=500, blank=True)
    attachment_text = models.TextField(blank=True)

    # Relationships (names and city are denormalized for display)
    assigned_to = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='assigned_tasks',
    )
    assigned_to_name = models.CharField(max_length=150, blank=True)
    assigned_to_city = models.CharField(max_length=100, blank=True)
    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_tasks',
    )
    assigned_by_name = models.CharField(max_length=150, blank=True)
    parent_task = models.ForeignKey(
        'self',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='instances',
        help_text='Recurring template this instance was generated from'
    )

    is_holiday = models.BooleanField(
        default=False,
        help_text='Due date was a known holiday when the task was created'
    )

    # Audit of completion evidence
    audit_status = models.CharField(
        max_length=10,
        choices=AuditStatus.choices,
        default=AuditStatus.PENDING,
    )
    audited_at = models.DateTimeField(null=True, blank=True)
    audited_by = models.CharField(max_length=150, blank=True)

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = 'task'
        verbose_name_plural = 'tasks'
        ordering = ['-updated_at']
        indexes = [
            models.Index(fields=['assigned_to', 'status'], name='tasks_assignee_status_idx'),
            models.Index(fields=['assigned_by', 'status'], name='tasks_assigner_status_idx'),
            models.Index(fields=['due_date', 'status'], name='tasks_due_status_idx'),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=['parent_task', 'due_date'],
                name='unique_instance_per_template_day',
            ),
        ]

    def __str__(self):
        return f"{self.title} (due {self.due_date})"

    # ==========================================================================
    # Status Properties
    # ==========================================================================

    @property
    def is_template(self):
        return self.recurring == self.Recurring.DAILY

    @property
    def is_completed(self):
        return self.status == self.Status.COMPLETED

    def is_overdue_on(self, today):
        """Past due and still open on ``today``; templates never are."""
        if self.is_template:
            return False
        return self.status in self.OVERDUE_STATUSES and self.due_date < today

    @property
    def is_overdue(self):
        return self.is_overdue_on(timezone.localdate())

    @property
    def needs_audit(self):
        return (
            self.is_completed
            and self.attachment_required
            and self.audit_status == self.AuditStatus.PENDING
        )

    def get_recurring_days_display(self):
        labels = dict(WEEKDAY_CHOICES)
        return ', '.join(labels[day] for day in sorted(self.recurring_days or []) if day in labels)


class RemovalRequest(models.Model):
    """
    Request to delete a task, resolved by an owner.

    Approval deletes the task; the request keeps the title for history.
    """

    class Status(models.TextChoices):
        PENDING = 'pending', 'Pending'
        APPROVED = 'approved', 'Approved'
        REJECTED = 'rejected', 'Rejected'

    task = models.ForeignKey(
        Task,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='removal_requests',
    )
    task_title = models.CharField(max_length=255)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='removal_requests',
    )
    requested_by_name = models.CharField(max_length=150, blank=True)
    reason = models.TextField()
    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    resolved_at = models.DateTimeField(null=True, blank=True)
    resolved_by = models.CharField(max_length=150, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'removal request'
        verbose_name_plural = 'removal requests'
        ordering = ['-created_at']

    def __str__(self):
        return f"Removal of '{self.task_title}' ({self.get_status_display()})"

    @property
    def is_pending(self):
        return self.status == self.Status.PENDING
