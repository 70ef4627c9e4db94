"""
Attendance models.

Models:
- Holiday: Organization-wide non-working day
- Absence: A member's logged absence over an inclusive date range

Both are read as snapshots by the KPI page; a task due on a holiday, or
due while its assignee was absent, does not count for or against anyone.
"""

from django.db import models
from django.conf import settings


class Holiday(models.Model):
    date = models.DateField(unique=True)
    name = models.CharField(max_length=150)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'holiday'
        verbose_name_plural = 'holidays'
        ordering = ['date']

    def __str__(self):
        return f"{self.name} ({self.date.isoformat()})"


class Absence(models.Model):
    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='absences',
    )
    user_name = models.CharField(
        max_length=150,
        blank=True,
        help_text='Denormalized display name at the time of logging'
    )
    from_date = models.DateField()
    to_date = models.DateField(help_text='Inclusive')
    reason = models.CharField(max_length=255, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = 'absence'
        verbose_name_plural = 'absences'
        ordering = ['-from_date']
        indexes = [
            models.Index(fields=['user', 'from_date'], name='attendance_user_from_idx'),
        ]

    def __str__(self):
        return f"{self.user_name or self.user_id}: {self.from_date} to {self.to_date}"
