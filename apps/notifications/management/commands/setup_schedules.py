"""
Management command to set up Django-Q2 schedules for the daily jobs.

This command creates/updates the scheduled tasks required for:
- Recurring task instances (RECURRING_TASKS_CRON, default 4:30 AM IST)
- Daily due date reminders (DAILY_REMINDER_CRON, default 8:00 AM IST)

Usage:
    python manage.py setup_schedules

The command is idempotent - safe to run multiple times.
Existing schedules will be updated if their configuration changes.
"""
from django.conf import settings
from django.core.management.base import BaseCommand
from django_q.models import Schedule


SCHEDULES = [
    ('Recurring Task Instances', 'apps.notifications.tasks.create_recurring_task_instances', 'RECURRING_TASKS_CRON'),
    ('Daily Due Date Reminders', 'apps.notifications.tasks.send_daily_due_date_reminders', 'DAILY_REMINDER_CRON'),
]


class Command(BaseCommand):
    help = 'Set up Django-Q2 schedules for the daily jobs'

    def handle(self, *args, **options):
        self.stdout.write('\nSetting up Django-Q2 schedules...\n')

        schedules_created = 0
        schedules_updated = 0

        for name, func, cron_setting in SCHEDULES:
            cron = getattr(settings, cron_setting)
            _, created = Schedule.objects.update_or_create(
                name=name,
                defaults={
                    'func': func,
                    'schedule_type': Schedule.CRON,
                    'cron': cron,
                    'repeats': -1,  # Run forever
                }
            )
            if created:
                schedules_created += 1
                self.stdout.write(self.style.SUCCESS(f'✓ Created schedule: {name} ({cron})'))
            else:
                schedules_updated += 1
                self.stdout.write(self.style.WARNING(f'↻ Updated schedule: {name} ({cron})'))

        total = schedules_created + schedules_updated
        self.stdout.write('')
        self.stdout.write(
            self.style.SUCCESS(
                f'Done! {schedules_created} schedule(s) created, '
                f'{schedules_updated} schedule(s) updated. '
                f'Total: {total} schedules configured.'
            )
        )
        self.stdout.write('')
        self.stdout.write(
            self.style.NOTICE(
                f'Cron times are evaluated in {settings.TIME_ZONE}. '
                'Ensure Django-Q cluster is running: python manage.py qcluster'
            )
        )
        self.stdout.write('')
