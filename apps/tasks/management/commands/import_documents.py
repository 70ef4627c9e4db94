"""
Management command to import a JSON export of the document store.

The file holds one list per collection:
    {"users": [...], "holidays": [...], "absences": [...],
     "tasks": [...], "removal_requests": [...]}
Every document carries its original "id"; references between documents
are re-mapped to the new primary keys. Everything is imported in one
transaction.

Usage:
    python manage.py import_documents export.json
"""
import json
import logging

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from apps.attendance.models import Holiday
from apps.tasks.documents import (
    decode_absence, decode_holiday, decode_removal_request, decode_task, decode_user,
)
from apps.tasks.models import Task

logger = logging.getLogger(__name__)


def _save(instance):
    """Save ``instance`` and restore its exported timestamps."""
    timestamps = {
        field: getattr(instance, field, None)
        for field in ('created_at', 'updated_at')
    }
    instance.save()
    timestamps = {field: value for field, value in timestamps.items() if value is not None}
    if timestamps:
        type(instance).objects.filter(pk=instance.pk).update(**timestamps)
    return instance


class Command(BaseCommand):
    help = 'Import users, holidays, absences, tasks and removal requests from a JSON export'

    def add_arguments(self, parser):
        parser.add_argument('path', help='Path to the JSON export')

    def handle(self, *args, **options):
        try:
            with open(options['path'], encoding='utf-8') as f:
                export = json.load(f)
        except (OSError, ValueError) as e:
            raise CommandError(f"Cannot read {options['path']}: {e}") from e

        User = get_user_model()
        user_ids = {}
        task_ids = {}
        counts = {}

        with transaction.atomic():
            for doc in export.get('users', []):
                existing = User.objects.filter(email__iexact=doc.get('email', '')).first()
                user = existing or _save(decode_user(doc))
                user_ids[doc.get('id')] = user.pk
            counts['users'] = len(user_ids)

            holidays = 0
            for doc in export.get('holidays', []):
                holiday = decode_holiday(doc)
                if Holiday.objects.filter(date=holiday.date).exists():
                    logger.warning("Skipping holiday %s: %s is already a holiday", doc.get('id'), holiday.date)
                    continue
                _save(holiday)
                holidays += 1
            counts['holidays'] = holidays

            absences = 0
            for doc in export.get('absences', []):
                absence = decode_absence(doc, user_ids)
                if absence.user_id is None:
                    logger.warning("Skipping absence %s: unknown user %s", doc.get('id'), doc.get('user_id'))
                    continue
                _save(absence)
                absences += 1
            counts['absences'] = absences

            # Parents may appear after their instances; link them once all exist
            parents = {}
            for doc in export.get('tasks', []):
                task = _save(decode_task(doc, user_ids))
                task_ids[doc.get('id')] = task.pk
                if doc.get('parent_task_id'):
                    parents[task.pk] = doc['parent_task_id']
            for pk, parent_doc_id in parents.items():
                Task.objects.filter(pk=pk).update(parent_task_id=task_ids.get(parent_doc_id))
            counts['tasks'] = len(task_ids)

            removal_requests = [
                _save(decode_removal_request(doc, user_ids, task_ids))
                for doc in export.get('removal_requests', [])
            ]
            counts['removal_requests'] = len(removal_requests)

        for collection, count in counts.items():
            self.stdout.write(self.style.SUCCESS(f'✓ Imported {count} {collection.replace("_", " ")}'))
