"""
Management command to create one demo account per role.

Usage:
    python manage.py seed_demo_users --password 'change-me-now'

Existing accounts (matched by email) are left untouched.
"""
from django.core.management.base import BaseCommand

from apps.accounts.services import DEMO_USERS, seed_demo_users


class Command(BaseCommand):
    help = 'Create demo owner, manager, doer and auditor accounts'

    def add_arguments(self, parser):
        parser.add_argument('--password', required=True, help='Password for every demo account')

    def handle(self, *args, **options):
        created = seed_demo_users(options['password'])

        for user in created:
            self.stdout.write(self.style.SUCCESS(f'✓ Created {user.role}: {user.email}'))

        skipped = len(DEMO_USERS) - len(created)
        if skipped:
            self.stdout.write(self.style.WARNING(f'↻ {skipped} demo account(s) already existed'))
