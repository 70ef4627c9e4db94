"""
Shared fixtures: one member per role and a task factory.
"""

from datetime import date

import pytest

from apps.accounts.models import User
from apps.tasks.models import Task


def _member(email, name, role, **extra):
    return User.objects.create_user(
        email=email, password='test-pass-123', name=name, role=role, **extra
    )


@pytest.fixture
def owner(db):
    return _member('owner@example.com', 'Olivia Owner', User.Role.OWNER, city='Mumbai')


@pytest.fixture
def manager(db):
    return _member('manager@example.com', 'Manav Manager', User.Role.MANAGER, city='Delhi')


@pytest.fixture
def doer(db):
    return _member(
        'doer@example.com', 'Dev Doer', User.Role.DOER,
        city='Pune', phone='98765 43210',
    )


@pytest.fixture
def other_doer(db):
    return _member('doer2@example.com', 'Diya Doer', User.Role.DOER, city='Surat')


@pytest.fixture
def auditor(db):
    return _member('auditor@example.com', 'Anu Auditor', User.Role.AUDITOR)


@pytest.fixture
def make_task(db):
    """Create a Task row; assignee and assigner names are filled from the users."""
    def factory(assigned_to=None, assigned_by=None, **fields):
        fields.setdefault('title', 'File GST return')
        fields.setdefault('due_date', date(2024, 3, 1))
        if assigned_to is not None:
            fields.setdefault('assigned_to_name', assigned_to.name)
            fields.setdefault('assigned_to_city', assigned_to.city)
        if assigned_by is not None:
            fields.setdefault('assigned_by_name', assigned_by.name)
        return Task.objects.create(assigned_to=assigned_to, assigned_by=assigned_by, **fields)
    return factory
