"""
Service layer for accounts app.

- create_member: add an approved member with a hashed password
- remove_member: delete a member (their tasks keep the denormalized names)
- seed_demo_users: one approved account per role for a fresh install
"""

import logging

from django.contrib.auth import get_user_model
from django.core.exceptions import PermissionDenied, ValidationError
from django.db import transaction

logger = logging.getLogger(__name__)

User = get_user_model()

DEMO_USERS = [
    {
        'name': 'Owner User',
        'email': 'owner@whiterock.co.in',
        'role': 'owner',
        'city': 'Mumbai',
        'phone': '+919876543210',
    },
    {
        'name': 'Manager User',
        'email': 'manager@whiterock.co.in',
        'role': 'manager',
        'city': 'Delhi',
        'phone': '+919876543211',
    },
    {
        'name': 'Doer User',
        'email': 'doer@whiterock.co.in',
        'role': 'doer',
        'city': 'Bangalore',
        'phone': '+919876543212',
    },
    {
        'name': 'Auditor User',
        'email': 'auditor@whiterock.co.in',
        'role': 'auditor',
        'city': 'Chennai',
        'phone': '+919876543213',
    },
]


def create_member(created_by, name, email, password, role, city='', phone=''):
    """
    Create an approved member.

    Raises:
        PermissionDenied: If created_by cannot manage members
        ValidationError: If required fields are missing
    """
    if not created_by.can_manage_members():
        raise PermissionDenied("Only owners and managers can add members.")

    if not name or not name.strip():
        raise ValidationError("Name is required.")
    if not email or not password:
        raise ValidationError("Email and password are required.")
    if role not in User.Role.values:
        raise ValidationError(f"Invalid role: {role}")

    user = User.objects.create_user(
        email=email,
        password=password,
        name=name.strip(),
        role=role,
        city=(city or '').strip(),
        phone=(phone or '').strip(),
        approved=True,
    )
    logger.info('Member %s (%s) added by %s', user.email, user.role, created_by.email)
    return user


def remove_member(removed_by, member):
    """
    Delete a member.

    Raises:
        PermissionDenied: If removed_by cannot manage members or removes themselves
    """
    if not removed_by.can_manage_members():
        raise PermissionDenied("Only owners and managers can remove members.")
    if removed_by.pk == member.pk:
        raise PermissionDenied("You cannot remove yourself.")

    email = member.email
    with transaction.atomic():
        member.delete()
    logger.info('Member %s removed by %s', email, removed_by.email)


def seed_demo_users(password):
    """
    Create the demo accounts that do not exist yet.

    Returns:
        list of created User instances
    """
    created = []
    with transaction.atomic():
        for data in DEMO_USERS:
            if User.objects.filter(email__iexact=data['email']).exists():
                continue
            created.append(User.objects.create_user(password=password, approved=True, **data))
    return created
