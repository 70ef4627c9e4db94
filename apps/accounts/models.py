"""
Custom User model for task_tracker.

CRITICAL: AUTH_USER_MODEL points here from the first migration on.
Changing the User model after migrations is very complex.
"""

from django.contrib.auth.models import AbstractUser, BaseUserManager
from django.db import models


class UserManager(BaseUserManager):
    """
    Custom user manager where email is the unique identifier
    for authentication instead of username.
    """

    def create_user(self, email, password=None, **extra_fields):
        """Create and save a regular user with the given email and password."""
        if not email:
            raise ValueError('The Email field must be set')

        email = self.normalize_email(email).lower()
        user = self.model(email=email, **extra_fields)
        user.set_password(password)
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        """Create and save a SuperUser with the given email and password."""
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)
        extra_fields.setdefault('is_active', True)
        extra_fields.setdefault('role', User.Role.OWNER)

        if extra_fields.get('is_staff') is not True:
            raise ValueError('Superuser must have is_staff=True.')
        if extra_fields.get('is_superuser') is not True:
            raise ValueError('Superuser must have is_superuser=True.')

        return self.create_user(email, password, **extra_fields)


class User(AbstractUser):
    """
    Organization member with email authentication and role-based access.

    Roles:
    - Owner: Full access, team-wide KPI, resolves removal requests
    - Manager: Assign tasks, view all tasks, manage holidays and members
    - Doer: Assign tasks, view own tasks, complete assigned tasks
    - Auditor: Review attachments of completed tasks; cannot assign
    """

    class Role(models.TextChoices):
        OWNER = 'owner', 'Owner'
        MANAGER = 'manager', 'Manager'
        DOER = 'doer', 'Doer'
        AUDITOR = 'auditor', 'Auditor'

    # Single display name instead of first/last; email instead of username
    username = None
    first_name = None
    last_name = None

    email = models.EmailField(
        'email address',
        unique=True,
        error_messages={
            'unique': 'A user with that email already exists.',
        },
    )
    name = models.CharField(max_length=150)

    role = models.CharField(
        max_length=10,
        choices=Role.choices,
        default=Role.DOER,
        db_index=True,
    )
    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text='Free-form; normalized to 91XXXXXXXXXX before sending WhatsApp messages.',
    )
    city = models.CharField(max_length=100, blank=True)
    approved = models.BooleanField(
        default=True,
        help_text='Unapproved members cannot log in.',
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = ['name']

    class Meta:
        verbose_name = 'user'
        verbose_name_plural = 'users'
        ordering = ['name']
        indexes = [
            models.Index(fields=['role'], name='accounts_user_role_idx'),
            models.Index(fields=['is_active'], name='accounts_user_active_idx'),
        ]

    def __str__(self):
        return f"{self.get_full_name()} ({self.email})"

    def get_full_name(self):
        return self.name or self.email

    def get_short_name(self):
        return self.name.split(' ')[0] if self.name else self.email.split('@')[0]

    # ==========================================================================
    # Role Permission Methods
    # ==========================================================================

    def is_owner(self):
        return self.role == self.Role.OWNER

    def is_manager(self):
        return self.role == self.Role.MANAGER

    def is_doer(self):
        return self.role == self.Role.DOER

    def is_auditor(self):
        return self.role == self.Role.AUDITOR

    def is_manager_or_owner(self):
        """Owners and managers share the management screens."""
        return self.role in [self.Role.OWNER, self.Role.MANAGER]

    def can_assign_tasks(self):
        """Everyone except auditors can assign tasks."""
        return self.role in [self.Role.OWNER, self.Role.MANAGER, self.Role.DOER]

    def can_view_all_tasks(self):
        return self.is_manager_or_owner()

    def can_audit_tasks(self):
        return self.role in [self.Role.OWNER, self.Role.MANAGER, self.Role.AUDITOR]

    def can_view_team_kpi(self):
        return self.is_owner()

    def can_resolve_removal_requests(self):
        return self.is_owner()

    def can_manage_members(self):
        return self.is_manager_or_owner()

    def can_manage_holidays(self):
        return self.is_manager_or_owner()
