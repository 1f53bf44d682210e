# users/models.py
from django.contrib.auth.models import AbstractUser
from django.db import models
from django.conf import settings
from django.utils.translation import gettext_lazy as _
import logging

# SHARED IMPORTS - NEW ARCHITECTURE
from shared.constants import (
    USERS_COLLECTION,
    ROLES_COLLECTION,
    StatusChoices,
    RoleTypes,
)

from .managers import UserManager

logger = logging.getLogger(__name__)


class User(AbstractUser):
    """Auth account. Logs in with email; username is the generated handle."""

    username = models.CharField(
        _("username"),
        max_length=150,
        blank=True,
        null=True,
        help_text=_("Optional. 150 characters or fewer."),
    )

    email = models.EmailField(_("email address"), unique=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)

    USERNAME_FIELD = 'email'
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = 'auth_user'
        indexes = [
            models.Index(fields=['email'], name='auth_user_email_idx'),
        ]

    def __str__(self):
        return self.email


class RoleDefinition(models.Model):
    """Role -> permission-id set, edited through the permission matrix."""
    ROLE_TYPES = (
        (RoleTypes.ADMIN, 'Administrator'),
        (RoleTypes.ADMISSION_OFFICER, 'Admission Officer'),
        (RoleTypes.ACCOUNTANT, 'Accountant'),
        (RoleTypes.INSTRUCTOR, 'Instructor'),
        (RoleTypes.CONTENT_MANAGER, 'Content Manager'),
        (RoleTypes.PARENT, 'Parent'),
        (RoleTypes.STUDENT, 'Student'),
        (RoleTypes.GUEST, 'Guest'),
    )

    organization = models.ForeignKey(
        "core.Organization",
        on_delete=models.CASCADE,
        related_name='roles',
    )
    role_id = models.CharField(max_length=50, help_text="Role identifier, e.g. accountant")
    label = models.CharField(max_length=100)
    description = models.TextField(blank=True, default='')
    permissions = models.JSONField(default=list, help_text='Permission ids, e.g. ["finance.view", "students.*"]')
    is_system = models.BooleanField(default=False, help_text="System roles cannot be deleted")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = ROLES_COLLECTION
        unique_together = ['organization', 'role_id']
        ordering = ['id']

    def __str__(self):
        return f"{self.label} - {self.organization_id}"

    def has_permission(self, permission):
        """Check if role grants a permission (exact, namespace wildcard or '*')."""
        from shared.decorators.permissions import PermissionChecker
        return PermissionChecker.is_allowed(self.permissions, permission)


class UserProfile(models.Model):
    """Per-user profile document (users/{uid}) holding role and tenant."""
    STATUS_CHOICES = (
        (StatusChoices.ACTIVE, 'Active'),
        (StatusChoices.DISABLED, 'Disabled'),
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='profile',
    )
    organization = models.ForeignKey(
        "core.Organization",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='members',
    )
    email = models.EmailField()
    name = models.CharField(max_length=255, blank=True, default='')
    role = models.CharField(max_length=50, choices=RoleDefinition.ROLE_TYPES, default=RoleTypes.GUEST)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=StatusChoices.ACTIVE)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = USERS_COLLECTION
        indexes = [
            models.Index(fields=['organization', 'role'], name='users_org_role_idx'),
            models.Index(fields=['email'], name='users_email_idx'),
        ]

    def __str__(self):
        return f"{self.email} ({self.role})"

    @property
    def uid(self):
        return self.user_id

    @property
    def is_active(self) -> bool:
        return self.status == StatusChoices.ACTIVE

    def get_role_definition(self):
        if not self.organization_id:
            return None
        return RoleDefinition.objects.filter(
            organization_id=self.organization_id,
            role_id=self.role,
        ).first()
