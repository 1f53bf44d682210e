# students/models.py
"""
STUDENT MODELS - Student records with their generated login credentials
"""
import logging
import re

from django.db import models

# SHARED IMPORTS
from shared.constants import STUDENTS_COLLECTION, StatusChoices

logger = logging.getLogger(__name__)


def normalize_phone(phone) -> str:
    """Digits only, for duplicate detection ("06 12-34" == "061234")."""
    return re.sub(r'\D', '', phone or '')


class Student(models.Model):
    """
    A learner of the academy.

    login_info:        {"username", "email", "initialPassword", "uid"}
    parent_login_info: {"email", "initialPassword", "uid"}

    Initial passwords are kept in plain text for one-time display on the
    credentials card.
    """
    STATUS_CHOICES = (
        (StatusChoices.ACTIVE, 'Active'),
        (StatusChoices.INACTIVE, 'Inactive'),
    )

    organization = models.ForeignKey(
        "core.Organization",
        on_delete=models.CASCADE,
        related_name='students',
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default='', help_text="Parent contact email")
    parent_phone = models.CharField(max_length=30, blank=True, default='')
    # Digits of parent_phone, kept in sync by save() for duplicate lookups
    parent_phone_digits = models.CharField(max_length=30, blank=True, default='', editable=False)
    parent_name = models.CharField(max_length=255, blank=True, default='')
    address = models.CharField(max_length=500, blank=True, default='')
    school = models.CharField(max_length=255, blank=True, default='')
    birth_date = models.DateField(null=True, blank=True)
    medical_info = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=StatusChoices.ACTIVE)

    login_info = models.JSONField(null=True, blank=True)
    parent_login_info = models.JSONField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = STUDENTS_COLLECTION
        ordering = ['name']
        indexes = [
            models.Index(fields=['organization', 'status'], name='students_org_status_idx'),
            models.Index(fields=['organization', 'name'], name='students_org_name_idx'),
            models.Index(fields=['organization', 'parent_phone_digits'], name='students_org_phone_idx'),
        ]

    def __str__(self):
        return self.name

    def save(self, *args, **kwargs):
        self.parent_phone_digits = normalize_phone(self.parent_phone)
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'parent_phone' in update_fields:
            kwargs['update_fields'] = {*update_fields, 'parent_phone_digits'}
        super().save(*args, **kwargs)

    @property
    def is_active(self) -> bool:
        return self.status == StatusChoices.ACTIVE

    @property
    def normalized_phone(self) -> str:
        return normalize_phone(self.parent_phone)

    @property
    def has_login(self) -> bool:
        return bool(self.login_info)

    @property
    def has_parent_login(self) -> bool:
        return bool(self.parent_login_info)
