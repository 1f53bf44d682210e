# core/models.py
"""
CORE MODELS - Tenancy and the program catalogue
Consistent field naming, proper relationships, well documented
"""
import logging
from decimal import Decimal, InvalidOperation
from typing import Optional, List, Dict, Any, Tuple

from django.db import models
from django.core.exceptions import ValidationError

# SHARED IMPORTS
from shared.constants import (
    ORGANIZATIONS_COLLECTION,
    ORGANIZATION_SETTINGS_COLLECTION,
    PROGRAMS_COLLECTION,
    DEFAULT_LOGIN_DOMAIN,
    REGULAR_PROGRAM,
    HOLIDAY_CAMP,
    WORKSHOP,
    StatusChoices,
)

logger = logging.getLogger(__name__)


# ============ ORGANIZATION MODEL ============

class Organization(models.Model):
    """A customer academy - the isolated data partition for multi-tenancy."""
    STATUS_CHOICES = (
        (StatusChoices.ACTIVE, 'Active'),
        (StatusChoices.DISABLED, 'Disabled'),
    )

    id = models.SlugField(primary_key=True, max_length=100)
    name = models.CharField(max_length=255, help_text="Academy display name")
    slug = models.SlugField(max_length=100, unique=True)
    owner_email = models.EmailField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=StatusChoices.ACTIVE)
    modules = models.JSONField(default=dict, blank=True, help_text="Enabled product modules")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = ORGANIZATIONS_COLLECTION
        ordering = ['name']

    def __str__(self):
        return f"{self.name} ({self.id})"

    @property
    def is_active(self) -> bool:
        return self.status == StatusChoices.ACTIVE

    def get_settings(self) -> 'OrganizationSettings':
        """Tenant settings document, created with defaults on first access."""
        organization_settings, created = OrganizationSettings.objects.get_or_create(
            organization=self,
            defaults={'academy_name': self.name},
        )
        if created:
            logger.info(f"Created default settings for organization {self.id}")
        return organization_settings


class OrganizationSettings(models.Model):
    """Global settings of one organization (organizations/{id}/settings/global)."""
    LANGUAGES = (
        ('en', 'English'),
        ('fr', 'French'),
    )

    organization = models.OneToOneField(
        Organization,
        on_delete=models.CASCADE,
        related_name='settings',
        primary_key=True,
    )
    academy_name = models.CharField(max_length=255, blank=True, default='')
    academic_year = models.CharField(
        max_length=20,
        blank=True,
        default='',
        help_text="Session tag applied to financial records, e.g. 2024-2025"
    )
    login_domain = models.CharField(
        max_length=255,
        default=DEFAULT_LOGIN_DOMAIN,
        help_text="Domain of auto-generated student login emails"
    )
    language = models.CharField(max_length=2, choices=LANGUAGES, default='en')
    receipt_contact = models.CharField(max_length=255, blank=True, default='')
    receipt_footer = models.TextField(blank=True, default='')

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = ORGANIZATION_SETTINGS_COLLECTION
        verbose_name = 'Organization Settings'
        verbose_name_plural = 'Organization Settings'

    def __str__(self):
        return f"Settings - {self.organization_id}"


# ============ PROGRAM MODEL ============

class Program(models.Model):
    """
    A sellable program with its priced packs and its grade/group timetable.

    packs:  [{"name", "price", "priceAnnual", "priceTrimester", "promoPrice",
              "workshopsPerWeek"}]
    grades: [{"id", "name", "groups": [{"id", "name", "day", "time"}]}]
    """
    PROGRAM_TYPES = (
        (REGULAR_PROGRAM, 'Regular Program'),
        (HOLIDAY_CAMP, 'Holiday Camp'),
        (WORKSHOP, 'Workshop'),
    )
    STATUS_CHOICES = (
        (StatusChoices.ACTIVE, 'Active'),
        (StatusChoices.ARCHIVED, 'Archived'),
    )

    organization = models.ForeignKey(
        Organization,
        on_delete=models.CASCADE,
        related_name='programs',
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=200)
    type = models.CharField(max_length=50, choices=PROGRAM_TYPES, default=REGULAR_PROGRAM)
    description = models.TextField(blank=True, default='')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=StatusChoices.ACTIVE)
    packs = models.JSONField(default=list, blank=True)
    grades = models.JSONField(default=list, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = PROGRAMS_COLLECTION
        ordering = ['name']
        indexes = [
            models.Index(fields=['organization', 'status'], name='programs_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.type})"

    @property
    def is_regular(self) -> bool:
        return self.type == REGULAR_PROGRAM

    def get_pack(self, pack_name: Optional[str]) -> Optional[Dict[str, Any]]:
        if not pack_name:
            return None
        for pack in self.packs or []:
            if pack.get('name') == pack_name:
                return pack
        return None

    def get_grade(self, grade_id: Optional[str]) -> Optional[Dict[str, Any]]:
        if not grade_id:
            return None
        for grade in self.grades or []:
            if grade.get('id') == grade_id:
                return grade
        return None

    def find_group(self, group_id: Optional[str]) -> Tuple[Optional[Dict], Optional[Dict]]:
        """Locate a group by id across all grades. Returns (grade, group)."""
        if not group_id:
            return None, None
        for grade in self.grades or []:
            for group in grade.get('groups', []):
                if group.get('id') == group_id:
                    return grade, group
        return None, None

    def find_group_by_slot(self, slot: Optional[str]) -> Tuple[Optional[Dict], Optional[Dict]]:
        """Match a slot string against "{day} {time}" or the group name."""
        if not slot:
            return None, None
        for grade in self.grades or []:
            for group in grade.get('groups', []):
                if group_slot_label(group) == slot or group.get('name') == slot:
                    return grade, group
        return None, None

    def pack_names(self) -> List[str]:
        return [pack.get('name') for pack in self.packs or [] if pack.get('name')]

    def clean(self):
        """Validate the embedded pack documents."""
        seen = set()
        for pack in self.packs or []:
            name = pack.get('name')
            if not name:
                raise ValidationError({'packs': 'Every pack needs a name.'})
            if name in seen:
                raise ValidationError({'packs': f'Duplicate pack name: {name}'})
            seen.add(name)
            for field in ('price', 'priceAnnual', 'priceTrimester', 'promoPrice'):
                value = pack.get(field)
                if value in (None, ''):
                    continue
                try:
                    if Decimal(str(value)) < 0:
                        raise ValidationError({'packs': f'{name}: {field} cannot be negative.'})
                except InvalidOperation:
                    raise ValidationError({'packs': f'{name}: {field} must be a number.'})


def group_slot_label(group: Optional[Dict[str, Any]]) -> Optional[str]:
    """Display time of a group, e.g. "Wednesday 14:00"."""
    if not group:
        return None
    return f"{group.get('day', '')} {group.get('time', '')}"
