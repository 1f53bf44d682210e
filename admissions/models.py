# admissions/models.py
from decimal import Decimal
import logging

from django.core.validators import MinValueValidator
from django.db import models
from django.conf import settings

# SHARED IMPORTS
from shared.constants import (
    ENROLLMENTS_COLLECTION,
    LEADS_COLLECTION,
    StatusChoices,
    LeadStatus,
)

logger = logging.getLogger(__name__)


class Lead(models.Model):
    """CRM capture record (kiosk form, walk-in, social media)."""
    STATUS_CHOICES = (
        (LeadStatus.NEW, 'New'),
        (LeadStatus.CONTACTED, 'Contacted'),
        (LeadStatus.INTERESTED, 'Interested'),
        (LeadStatus.CONVERTED, 'Converted'),
        (LeadStatus.CLOSED, 'Closed'),
    )

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='leads',
        null=True,
        blank=True,
    )
    name = models.CharField(max_length=255)
    parent_name = models.CharField(max_length=255, blank=True, default='')
    phone = models.CharField(max_length=30, blank=True, default='')
    email = models.EmailField(blank=True, default='')
    source = models.CharField(max_length=100, blank=True, default='', help_text="e.g. Facebook, Walk-in")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=LeadStatus.NEW)
    notes = models.TextField(blank=True, default='')

    # Kiosk selection
    program = models.ForeignKey(
        'core.Program',
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='leads',
    )
    selected_pack = models.CharField(max_length=100, blank=True, default='')
    selected_slot = models.CharField(max_length=100, blank=True, default='', help_text='e.g. "Wednesday 14:00"')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = LEADS_COLLECTION
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'status'], name='leads_org_status_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.status})"


class Enrollment(models.Model):
    """
    A student's registration in a program pack and group.

    Names of the student, program, grade and groups are denormalized at
    creation. balance == total_amount - paid_amount after every update
    made through billing.services.BalanceService.
    """
    STATUS_CHOICES = (
        (StatusChoices.ACTIVE, 'Active'),
        (StatusChoices.COMPLETED, 'Completed'),
        (StatusChoices.DROPPED, 'Dropped'),
    )
    PAYMENT_PLANS = (
        ('annual', 'Annual'),
        ('trimester', 'Trimester'),
        ('full', 'Full'),
    )

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='enrollments',
        null=True,
        blank=True,
    )
    student = models.ForeignKey('students.Student', on_delete=models.CASCADE, related_name='enrollments')
    student_name = models.CharField(max_length=255)
    program = models.ForeignKey('core.Program', on_delete=models.PROTECT, related_name='enrollments')
    program_name = models.CharField(max_length=200)
    pack_name = models.CharField(max_length=100, blank=True, default='')

    grade_id = models.CharField(max_length=100, blank=True, default='')
    grade_name = models.CharField(max_length=100, blank=True, default='')
    group_id = models.CharField(max_length=100, blank=True, default='')
    group_name = models.CharField(max_length=100, blank=True, default='')
    group_time = models.CharField(max_length=100, blank=True, default='')
    # Optional second ("DIY") group
    second_group_id = models.CharField(max_length=100, blank=True, default='')
    second_group_name = models.CharField(max_length=100, blank=True, default='')
    second_group_time = models.CharField(max_length=100, blank=True, default='')

    payment_plan = models.CharField(max_length=20, choices=PAYMENT_PLANS, default='full')
    total_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    discount_amount = models.DecimalField(
        max_digits=12, decimal_places=2, default=Decimal('0.00'),
        validators=[MinValueValidator(0)],
    )
    paid_amount = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))
    balance = models.DecimalField(max_digits=12, decimal_places=2, default=Decimal('0.00'))

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=StatusChoices.ACTIVE)
    start_date = models.DateField()
    session = models.CharField(max_length=20, blank=True, default='', help_text="Academic year, e.g. 2024-2025")

    lead = models.ForeignKey(Lead, on_delete=models.SET_NULL, null=True, blank=True, related_name='enrollments')
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='created_enrollments',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = ENROLLMENTS_COLLECTION
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['organization', 'status'], name='enrollments_org_status_idx'),
            models.Index(fields=['student', 'status'], name='enrollments_student_idx'),
            models.Index(fields=['organization', 'session'], name='enrollments_org_session_idx'),
        ]

    def __str__(self):
        return f"{self.student_name} - {self.program_name} ({self.pack_name})"

    @property
    def is_active(self) -> bool:
        return self.status == StatusChoices.ACTIVE

    @property
    def is_settled(self) -> bool:
        return self.balance <= 0
