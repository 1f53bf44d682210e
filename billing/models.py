# billing/models.py
import logging
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.core.validators import MinValueValidator
from django.db import models
from django.conf import settings

# SHARED IMPORTS
from shared.constants import (
    PAYMENTS_COLLECTION,
    CLEARED_PAYMENT_STATUSES,
    PaymentMethods,
    PaymentStatus,
)

logger = logging.getLogger(__name__)


class Payment(models.Model):
    """One payment received against an enrollment."""
    METHOD_CHOICES = (
        (PaymentMethods.CASH, 'Cash'),
        (PaymentMethods.CHECK, 'Check'),
        (PaymentMethods.TRANSFER, 'Bank Transfer'),
    )
    STATUS_CHOICES = (
        (PaymentStatus.PAID, 'Paid'),
        (PaymentStatus.PENDING_VERIFICATION, 'Pending Verification'),
        (PaymentStatus.VERIFIED, 'Verified'),
        (PaymentStatus.CHECK_RECEIVED, 'Check Received'),
        (PaymentStatus.CHECK_DEPOSITED, 'Check Deposited'),
        (PaymentStatus.CHECK_BOUNCED, 'Check Bounced'),
    )

    organization = models.ForeignKey(
        'core.Organization',
        on_delete=models.CASCADE,
        related_name='payments',
        null=True,
        blank=True,
    )
    enrollment = models.ForeignKey('admissions.Enrollment', on_delete=models.CASCADE, related_name='payments')
    student_name = models.CharField(max_length=255, blank=True, default='')
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(Decimal('0.01'))])
    date = models.DateField()
    method = models.CharField(max_length=20, choices=METHOD_CHOICES, default=PaymentMethods.CASH)
    status = models.CharField(max_length=30, choices=STATUS_CHOICES, default=PaymentStatus.PAID)

    # Check details
    check_number = models.CharField(max_length=50, blank=True, null=True)
    bank_name = models.CharField(max_length=100, blank=True, null=True)
    deposit_date = models.DateField(blank=True, null=True)
    # Transfer receipt
    proof_url = models.TextField(blank=True, null=True)

    session = models.CharField(max_length=20, blank=True, default='', help_text="Academic year, e.g. 2024-2025")
    recorded_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='recorded_payments',
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = PAYMENTS_COLLECTION
        ordering = ['-date', '-created_at']
        indexes = [
            models.Index(fields=['organization', 'status'], name='payments_org_status_idx'),
            models.Index(fields=['enrollment', 'status'], name='payments_enrollment_idx'),
            models.Index(fields=['organization', 'session'], name='payments_org_session_idx'),
        ]

    def __str__(self):
        return f"{self.student_name} - {self.amount} ({self.method}/{self.status})"

    @property
    def is_cleared(self) -> bool:
        """Counts toward the enrollment's paid amount."""
        return self.status in CLEARED_PAYMENT_STATUSES

    def clean(self):
        if self.amount is not None and self.amount <= 0:
            raise ValidationError({'amount': 'Payment amount must be positive.'})

        if self.method != PaymentMethods.CHECK and (self.check_number or self.bank_name):
            raise ValidationError({'method': 'Check details are only valid for check payments.'})

        if self.method != PaymentMethods.TRANSFER and self.proof_url:
            raise ValidationError({'method': 'Proof of transfer is only valid for transfers.'})

    def save(self, *args, **kwargs):
        self.full_clean()
        super().save(*args, **kwargs)
