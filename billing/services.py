# billing/services.py
"""
BILLING SERVICES - Payment recording, reconciliation and balances
NO circular imports, PROPER error handling, WELL LOGGED
"""
import logging
import datetime
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional, List

from django.apps import apps
from django.db import transaction
from django.db.models import Q, Sum, Count
from django.utils import timezone

# SHARED IMPORTS
from shared.constants import (
    CLEARED_PAYMENT_STATUSES,
    PaymentStatus,
    StatusChoices,
)
from core.exceptions import NotFoundError, PaymentRecordingError, ValidationError
from .methods import PaymentMethod, settle, method_fields

logger = logging.getLogger(__name__)

ZERO = Decimal('0.00')

# Reconciliation: status -> statuses it may move to
STATUS_TRANSITIONS = {
    PaymentStatus.CHECK_RECEIVED: (
        PaymentStatus.CHECK_DEPOSITED,
        PaymentStatus.PAID,
        PaymentStatus.CHECK_BOUNCED,
    ),
    PaymentStatus.CHECK_DEPOSITED: (
        PaymentStatus.PAID,
        PaymentStatus.CHECK_BOUNCED,
    ),
    # A rejected transfer is filed as bounced
    PaymentStatus.PENDING_VERIFICATION: (
        PaymentStatus.VERIFIED,
        PaymentStatus.CHECK_BOUNCED,
    ),
}


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'billing'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


def to_amount(value, field: str = 'amount') -> Decimal:
    """Parse a positive money amount."""
    try:
        amount = Decimal(str(value)).quantize(Decimal('0.01'))
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid {field}: {value}", details={field: value})

    if amount <= 0:
        raise ValidationError(f"{field.capitalize()} must be greater than zero", details={field: str(value)})
    return amount


def _current_session(organization) -> str:
    if organization is None:
        return ''
    return organization.get_settings().academic_year or ''


# ============ BALANCE SERVICE ============

class BalanceService:
    """Keeps enrollment.paid_amount / balance in line with cleared payments."""

    @staticmethod
    def cleared_total(enrollment) -> Decimal:
        Payment = _get_model('Payment')
        total = Payment.objects.filter(
            enrollment_id=enrollment.pk,
            status__in=CLEARED_PAYMENT_STATUSES,
        ).aggregate(total=Sum('amount'))['total']
        return total or ZERO

    @staticmethod
    @transaction.atomic
    def rebalance(enrollment) -> Any:
        """
        Recompute paid amount and balance under a row lock.

        paid_amount = sum of paid/verified payments
        balance     = total_amount - paid_amount
        """
        Enrollment = _get_model('Enrollment', 'admissions')

        locked = Enrollment.objects.select_for_update().get(pk=enrollment.pk)
        paid = BalanceService.cleared_total(locked)

        locked.paid_amount = paid
        locked.balance = locked.total_amount - paid
        locked.save(update_fields=['paid_amount', 'balance', 'updated_at'])

        enrollment.paid_amount = locked.paid_amount
        enrollment.balance = locked.balance

        logger.debug(f"Enrollment {locked.pk} rebalanced: paid={paid} balance={locked.balance}")
        return locked


# ============ PAYMENT SERVICE ============

class PaymentService:
    """Single-payment recorder and reconciliation of pending payments."""

    @staticmethod
    def get_enrollment(organization, enrollment_id, lock: bool = False) -> Any:
        """
        Raises:
            ValidationError: If no enrollment was selected
            NotFoundError: If the enrollment is not part of the organization
        """
        Enrollment = _get_model('Enrollment', 'admissions')

        if not enrollment_id:
            raise ValidationError("Please select a student/enrollment")

        queryset = Enrollment.objects.filter(organization=organization)
        if lock:
            queryset = queryset.select_for_update()

        try:
            enrollment = queryset.filter(pk=enrollment_id).first()
        except (TypeError, ValueError):
            enrollment = None

        if not enrollment:
            raise NotFoundError("Enrollment not found")
        return enrollment

    @staticmethod
    def get_payment(organization, payment_id) -> Any:
        Payment = _get_model('Payment')
        try:
            payment = Payment.objects.select_related('enrollment').filter(
                organization=organization, pk=payment_id
            ).first()
        except (TypeError, ValueError):
            payment = None

        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    @staticmethod
    @transaction.atomic
    def record_payment(organization, enrollment_id, amount, method: PaymentMethod,
                       date: Optional[datetime.date] = None, recorded_by=None) -> Any:
        """
        Record one payment against an existing enrollment.

        Cash clears at once and updates the enrollment balance; checks and
        transfers are stored and wait for reconciliation.
        """
        Payment = _get_model('Payment')

        enrollment = PaymentService.get_enrollment(organization, enrollment_id, lock=True)
        amount = to_amount(amount)
        settlement = settle(method)

        try:
            payment = Payment.objects.create(
                organization=organization,
                enrollment=enrollment,
                student_name=enrollment.student_name,
                amount=amount,
                date=date or timezone.localdate(),
                status=settlement.status,
                session=_current_session(organization),
                recorded_by=recorded_by,
                **method_fields(method),
            )
        except Exception as e:
            logger.error(f"Failed to record payment for enrollment {enrollment.pk}: {e}", exc_info=True)
            raise PaymentRecordingError(details={'enrollment': enrollment.pk})

        if settlement.clears_balance:
            BalanceService.rebalance(enrollment)

        logger.info(
            f"Payment recorded: {payment.pk} {payment.amount} {payment.method} "
            f"-> {payment.status} for enrollment {enrollment.pk}"
        )
        return payment

    @staticmethod
    @transaction.atomic
    def update_status(payment, new_status: str) -> Any:
        """
        Move a pending payment along the check / transfer lifecycle.

        Raises:
            ValidationError: If the transition is not allowed
        """
        allowed = STATUS_TRANSITIONS.get(payment.status, ())
        if new_status not in allowed:
            raise ValidationError(
                f"Cannot change payment status from {payment.status} to {new_status}",
                details={'status': payment.status, 'requested': new_status},
            )

        update_fields = ['status', 'updated_at']
        if new_status == PaymentStatus.CHECK_DEPOSITED and not payment.deposit_date:
            payment.deposit_date = timezone.localdate()
            update_fields.append('deposit_date')

        previous = payment.status
        payment.status = new_status
        payment.save(update_fields=update_fields)

        BalanceService.rebalance(payment.enrollment)

        logger.info(f"Payment {payment.pk} status {previous} -> {new_status}")
        return payment

    @staticmethod
    @transaction.atomic
    def update_amount(payment, amount) -> Any:
        payment.amount = to_amount(amount)
        payment.save(update_fields=['amount', 'updated_at'])

        BalanceService.rebalance(payment.enrollment)

        logger.info(f"Payment {payment.pk} amount changed to {payment.amount}")
        return payment

    @staticmethod
    @transaction.atomic
    def delete_payment(payment) -> None:
        """Delete a payment; a cleared one puts its amount back on the balance."""
        enrollment = payment.enrollment
        payment_id = payment.pk
        payment.delete()

        BalanceService.rebalance(enrollment)
        logger.info(f"Payment {payment_id} deleted from enrollment {enrollment.pk}")


# ============ LOOKUPS & REPORTING ============

class FinanceService:

    @staticmethod
    def search_enrollments(organization, query: str, limit: int = 10) -> List[Any]:
        """Active enrollments of active students, matched on student or program name."""
        Enrollment = _get_model('Enrollment', 'admissions')

        queryset = Enrollment.objects.filter(
            organization=organization,
            status=StatusChoices.ACTIVE,
            student__status=StatusChoices.ACTIVE,
        ).select_related('student')

        query = (query or '').strip()
        if query:
            queryset = queryset.filter(
                Q(student_name__icontains=query) | Q(program_name__icontains=query)
            )

        return list(queryset.order_by('student_name')[:limit])

    @staticmethod
    def default_payment_for_student(organization, student_id) -> Dict[str, Any]:
        """Pre-filled payment form: the student's active enrollment and its balance."""
        Enrollment = _get_model('Enrollment', 'admissions')

        form = {
            'studentId': student_id,
            'enrollmentId': None,
            'amount': ZERO,
            'method': 'cash',
            'date': timezone.localdate().isoformat(),
        }

        enrollment = Enrollment.objects.filter(
            organization=organization,
            student_id=student_id,
            status=StatusChoices.ACTIVE,
        ).order_by('-created_at').first()

        if enrollment:
            form['enrollmentId'] = enrollment.pk
            form['amount'] = enrollment.balance
        return form

    @staticmethod
    def finance_summary(organization, session: Optional[str] = None) -> Dict[str, Any]:
        """Balances of the session's active enrollments and collected revenue."""
        Enrollment = _get_model('Enrollment', 'admissions')
        Payment = _get_model('Payment')

        session = session if session is not None else _current_session(organization)

        enrollments = Enrollment.objects.filter(organization=organization, status=StatusChoices.ACTIVE)
        payments = Payment.objects.filter(organization=organization, status__in=CLEARED_PAYMENT_STATUSES)
        if session:
            enrollments = enrollments.filter(session=session)
            payments = payments.filter(session=session)

        totals = enrollments.aggregate(
            expected=Sum('total_amount'),
            paid=Sum('paid_amount'),
            outstanding=Sum('balance'),
            students=Count('id'),
            paid_count=Count('id', filter=Q(balance__lte=0)),
            unpaid_count=Count('id', filter=Q(balance__gt=0)),
        )

        expected = totals['expected'] or ZERO
        paid = totals['paid'] or ZERO
        collection_rate = (paid / expected * 100).quantize(Decimal('0.01')) if expected > 0 else ZERO

        return {
            'session': session,
            'total_expected': expected,
            'total_paid': paid,
            'total_outstanding': totals['outstanding'] or ZERO,
            'total_students': totals['students'],
            'paid_count': totals['paid_count'],
            'unpaid_count': totals['unpaid_count'],
            'collection_rate': collection_rate,
            'collected': payments.aggregate(total=Sum('amount'))['total'] or ZERO,
        }
