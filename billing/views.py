# billing/views.py
"""
BILLING API VIEWS - Payment recorder, reconciliation and finance totals
"""
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.decorators.permissions import require_organization, require_permission

from .models import Payment
from .serializers import (
    EnrollmentBalanceSerializer,
    PaymentAmountSerializer,
    PaymentSerializer,
    PaymentStatusSerializer,
    RecordPaymentSerializer,
)
from .services import FinanceService, PaymentService

logger = logging.getLogger(__name__)


# ============ PAYMENTS ============

@api_view(['GET', 'POST'])
@require_organization
@require_permission('finance.record_payment')
def payment_list_view(request):
    """List payments (?status=&enrollment_id=) or record a new one."""
    if request.method == 'POST':
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        payment = PaymentService.record_payment(
            request.organization,
            data.get('enrollment_id'),
            data['amount'],
            data['payment_method'],
            date=data.get('date'),
            recorded_by=request.user,
        )
        return Response({
            'success': True,
            'message': 'Payment recorded',
            'payment': PaymentSerializer(payment).data,
        }, status=201)

    payments = Payment.objects.filter(organization=request.organization)
    status = request.query_params.get('status')
    if status:
        payments = payments.filter(status=status)
    enrollment_id = request.query_params.get('enrollment_id')
    if enrollment_id:
        payments = payments.filter(enrollment_id=enrollment_id)

    return Response({'success': True, 'payments': PaymentSerializer(payments, many=True).data})


@api_view(['PATCH', 'DELETE'])
@require_organization
@require_permission('finance.record_payment')
def payment_detail_view(request, payment_id):
    """Correct the amount of a payment or delete it."""
    payment = PaymentService.get_payment(request.organization, payment_id)

    if request.method == 'DELETE':
        PaymentService.delete_payment(payment)
        return Response({'success': True, 'message': 'Payment deleted'})

    serializer = PaymentAmountSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    payment = PaymentService.update_amount(payment, serializer.validated_data['amount'])
    return Response({'success': True, 'payment': PaymentSerializer(payment).data})


@api_view(['POST'])
@require_organization
@require_permission('finance.record_payment')
def payment_status_view(request, payment_id):
    """Reconciliation: deposit, clear, verify or bounce a pending payment."""
    serializer = PaymentStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    payment = PaymentService.get_payment(request.organization, payment_id)
    payment = PaymentService.update_status(payment, serializer.validated_data['status'])
    return Response({
        'success': True,
        'payment': PaymentSerializer(payment).data,
        'enrollment': {
            'id': payment.enrollment.pk,
            'paid_amount': str(payment.enrollment.paid_amount),
            'balance': str(payment.enrollment.balance),
        },
    })


# ============ RECORDER LOOKUPS ============

@api_view(['GET'])
@require_organization
@require_permission('finance.record_payment')
def enrollment_search_view(request):
    enrollments = FinanceService.search_enrollments(request.organization, request.query_params.get('q', ''))
    return Response({
        'success': True,
        'enrollments': EnrollmentBalanceSerializer(enrollments, many=True).data,
    })


@api_view(['GET'])
@require_organization
@require_permission('finance.record_payment')
def default_payment_view(request, student_id):
    """Payment form pre-filled for a student (deep link from the student page)."""
    form = FinanceService.default_payment_for_student(request.organization, student_id)
    form['amount'] = str(form['amount'])
    return Response({'success': True, 'form': form})


# ============ REPORTING ============

@api_view(['GET'])
@require_organization
@require_permission('finance.view_totals')
def finance_summary_view(request):
    session = request.query_params.get('session')
    summary = FinanceService.finance_summary(request.organization, session)
    data = {
        key: str(value) if key not in ('session', 'total_students', 'paid_count', 'unpaid_count') else value
        for key, value in summary.items()
    }
    return Response({'success': True, 'summary': data})
