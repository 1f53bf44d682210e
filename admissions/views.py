# admissions/views.py
"""
ADMISSIONS API VIEWS - Enrollment wizard, pricing quotes and leads
"""
import logging

from django.db import transaction
from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.decorators.permissions import require_organization, require_permission
from shared.utils.idempotency import IdempotencyService
from core.services import ProgramService
from core.exceptions import ValidationError
from students.services import StudentService

from . import wizard
from .models import Lead
from .pricing import Quote
from .serializers import (
    EnrollmentSerializer,
    FinishSerializer,
    LeadSerializer,
    LeadStatusSerializer,
    NegotiatedPriceSerializer,
    PaymentEntrySerializer,
    ProgramFormSerializer,
    StudentFormSerializer,
    WizardStartSerializer,
    wizard_payload,
)
from .services import EnrollmentService, LeadService, WizardSessionStore

logger = logging.getLogger(__name__)


# ============ HELPER FUNCTIONS ============

def _respond(request, state, status=200):
    """Store the state and return it with live pricing."""
    WizardSessionStore.save(request, state)

    quote = None
    if isinstance(state, wizard.EDITABLE_STATES) and state.form.program.program_id:
        program = ProgramService.get_program(request.organization, state.form.program.program_id)
        quote = wizard.quote(state, program)

    return Response({'success': True, 'wizard': wizard_payload(state, quote)}, status=status)


# ============ WIZARD ============

@api_view(['GET', 'DELETE'])
@require_organization
@require_permission('students.enroll')
def wizard_view(request):
    if request.method == 'DELETE':
        WizardSessionStore.clear(request)
        return Response({'success': True})

    return _respond(request, WizardSessionStore.require(request))


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_start_view(request):
    """
    Open the wizard.

    {"student_id"}                        quick-enroll an existing student
    {"lead_id"}                           pre-filled from a CRM lead
    {"program_id", "grade_id", "group_id"} enroll straight into a group
    {}                                    blank wizard
    """
    serializer = WizardStartSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data
    organization = request.organization

    if data.get('student_id'):
        student = StudentService.get_student(organization, data['student_id'])
        state = wizard.start(existing_student_id=student.pk)
    elif data.get('lead_id'):
        lead = LeadService.get_lead(organization, data['lead_id'])
        state = wizard.seed_from_lead(lead)
    elif data.get('program_id'):
        program = ProgramService.get_program(organization, data['program_id'])
        state = wizard.seed_from_group(program, data.get('grade_id', ''), data.get('group_id', ''))
    else:
        state = wizard.start()

    logger.debug(f"Enrollment wizard opened at step {state.step} by user {request.user.id}")
    return _respond(request, state, status=201)


@api_view(['PATCH'])
@require_organization
@require_permission('students.enroll')
def wizard_student_view(request):
    serializer = StudentFormSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    state = WizardSessionStore.require(request)
    state = wizard.update_student_form(state, **serializer.validated_data)
    return _respond(request, state)


@api_view(['PATCH'])
@require_organization
@require_permission('students.enroll')
def wizard_program_view(request):
    serializer = ProgramFormSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    changes = serializer.validated_data

    if changes.get('program_id'):
        ProgramService.get_program(request.organization, changes['program_id'])

    state = WizardSessionStore.require(request)
    state = wizard.update_program_form(state, **changes)
    return _respond(request, state)


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_price_view(request):
    serializer = NegotiatedPriceSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    state = WizardSessionStore.require(request)
    state = wizard.set_negotiated_price(state, serializer.validated_data['negotiated_price'])
    return _respond(request, state)


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_next_view(request):
    state = wizard.advance(WizardSessionStore.require(request))
    return _respond(request, state)


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_back_view(request):
    state = wizard.back(WizardSessionStore.require(request))
    return _respond(request, state)


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_add_payment_view(request):
    serializer = PaymentEntrySerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    data = serializer.validated_data

    state = WizardSessionStore.require(request)
    state = wizard.add_payment(state, data['amount'], data['payment_method'], data.get('date'))
    return _respond(request, state, status=201)


@api_view(['DELETE'])
@require_organization
@require_permission('students.enroll')
def wizard_remove_payment_view(request, entry_id):
    state = wizard.remove_payment(WizardSessionStore.require(request), entry_id)
    return _respond(request, state)


@api_view(['POST'])
@require_organization
@require_permission('students.enroll')
def wizard_finish_view(request):
    """
    Submit the wizard.

    Accepts an X-Idempotency-Key header; a replayed key returns the
    enrollment created by the first request.
    """
    serializer = FinishSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    idempotency_key = IdempotencyService.get_idempotency_key(request, 'enrollment_finish')
    if idempotency_key:
        if not IdempotencyService.check_and_lock(idempotency_key):
            previous = IdempotencyService.get_result(idempotency_key)
            if previous:
                return Response(previous, status=200)
            return Response({
                'success': False,
                'error': 'IN_PROGRESS',
                'message': 'This enrollment is already being processed.',
            }, status=409)

    try:
        submitted = EnrollmentService.finish_enrollment(
            WizardSessionStore.require(request),
            request.organization,
            confirm_duplicate=serializer.validated_data['confirm_duplicate'],
            created_by=request.user,
        )
    except Exception:
        if idempotency_key:
            IdempotencyService.mark_failed(idempotency_key)
        raise

    enrollment = request.organization.enrollments.get(pk=submitted.enrollment_id)
    payload = {
        'success': True,
        'message': 'Enrollment Successful! Student account created.',
        'wizard': wizard.to_dict(submitted),
        'enrollment': EnrollmentSerializer(enrollment).data,
    }

    WizardSessionStore.clear(request)
    if idempotency_key:
        # A replay must never see an enrollment that was rolled back
        transaction.on_commit(lambda: IdempotencyService.mark_processed(idempotency_key, payload))

    return Response(payload, status=201)


# ============ PRICING ============

@api_view(['GET'])
@require_organization
@require_permission('students.enroll')
def quote_view(request):
    """Standalone price quote: ?program_id=&pack_name=&negotiated_price="""
    program_id = request.query_params.get('program_id')
    if not program_id:
        raise ValidationError("program_id is required")

    program = ProgramService.get_program(request.organization, program_id)
    quote = Quote.build(
        program,
        request.query_params.get('pack_name'),
        request.query_params.get('negotiated_price'),
    )
    return Response({'success': True, 'quote': {k: str(v) for k, v in quote.to_dict().items()}})


# ============ LEADS ============

@api_view(['GET', 'POST'])
@require_organization
@require_permission('marketing.view')
def lead_list_view(request):
    if request.method == 'GET':
        leads = Lead.objects.filter(organization=request.organization)
        status = request.query_params.get('status')
        if status:
            leads = leads.filter(status=status)
        return Response({'success': True, 'leads': LeadSerializer(leads, many=True).data})

    return _create_lead(request)


@require_permission('marketing.create')
def _create_lead(request):
    serializer = LeadSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    lead = LeadService.create_lead(request.organization, serializer.validated_data)
    return Response({'success': True, 'lead': LeadSerializer(lead).data}, status=201)


@api_view(['PATCH'])
@require_organization
@require_permission('marketing.create')
def lead_status_view(request, lead_id):
    serializer = LeadStatusSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    lead = LeadService.get_lead(request.organization, lead_id)
    lead = LeadService.update_status(lead, serializer.validated_data['status'])
    return Response({'success': True, 'lead': LeadSerializer(lead).data})
