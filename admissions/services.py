# admissions/services.py
"""
ADMISSIONS SERVICES - Enrollment finish, wizard storage and leads
NO circular imports, PROPER error handling, WELL LOGGED
"""
import logging
from typing import Optional, Dict, Any

from django.apps import apps
from django.db import transaction
from django.utils import timezone

# SHARED IMPORTS
from shared.constants import LeadStatus, StatusChoices
from core.exceptions import (
    DuplicateStudentError,
    NotFoundError,
    ValidationError,
    WizardValidationError,
)
from billing.methods import settle_at_enrollment, method_fields
from core.models import group_slot_label
from core.services import ProgramService
from students.services import StudentService
from users.services import AccountProvisioningService

from . import wizard
from .pricing import Quote, cleared_amount, persisted_discount

logger = logging.getLogger(__name__)

WIZARD_SESSION_KEY = 'enrollment_wizard'


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'admissions'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


# ============ WIZARD STORAGE ============

class WizardSessionStore:
    """Keeps the in-progress wizard of a staff member in their session."""

    @staticmethod
    def load(request) -> Optional[wizard.WizardState]:
        data = request.session.get(WIZARD_SESSION_KEY)
        if not data:
            return None
        return wizard.from_dict(data)

    @staticmethod
    def require(request) -> wizard.WizardState:
        state = WizardSessionStore.load(request)
        if state is None:
            raise WizardValidationError("No enrollment in progress")
        return state

    @staticmethod
    def save(request, state: wizard.WizardState) -> wizard.WizardState:
        request.session[WIZARD_SESSION_KEY] = wizard.to_dict(state)
        return state

    @staticmethod
    def clear(request) -> None:
        request.session.pop(WIZARD_SESSION_KEY, None)


# ============ ENROLLMENT SERVICE ============

class EnrollmentService:
    """Turns a completed wizard into student, enrollment and payment records."""

    @staticmethod
    def finish_enrollment(state: wizard.WizardState, organization, confirm_duplicate: bool = False,
                          created_by=None) -> wizard.Submitted:
        """
        Submit the wizard.

        1. Resolve the existing student or create a new one
        2. Provision student / parent logins (best-effort)
        3. Resolve the selected groups
        4. Create the enrollment with cash entries counted as paid
        5. Create one payment per entry

        All writes share one transaction; a failure leaves nothing behind.

        Raises:
            WizardValidationError: If the wizard is not on the payment step
            DuplicateStudentError: If a similar student exists and the
                duplicate was not confirmed
            NotFoundError: If the program or existing student is unknown
        """
        if not isinstance(state, wizard.PaymentStep):
            raise WizardValidationError("Complete the program step before finishing")

        form = state.form
        program = ProgramService.get_program(organization, form.program.program_id)

        existing_student = None
        if form.existing_student_id:
            existing_student = StudentService.get_student(organization, form.existing_student_id)
        else:
            if not form.student.name.strip():
                raise ValidationError("Student name is required")
            matches = StudentService.find_duplicates(organization, form.student.name, form.student.parent_phone)
            if matches and not confirm_duplicate:
                logger.warning(
                    f"Duplicate student declined for {form.student.name!r} in {organization.id}: "
                    f"{[m.pk for m in matches]}"
                )
                raise DuplicateStudentError(
                    matches=[
                        {'id': m.pk, 'name': m.name, 'parentPhone': m.parent_phone}
                        for m in matches
                    ]
                )

        try:
            with transaction.atomic():
                enrollment = EnrollmentService._write_enrollment(
                    state, organization, program, existing_student, created_by
                )
        except Exception as e:
            logger.error(f"Error processing enrollment in {organization.id}: {e}", exc_info=True)
            raise

        logger.info(
            f"Enrollment created: {enrollment.pk} for student {enrollment.student_id} "
            f"({enrollment.program_name}/{enrollment.pack_name}) total={enrollment.total_amount} "
            f"paid={enrollment.paid_amount} balance={enrollment.balance}"
        )
        return wizard.Submitted(enrollment_id=enrollment.pk, student_id=enrollment.student_id)

    @staticmethod
    def _write_enrollment(state: wizard.PaymentStep, organization, program, student, created_by):
        Enrollment = _get_model('Enrollment')
        Lead = _get_model('Lead')
        Payment = _get_model('Payment', 'billing')

        form = state.form
        entries = state.entries
        session = organization.get_settings().academic_year or ''

        # 1. Student
        if student is None:
            student = StudentService.create_student(organization, {
                'name': form.student.name,
                'parent_name': form.student.parent_name,
                'parent_phone': form.student.parent_phone,
                'email': form.student.email,
                'birth_date': form.student.birth_date,
                'school': form.student.school,
                'address': form.student.address,
            })

        # 2. Logins
        AccountProvisioningService.provision_enrollment_accounts(
            student,
            parent_email=form.student.email or None,
            parent_name=form.student.parent_name or student.parent_name,
            organization=organization,
        )

        # 3. Groups
        selected_grade = program.get_grade(form.program.grade_id)
        group_grade, group = program.find_group(form.program.group_id)
        grade = selected_grade or group_grade
        _, second_group = program.find_group(form.program.second_group_id)

        # 4. Enrollment
        quote = Quote.build(program, form.program.pack_name, form.negotiated_price, entries)
        initial_cleared = cleared_amount(entries)
        pack = program.get_pack(form.program.pack_name)

        enrollment = Enrollment.objects.create(
            organization=organization,
            student=student,
            student_name=student.name,
            program=program,
            program_name=program.name,
            pack_name=pack.get('name') if pack else '',
            grade_id=grade.get('id', '') if grade else '',
            grade_name=grade.get('name', '') if grade else '',
            group_id=group.get('id', '') if group else '',
            group_name=group.get('name', '') if group else '',
            group_time=group_slot_label(group) or '',
            second_group_id=second_group.get('id', '') if second_group else '',
            second_group_name=second_group.get('name', '') if second_group else '',
            second_group_time=group_slot_label(second_group) or '',
            payment_plan=form.program.payment_plan or 'full',
            total_amount=quote.negotiated_price,
            discount_amount=persisted_discount(quote.standard_tuition, quote.negotiated_price),
            paid_amount=initial_cleared,
            balance=quote.negotiated_price - initial_cleared,
            status=StatusChoices.ACTIVE,
            start_date=timezone.localdate(),
            session=session,
            lead_id=form.lead_id if form.lead_id and Lead.objects.filter(
                organization=organization, pk=form.lead_id
            ).exists() else None,
            created_by=created_by,
        )

        # 5. Payments
        for entry in entries:
            settlement = settle_at_enrollment(entry.method)
            Payment.objects.create(
                organization=organization,
                enrollment=enrollment,
                student_name=student.name,
                amount=entry.amount,
                date=entry.date,
                status=settlement.status,
                session=session,
                recorded_by=created_by,
                **method_fields(entry.method),
            )

        if enrollment.lead_id:
            Lead.objects.filter(pk=enrollment.lead_id).update(
                status=LeadStatus.CONVERTED,
                updated_at=timezone.now(),
            )

        return enrollment


# ============ LEAD SERVICE ============

class LeadService:

    LEAD_FIELDS = ('name', 'parent_name', 'phone', 'email', 'source', 'notes',
                   'selected_pack', 'selected_slot', 'status')

    @staticmethod
    def create_lead(organization, data: Dict[str, Any]) -> Any:
        Lead = _get_model('Lead')

        if not (data.get('name') or '').strip():
            raise ValidationError("Lead name is required")

        values = {field: data[field] for field in LeadService.LEAD_FIELDS if data.get(field) is not None}
        values['name'] = values['name'].strip()

        program_id = data.get('program_id')
        if program_id:
            values['program'] = ProgramService.get_program(organization, program_id)

        lead = Lead.objects.create(organization=organization, **values)
        logger.info(f"Lead created: {lead.pk} ({lead.source or 'unknown source'}) in {organization.id}")
        return lead

    @staticmethod
    def get_lead(organization, lead_id) -> Any:
        Lead = _get_model('Lead')
        try:
            lead = Lead.objects.select_related('program').filter(organization=organization, pk=lead_id).first()
        except (TypeError, ValueError):
            lead = None
        if not lead:
            raise NotFoundError("Lead not found")
        return lead

    @staticmethod
    def update_status(lead, status: str) -> Any:
        Lead = _get_model('Lead')
        if status not in dict(Lead.STATUS_CHOICES):
            raise ValidationError(f"Invalid lead status: {status}")
        lead.status = status
        lead.save(update_fields=['status', 'updated_at'])
        return lead
