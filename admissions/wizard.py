# admissions/wizard.py
"""
ENROLLMENT WIZARD - Step state machine

    StudentStep -> ProgramStep -> PaymentStep -> Submitted

States are immutable; every transition returns a new state or raises
WizardValidationError and leaves the current one untouched. States
serialize to plain dicts so they can live in the session between requests.
"""
import datetime
import uuid
from dataclasses import dataclass, field, replace, asdict
from decimal import Decimal
from typing import Optional, Tuple, Union, Dict, Any

from django.utils import timezone
from django.utils.dateparse import parse_date

from billing.methods import PaymentMethod, Cash, parse_method, method_to_dict
from core.exceptions import WizardValidationError
from .pricing import Quote, to_decimal


# ============ FORMS ============

@dataclass(frozen=True)
class StudentForm:
    name: str = ''
    parent_name: str = ''
    parent_phone: str = ''
    email: str = ''
    birth_date: str = ''
    school: str = ''
    address: str = ''


@dataclass(frozen=True)
class ProgramForm:
    program_id: Optional[int] = None
    pack_name: str = ''
    grade_id: str = ''
    group_id: str = ''
    second_group_id: str = ''
    payment_plan: str = 'full'


@dataclass(frozen=True)
class WizardForm:
    student: StudentForm = field(default_factory=StudentForm)
    program: ProgramForm = field(default_factory=ProgramForm)
    existing_student_id: Optional[int] = None
    # None means "use the standard tuition of the selected pack"
    negotiated_price: Optional[Decimal] = None
    lead_id: Optional[int] = None


@dataclass(frozen=True)
class PaymentEntry:
    amount: Decimal
    method: PaymentMethod = field(default_factory=Cash)
    date: datetime.date = field(default_factory=timezone.localdate)
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


# ============ STATES ============

@dataclass(frozen=True)
class StudentStep:
    form: WizardForm
    step = 1


@dataclass(frozen=True)
class ProgramStep:
    form: WizardForm
    step = 2


@dataclass(frozen=True)
class PaymentStep:
    form: WizardForm
    entries: Tuple[PaymentEntry, ...] = ()
    step = 3


@dataclass(frozen=True)
class Submitted:
    enrollment_id: int
    student_id: Optional[int] = None
    step = 4


WizardState = Union[StudentStep, ProgramStep, PaymentStep, Submitted]
EDITABLE_STATES = (StudentStep, ProgramStep, PaymentStep)


# ============ TRANSITIONS ============

def start(existing_student_id: Optional[int] = None, student: Optional[StudentForm] = None,
          program: Optional[ProgramForm] = None, lead_id: Optional[int] = None) -> WizardState:
    """Quick-enroll of an existing student skips the student step."""
    form = WizardForm(
        student=student or StudentForm(),
        program=program or ProgramForm(),
        existing_student_id=existing_student_id,
        lead_id=lead_id,
    )
    if existing_student_id:
        return ProgramStep(form)
    return StudentStep(form)


def advance(state: WizardState) -> WizardState:
    if isinstance(state, StudentStep):
        if not state.form.existing_student_id and not state.form.student.name.strip():
            raise WizardValidationError("Student name is required", details={'field': 'name'})
        return ProgramStep(state.form)

    if isinstance(state, ProgramStep):
        if not state.form.program.program_id:
            raise WizardValidationError("Please select a program", details={'field': 'program_id'})
        return PaymentStep(state.form)

    if isinstance(state, PaymentStep):
        raise WizardValidationError("Use finish to submit the enrollment")

    raise WizardValidationError("Enrollment already submitted")


def back(state: WizardState) -> WizardState:
    if isinstance(state, PaymentStep):
        return ProgramStep(state.form)
    if isinstance(state, ProgramStep):
        return StudentStep(state.form)
    if isinstance(state, StudentStep):
        return state
    raise WizardValidationError("Enrollment already submitted")


def _with_form(state: WizardState, form: WizardForm) -> WizardState:
    if not isinstance(state, EDITABLE_STATES):
        raise WizardValidationError("Enrollment already submitted")
    return replace(state, form=form)


def update_student_form(state: WizardState, **changes) -> WizardState:
    _require_editable(state)
    student = replace(state.form.student, **changes)
    return _with_form(state, replace(state.form, student=student))


def update_program_form(state: WizardState, **changes) -> WizardState:
    """A new program or pack drops the negotiated price back to standard tuition."""
    _require_editable(state)
    current = state.form.program
    program = replace(current, **changes)

    form = replace(state.form, program=program)
    if program.program_id != current.program_id or program.pack_name != current.pack_name:
        form = replace(form, negotiated_price=None)
    return _with_form(state, form)


def set_negotiated_price(state: WizardState, price) -> WizardState:
    _require_editable(state)
    value = None if price in (None, '') else to_decimal(price)
    return _with_form(state, replace(state.form, negotiated_price=value))


def add_payment(state: WizardState, amount, method: Optional[PaymentMethod] = None,
                date: Optional[datetime.date] = None) -> PaymentStep:
    if not isinstance(state, PaymentStep):
        raise WizardValidationError("Payments can only be added on the payment step")

    value = to_decimal(amount)
    if value <= 0:
        raise WizardValidationError("Payment amount must be greater than zero", details={'field': 'amount'})

    entry = PaymentEntry(
        amount=value,
        method=method or Cash(),
        date=date or timezone.localdate(),
    )
    return replace(state, entries=state.entries + (entry,))


def remove_payment(state: WizardState, entry_id: str) -> PaymentStep:
    if not isinstance(state, PaymentStep):
        raise WizardValidationError("Payments can only be removed on the payment step")
    return replace(state, entries=tuple(e for e in state.entries if e.id != entry_id))


def _require_editable(state):
    if not isinstance(state, EDITABLE_STATES):
        raise WizardValidationError("Enrollment already submitted")


def entries_of(state: WizardState) -> Tuple[PaymentEntry, ...]:
    return state.entries if isinstance(state, PaymentStep) else ()


def quote(state: WizardState, program) -> Quote:
    """Live pricing of the wizard's current selection."""
    form = state.form
    return Quote.build(program, form.program.pack_name, form.negotiated_price, entries_of(state))


# ============ SEEDING ============

def seed_from_lead(lead) -> WizardState:
    """
    Pre-fill a new-student wizard from a CRM lead.

    The lead's slot ("Wednesday 14:00" or a group name) is matched against the
    groups of the lead's program.
    """
    student = StudentForm(
        name=lead.name or '',
        parent_name=lead.parent_name or '',
        parent_phone=lead.phone or '',
        email=lead.email or '',
    )

    program_form = ProgramForm(pack_name=lead.selected_pack or '')
    program = lead.program
    if program is not None:
        program_form = replace(program_form, program_id=program.pk)
        grade, group = program.find_group_by_slot(lead.selected_slot)
        if group:
            program_form = replace(program_form, grade_id=grade.get('id', ''), group_id=group.get('id', ''))

    return start(student=student, program=program_form, lead_id=lead.pk)


def seed_from_group(program, grade_id: str, group_id: str) -> WizardState:
    """Enroll a new student straight into a group; pack defaults to the first one."""
    names = program.pack_names()
    program_form = ProgramForm(
        program_id=program.pk,
        grade_id=grade_id or '',
        group_id=group_id or '',
        pack_name=names[0] if names else '',
    )
    return start(program=program_form)


# ============ SERIALIZATION ============

def _entry_to_dict(entry: PaymentEntry) -> Dict[str, Any]:
    data = {
        'id': entry.id,
        'amount': str(entry.amount),
        'date': entry.date.isoformat(),
    }
    data.update(method_to_dict(entry.method))
    return data


def _entry_from_dict(data: Dict[str, Any]) -> PaymentEntry:
    return PaymentEntry(
        id=data['id'],
        amount=to_decimal(data['amount']),
        method=parse_method(data),
        date=parse_date(data['date']) if data.get('date') else timezone.localdate(),
    )


def _form_to_dict(form: WizardForm) -> Dict[str, Any]:
    return {
        'student': asdict(form.student),
        'program': asdict(form.program),
        'existing_student_id': form.existing_student_id,
        'negotiated_price': None if form.negotiated_price is None else str(form.negotiated_price),
        'lead_id': form.lead_id,
    }


def _form_from_dict(data: Dict[str, Any]) -> WizardForm:
    price = data.get('negotiated_price')
    return WizardForm(
        student=StudentForm(**data.get('student', {})),
        program=ProgramForm(**data.get('program', {})),
        existing_student_id=data.get('existing_student_id'),
        negotiated_price=None if price is None else to_decimal(price),
        lead_id=data.get('lead_id'),
    )


def to_dict(state: WizardState) -> Dict[str, Any]:
    if isinstance(state, Submitted):
        return {'step': state.step, 'enrollment_id': state.enrollment_id, 'student_id': state.student_id}

    data = {'step': state.step, 'form': _form_to_dict(state.form)}
    if isinstance(state, PaymentStep):
        data['entries'] = [_entry_to_dict(entry) for entry in state.entries]
    return data


def from_dict(data: Dict[str, Any]) -> WizardState:
    step = data.get('step')

    if step == Submitted.step:
        return Submitted(enrollment_id=data['enrollment_id'], student_id=data.get('student_id'))

    form = _form_from_dict(data.get('form', {}))
    if step == StudentStep.step:
        return StudentStep(form)
    if step == ProgramStep.step:
        return ProgramStep(form)
    if step == PaymentStep.step:
        return PaymentStep(form, tuple(_entry_from_dict(e) for e in data.get('entries', [])))

    raise WizardValidationError(f"Unknown wizard step: {step}")
