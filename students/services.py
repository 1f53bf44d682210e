# students/services.py
"""
STUDENT SERVICES - Business logic extracted from models and views
NO circular imports, PROPER error handling, WELL LOGGED
"""
import logging
from typing import Optional, List, Dict, Any

from django.apps import apps
from django.db.models import Q
from django.utils.dateparse import parse_date

# SHARED IMPORTS
from shared.constants import StatusChoices
from core.exceptions import NotFoundError, ValidationError

from .models import normalize_phone

logger = logging.getLogger(__name__)

STUDENT_FIELDS = (
    'name', 'email', 'parent_phone', 'parent_name', 'address',
    'school', 'birth_date', 'medical_info', 'status',
)


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'students'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


# ============ STUDENT SERVICE ============

class StudentService:
    """
    Service for student-related business logic.
    """

    @staticmethod
    def find_duplicates(organization, name: str, parent_phone: str = '') -> List[Any]:
        """
        Students with the same name (trimmed, case-insensitive) or the same
        parent phone digits.
        """
        Student = _get_model('Student')

        name = (name or '').strip()
        phone = normalize_phone(parent_phone)
        if not name and not phone:
            return []

        match = Q()
        if name:
            match |= Q(name__iexact=name)
        if phone:
            match |= Q(parent_phone_digits=phone)

        return list(
            Student.objects.filter(match, organization=organization).only('id', 'name', 'parent_phone')
        )

    @staticmethod
    def create_student(organization, student_data: Dict[str, Any]) -> Any:
        """
        Create a student record.

        Args:
            organization: Owning organization
            student_data: Form data (name, parent_phone, parent_name, email,
                birth_date, school, address, medical_info)

        Raises:
            ValidationError: If the name is missing or a date is invalid
        """
        Student = _get_model('Student')

        data = StudentService._validate_student_data(student_data)
        student = Student.objects.create(
            organization=organization,
            status=data.pop('status', StatusChoices.ACTIVE),
            **data,
        )

        logger.info(f"Student created: {student.name} ({student.pk}) in {organization.id}")
        return student

    @staticmethod
    def update_student(student, student_data: Dict[str, Any]) -> Any:
        data = StudentService._validate_student_data(student_data, partial=True)
        for field, value in data.items():
            setattr(student, field, value)
        student.save()

        logger.info(f"Student updated: {student.name} ({student.pk})")
        return student

    @staticmethod
    def get_student(organization, student_id) -> Any:
        Student = _get_model('Student')
        try:
            student = Student.objects.filter(organization=organization, pk=student_id).first()
        except (TypeError, ValueError):
            student = None
        if not student:
            raise NotFoundError("Student not found")
        return student

    @staticmethod
    def search_students(organization, query: str = '', status: Optional[str] = None):
        Student = _get_model('Student')

        queryset = Student.objects.filter(organization=organization)
        if status:
            queryset = queryset.filter(status=status)

        query = (query or '').strip()
        if query:
            queryset = queryset.filter(
                Q(name__icontains=query)
                | Q(parent_name__icontains=query)
                | Q(parent_phone__icontains=query)
                | Q(email__icontains=query)
            )
        return queryset

    @staticmethod
    def _validate_student_data(data: Dict[str, Any], partial: bool = False) -> Dict[str, Any]:
        """Keep known fields, trim strings and parse the birth date."""
        cleaned = {}
        for field in STUDENT_FIELDS:
            if field not in data:
                continue
            value = data[field]
            cleaned[field] = value.strip() if isinstance(value, str) else value

        if not partial or 'name' in cleaned:
            if not cleaned.get('name'):
                raise ValidationError("Student name is required", details={'name': 'required'})

        if 'birth_date' in cleaned:
            raw = cleaned['birth_date']
            if not raw:
                cleaned['birth_date'] = None
            elif isinstance(raw, str):
                try:
                    parsed = parse_date(raw[:10])
                except ValueError:
                    parsed = None
                if parsed is None:
                    raise ValidationError(f"Invalid birth date: {raw}", details={'birth_date': raw})
                cleaned['birth_date'] = parsed

        if 'status' in cleaned and cleaned['status'] not in (StatusChoices.ACTIVE, StatusChoices.INACTIVE):
            raise ValidationError(f"Invalid status: {cleaned['status']}")

        for field in ('email', 'parent_phone', 'parent_name', 'address', 'school', 'medical_info'):
            if field in cleaned and cleaned[field] is None:
                cleaned[field] = ''

        return cleaned
