# core/tests/fixtures.py
"""Builders shared by the app test suites."""
import datetime
from decimal import Decimal

from django.contrib import admin
from django.contrib.auth import get_user_model
from django.forms.models import model_to_dict
from django.test import RequestFactory

from shared.constants import REGULAR_PROGRAM, RoleTypes
from core.models import Program
from core.services import OrganizationService
from users.models import UserProfile
from students.models import Student
from admissions.models import Enrollment

User = get_user_model()

PACKS = [
    {'name': 'Pack Explorer', 'price': 1200, 'priceAnnual': 1000, 'priceTrimester': 400, 'workshopsPerWeek': 1},
    {'name': 'Pack Maker', 'price': 2000, 'priceAnnual': 1800, 'priceTrimester': 700, 'workshopsPerWeek': 2},
]

GRADES = [
    {
        'id': 'g1',
        'name': 'Juniors',
        'groups': [
            {'id': 'grp-wed', 'name': 'Group A', 'day': 'Wednesday', 'time': '14:00'},
            {'id': 'grp-sat', 'name': 'Group B', 'day': 'Saturday', 'time': '10:00'},
        ],
    },
    {
        'id': 'g2',
        'name': 'Seniors',
        'groups': [
            {'id': 'grp-diy', 'name': 'DIY Lab', 'day': 'Sunday', 'time': '11:00'},
        ],
    },
]


def create_organization(organization_id='makerlab-academy', name='MakerLab Academy', academic_year='2024-2025'):
    return OrganizationService.create_organization(name, organization_id, academic_year=academic_year)


def create_program(organization, **overrides):
    values = {
        'organization': organization,
        'name': 'Robotics',
        'type': REGULAR_PROGRAM,
        'packs': PACKS,
        'grades': GRADES,
    }
    values.update(overrides)
    return Program.objects.create(**values)


def create_staff(organization, email='admin@makerlab.academy', role=RoleTypes.ADMIN, password='s3cret-pass'):
    user = User.objects.create_user(email=email, password=password)
    UserProfile.objects.create(
        user=user,
        organization=organization,
        email=email,
        name=email.split('@')[0],
        role=role,
    )
    return user


def create_enrollment(organization, program, student_name='Neil Hamdouch', total=Decimal('1000.00'), **overrides):
    student = overrides.pop('student', None) or Student.objects.create(organization=organization, name=student_name)
    values = {
        'organization': organization,
        'student': student,
        'student_name': student.name,
        'program': program,
        'program_name': program.name,
        'pack_name': 'Pack Explorer',
        'total_amount': total,
        'balance': total,
        'start_date': datetime.date(2024, 9, 15),
        'session': organization.get_settings().academic_year,
    }
    values.update(overrides)
    return Enrollment.objects.create(**values)


def admin_change(user, obj, **changes):
    """Submit obj's admin change form with changes, as the admin view does."""
    model_admin = admin.site._registry[type(obj)]
    request = admin_request(user)

    form_class = model_admin.get_form(request, obj, change=True)
    data = {
        name: value
        for name, value in model_to_dict(obj, fields=list(form_class.base_fields)).items()
        if value is not None
    }
    data.update(changes)

    form = form_class(data, instance=obj)
    if not form.is_valid():
        raise AssertionError(form.errors.as_json())
    saved = form.save(commit=False)
    model_admin.save_model(request, saved, form, change=True)
    return saved


def admin_request(user):
    request = RequestFactory().post('/admin/')
    request.user = user
    return request
