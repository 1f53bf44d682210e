# shared/constants/__init__.py
from .model_fields import (
    STUDENTS_COLLECTION,
    PROGRAMS_COLLECTION,
    ENROLLMENTS_COLLECTION,
    PAYMENTS_COLLECTION,
    LEADS_COLLECTION,
    USERS_COLLECTION,
    ROLES_COLLECTION,
    ORGANIZATIONS_COLLECTION,
    ORGANIZATION_SETTINGS_COLLECTION,
    REGULAR_PROGRAM,
    HOLIDAY_CAMP,
    WORKSHOP,
    DEFAULT_ORGANIZATION_ID,
    DEFAULT_LOGIN_DOMAIN,
    STUDENT_PASSWORD_LENGTH,
    PARENT_PASSWORD_LENGTH,
    CLEARED_PAYMENT_STATUSES,
    StatusChoices,
    LeadStatus,
    PaymentMethods,
    PaymentStatus,
    RoleTypes,
)

__all__ = [
    'STUDENTS_COLLECTION',
    'PROGRAMS_COLLECTION',
    'ENROLLMENTS_COLLECTION',
    'PAYMENTS_COLLECTION',
    'LEADS_COLLECTION',
    'USERS_COLLECTION',
    'ROLES_COLLECTION',
    'ORGANIZATIONS_COLLECTION',
    'ORGANIZATION_SETTINGS_COLLECTION',
    'REGULAR_PROGRAM',
    'HOLIDAY_CAMP',
    'WORKSHOP',
    'DEFAULT_ORGANIZATION_ID',
    'DEFAULT_LOGIN_DOMAIN',
    'STUDENT_PASSWORD_LENGTH',
    'PARENT_PASSWORD_LENGTH',
    'CLEARED_PAYMENT_STATUSES',
    'StatusChoices',
    'LeadStatus',
    'PaymentMethods',
    'PaymentStatus',
    'RoleTypes',
]
