# shared/constants/model_fields.py

"""
CONSTANT field values used across the entire system.
NO DEPENDENCIES - safe to import from models, services and migrations.
"""

# Collection (table) names - one per stored document type
STUDENTS_COLLECTION = 'students'
PROGRAMS_COLLECTION = 'programs'
ENROLLMENTS_COLLECTION = 'enrollments'
PAYMENTS_COLLECTION = 'payments'
LEADS_COLLECTION = 'leads'
USERS_COLLECTION = 'users'
ROLES_COLLECTION = 'roles'
ORGANIZATIONS_COLLECTION = 'organizations'
ORGANIZATION_SETTINGS_COLLECTION = 'organization_settings'

# Program types
REGULAR_PROGRAM = 'Regular Program'
HOLIDAY_CAMP = 'Holiday Camp'
WORKSHOP = 'Workshop'

# Tenant zero - legacy records are tagged with it
DEFAULT_ORGANIZATION_ID = 'makerlab-academy'
DEFAULT_LOGIN_DOMAIN = 'makerlab.academy'

# Initial password lengths for auto-provisioned accounts
STUDENT_PASSWORD_LENGTH = 6
PARENT_PASSWORD_LENGTH = 8


class StatusChoices:
    """Record lifecycle statuses."""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    DISABLED = 'disabled'
    ARCHIVED = 'archived'
    COMPLETED = 'completed'
    DROPPED = 'dropped'


class LeadStatus:
    NEW = 'new'
    CONTACTED = 'contacted'
    INTERESTED = 'interested'
    CONVERTED = 'converted'
    CLOSED = 'closed'


# Payment methods
class PaymentMethods:
    CASH = 'cash'
    CHECK = 'check'
    TRANSFER = 'virement'


# Payment statuses
class PaymentStatus:
    PAID = 'paid'
    VERIFIED = 'verified'
    PENDING_VERIFICATION = 'pending_verification'
    CHECK_RECEIVED = 'check_received'
    CHECK_DEPOSITED = 'check_deposited'
    CHECK_BOUNCED = 'check_bounced'


# Statuses whose amount counts toward an enrollment's paid amount
CLEARED_PAYMENT_STATUSES = (PaymentStatus.PAID, PaymentStatus.VERIFIED)


# Role ids
class RoleTypes:
    ADMIN = 'admin'
    ADMISSION_OFFICER = 'admission_officer'
    ACCOUNTANT = 'accountant'
    INSTRUCTOR = 'instructor'
    CONTENT_MANAGER = 'content_manager'
    PARENT = 'parent'
    STUDENT = 'student'
    GUEST = 'guest'
