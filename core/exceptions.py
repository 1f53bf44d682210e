# core/exceptions.py
class AcademyException(Exception):
    """Base exception for all academy management errors."""

    status_code = 400

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)

    def to_dict(self):
        return {
            'success': False,
            'error': self.error_code or 'ERROR',
            'message': self.message,
            'details': self.details,
        }


class ValidationError(AcademyException):
    """Data validation errors (missing field, unresolved selection)."""
    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Validation failed", user_friendly, details, "VALIDATION_ERROR")


class WizardValidationError(ValidationError):
    """Enrollment wizard refused to change step."""


class NotFoundError(AcademyException):
    status_code = 404

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Record not found", user_friendly, details, "NOT_FOUND")


class DuplicateStudentError(AcademyException):
    """A student with the same name or parent phone already exists."""
    status_code = 409

    def __init__(self, message=None, user_friendly=True, details=None, matches=None):
        self.matches = matches or []
        super().__init__(
            message or "A student with this Name or Phone Number already exists.",
            user_friendly, details, "DUPLICATE_STUDENT"
        )


class PaymentRecordingError(AcademyException):
    """Payment-related errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Failed to record payment", user_friendly, details, "PAYMENT_ERROR")


class RolePermissionError(AcademyException):
    """Authorization and permission-related errors."""
    status_code = 403

    def __init__(self, message=None, user_friendly=True, details=None):
        super().__init__(message or "Insufficient permissions", user_friendly, details, "PERMISSION_ERROR")


class AccountProvisioningError(AcademyException):
    """Login account could not be generated."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Account provisioning failed", user_friendly, details, "PROVISIONING_ERROR")


class AccountExistsError(AccountProvisioningError):
    """Auth account with this email already exists."""
    def __init__(self, email=None):
        self.email = email
        super().__init__(f"User with email {email} already exists.", details={'email': email})
