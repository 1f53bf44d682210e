"""
Shared package - central access to constants and utils.
Avoids importing services or models to prevent circular dependencies.
"""

# Constants
from .constants import (
    CLEARED_PAYMENT_STATUSES,
    StatusChoices,
    PaymentMethods,
    PaymentStatus,
    RoleTypes,
)

# Utilities
from .utils.idempotency import IdempotencyService

__all__ = [
    # Constants
    'CLEARED_PAYMENT_STATUSES',
    'StatusChoices',
    'PaymentMethods',
    'PaymentStatus',
    'RoleTypes',

    # Utilities
    'IdempotencyService',
]
