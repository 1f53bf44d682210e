# shared/decorators/permissions.py
"""
UNIFIED PERMISSION SYSTEM
==========================

Role -> permission-id sets and the decorator that gates API views.
All permission logic flows through PermissionChecker for consistency.

A permission id is "{namespace}.{action}" (e.g. "finance.view"). A role
grants it when its set holds "*", the exact id, or "{namespace}.*".
"""

import logging
from functools import wraps
from typing import Optional, Callable, Any, Iterable, Dict, List

from django.apps import apps
from django.http import JsonResponse, HttpRequest, HttpResponse

from shared.constants import RoleTypes, StatusChoices

logger = logging.getLogger(__name__)


# ============================================================================
# 1. PERMISSION CATALOGUE
# ============================================================================

# Rows of the permission matrix, in display order
AVAILABLE_PERMISSIONS: List[Dict[str, str]] = [
    {'id': 'dashboard.view', 'label': 'View Dashboard'},
    {'id': 'finance.view', 'label': 'View Finance List'},
    {'id': 'finance.view_totals', 'label': 'View Financial Totals'},
    {'id': 'finance.record_payment', 'label': 'Record Payments'},
    {'id': 'expenses.view', 'label': 'View Expenses'},
    {'id': 'expenses.manage', 'label': 'Manage Expenses (Add/Edit)'},
    {'id': 'students.view', 'label': 'View Students'},
    {'id': 'students.edit', 'label': 'Edit Student Profiles'},
    {'id': 'students.enroll', 'label': 'Enroll Students'},
    {'id': 'students.delete', 'label': 'Delete Students'},
    {'id': 'classes.view', 'label': 'View Classes'},
    {'id': 'attendance.manage', 'label': 'Manage Attendance'},
    {'id': 'workshops.manage', 'label': 'Manage Workshops'},
    {'id': 'team.view', 'label': 'View Team & Tasks'},
    {'id': 'team.create', 'label': 'Create Tasks'},
    {'id': 'team.assign_others', 'label': 'Assign Tasks to Others'},
    {'id': 'marketing.view', 'label': 'View Marketing'},
    {'id': 'marketing.create', 'label': 'Create Content'},
    {'id': 'marketing.approve', 'label': 'Approve Content'},
    {'id': 'settings.view', 'label': 'View Settings'},
    {'id': 'settings.manage', 'label': 'Manage System'},
    {'id': 'settings.manage_team', 'label': 'Manage Team & Roles'},
]

DEFAULT_ROLES: Dict[str, Dict[str, Any]] = {
    RoleTypes.ADMIN: {
        'label': 'Administrator',
        'description': 'Full access to all modules',
        'permissions': ['*'],
        'is_system': True,
    },
    RoleTypes.ADMISSION_OFFICER: {
        'label': 'Admission Officer',
        'description': 'Manages students, enrollments and attendance',
        'permissions': [
            'dashboard.view', 'students.view', 'students.edit', 'students.enroll',
            'classes.view', 'attendance.manage', 'finance.record_payment',
            'finance.view', 'expenses.view', 'workshops.manage', 'programs.view',
        ],
        'is_system': True,
    },
    RoleTypes.ACCOUNTANT: {
        'label': 'Accountant',
        'description': 'Manages finance and expenses',
        'permissions': [
            'dashboard.view', 'finance.*', 'expenses.*', 'students.view', 'classes.view',
        ],
        'is_system': True,
    },
    RoleTypes.INSTRUCTOR: {
        'label': 'Instructor',
        'description': 'Teaches classes and manages learning content',
        'permissions': [
            'dashboard.view', 'classes.view', 'attendance.manage', 'students.view_basic',
            'learning.view', 'learning.manage', 'toolkit.view', 'toolkit.manage',
            'media.view', 'media.manage',
        ],
        'is_system': True,
    },
    RoleTypes.CONTENT_MANAGER: {
        'label': 'Content Manager',
        'description': 'Creates marketing content and tasks',
        'permissions': [
            'dashboard.view', 'marketing.view', 'marketing.create', 'team.view', 'team.create',
        ],
        'is_system': True,
    },
    RoleTypes.STUDENT: {
        'label': 'Student',
        'description': 'Student portal access',
        'permissions': [
            'dashboard.view', 'dashboard.view_student', 'learning.view', 'learning.submit',
            'toolkit.view', 'media.view', 'pickup.view', 'settings.view',
        ],
        'is_system': True,
    },
    RoleTypes.PARENT: {
        'label': 'Parent',
        'description': 'Parent portal access',
        'permissions': [
            'dashboard.view', 'dashboard.view_parent', 'students.view_children',
            'finance.view_payments',
        ],
        'is_system': True,
    },
}


# ============================================================================
# 2. PERMISSION CHECKER - SINGLE SOURCE OF TRUTH
# ============================================================================

class PermissionChecker:
    """Centralized permission validation used across entire system."""

    @staticmethod
    def is_allowed(permissions: Optional[Iterable[str]], permission: str) -> bool:
        """
        Check a permission id against a role's permission set.

        Granted by:
        1. Wildcard "*"
        2. The exact permission id
        3. Namespace wildcard, e.g. "finance.*" for "finance.view"
        """
        if not permissions or not permission:
            return False

        granted = set(permissions)

        if '*' in granted:
            return True

        if permission in granted:
            return True

        namespace = permission.split('.', 1)[0]
        return f"{namespace}.*" in granted

    @staticmethod
    def can(profile, permission: str) -> bool:
        """
        Check if a user profile may perform an action.

        Inactive profiles never pass; the admin role always passes.
        """
        if not profile or profile.status != StatusChoices.ACTIVE:
            return False

        if profile.role == RoleTypes.ADMIN:
            return True

        role = PermissionChecker.get_role_definition(profile)
        if not role:
            return False

        return PermissionChecker.is_allowed(role.permissions, permission)

    @staticmethod
    def can_request(request: HttpRequest, permission: str) -> bool:
        """
        Check the signed-in user of a request.

        Superusers pass in whichever organization the request resolved to;
        everyone else goes through their profile in that organization.
        """
        user = getattr(request, 'user', None)
        if user is not None and user.is_authenticated and user.is_superuser:
            return getattr(request, 'organization', None) is not None

        return PermissionChecker.can(_get_user_profile(request), permission)

    @staticmethod
    def get_role_definition(profile) -> Optional[Any]:
        """RoleDefinition for the profile's role within its organization."""
        if not profile or not profile.organization_id:
            return None

        RoleDefinition = apps.get_model('users', 'RoleDefinition')
        return RoleDefinition.objects.filter(
            organization_id=profile.organization_id,
            role_id=profile.role,
        ).first()


# ============================================================================
# 3. HELPER FUNCTIONS
# ============================================================================

def _get_user_profile(request: HttpRequest) -> Optional[Any]:
    """Profile of the signed-in user within the request's organization."""
    user = getattr(request, 'user', None)
    if not user or not user.is_authenticated:
        return None

    profile = getattr(user, 'profile', None)
    organization = getattr(request, 'organization', None)
    if not profile or not organization or profile.organization_id != organization.id:
        return None
    return profile


def _handle_permission_denied(request: HttpRequest, permission: str) -> HttpResponse:
    """Handle permission denied consistently."""
    if not request.user.is_authenticated:
        return JsonResponse({
            'success': False,
            'error': 'NOT_AUTHENTICATED',
            'message': 'Please login to access this resource.',
        }, status=401)

    return JsonResponse({
        'success': False,
        'error': 'PERMISSION_ERROR',
        'message': f"You don't have permission to {permission.replace('.', ' ').replace('_', ' ')}",
    }, status=403)


# ============================================================================
# 4. CORE DECORATORS
# ============================================================================

def require_permission(permission: str) -> Callable:
    """Gate a view behind a permission id of the caller's role."""
    def decorator(view_func: Callable) -> Callable:
        @wraps(view_func)
        def _wrapped_view(request: HttpRequest, *args, **kwargs) -> HttpResponse:
            if not PermissionChecker.can_request(request, permission):
                logger.warning(
                    f"Permission denied: user={getattr(request.user, 'id', None)} "
                    f"permission={permission} path={request.path}"
                )
                return _handle_permission_denied(request, permission)

            return view_func(request, *args, **kwargs)

        return _wrapped_view
    return decorator


def require_organization(view_func: Callable) -> Callable:
    """Ensure the request resolved to an organization."""
    @wraps(view_func)
    def _wrapped_view(request: HttpRequest, *args, **kwargs) -> HttpResponse:
        if not getattr(request, 'organization', None):
            return JsonResponse({
                'success': False,
                'error': 'NO_ORGANIZATION',
                'message': 'No organization selected.',
            }, status=400)
        return view_func(request, *args, **kwargs)
    return _wrapped_view
