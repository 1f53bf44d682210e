# core/middleware.py
"""
TENANT MIDDLEWARE - Organization resolution, security headers, JSON errors
NO direct model imports, PROPER lazy loading, WELL LOGGED
"""
import logging
from typing import Optional, Any

from django.apps import apps
from django.conf import settings
from django.http import JsonResponse

from shared.constants import StatusChoices
from .exceptions import AcademyException

logger = logging.getLogger(__name__)

SESSION_ORGANIZATION_KEY = 'current_organization_id'


# ============ HELPER FUNCTIONS ============

def _get_model(model_name: str, app_label: str = 'core'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


# ============ SECURITY HEADERS MIDDLEWARE ============

class SecurityHeadersMiddleware:
    """Adds baseline security headers to every response."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        response = self.get_response(request)

        if response is None:
            return response

        response["X-Content-Type-Options"] = "nosniff"
        response["X-Frame-Options"] = "DENY"
        response["Referrer-Policy"] = "strict-origin-when-cross-origin"
        return response


# ============ ORGANIZATION RESOLUTION MIDDLEWARE ============

class OrganizationMiddleware:
    """
    Determines the active organization (tenant) using this order:
    1. Profile:  users/{uid}.organization
    2. Session:  session['current_organization_id']
    3. Superuser fallback: settings.ACADEMY_DEFAULT_ORGANIZATION
    """

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        request.organization = None

        organization = (
            self._resolve_profile(request)
            or self._resolve_session(request)
            or self._superuser_fallback(request)
        )

        if organization:
            request.organization = organization

            user = getattr(request, 'user', None)
            if user and user.is_authenticated:
                if request.session.get(SESSION_ORGANIZATION_KEY) != organization.id:
                    request.session[SESSION_ORGANIZATION_KEY] = organization.id

        return self.get_response(request)

    def _resolve_profile(self, request) -> Optional[Any]:
        user = getattr(request, 'user', None)
        if not user or not user.is_authenticated:
            return None

        profile = getattr(user, 'profile', None)
        if profile and profile.organization_id:
            organization = profile.organization
            if organization.status == StatusChoices.ACTIVE:
                logger.debug(f"Resolved organization from profile: {organization.id}")
                return organization
        return None

    def _resolve_session(self, request) -> Optional[Any]:
        session = getattr(request, 'session', None)
        if session is None:
            return None

        organization_id = session.get(SESSION_ORGANIZATION_KEY)
        if not organization_id:
            return None

        Organization = _get_model('Organization')
        organization = Organization.objects.filter(
            id=organization_id,
            status=StatusChoices.ACTIVE,
        ).first()
        if organization:
            logger.debug(f"Resolved organization from session: {organization.id}")
        return organization

    def _superuser_fallback(self, request) -> Optional[Any]:
        user = getattr(request, 'user', None)
        if user and user.is_authenticated and user.is_superuser:
            Organization = _get_model('Organization')
            organization = Organization.objects.filter(
                id=getattr(settings, 'ACADEMY_DEFAULT_ORGANIZATION', None),
                status=StatusChoices.ACTIVE,
            ).first()
            if organization:
                logger.debug(f"Using default organization for superuser: {organization.id}")
            return organization
        return None


# ============ EXCEPTION HANDLING MIDDLEWARE ============

class ExceptionHandlingMiddleware:
    """Turns AcademyException and unexpected server errors into JSON."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        if isinstance(exception, AcademyException):
            logger.warning(f"Business exception on {request.path}: {exception}")
            return JsonResponse(exception.to_dict(), status=exception.status_code)

        logger.error(f"Unhandled error on {request.path}: {exception}", exc_info=True)
        if settings.DEBUG:
            # Let Django render its debug page
            return None
        return JsonResponse({
            'success': False,
            'error': 'SERVER_ERROR',
            'message': 'An unexpected error occurred. Please try again.',
        }, status=500)
