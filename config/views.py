# config/views.py
"""
Project-level views: health check, JSON error handlers and the API
exception handler.
"""
import logging

from django.db import connection
from django.db.utils import OperationalError
from django.http import JsonResponse
from django.utils import timezone
from rest_framework.response import Response
from rest_framework.views import exception_handler, set_rollback

from core.exceptions import AcademyException

logger = logging.getLogger(__name__)


# ============================================================================
# HEALTH
# ============================================================================

def health_check_view(request):
    """System health check endpoint."""
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        db_status = True
    except OperationalError:
        db_status = False

    status_code = 200 if db_status else 503

    return JsonResponse({
        'status': 'healthy' if db_status else 'unhealthy',
        'database': 'connected' if db_status else 'disconnected',
        'timestamp': timezone.now().isoformat(),
    }, status=status_code)


# ============================================================================
# API EXCEPTION HANDLER
# ============================================================================

def api_exception_handler(exc, context):
    """Render AcademyException as {success, error, message, details}."""
    if isinstance(exc, AcademyException):
        if exc.status_code >= 500:
            logger.error(f"API error: {exc}", exc_info=True)
        else:
            logger.warning(f"API rejected request: {exc.error_code} {exc.message}")

        data = exc.to_dict()
        matches = getattr(exc, 'matches', None)
        if matches:
            data['matches'] = matches

        set_rollback()
        return Response(data, status=exc.status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    details = response.data
    if isinstance(details, dict) and 'detail' in details:
        message = str(details.pop('detail'))
    else:
        message = 'Invalid request data'

    response.data = {
        'success': False,
        'error': str(getattr(exc, 'default_code', 'error')).upper(),
        'message': message,
        'details': details,
    }
    return response


# ============================================================================
# ERROR HANDLERS
# ============================================================================

def handler404(request, exception):
    return JsonResponse({
        'success': False,
        'error': 'NOT_FOUND',
        'message': 'The resource you are looking for does not exist.',
    }, status=404)


def handler500(request):
    return JsonResponse({
        'success': False,
        'error': 'SERVER_ERROR',
        'message': 'Something went wrong on our end.',
    }, status=500)


def handler403(request, exception):
    return JsonResponse({
        'success': False,
        'error': 'PERMISSION_ERROR',
        'message': 'You do not have permission to access this resource.',
    }, status=403)


def handler400(request, exception):
    return JsonResponse({
        'success': False,
        'error': 'BAD_REQUEST',
        'message': 'Your request could not be processed.',
    }, status=400)
