# users/views.py
"""
USER API VIEWS - Current profile and the role permission matrix
"""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

# SHARED IMPORTS
from shared.decorators.permissions import (
    AVAILABLE_PERMISSIONS,
    PermissionChecker,
    require_organization,
    require_permission,
)

from .serializers import RoleDefinitionSerializer, TogglePermissionSerializer, UserProfileSerializer
from .services import RoleManagementService

logger = logging.getLogger(__name__)


# ============ CURRENT USER ============

@api_view(['GET'])
@permission_classes([AllowAny])
def me_view(request):
    """Signed-in user, their profile and the permission ids their role grants."""
    if not request.user.is_authenticated:
        return Response({
            'success': False,
            'error': 'NOT_AUTHENTICATED',
            'message': 'Please login to access this resource.',
        }, status=401)

    profile = getattr(request.user, 'profile', None)
    organization = getattr(request, 'organization', None)

    granted = [p['id'] for p in AVAILABLE_PERMISSIONS if PermissionChecker.can_request(request, p['id'])]

    return Response({
        'success': True,
        'user': {'id': request.user.pk, 'email': request.user.email},
        'profile': UserProfileSerializer(profile).data if profile else None,
        'organization': organization.id if organization else None,
        'permissions': granted,
    })


# ============ ROLE MANAGEMENT ============

@api_view(['GET'])
@require_organization
@require_permission('settings.manage_team')
def role_list_view(request):
    roles = request.organization.roles.all()
    return Response({'success': True, 'roles': RoleDefinitionSerializer(roles, many=True).data})


@api_view(['GET', 'POST'])
@require_organization
@require_permission('settings.manage_team')
def permission_matrix_view(request):
    """
    GET:  permission rows x editable roles
    POST: {"role_id", "permission"} toggles one cell, saved immediately
    """
    if request.method == 'POST':
        serializer = TogglePermissionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        role = RoleManagementService.toggle_permission(
            request.organization,
            serializer.validated_data['role_id'],
            serializer.validated_data['permission'],
        )
        logger.info(f"Permission matrix edited by user {request.user.id}: {role.role_id}")

    return Response({'success': True, 'matrix': RoleManagementService.permission_matrix(request.organization)})
