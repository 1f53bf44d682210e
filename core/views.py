# core/views.py
"""
CORE API VIEWS - Program catalogue and organization settings
"""
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.decorators.permissions import require_organization, require_permission

from .serializers import OrganizationSerializer, OrganizationSettingsSerializer, ProgramSerializer
from .services import OrganizationService, ProgramService

logger = logging.getLogger(__name__)


# ============ PROGRAMS ============

@api_view(['GET'])
@require_organization
@require_permission('dashboard.view')
def program_list_view(request):
    programs = ProgramService.get_active_programs(request.organization)
    return Response({'success': True, 'programs': ProgramSerializer(programs, many=True).data})


@api_view(['GET'])
@require_organization
@require_permission('dashboard.view')
def program_detail_view(request, program_id):
    program = ProgramService.get_program(request.organization, program_id)
    return Response({'success': True, 'program': ProgramSerializer(program).data})


# ============ ORGANIZATION ============

@api_view(['GET'])
@require_organization
def current_organization_view(request):
    organization = request.organization
    return Response({
        'success': True,
        'organization': OrganizationSerializer(organization).data,
        'settings': OrganizationSettingsSerializer(organization.get_settings()).data,
    })


@api_view(['GET', 'PATCH'])
@require_organization
@require_permission('settings.view')
def organization_settings_view(request):
    organization = request.organization

    if request.method == 'GET':
        return Response({
            'success': True,
            'settings': OrganizationSettingsSerializer(organization.get_settings()).data,
        })

    return _update_settings(request, organization)


@require_permission('settings.manage')
def _update_settings(request, organization):
    serializer = OrganizationSettingsSerializer(
        organization.get_settings(), data=request.data, partial=True
    )
    serializer.is_valid(raise_exception=True)

    updated = OrganizationService.update_settings(organization, serializer.validated_data)
    logger.info(f"Settings of {organization.id} updated by user {request.user.id}")
    return Response({'success': True, 'settings': OrganizationSettingsSerializer(updated).data})
