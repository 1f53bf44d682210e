# students/views.py
"""
STUDENT API VIEWS - Directory, profile and login access
"""
import logging

from rest_framework.decorators import api_view
from rest_framework.response import Response

# SHARED IMPORTS
from shared.decorators.permissions import require_organization, require_permission
from users.services import AccountProvisioningService

from .serializers import StudentDetailSerializer, StudentInputSerializer, StudentSerializer
from .services import StudentService

logger = logging.getLogger(__name__)


# ============ STUDENT DIRECTORY ============

@api_view(['GET', 'POST'])
@require_organization
@require_permission('students.view')
def student_list_view(request):
    """Search students (?q=&status=) or add one."""
    if request.method == 'POST':
        return _create_student(request)

    students = StudentService.search_students(
        request.organization,
        request.query_params.get('q', ''),
        request.query_params.get('status'),
    )
    return Response({'success': True, 'students': StudentSerializer(students, many=True).data})


@require_permission('students.edit')
def _create_student(request):
    serializer = StudentInputSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    student = StudentService.create_student(request.organization, serializer.validated_data)
    return Response({'success': True, 'student': StudentSerializer(student).data}, status=201)


@api_view(['GET'])
@require_organization
@require_permission('students.enroll')
def duplicate_check_view(request):
    """Existing students sharing the name or parent phone (?name=&parent_phone=)."""
    matches = StudentService.find_duplicates(
        request.organization,
        request.query_params.get('name', ''),
        request.query_params.get('parent_phone', ''),
    )
    return Response({
        'success': True,
        'matches': [{'id': m.pk, 'name': m.name, 'parentPhone': m.parent_phone} for m in matches],
    })


# ============ STUDENT PROFILE ============

@api_view(['GET', 'PATCH'])
@require_organization
@require_permission('students.view')
def student_detail_view(request, student_id):
    student = StudentService.get_student(request.organization, student_id)

    if request.method == 'PATCH':
        return _update_student(request, student)

    enrollments = student.enrollments.order_by('-created_at').values(
        'id', 'program_name', 'pack_name', 'group_name', 'group_time',
        'total_amount', 'paid_amount', 'balance', 'status',
    )
    data = StudentDetailSerializer(student).data
    data['enrollments'] = [
        {key: str(value) if key in ('total_amount', 'paid_amount', 'balance') else value
         for key, value in enrollment.items()}
        for enrollment in enrollments
    ]
    return Response({'success': True, 'student': data})


@require_permission('students.edit')
def _update_student(request, student):
    serializer = StudentInputSerializer(data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)

    student = StudentService.update_student(student, serializer.validated_data)
    return Response({'success': True, 'student': StudentSerializer(student).data})


# ============ LOGIN ACCESS ============

@api_view(['POST'])
@require_organization
@require_permission('students.edit')
def generate_student_access_view(request, student_id):
    student = StudentService.get_student(request.organization, student_id)
    login_info = AccountProvisioningService.generate_student_access(student, request.organization)

    logger.info(f"Student access generated for {student.pk} by user {request.user.id}")
    return Response({'success': True, 'login_info': login_info}, status=201)


@api_view(['POST'])
@require_organization
@require_permission('students.edit')
def generate_parent_access_view(request, student_id):
    student = StudentService.get_student(request.organization, student_id)
    parent_login_info = AccountProvisioningService.generate_parent_access(student, request.organization)

    logger.info(f"Parent access generated for {student.pk} by user {request.user.id}")
    return Response({'success': True, 'parent_login_info': parent_login_info}, status=201)
