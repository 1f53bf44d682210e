# users/services.py
"""
USER SERVICES - Login account provisioning and role management
NO circular imports, PROPER error handling, WELL LOGGED
"""
import logging
import secrets
import string
from typing import Dict, Any, Optional, List

from django.apps import apps
from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import transaction, IntegrityError

# SHARED IMPORTS
from shared.constants import (
    DEFAULT_LOGIN_DOMAIN,
    STUDENT_PASSWORD_LENGTH,
    PARENT_PASSWORD_LENGTH,
    RoleTypes,
    StatusChoices,
)
from shared.decorators.permissions import AVAILABLE_PERMISSIONS, DEFAULT_ROLES, PermissionChecker
from core.exceptions import (
    AccountProvisioningError,
    AccountExistsError,
    NotFoundError,
    RolePermissionError,
    ValidationError,
)

logger = logging.getLogger(__name__)

PASSWORD_ALPHABET = string.ascii_lowercase + string.digits
MAX_EMAIL_ATTEMPTS = 50


# ============ HELPER FUNCTIONS ============

def _get_model(model_name, app_label='users'):
    """Get model lazily to avoid circular imports."""
    try:
        return apps.get_model(app_label, model_name)
    except LookupError as e:
        logger.error(f"Model not found: {app_label}.{model_name} - {e}")
        raise


def _login_domain(organization) -> str:
    fallback = getattr(settings, 'ACADEMY_DEFAULT_LOGIN_DOMAIN', None) or DEFAULT_LOGIN_DOMAIN
    if organization is None:
        return fallback
    return organization.get_settings().login_domain or fallback


# ============ ACCOUNT PROVISIONING SERVICE ============

class AccountProvisioningService:
    """
    Generates login accounts for students and their parents.

    Creating an account never touches the session of the staff member
    performing the enrollment.
    """

    @staticmethod
    def derive_username(full_name: str) -> str:
        """
        "Neil Hamdouch" -> "n.hamdouch", "Ali" -> "a.ali".

        First character of the first name token, a dot, then the last token.
        """
        tokens = (full_name or '').split()
        if not tokens:
            raise AccountProvisioningError("Cannot derive a username from an empty name")

        first_name_char = tokens[0][0].lower()
        last_name = tokens[-1].lower()
        return f"{first_name_char}.{last_name}"

    @staticmethod
    def generate_password(length: int = STUDENT_PASSWORD_LENGTH) -> str:
        """Random base-36 password."""
        return ''.join(secrets.choice(PASSWORD_ALPHABET) for _ in range(length))

    @staticmethod
    def create_account(email: str, password: str, name: str, role: str, organization) -> Any:
        """
        Create the auth user and its users/{uid} profile.

        Raises:
            AccountExistsError: If the email is already registered
        """
        User = get_user_model()
        UserProfile = _get_model('UserProfile')

        if User.objects.email_taken(email):
            raise AccountExistsError(email)

        try:
            user = User.objects.create_user(
                email=email,
                password=password,
                username=email.split('@')[0],
            )
        except IntegrityError:
            raise AccountExistsError(email)

        UserProfile.objects.create(
            user=user,
            organization=organization,
            email=user.email,
            name=name,
            role=role,
            status=StatusChoices.ACTIVE,
        )
        return user

    @staticmethod
    def provision_student_account(student, organization=None) -> Dict[str, Any]:
        """
        Create the student's login and link it to the student record.

        Returns:
            The stored login_info block
        """
        if student.login_info:
            return student.login_info

        organization = organization or student.organization
        username = AccountProvisioningService.derive_username(student.name)
        email = f"{username}@{_login_domain(organization)}"
        password = AccountProvisioningService.generate_password(STUDENT_PASSWORD_LENGTH)

        user = AccountProvisioningService.create_account(
            email, password, student.name, RoleTypes.STUDENT, organization
        )

        student.login_info = {
            'username': username,
            'email': user.email,
            'initialPassword': password,
            'uid': user.pk,
        }
        student.save(update_fields=['login_info', 'updated_at'])

        logger.info(f"Student account provisioned: {user.email} for student {student.pk}")
        return student.login_info

    @staticmethod
    def provision_parent_account(student, email: str, parent_name: Optional[str] = None,
                                 organization=None) -> Dict[str, Any]:
        """Create the parent's login under the email they supplied."""
        if student.parent_login_info:
            return student.parent_login_info

        if not email:
            raise AccountProvisioningError("Parent email is required", user_friendly=True)

        organization = organization or student.organization
        password = AccountProvisioningService.generate_password(PARENT_PASSWORD_LENGTH)

        user = AccountProvisioningService.create_account(
            email, password, parent_name or 'Parent', RoleTypes.PARENT, organization
        )

        student.parent_login_info = {
            'email': user.email,
            'initialPassword': password,
            'uid': user.pk,
        }
        student.save(update_fields=['parent_login_info', 'updated_at'])

        logger.info(f"Parent account provisioned: {user.email} for student {student.pk}")
        return student.parent_login_info

    @staticmethod
    def provision_enrollment_accounts(student, parent_email: Optional[str] = None,
                                      parent_name: Optional[str] = None,
                                      organization=None) -> Dict[str, Any]:
        """
        Best-effort provisioning used by the enrollment finish step.

        Each account is created in its own savepoint. Failures are logged and
        swallowed; a parent failure does not affect the student account.
        """
        result = {'student': None, 'parent': None}

        try:
            with transaction.atomic():
                result['student'] = AccountProvisioningService.provision_student_account(
                    student, organization
                )
        except Exception as e:
            student.refresh_from_db(fields=['login_info'])
            logger.error(f"Failed to auto-generate student account for {student.pk}: {e}", exc_info=True)

        if parent_email:
            try:
                with transaction.atomic():
                    result['parent'] = AccountProvisioningService.provision_parent_account(
                        student, parent_email, parent_name, organization
                    )
            except Exception as e:
                student.refresh_from_db(fields=['parent_login_info'])
                logger.error(f"Failed to generate parent account for {student.pk}: {e}", exc_info=True)

        return result

    @staticmethod
    @transaction.atomic
    def generate_student_access(student, organization=None) -> Dict[str, Any]:
        """
        Create (or re-create) a student login from the student profile.

        Uses "{first}.{last}" with a numeric suffix when the address is taken.
        Re-generating replaces the previous login on the student record.
        """
        organization = organization or student.organization
        tokens = [
            ''.join(ch for ch in token.lower() if ch.isalnum())
            for token in (student.name or '').split()
        ]
        tokens = [token for token in tokens if token]
        if not tokens:
            raise AccountProvisioningError("Student name is required", user_friendly=True)

        base_username = f"{tokens[0]}.{tokens[-1]}"
        domain = _login_domain(organization)
        password = AccountProvisioningService.generate_password(PARENT_PASSWORD_LENGTH)

        user = None
        for attempt in range(MAX_EMAIL_ATTEMPTS):
            username = base_username if attempt == 0 else f"{base_username}{attempt}"
            try:
                with transaction.atomic():
                    user = AccountProvisioningService.create_account(
                        f"{username}@{domain}", password, student.name, RoleTypes.STUDENT, organization
                    )
                break
            except AccountExistsError:
                continue

        if user is None:
            raise AccountProvisioningError(f"No free login address for {base_username}@{domain}")

        student.login_info = {
            'username': user.email.split('@')[0],
            'email': user.email,
            'initialPassword': password,
            'uid': user.pk,
        }
        student.save(update_fields=['login_info', 'updated_at'])

        logger.info(f"Student access generated: {user.email} for student {student.pk}")
        return student.login_info

    @staticmethod
    @transaction.atomic
    def generate_parent_access(student, organization=None) -> Dict[str, Any]:
        """
        Create the parent login "p.{last}@{domain}" or link the existing one.

        An existing account keeps its password; its initial password is masked.
        """
        User = get_user_model()
        UserProfile = _get_model('UserProfile')

        organization = organization or student.organization
        tokens = (student.name or '').split()
        if not tokens:
            raise AccountProvisioningError("Student name is required", user_friendly=True)

        parent_email = f"p.{tokens[-1].lower()}@{_login_domain(organization)}"
        parent_name = student.parent_name or 'Parent'
        password = AccountProvisioningService.generate_password(PARENT_PASSWORD_LENGTH)

        try:
            with transaction.atomic():
                user = AccountProvisioningService.create_account(
                    parent_email, password, parent_name, RoleTypes.PARENT, organization
                )
            initial_password = password
        except AccountExistsError:
            user = User.objects.get(email__iexact=parent_email)
            UserProfile.objects.update_or_create(
                user=user,
                defaults={
                    'organization': organization,
                    'email': user.email,
                    'name': parent_name,
                    'role': RoleTypes.PARENT,
                    'status': StatusChoices.ACTIVE,
                },
            )
            initial_password = '********'
            logger.info(f"Linked existing parent account {parent_email} to student {student.pk}")

        student.parent_login_info = {
            'email': user.email,
            'initialPassword': initial_password,
            'uid': user.pk,
        }
        student.save(update_fields=['parent_login_info', 'updated_at'])
        return student.parent_login_info


# ============ ROLE MANAGEMENT SERVICE ============

class RoleManagementService:
    """Service for role management operations."""

    @staticmethod
    def sync_default_roles(organization) -> List[Any]:
        """
        Seed missing default roles and merge missing default permissions.

        Permissions added by admins are never removed.
        """
        RoleDefinition = _get_model('RoleDefinition')
        roles = []

        for role_id, defaults in DEFAULT_ROLES.items():
            role, created = RoleDefinition.objects.get_or_create(
                organization=organization,
                role_id=role_id,
                defaults={
                    'label': defaults['label'],
                    'description': defaults['description'],
                    'permissions': list(defaults['permissions']),
                    'is_system': defaults['is_system'],
                },
            )

            if created:
                logger.info(f"Role created: {role_id} for organization {organization.id}")
            else:
                missing = [p for p in defaults['permissions'] if p not in role.permissions]
                if missing:
                    role.permissions = list(role.permissions) + missing
                    role.save(update_fields=['permissions', 'updated_at'])
                    logger.info(f"Role {role_id} healed with {missing} for organization {organization.id}")

            roles.append(role)

        return roles

    @staticmethod
    def get_editable_roles(organization) -> List[Any]:
        """All roles except admin, which always holds every permission."""
        RoleDefinition = _get_model('RoleDefinition')
        return list(
            RoleDefinition.objects.filter(organization=organization).exclude(role_id=RoleTypes.ADMIN)
        )

    @staticmethod
    def permission_matrix(organization) -> Dict[str, Any]:
        """Rows of AVAILABLE_PERMISSIONS x editable roles with allowed flags."""
        roles = RoleManagementService.get_editable_roles(organization)

        rows = []
        for permission in AVAILABLE_PERMISSIONS:
            rows.append({
                'id': permission['id'],
                'label': permission['label'],
                'roles': {
                    role.role_id: PermissionChecker.is_allowed(role.permissions, permission['id'])
                    for role in roles
                },
            })

        return {
            'roles': [{'id': role.role_id, 'label': role.label} for role in roles],
            'permissions': rows,
        }

    @staticmethod
    @transaction.atomic
    def toggle_permission(organization, role_id: str, permission: str) -> Any:
        """
        Flip exact membership of a permission id in a role's set.

        Raises:
            RolePermissionError: For the admin role
            NotFoundError: If the role does not exist
        """
        RoleDefinition = _get_model('RoleDefinition')

        if role_id == RoleTypes.ADMIN:
            raise RolePermissionError("The admin role cannot be edited")

        if not permission:
            raise ValidationError("Permission id is required")

        role = RoleDefinition.objects.select_for_update().filter(
            organization=organization,
            role_id=role_id,
        ).first()
        if not role:
            raise NotFoundError(f"Role {role_id} not found")

        permissions = list(role.permissions or [])
        if permission in permissions:
            permissions.remove(permission)
            action = 'revoked'
        else:
            permissions.append(permission)
            action = 'granted'

        role.permissions = permissions
        role.save(update_fields=['permissions', 'updated_at'])

        logger.info(f"Permission {permission} {action} for role {role_id} in {organization.id}")
        return role
