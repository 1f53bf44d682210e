# users/tests/test_permissions.py
from django.test import SimpleTestCase, TestCase, override_settings
from django.urls import reverse

from shared.constants import RoleTypes, StatusChoices
from shared.decorators.permissions import PermissionChecker
from core.middleware import SESSION_ORGANIZATION_KEY
from core.tests.fixtures import create_organization, create_staff
from users.models import RoleDefinition, User


class IsAllowedTest(SimpleTestCase):
    def test_wildcard(self):
        self.assertTrue(PermissionChecker.is_allowed(['*'], 'finance.view'))

    def test_exact_match(self):
        self.assertTrue(PermissionChecker.is_allowed(['finance.view'], 'finance.view'))
        self.assertFalse(PermissionChecker.is_allowed(['finance.view'], 'finance.view_totals'))

    def test_namespace_wildcard(self):
        self.assertTrue(PermissionChecker.is_allowed(['finance.*'], 'finance.record_payment'))
        self.assertFalse(PermissionChecker.is_allowed(['finance.*'], 'students.view'))

    def test_empty(self):
        self.assertFalse(PermissionChecker.is_allowed([], 'finance.view'))
        self.assertFalse(PermissionChecker.is_allowed(None, 'finance.view'))
        self.assertFalse(PermissionChecker.is_allowed(['*'], ''))


class CanTest(TestCase):
    def setUp(self):
        self.organization = create_organization()

    def test_role_permissions(self):
        profile = create_staff(self.organization, role=RoleTypes.ACCOUNTANT).profile

        self.assertTrue(PermissionChecker.can(profile, 'finance.view_totals'))
        self.assertFalse(PermissionChecker.can(profile, 'students.edit'))

    def test_inactive_profile_is_denied(self):
        profile = create_staff(self.organization).profile
        profile.status = StatusChoices.DISABLED
        profile.save()

        self.assertFalse(PermissionChecker.can(profile, 'dashboard.view'))

    def test_admin_always_allowed(self):
        RoleDefinition.objects.filter(organization=self.organization, role_id=RoleTypes.ADMIN).delete()
        profile = create_staff(self.organization).profile

        self.assertTrue(PermissionChecker.can(profile, 'settings.manage_team'))

    def test_missing_role_definition(self):
        profile = create_staff(self.organization, role=RoleTypes.GUEST).profile
        self.assertFalse(PermissionChecker.can(profile, 'dashboard.view'))

    def test_matrix_edit_takes_effect(self):
        profile = create_staff(self.organization, role=RoleTypes.CONTENT_MANAGER).profile
        role = RoleDefinition.objects.get(organization=self.organization, role_id=RoleTypes.CONTENT_MANAGER)
        role.permissions = role.permissions + ['students.view']
        role.save()

        self.assertTrue(PermissionChecker.can(profile, 'students.view'))


@override_settings(ACADEMY_DEFAULT_ORGANIZATION='makerlab-academy')
class SuperuserAccessTest(TestCase):
    def setUp(self):
        self.organization = create_organization()
        self.superuser = User.objects.create_superuser(email='root@example.com', password='x')

    def test_superuser_without_profile_passes_gated_views(self):
        self.client.force_login(self.superuser)

        response = self.client.get(reverse('billing:finance_summary'))

        self.assertEqual(response.status_code, 200)

    def test_superuser_sees_every_permission(self):
        self.client.force_login(self.superuser)

        body = self.client.get(reverse('users:me')).json()

        self.assertEqual(body['organization'], 'makerlab-academy')
        self.assertIn('settings.manage_team', body['permissions'])
        self.assertIsNone(body['profile'])

    def test_staff_without_profile_is_still_denied(self):
        staff = User.objects.create_user(email='desk@example.com', password='x', is_staff=True)
        self.client.force_login(staff)
        session = self.client.session
        session[SESSION_ORGANIZATION_KEY] = self.organization.id
        session.save()

        response = self.client.get(reverse('billing:finance_summary'))

        self.assertEqual(response.status_code, 403)
