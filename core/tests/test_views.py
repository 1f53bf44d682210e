# core/tests/test_views.py
from django.core.cache import cache
from django.test import RequestFactory, TestCase
from django.urls import reverse
from rest_framework.exceptions import NotAuthenticated

from shared.constants import RoleTypes
from core.exceptions import DuplicateStudentError
from core.tests.fixtures import create_organization, create_program, create_staff
from users.models import User
from config.views import api_exception_handler


class HealthCheckTest(TestCase):
    def test_health(self):
        response = self.client.get('/health/')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['database'], 'connected')


class ProgramApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()
        self.program = create_program(self.organization)
        self.client.force_login(create_staff(self.organization, role=RoleTypes.INSTRUCTOR))

    def test_list(self):
        programs = self.client.get(reverse('core:program_list')).json()['programs']
        self.assertEqual(programs[0]['packs'][0]['name'], 'Pack Explorer')

    def test_detail_of_other_organization(self):
        other = create_organization('other-academy', 'Other Academy')
        hidden = create_program(other)

        response = self.client.get(reverse('core:program_detail', args=[hidden.pk]))

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.json()['error'], 'NOT_FOUND')

    def test_without_organization(self):
        self.client.force_login(User.objects.create_user(email='nobody@example.com', password='x'))

        response = self.client.get(reverse('core:program_list'))

        self.assertEqual(response.status_code, 400)
        self.assertEqual(response.json()['error'], 'NO_ORGANIZATION')


class OrganizationSettingsApiTest(TestCase):
    def setUp(self):
        cache.clear()
        self.organization = create_organization()

    def test_admin_updates_settings(self):
        self.client.force_login(create_staff(self.organization))

        response = self.client.patch(
            reverse('core:organization_settings'),
            {'academic_year': '2025-2026'},
            content_type='application/json',
        )

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.json()['settings']['academic_year'], '2025-2026')

    def test_view_without_manage(self):
        self.client.force_login(create_staff(self.organization, role=RoleTypes.STUDENT))

        self.assertEqual(self.client.get(reverse('core:organization_settings')).status_code, 200)
        response = self.client.patch(
            reverse('core:organization_settings'),
            {'academic_year': '2025-2026'},
            content_type='application/json',
        )
        self.assertEqual(response.status_code, 403)

    def test_current_organization(self):
        self.client.force_login(create_staff(self.organization, role=RoleTypes.PARENT))

        body = self.client.get(reverse('core:current_organization')).json()

        self.assertEqual(body['organization']['id'], 'makerlab-academy')
        self.assertEqual(body['settings']['academic_year'], '2024-2025')


class ApiExceptionHandlerTest(TestCase):
    def setUp(self):
        self.context = {'request': RequestFactory().get('/')}

    def test_duplicate_carries_matches(self):
        exc = DuplicateStudentError(matches=[{'id': 1, 'name': 'Neil Hamdouch', 'parentPhone': ''}])

        response = api_exception_handler(exc, self.context)

        self.assertEqual(response.status_code, 409)
        self.assertEqual(response.data['error'], 'DUPLICATE_STUDENT')
        self.assertEqual(response.data['matches'][0]['id'], 1)

    def test_drf_exception_shape(self):
        response = api_exception_handler(NotAuthenticated(), self.context)

        self.assertFalse(response.data['success'])
        self.assertEqual(response.data['error'], 'NOT_AUTHENTICATED')
        self.assertIn('message', response.data)

    def test_unknown_exception_is_left_to_django(self):
        self.assertIsNone(api_exception_handler(RuntimeError('boom'), self.context))
