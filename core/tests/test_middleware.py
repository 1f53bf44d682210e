# core/tests/test_middleware.py
from django.contrib.auth.models import AnonymousUser
from django.contrib.sessions.backends.db import SessionStore
from django.http import HttpResponse
from django.test import RequestFactory, TestCase, override_settings

from shared.constants import StatusChoices
from core.exceptions import NotFoundError
from core.middleware import (
    SESSION_ORGANIZATION_KEY,
    ExceptionHandlingMiddleware,
    OrganizationMiddleware,
    SecurityHeadersMiddleware,
)
from core.tests.fixtures import create_organization, create_staff
from users.models import User


class OrganizationMiddlewareTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = OrganizationMiddleware(lambda r: None)
        self.organization = create_organization()
        self.other = create_organization('other-academy', 'Other Academy')

    def _request(self, user=None, session_organization=None):
        request = self.factory.get('/')
        request.user = user or AnonymousUser()
        request.session = SessionStore()
        if session_organization:
            request.session[SESSION_ORGANIZATION_KEY] = session_organization
        return request

    def test_profile_organization_wins(self):
        user = create_staff(self.organization)
        request = self._request(user, session_organization=self.other.id)

        self.middleware(request)

        self.assertEqual(request.organization, self.organization)
        self.assertEqual(request.session[SESSION_ORGANIZATION_KEY], self.organization.id)

    def test_session_organization(self):
        user = User.objects.create_user(email='nobody@example.com', password='x')
        request = self._request(user, session_organization=self.other.id)

        self.middleware(request)

        self.assertEqual(request.organization, self.other)

    def test_disabled_organization_is_ignored(self):
        self.other.status = StatusChoices.DISABLED
        self.other.save()
        request = self._request(session_organization=self.other.id)

        self.middleware(request)

        self.assertIsNone(request.organization)

    @override_settings(ACADEMY_DEFAULT_ORGANIZATION='makerlab-academy')
    def test_superuser_fallback(self):
        superuser = User.objects.create_superuser(email='root@example.com', password='x')

        request = self._request(superuser)
        self.middleware(request)

        self.assertEqual(request.organization, self.organization)

    def test_anonymous_without_session(self):
        request = self._request()
        self.middleware(request)
        self.assertIsNone(request.organization)


class ExceptionHandlingMiddlewareTest(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.middleware = ExceptionHandlingMiddleware(lambda r: None)

    def test_academy_exception_becomes_json(self):
        response = self.middleware.process_exception(self.factory.get('/x/'), NotFoundError("Program 9 not found"))

        self.assertEqual(response.status_code, 404)
        self.assertIn(b'"NOT_FOUND"', response.content)

    @override_settings(DEBUG=False)
    def test_unexpected_error_is_hidden(self):
        response = self.middleware.process_exception(self.factory.get('/x/'), RuntimeError("boom"))

        self.assertEqual(response.status_code, 500)
        self.assertNotIn(b'boom', response.content)


class SecurityHeadersMiddlewareTest(TestCase):
    def test_headers(self):
        middleware = SecurityHeadersMiddleware(lambda r: HttpResponse())
        response = middleware(RequestFactory().get('/'))

        self.assertEqual(response['X-Content-Type-Options'], 'nosniff')
