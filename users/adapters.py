# users/adapters.py
"""
ACCOUNT ADAPTER - Staff sign-in through allauth

Accounts are created by staff (team invitations) or provisioned at
enrollment, so public sign-up is closed unless explicitly enabled.
"""
import logging

from allauth.account.adapter import DefaultAccountAdapter
from django.conf import settings
from django.core.exceptions import ValidationError
from django.urls import reverse

from core.middleware import SESSION_ORGANIZATION_KEY

logger = logging.getLogger(__name__)


class AcademyAccountAdapter(DefaultAccountAdapter):
    """Custom account adapter for the academy back office."""

    def is_open_for_signup(self, request):
        return getattr(settings, 'ACCOUNT_ALLOW_REGISTRATION', False)

    def clean_email(self, email):
        """Lowercase and restrict to allowed domains (if configured)."""
        email = super().clean_email(email).lower()

        allowed_domains = getattr(settings, 'ALLOWED_EMAIL_DOMAINS', [])
        if allowed_domains:
            domain = email.split('@')[-1]
            if domain not in allowed_domains:
                raise ValidationError(
                    f"Email domain {domain} is not allowed. "
                    f"Please use an email from: {', '.join(allowed_domains)}"
                )
        return email

    def get_login_redirect_url(self, request):
        return reverse('users:me')

    def pre_login(self, request, user, **kwargs):
        """Pin the user's organization in the session before signing in."""
        profile = getattr(user, 'profile', None)
        if profile is not None and profile.organization_id:
            request.session[SESSION_ORGANIZATION_KEY] = profile.organization_id
        return super().pre_login(request, user, **kwargs)
