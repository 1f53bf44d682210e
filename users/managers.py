# users/managers.py
"""
User manager for email logins.

Generated academy logins are lower-case addresses, so lookups and
uniqueness checks ignore case.
"""
from django.contrib.auth.models import UserManager as BaseUserManager
from django.utils.translation import gettext_lazy as _


class UserManager(BaseUserManager):

    def normalize_login(self, email):
        return self.normalize_email(email or '').strip().lower()

    def create_user(self, email, password=None, **extra_fields):
        """
        Create a user whose login is the email address.

        Without a password the account cannot sign in until one is set
        from the admin or through a reset.
        """
        email = self.normalize_login(email)
        if not email:
            raise ValueError(_('An email address is required'))

        user = self.model(email=email, **extra_fields)
        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        extra_fields.setdefault('is_staff', True)
        extra_fields.setdefault('is_superuser', True)

        if not (extra_fields['is_staff'] and extra_fields['is_superuser']):
            raise ValueError(_('Superusers need is_staff and is_superuser'))

        return self.create_user(email, password, **extra_fields)

    def get_by_natural_key(self, email):
        return self.get(email__iexact=email)

    def email_taken(self, email) -> bool:
        return self.filter(email__iexact=self.normalize_login(email)).exists()
