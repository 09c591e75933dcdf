"""
Custom user manager for identity-provider subjects.

Users never log in with a password here: the external identity provider
authenticates them, and the subject claim of its token is the username.

Related files:
    - models.py: User model that uses this manager
    - services.py: IdentityService, the only caller of create_user()
"""

from django.contrib.auth.models import BaseUserManager


class UserManager(BaseUserManager):
    """
    Manager for User model keyed by external subject.

    Usage:
        user = User.objects.create_user(
            external_subject="idp|123",
            display_name="Ada",
            email="ada@example.com",
        )
    """

    def create_user(self, external_subject, **extra_fields):
        """
        Create and save a user for the given identity-provider subject.

        Args:
            external_subject: Stable subject identifier from the provider
            **extra_fields: Profile and presence fields to set on the user

        Returns:
            User: The created user instance

        Raises:
            ValueError: If external_subject is blank
        """
        if not external_subject:
            raise ValueError("The external subject must be set")

        email = extra_fields.pop("email", "") or ""

        user = self.model(external_subject=external_subject, email=email, **extra_fields)
        user.set_unusable_password()
        user.save(using=self._db)
        return user

    def get_by_natural_key(self, external_subject):
        return self.get(external_subject=external_subject)
