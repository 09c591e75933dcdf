"""
Accounts models.

This module defines the User model: the durable record behind an
externally authenticated caller.

Related files:
    - managers.py: UserManager keyed by external subject
    - identity.py: ExternalIdentity, the narrow identity-provider contract
    - services.py: IdentityService (the only writer of profile and presence)

Design Decisions:
    - The identity provider owns authentication; passwords are unusable
    - Profile attributes (name, email, avatar) mirror the provider and are
      patched only when they drift
    - is_online/last_seen_at is a per-user row with explicit writers,
      last write wins across devices
"""

from django.contrib.auth.models import AbstractBaseUser
from django.db import models
from django.utils import timezone

from accounts.identity import DEFAULT_DISPLAY_NAME
from accounts.managers import UserManager
from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel


class User(UUIDPrimaryKeyMixin, AbstractBaseUser, BaseModel):
    """
    Chat user created on first authenticated contact.

    Fields:
        external_subject: Identity-provider subject, unique, the username
        display_name: Name shown to other users ("Anonymous" if unknown)
        email: Email from the provider (may be empty)
        avatar_url: Picture URL from the provider (optional)
        is_online: Best-effort online flag set by the client
        last_seen_at: When the online flag or the user was last touched
        is_active: Deactivated users cannot authenticate

    Lifecycle:
        Created by IdentityService.resolve_or_create(), patched on profile
        drift or presence change, never deleted.
    """

    external_subject = models.CharField(
        max_length=255,
        unique=True,
        help_text="Stable subject identifier issued by the identity provider",
    )

    display_name = models.CharField(
        max_length=255,
        default=DEFAULT_DISPLAY_NAME,
        help_text="Display name from the identity provider",
    )

    email = models.EmailField(
        max_length=254,
        blank=True,
        default="",
        db_index=True,
        help_text="Email from the identity provider (not unique, may be empty)",
    )

    avatar_url = models.URLField(
        max_length=1024,
        null=True,
        blank=True,
        help_text="Profile picture URL from the identity provider",
    )

    is_online = models.BooleanField(
        default=False,
        help_text="Whether the user is currently online (last write wins)",
    )

    last_seen_at = models.DateTimeField(
        default=timezone.now,
        help_text="When the user's presence was last updated",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user may authenticate. Deactivate instead of deleting.",
    )

    USERNAME_FIELD = "external_subject"
    EMAIL_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        db_table = "accounts_user"
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["display_name", "created_at"]

    def __str__(self):
        return f"{self.display_name} ({self.external_subject})"

    def get_full_name(self):
        return self.display_name

    def get_short_name(self):
        return self.display_name
