"""
Accounts service layer.

This module contains IdentityService: the bridge between the identity
provider's assertions and the durable User record.

Responsibilities:
    - Create the user on first authenticated contact
    - Keep name/email/avatar in step with the provider (patch on drift only)
    - Resolve the caller for every other service call
    - Maintain the online flag and last-seen timestamp
    - Look users up for the "start a conversation" picker

Related files:
    - identity.py: ExternalIdentity input contract
    - authentication.py: builds the identity from the bearer token
    - views.py: HTTP endpoints

Usage:
    from accounts.services import IdentityService

    result = IdentityService.resolve_caller(identity)
    if not result.success:
        return service_failure_response(result)
    caller = result.data
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.db import IntegrityError
from django.db.models import Q
from django.utils import timezone

from accounts.models import User
from core.constants import ErrorCode
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from accounts.identity import ExternalIdentity


class IdentityService(BaseService):
    """
    Map identity-provider subjects to User records.

    Methods:
        resolve_or_create: Idempotent create/patch on first contact
        resolve_caller: Read-only lookup used before every service call
        set_online_status: Update presence flag
        get_me: Current user or None
        search_users: Case-insensitive lookup by name or email
    """

    @classmethod
    def get_by_identity(cls, identity: ExternalIdentity | None) -> User | None:
        """Return the user backing ``identity`` or None."""
        if identity is None:
            return None
        return User.objects.filter(external_subject=identity.subject).first()

    @classmethod
    def resolve_or_create(
        cls, identity: ExternalIdentity | None
    ) -> ServiceResult[User]:
        """
        Ensure a User exists for the identity and mirrors its profile.

        On first contact the user is inserted online with last_seen_at=now.
        On later calls only fields that drifted are written; when nothing
        drifted there is no write at all.

        Two concurrent first contacts race on the unique external_subject
        index: the loser's insert fails, and it returns the winner's row.

        Args:
            identity: Caller identity, None when the request is anonymous

        Returns:
            ServiceResult with the User

        Error codes:
            UNAUTHENTICATED: No identity
            CONFLICT: Insert failed but no row could be re-read
        """
        logger = cls.get_logger()

        if identity is None:
            return ServiceResult.failure(
                "Authentication required", error_code=ErrorCode.UNAUTHENTICATED
            )

        profile = identity.profile_fields()
        user = cls.get_by_identity(identity)

        if user is None:
            try:
                with cls.atomic():
                    user = User.objects.create_user(
                        external_subject=identity.subject,
                        is_online=True,
                        last_seen_at=timezone.now(),
                        **profile,
                    )
            except IntegrityError:
                user = cls.get_by_identity(identity)
                if user is None:
                    logger.warning(
                        f"User insert for subject {identity.subject} failed "
                        f"and no existing row was found"
                    )
                    return ServiceResult.failure(
                        "Could not create user, try again",
                        error_code=ErrorCode.CONFLICT,
                    )
                logger.info(
                    f"Concurrent first contact for subject {identity.subject}, "
                    f"using existing user {user.id}"
                )
            else:
                logger.info(f"Created user {user.id} for subject {identity.subject}")
                return ServiceResult.success(user)

        drifted = [field for field, value in profile.items() if getattr(user, field) != value]
        if drifted:
            for field in drifted:
                setattr(user, field, profile[field])
            user.save(update_fields=[*drifted, "updated_at"])
            logger.debug(f"Patched {', '.join(drifted)} on user {user.id}")

        return ServiceResult.success(user)

    @classmethod
    def resolve_caller(cls, identity: ExternalIdentity | None) -> ServiceResult[User]:
        """
        Resolve the acting user for a service call. Never writes.

        Error codes:
            UNAUTHENTICATED: No identity
            USER_NOT_FOUND: Identity has no backing user yet
        """
        if identity is None:
            return ServiceResult.failure(
                "Authentication required", error_code=ErrorCode.UNAUTHENTICATED
            )

        user = cls.get_by_identity(identity)
        if user is None:
            return ServiceResult.failure(
                "User not found", error_code=ErrorCode.USER_NOT_FOUND
            )

        return ServiceResult.success(user)

    @classmethod
    def set_online_status(cls, user: User | None, is_online: bool) -> ServiceResult[User | None]:
        """
        Set the user's online flag and stamp last_seen_at.

        Last write wins across devices. Without a caller this is a
        successful no-op.
        """
        if user is None:
            return ServiceResult.success(None)

        now = timezone.now()
        User.objects.filter(pk=user.pk).update(
            is_online=is_online, last_seen_at=now, updated_at=now
        )
        user.is_online = is_online
        user.last_seen_at = now
        user.updated_at = now

        cls.get_logger().debug(f"User {user.id} is_online={is_online}")
        return ServiceResult.success(user)

    @classmethod
    def get_me(cls, identity: ExternalIdentity | None) -> User | None:
        return cls.get_by_identity(identity)

    @classmethod
    def search_users(cls, user: User | None, term: str = "") -> list[User]:
        """
        Find other users whose display name or email contains ``term``.

        Matching is case-insensitive. A blank term matches everyone; the
        caller is always excluded. Anonymous callers get an empty list.
        """
        if user is None:
            return []

        queryset = User.objects.filter(is_active=True).exclude(pk=user.pk)

        term = (term or "").strip()
        if term:
            queryset = queryset.filter(
                Q(display_name__icontains=term) | Q(email__icontains=term)
            )

        return list(queryset.order_by("display_name", "created_at"))
