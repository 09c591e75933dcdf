"""
View mixins for resolving the calling user.

Every chat endpoint needs the same three answers about the request: which
identity the provider asserted, which User backs it, and a ServiceResult
form of that lookup for write paths.

Usage:
    from accounts.mixins import CallerMixin

    class MessageListView(CallerMixin, APIView):
        def post(self, request, conversation_id):
            result = self.require_caller()
            if not result.success:
                return service_failure_response(result)
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from accounts.identity import ExternalIdentity
from accounts.services import IdentityService

if TYPE_CHECKING:
    from accounts.models import User
    from core.services import ServiceResult


class CallerMixin:
    """Resolve the caller from ``request.auth`` set by ExternalIdentityAuthentication."""

    def get_identity(self) -> ExternalIdentity | None:
        auth = getattr(self.request, "auth", None)
        if isinstance(auth, ExternalIdentity):
            return auth
        return None

    def get_caller(self) -> User | None:
        """Backing user for reads; None degrades reads to empty results."""
        user = self.request.user
        if user is not None and user.is_authenticated:
            return user
        return None

    def require_caller(self) -> ServiceResult[User]:
        """Resolve the caller for writes (UNAUTHENTICATED / USER_NOT_FOUND)."""
        return IdentityService.resolve_caller(self.get_identity())
