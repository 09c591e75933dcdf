"""
The narrow identity contract between the identity provider and this service.

The provider's token carries many claims; only four of them matter here. The
authentication class narrows the validated payload to an ExternalIdentity,
and everything downstream (IdentityService, views) works with that instead
of the raw claims.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Mapping
    from typing import Any

DEFAULT_DISPLAY_NAME = "Anonymous"


@dataclass(frozen=True)
class ExternalIdentity:
    """
    Caller identity as asserted by the identity provider.

    Attributes:
        subject: Stable subject identifier (the ``sub`` claim)
        name: Display name (``name`` claim), if any
        email: Email address (``email`` claim), if any
        picture_url: Profile picture URL (``picture`` claim), if any
    """

    subject: str
    name: str | None = None
    email: str | None = None
    picture_url: str | None = None

    @classmethod
    def from_claims(cls, claims: Mapping[str, Any]) -> ExternalIdentity | None:
        """
        Build an identity from a validated token payload.

        Returns None when the payload carries no usable subject.
        """
        subject = claims.get("sub")
        if subject is None or not str(subject).strip():
            return None

        return cls(
            subject=str(subject),
            name=claims.get("name") or None,
            email=claims.get("email") or None,
            picture_url=claims.get("picture") or None,
        )

    def profile_fields(self) -> dict[str, Any]:
        """User field values this identity asserts, with defaults applied."""
        return {
            "display_name": self.name or DEFAULT_DISPLAY_NAME,
            "email": self.email or "",
            "avatar_url": self.picture_url,
        }
