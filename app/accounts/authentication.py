"""
DRF authentication backed by identity-provider tokens.

The identity provider signs a JWT for every client session. This module
validates it with simplejwt (signature, expiry, audience, issuer come from
SIMPLE_JWT settings), narrows the payload to an ExternalIdentity and looks up
the backing user.

Unlike stock JWTAuthentication, a valid token whose subject has no user row
yet is NOT rejected: the request proceeds as AnonymousUser with the identity
in ``request.auth``, so the client can call resolve-or-create on first
contact.
"""

import logging

from django.contrib.auth.models import AnonymousUser
from django.utils.translation import gettext_lazy as _
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

from accounts.identity import ExternalIdentity
from accounts.models import User

logger = logging.getLogger(__name__)


class ExternalIdentityAuthentication(JWTAuthentication):
    """
    Authenticate requests carrying an identity-provider bearer token.

    Returns:
        None when the request has no bearer token, otherwise
        ``(user, identity)`` where user is the backing User or
        AnonymousUser when none exists yet.

    Raises:
        InvalidToken: Signature, expiry, audience or issuer check failed
        AuthenticationFailed: Token has no subject, or the user is inactive
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header is None:
            return None

        raw_token = self.get_raw_token(header)
        if raw_token is None:
            return None

        validated_token = self.get_validated_token(raw_token)

        identity = ExternalIdentity.from_claims(validated_token.payload)
        if identity is None:
            raise AuthenticationFailed(
                _("Token contained no recognizable subject"), code="no_subject"
            )

        return self.get_user_for_identity(identity), identity

    def get_user_for_identity(self, identity):
        user = User.objects.filter(external_subject=identity.subject).first()
        if user is None:
            logger.debug(f"No user yet for subject {identity.subject}")
            return AnonymousUser()

        if not user.is_active:
            raise AuthenticationFailed(_("User is inactive"), code="user_inactive")

        return user
