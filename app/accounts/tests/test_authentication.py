"""
Tests for ExternalIdentityAuthentication.

Requests are built with APIRequestFactory and passed straight to the
authenticator, so these tests exercise token parsing and user lookup
without routing.
"""

from datetime import timedelta

import pytest
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.test import APIRequestFactory
from rest_framework_simplejwt.exceptions import InvalidToken

from accounts.authentication import ExternalIdentityAuthentication
from accounts.identity import ExternalIdentity
from accounts.tests.factories import UserFactory


@pytest.fixture
def authenticate():
    """Run the authenticator against a request with the given Authorization header."""
    factory = APIRequestFactory()

    def _authenticate(header=None):
        extra = {"HTTP_AUTHORIZATION": header} if header is not None else {}
        request = factory.get("/api/v1/accounts/me/", **extra)
        return ExternalIdentityAuthentication().authenticate(request)

    return _authenticate


class TestExternalIdentityAuthentication:
    """
    Verifies:
        - Requests without a bearer token stay anonymous (None)
        - A valid token yields (user, identity), or AnonymousUser before first contact
        - Invalid tokens and inactive users are rejected
    """

    def test_no_header_returns_none(self, db, authenticate):
        assert authenticate() is None

    def test_other_scheme_returns_none(self, db, authenticate):
        assert authenticate("Basic dXNlcjpwYXNz") is None

    def test_unknown_subject_is_anonymous_with_identity(self, db, authenticate, make_token):
        token = make_token(sub="idp|first-timer", name="First Timer", email="ft@example.com")

        user, identity = authenticate(f"Bearer {token}")

        assert isinstance(user, AnonymousUser)
        assert identity == ExternalIdentity(
            subject="idp|first-timer", name="First Timer", email="ft@example.com"
        )

    def test_known_subject_returns_user(self, db, authenticate, make_token):
        existing = UserFactory(external_subject="idp|known")
        token = make_token(sub="idp|known", picture="https://img.example.com/k.png")

        user, identity = authenticate(f"Bearer {token}")

        assert user == existing
        assert identity.subject == "idp|known"
        assert identity.picture_url == "https://img.example.com/k.png"

    def test_token_without_subject_is_rejected(self, db, authenticate, make_token):
        token = make_token(sub=None, name="Nobody")

        with pytest.raises(AuthenticationFailed) as exc_info:
            authenticate(f"Bearer {token}")

        assert exc_info.value.get_codes() == "no_subject"

    def test_expired_token_is_rejected(self, db, authenticate, make_token):
        token = make_token(sub="idp|late", lifetime=timedelta(minutes=-1))

        with pytest.raises(InvalidToken):
            authenticate(f"Bearer {token}")

    def test_garbage_token_is_rejected(self, db, authenticate):
        with pytest.raises(InvalidToken):
            authenticate("Bearer not-a-jwt")

    def test_inactive_user_is_rejected(self, db, authenticate, make_token):
        UserFactory(external_subject="idp|banned", is_active=False)
        token = make_token(sub="idp|banned")

        with pytest.raises(AuthenticationFailed) as exc_info:
            authenticate(f"Bearer {token}")

        assert exc_info.value.get_codes() == "user_inactive"
