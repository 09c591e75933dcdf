"""
Shared pytest setup for every app under app/.

Provides:
- A fast password hasher (users never have usable passwords anyway)
- unit/integration/e2e markers derived from the test module name
- Fixtures that mint identity-provider tokens and authenticated clients

Fixtures specific to one app live in that app's tests/conftest.py.
"""

from datetime import timedelta

import pytest
from django.utils import timezone
from rest_framework.test import APIClient
from rest_framework_simplejwt.state import token_backend

# Module name -> marker. Modules not listed are integration tests.
MARKERS_BY_MODULE = {
    "test_integration.py": "e2e",
    "test_views.py": "integration",
    "test_services.py": "integration",
    "test_tasks.py": "integration",
    "test_authentication.py": "integration",
    "test_messages.py": "integration",
    "test_reactions.py": "integration",
    "test_typing.py": "integration",
    "test_models.py": "unit",
    "test_serializers.py": "unit",
    "test_identity.py": "unit",
}


def pytest_configure(config):
    from django.conf import settings

    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]


def pytest_collection_modifyitems(items):
    """
    Tag each test as unit, integration or e2e from its module name.

    A marker set explicitly on the test or its class wins.
    """
    for item in items:
        if {m.name for m in item.iter_markers()} & {"unit", "integration", "e2e"}:
            continue

        module = item.path.name
        marker = MARKERS_BY_MODULE.get(module, "integration")
        item.add_marker(getattr(pytest.mark, marker))


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Client without credentials."""
    return APIClient()


@pytest.fixture
def make_token():
    """
    Sign a bearer token the way the identity provider would.

    Usage:
        token = make_token(sub="idp|123", name="Ada")
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

    Pass ``sub=None`` for a token without a subject and a negative
    ``lifetime`` for an expired one.
    """

    def _make_token(sub="idp|subject", lifetime=timedelta(minutes=5), **claims):
        payload = {"exp": timezone.now() + lifetime, **claims}
        if sub is not None:
            payload["sub"] = sub
        return token_backend.encode(payload)

    return _make_token


@pytest.fixture
def client_for(make_token):
    """
    Client carrying a token for an existing user.

    Profile claims default to the user's stored values, so requests made
    with it never look like profile drift.

    Usage:
        response = client_for(user).get("/api/v1/chat/conversations/")
    """

    def _client_for(user, **claims):
        claims.setdefault("name", user.display_name)
        if user.email:
            claims.setdefault("email", user.email)
        if user.avatar_url:
            claims.setdefault("picture", user.avatar_url)

        client = APIClient()
        token = make_token(sub=user.external_subject, **claims)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")
        return client

    return _client_for
