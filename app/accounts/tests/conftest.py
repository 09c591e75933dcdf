"""
Test configuration and fixtures for accounts tests.

Usage:
    def test_example(user, identity):
        result = IdentityService.resolve_caller(identity)
"""

import pytest

from accounts.identity import ExternalIdentity
from accounts.tests.factories import UserFactory


@pytest.fixture
def user(db):
    """A user with a complete profile."""
    return UserFactory(
        external_subject="idp|ada",
        display_name="Ada Lovelace",
        email="ada@example.com",
        avatar_url="https://img.example.com/ada.png",
    )


@pytest.fixture
def identity():
    """Identity matching the ``user`` fixture exactly."""
    return ExternalIdentity(
        subject="idp|ada",
        name="Ada Lovelace",
        email="ada@example.com",
        picture_url="https://img.example.com/ada.png",
    )


@pytest.fixture
def new_identity():
    """Identity of someone who has never called the API."""
    return ExternalIdentity(subject="idp|newcomer", name="Newcomer", email="new@example.com")
