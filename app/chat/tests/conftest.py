"""
Test configuration and fixtures for chat tests.

This module provides:
- Named users (alice, bob, carol) and an outsider
- A direct conversation between alice and bob
- A group conversation "Team" with alice, bob and carol
- API clients authenticated as each user

Usage:
    def test_example(group_conversation, alice_client):
        response = alice_client.get(f"/api/v1/chat/conversations/{group_conversation.id}/")
        assert response.status_code == 200
"""

import pytest

from accounts.tests.factories import UserFactory
from chat.tests.factories import DirectConversationFactory, GroupConversationFactory


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def alice(db):
    return UserFactory(display_name="Alice")


@pytest.fixture
def bob(db):
    return UserFactory(display_name="Bob")


@pytest.fixture
def carol(db):
    return UserFactory(display_name="Carol")


@pytest.fixture
def outsider(db):
    """A user who belongs to none of the test conversations."""
    return UserFactory(display_name="Mallory")


# =============================================================================
# Conversation Fixtures
# =============================================================================


@pytest.fixture
def direct_conversation(alice, bob):
    """Direct conversation between alice and bob."""
    return DirectConversationFactory(user1=alice, user2=bob)


@pytest.fixture
def group_conversation(alice, bob, carol):
    """Group "Team" with alice, bob and carol."""
    return GroupConversationFactory(name="Team", members=[alice, bob, carol])


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def alice_client(alice, client_for):
    return client_for(alice)


@pytest.fixture
def bob_client(bob, client_for):
    return client_for(bob)


@pytest.fixture
def outsider_client(outsider, client_for):
    return client_for(outsider)
