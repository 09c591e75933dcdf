"""
Tests for accounts API views.

These tests verify:
- HTTP status codes
- Response formats
- Anonymous and first-contact behavior
"""

from rest_framework import status

from accounts.models import User
from accounts.tests.factories import UserFactory

ME_URL = "/api/v1/accounts/me/"
STATUS_URL = "/api/v1/accounts/me/status/"
SEARCH_URL = "/api/v1/accounts/users/"


# =============================================================================
# TestMeView
# =============================================================================


class TestMeView:
    """Tests for GET/POST /api/v1/accounts/me/."""

    def test_get_anonymous_returns_null(self, db, api_client):
        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data is None

    def test_get_before_first_contact_returns_null(self, db, api_client, make_token):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(sub='idp|new')}")

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data is None

    def test_post_creates_user_on_first_contact(self, db, api_client, make_token):
        token = make_token(sub="idp|new", name="New Person", email="np@example.com")
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.post(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["display_name"] == "New Person"
        assert response.data["email"] == "np@example.com"
        assert response.data["is_online"] is True
        assert User.objects.filter(external_subject="idp|new").count() == 1

    def test_post_twice_keeps_one_user(self, db, api_client, make_token):
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {make_token(sub='idp|new')}")

        first = api_client.post(ME_URL)
        second = api_client.post(ME_URL)

        assert first.data["id"] == second.data["id"]
        assert User.objects.count() == 1

    def test_post_anonymous_is_401(self, db, api_client):
        response = api_client.post(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.data["error_code"] == "UNAUTHENTICATED"

    def test_get_returns_own_record(self, db, client_for):
        user = UserFactory(display_name="Grace")

        response = client_for(user).get(ME_URL)

        assert response.status_code == status.HTTP_200_OK
        assert response.data["id"] == str(user.id)
        assert response.data["display_name"] == "Grace"

    def test_invalid_token_is_401(self, db, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-jwt")

        response = api_client.get(ME_URL)

        assert response.status_code == status.HTTP_401_UNAUTHORIZED


# =============================================================================
# TestOnlineStatusView
# =============================================================================


class TestOnlineStatusView:
    """Tests for POST /api/v1/accounts/me/status/."""

    def test_sets_offline(self, db, client_for):
        user = UserFactory(is_online=True)

        response = client_for(user).post(STATUS_URL, {"is_online": False}, format="json")

        user.refresh_from_db()
        assert response.status_code == status.HTTP_200_OK
        assert response.data["is_online"] is False
        assert user.is_online is False

    def test_anonymous_is_noop(self, db, api_client):
        response = api_client.post(STATUS_URL, {"is_online": True}, format="json")

        assert response.status_code == status.HTTP_204_NO_CONTENT

    def test_missing_flag_is_400(self, db, client_for):
        response = client_for(UserFactory()).post(STATUS_URL, {}, format="json")

        assert response.status_code == status.HTTP_400_BAD_REQUEST


# =============================================================================
# TestUserSearchView
# =============================================================================


class TestUserSearchView:
    """Tests for GET /api/v1/accounts/users/."""

    def test_search_by_name(self, db, client_for):
        caller = UserFactory(display_name="Ada Lovelace")
        grace = UserFactory(display_name="Grace Hopper")
        UserFactory(display_name="Alan Turing")

        response = client_for(caller).get(SEARCH_URL, {"q": "grace"})

        assert response.status_code == status.HTTP_200_OK
        assert [row["id"] for row in response.data] == [str(grace.id)]

    def test_without_term_lists_other_users(self, db, client_for):
        caller = UserFactory()
        UserFactory.create_batch(2)

        response = client_for(caller).get(SEARCH_URL)

        assert response.status_code == status.HTTP_200_OK
        assert len(response.data) == 2
        assert str(caller.id) not in {row["id"] for row in response.data}

    def test_anonymous_gets_empty_list(self, db, api_client):
        UserFactory()

        response = api_client.get(SEARCH_URL, {"q": "a"})

        assert response.status_code == status.HTTP_200_OK
        assert response.data == []
