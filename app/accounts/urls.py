"""
URL configuration for accounts app.

URL structure:
    /api/v1/accounts/me/           - Current user (GET), resolve-or-create (POST)
    /api/v1/accounts/me/status/    - Online status (POST)
    /api/v1/accounts/users/        - User search (GET, ?q=)
"""

from django.urls import path

from accounts.views import MeView, OnlineStatusView, UserSearchView

app_name = "accounts"

urlpatterns = [
    path("me/", MeView.as_view(), name="me"),
    path("me/status/", OnlineStatusView.as_view(), name="online-status"),
    path("users/", UserSearchView.as_view(), name="user-search"),
]
