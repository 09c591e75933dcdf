"""
URL configuration for the Django application.

The `urlpatterns` list routes URLs to views. This is the root URL configuration
that includes all app-specific routes.

URL Structure:
    /                              - ReDoc API documentation
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/accounts/              - Caller identity and presence
        me/                        - Current user (GET), resolve-or-create (POST)
        me/status/                 - Online status (POST)
        users/                     - User search (GET ?q=)
    /api/v1/chat/                  - Chat endpoints
        conversations/             - Conversation list / get-or-create direct / create group
        conversations/{id}/        - Conversation detail / delete group
        conversations/{id}/members/  - Add group members
        conversations/{id}/read/   - Mark conversation as read
        conversations/{id}/messages/ - Message list/send
        conversations/{id}/typing/ - Typing users / report typing
        messages/{id}/             - Edit / soft delete message
        messages/{id}/reactions/toggle/ - Toggle emoji reaction

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
# All routes here are prefixed with /api/v1/ automatically
api_v1_patterns = [
    path("accounts/", include("accounts.urls")),
    path("chat/", include("chat.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]
