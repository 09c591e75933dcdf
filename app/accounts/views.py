"""
Accounts views.

This module provides API views for:
- Resolve-or-create of the caller's user record (first contact)
- Reading the caller's own record
- Online status updates
- User search for starting conversations

Related files:
    - serializers.py: Request/response serialization
    - services.py: IdentityService
    - urls.py: URL routing

Note:
    All views are AllowAny. Authentication is decided per operation:
    reads degrade to null/empty for anonymous callers, writes answer 401.
"""

from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from accounts.mixins import CallerMixin
from accounts.serializers import (
    OnlineStatusSerializer,
    UserSearchQuerySerializer,
    UserSerializer,
)
from accounts.services import IdentityService
from core.views import service_failure_response


class MeView(CallerMixin, APIView):
    """
    The caller's own user record.

    GET: Current user, or null when anonymous or not yet created
    POST: Resolve-or-create from the token's identity claims

    URL: /api/v1/accounts/me/
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Get current user",
        tags=["Accounts"],
        responses={200: UserSerializer},
    )
    def get(self, request):
        user = IdentityService.get_me(self.get_identity())
        if user is None:
            return Response(None)
        return Response(UserSerializer(user).data)

    @extend_schema(
        summary="Resolve or create current user",
        description=(
            "Create the user on first contact, or patch name/email/avatar "
            "when the identity provider reports new values. Idempotent."
        ),
        tags=["Accounts"],
        request=None,
        responses={
            200: UserSerializer,
            401: OpenApiResponse(description="No bearer token"),
        },
    )
    def post(self, request):
        result = IdentityService.resolve_or_create(self.get_identity())
        if not result.success:
            return service_failure_response(result)
        return Response(UserSerializer(result.data).data)


class OnlineStatusView(CallerMixin, APIView):
    """
    Update the caller's online flag.

    URL: /api/v1/accounts/me/status/

    Request body:
        {"is_online": true}

    Anonymous callers get a 204 without any write.
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Set online status",
        tags=["Accounts"],
        request=OnlineStatusSerializer,
        responses={200: UserSerializer, 204: None},
    )
    def post(self, request):
        serializer = OnlineStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = IdentityService.set_online_status(
            self.get_caller(), serializer.validated_data["is_online"]
        )
        if result.data is None:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return Response(UserSerializer(result.data).data)


class UserSearchView(CallerMixin, APIView):
    """
    Search other users by display name or email.

    URL: /api/v1/accounts/users/?q=<term>
    """

    permission_classes = [AllowAny]

    @extend_schema(
        summary="Search users",
        tags=["Accounts"],
        parameters=[
            OpenApiParameter(
                "q",
                str,
                description="Case-insensitive substring of name or email",
            )
        ],
        responses={200: UserSerializer(many=True)},
    )
    def get(self, request):
        query = UserSearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        users = IdentityService.search_users(self.get_caller(), query.validated_data["q"])
        return Response(UserSerializer(users, many=True).data)
