"""
ViewSets for chat API.

This module provides REST API endpoints for the chat system:
- ConversationViewSet: Conversations, membership, read state, messages, typing
- MessageViewSet: Edit, delete and react to a single message

URL Structure:
    /api/v1/chat/conversations/                      GET, POST
    /api/v1/chat/conversations/{id}/                 GET, DELETE
    /api/v1/chat/conversations/{id}/members/         POST
    /api/v1/chat/conversations/{id}/read/            POST
    /api/v1/chat/conversations/{id}/messages/        GET, POST
    /api/v1/chat/conversations/{id}/typing/          GET, POST
    /api/v1/chat/messages/{id}/                      PATCH, DELETE
    /api/v1/chat/messages/{id}/reactions/toggle/     POST

Design Decisions:
    - Permissions are AllowAny; reads degrade to empty/null for anonymous
      callers and writes fail with 401 from the service layer
    - Writes resolve the caller through IdentityService first, so a token
      without a user record answers USER_NOT_FOUND
    - All operations use the service layer for business logic
    - Service failures map to HTTP status through core.views.service_failure_response
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiResponse, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

from accounts.mixins import CallerMixin
from accounts.serializers import UserSerializer
from chat.serializers import (
    ConversationCreateSerializer,
    ConversationDetailSerializer,
    ConversationListSerializer,
    MemberAddSerializer,
    MessageCreateSerializer,
    MessageEditSerializer,
    MessageSerializer,
    ReactionSerializer,
    ReactionToggleResponseSerializer,
    ReactionToggleSerializer,
    TypingSetSerializer,
)
from chat.services import (
    ConversationService,
    MessageService,
    ReactionService,
    TypingService,
)
from core.views import service_failure_response


# =============================================================================
# Conversations
# =============================================================================


@extend_schema_view(
    list=extend_schema(
        operation_id="list_conversations",
        summary="List my conversations",
        tags=["Chat - Conversations"],
        responses={200: ConversationListSerializer(many=True)},
    ),
    retrieve=extend_schema(
        operation_id="get_conversation",
        summary="Get conversation",
        tags=["Chat - Conversations"],
        responses={200: ConversationDetailSerializer},
    ),
    destroy=extend_schema(
        operation_id="delete_group",
        summary="Delete group conversation",
        tags=["Chat - Conversations"],
        responses={204: None},
    ),
)
class ConversationViewSet(CallerMixin, viewsets.ViewSet):
    """
    ViewSet for conversation operations.

    list:
        All conversations of the caller, most recent activity first, with
        unread counts and last message preview.

    create:
        Direct: returns the existing conversation with the other user or
        creates it. Group: creates a new named group.

    retrieve:
        One conversation the caller belongs to (null otherwise).

    destroy:
        Delete a group and all its messages. Any member may do this.

    members:
        Add users to a group.

    read:
        Reset the caller's unread count.

    messages:
        History (GET) or send (POST).

    typing:
        Who is typing (GET) or report own typing state (POST).
    """

    permission_classes = [AllowAny]
    lookup_value_regex = r"\d+"

    def _render(self, conversation_id, status_code=status.HTTP_200_OK):
        conversation = ConversationService.get_for_user(self.get_caller(), conversation_id)
        return Response(ConversationDetailSerializer(conversation).data, status=status_code)

    def list(self, request):
        conversations = ConversationService.list_for_user(self.get_caller())
        return Response(ConversationListSerializer(conversations, many=True).data)

    @extend_schema(
        operation_id="create_conversation",
        summary="Get or create direct conversation, or create group",
        tags=["Chat - Conversations"],
        request=ConversationCreateSerializer,
        responses={
            200: ConversationDetailSerializer,
            201: ConversationDetailSerializer,
            409: OpenApiResponse(description="Group name taken or concurrent write"),
        },
    )
    def create(self, request):
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)
        caller = caller_result.data

        serializer = ConversationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = serializer.validated_data
        if serializer.is_group:
            result = ConversationService.create_group(
                caller, data["name"], data["member_ids"]
            )
            status_code = status.HTTP_201_CREATED
        else:
            result = ConversationService.get_or_create_direct(caller, data["other_user_id"])
            status_code = status.HTTP_200_OK

        if not result.success:
            return service_failure_response(result)

        return self._render(result.data.id, status_code)

    def retrieve(self, request, pk=None):
        conversation = ConversationService.get_for_user(self.get_caller(), pk)
        if conversation is None:
            return Response(None)
        return Response(ConversationDetailSerializer(conversation).data)

    def destroy(self, request, pk=None):
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        result = ConversationService.delete_group(caller_result.data, pk)
        if not result.success:
            return service_failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(
        operation_id="add_group_members",
        summary="Add group members",
        tags=["Chat - Conversations"],
        request=MemberAddSerializer,
        responses={200: ConversationDetailSerializer},
    )
    @action(detail=True, methods=["post"])
    def members(self, request, pk=None):
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        serializer = MemberAddSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ConversationService.add_group_members(
            caller_result.data, pk, serializer.validated_data["member_ids"]
        )
        if not result.success:
            return service_failure_response(result)

        return self._render(pk)

    @extend_schema(
        operation_id="mark_conversation_read",
        summary="Mark conversation as read",
        tags=["Chat - Conversations"],
        request=None,
        responses={200: OpenApiResponse(description='{"updated": bool}')},
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        result = ConversationService.mark_as_read(self.get_caller(), pk)
        return Response({"updated": result.data})

    @extend_schema(
        methods=["GET"],
        operation_id="list_messages",
        summary="List messages",
        tags=["Chat - Messages"],
        responses={200: MessageSerializer(many=True)},
    )
    @extend_schema(
        methods=["POST"],
        operation_id="send_message",
        summary="Send message",
        tags=["Chat - Messages"],
        request=MessageCreateSerializer,
        responses={201: MessageSerializer},
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "GET":
            messages = MessageService.list_messages(self.get_caller(), pk)
            return Response(MessageSerializer(messages, many=True).data)

        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        serializer = MessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.send_message(
            caller_result.data,
            pk,
            serializer.validated_data["content"],
            reply_to_id=serializer.validated_data.get("reply_to_id"),
        )
        if not result.success:
            return service_failure_response(result)

        return Response(MessageSerializer(result.data).data, status=status.HTTP_201_CREATED)

    @extend_schema(
        methods=["GET"],
        operation_id="list_typing_users",
        summary="Users typing now",
        tags=["Chat - Typing"],
        responses={200: UserSerializer(many=True)},
    )
    @extend_schema(
        methods=["POST"],
        operation_id="set_typing",
        summary="Report typing state",
        tags=["Chat - Typing"],
        request=TypingSetSerializer,
        responses={204: None},
    )
    @action(detail=True, methods=["get", "post"])
    def typing(self, request, pk=None):
        if request.method == "GET":
            users = TypingService.list_typing(self.get_caller(), pk)
            return Response(UserSerializer(users, many=True).data)

        serializer = TypingSetSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = TypingService.set_typing(
            self.get_caller(), pk, serializer.validated_data["is_typing"]
        )
        if not result.success:
            return service_failure_response(result)

        return Response(status=status.HTTP_204_NO_CONTENT)


# =============================================================================
# Messages
# =============================================================================


@extend_schema_view(
    partial_update=extend_schema(
        operation_id="edit_message",
        summary="Edit message",
        tags=["Chat - Messages"],
        request=MessageEditSerializer,
        responses={200: MessageSerializer},
    ),
    destroy=extend_schema(
        operation_id="delete_message",
        summary="Delete message",
        tags=["Chat - Messages"],
        responses={200: MessageSerializer},
    ),
)
class MessageViewSet(CallerMixin, viewsets.ViewSet):
    """
    ViewSet for single-message operations.

    partial_update:
        Edit own message content. Marks the message as edited.

    destroy:
        Soft delete own message. Content is cleared, position kept.

    toggle_reaction:
        Add the emoji if absent, remove it if present.
    """

    permission_classes = [AllowAny]
    lookup_value_regex = r"\d+"

    def partial_update(self, request, pk=None):
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        serializer = MessageEditSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = MessageService.edit_message(
            caller_result.data, pk, serializer.validated_data["content"]
        )
        if not result.success:
            return service_failure_response(result)

        return Response(MessageSerializer(result.data).data)

    def destroy(self, request, pk=None):
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        result = MessageService.delete_message(caller_result.data, pk)
        if not result.success:
            return service_failure_response(result)

        return Response(MessageSerializer(result.data).data)

    @extend_schema(
        operation_id="toggle_reaction",
        summary="Toggle reaction",
        tags=["Chat - Reactions"],
        request=ReactionToggleSerializer,
        responses={200: ReactionToggleResponseSerializer},
    )
    @action(detail=True, methods=["post"], url_path="reactions/toggle")
    def toggle_reaction(self, request, pk=None):
        """
        Toggle a reaction on a message.

        POST /api/v1/chat/messages/{id}/reactions/toggle/
        """
        caller_result = self.require_caller()
        if not caller_result.success:
            return service_failure_response(caller_result)

        serializer = ReactionToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = ReactionService.toggle_reaction(
            caller_result.data, pk, serializer.validated_data["emoji"]
        )
        if not result.success:
            return service_failure_response(result)

        added, reaction = result.data
        response_data = {
            "added": added,
            "reaction": ReactionSerializer(reaction).data if reaction else None,
        }
        return Response(response_data)
