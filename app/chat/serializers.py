"""
Serializers for chat API.

This module provides serializers for the chat system:
- Conversation serializers (list, detail, create)
- Message serializers (read, create, edit)
- Reaction and typing serializers

Serializer Hierarchy:
    ConversationListSerializer: List view with unread count and last message
    ConversationDetailSerializer: Adds every other member (groups)
    ConversationCreateSerializer: Direct (other_user_id) or group (name, member_ids)
    MemberAddSerializer: Add members to a group

    MessageSerializer: Message with sender and reactions
    MessagePreviewSerializer: Minimal message for list preview
    MessageCreateSerializer / MessageEditSerializer: Send and edit

    ReactionSerializer / ReactionToggleSerializer: Reactions
    TypingSetSerializer: Typing state

Design Decisions:
    - Read and write serializers are separate for clarity
    - Conversation read serializers render instances decorated by
      chat.projections (unread_count, other_user, other_users)
    - Write serializers only check shape; services own the business rules
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.serializers import UserSerializer
from chat.constants import CONVERSATION_CONFIG, MESSAGE_CONFIG
from chat.models import Conversation, Message, Reaction


# =============================================================================
# Message Serializers
# =============================================================================


class ReactionSerializer(serializers.ModelSerializer):
    """One emoji reaction on a message."""

    user_id = serializers.UUIDField(read_only=True)

    class Meta:
        model = Reaction
        fields = ["id", "message_id", "user_id", "emoji", "created_at"]
        read_only_fields = fields


class MessagePreviewSerializer(serializers.ModelSerializer):
    """
    Minimal message serializer for conversation list preview.

    Used to show the last message in conversation lists.
    """

    sender_id = serializers.UUIDField(read_only=True)
    sender_name = serializers.CharField(source="sender.display_name", read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "sender_id",
            "sender_name",
            "content",
            "is_deleted",
            "created_at",
        ]
        read_only_fields = fields


class MessageSerializer(serializers.ModelSerializer):
    """
    Full message serializer for message lists.

    Includes sender display name and avatar plus every reaction. Deleted
    messages keep their place with empty content.
    """

    sender_id = serializers.UUIDField(read_only=True)
    sender_name = serializers.CharField(source="sender.display_name", read_only=True)
    sender_avatar_url = serializers.CharField(
        source="sender.avatar_url", read_only=True, allow_null=True
    )
    reply_to_id = serializers.IntegerField(read_only=True, allow_null=True)
    reactions = ReactionSerializer(many=True, read_only=True)

    class Meta:
        model = Message
        fields = [
            "id",
            "conversation_id",
            "sender_id",
            "sender_name",
            "sender_avatar_url",
            "content",
            "is_deleted",
            "is_edited",
            "reply_to_id",
            "reactions",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class MessageCreateSerializer(serializers.Serializer):
    """
    Serializer for sending messages.

    Supports:
    - Regular text messages
    - Replies (with reply_to_id of a message in the same conversation)
    """

    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        allow_blank=True,
        trim_whitespace=False,
        help_text="Message content (max 10,000 characters)",
    )
    reply_to_id = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="Message being replied to (optional)",
    )


class MessageEditSerializer(serializers.Serializer):
    content = serializers.CharField(
        max_length=MESSAGE_CONFIG.MAX_CONTENT_LENGTH,
        allow_blank=True,
        trim_whitespace=False,
    )


class ReactionToggleSerializer(serializers.Serializer):
    emoji = serializers.CharField(allow_blank=True, max_length=64)


class ReactionToggleResponseSerializer(serializers.Serializer):
    added = serializers.BooleanField()
    reaction = ReactionSerializer(allow_null=True)


# =============================================================================
# Conversation Serializers
# =============================================================================


class ConversationListSerializer(serializers.ModelSerializer):
    """
    Conversation as listed for one member.

    Expects an instance decorated by ConversationProjection; plain
    instances (e.g. fresh from create) render with zero unread and no
    other members resolved.
    """

    unread_count = serializers.SerializerMethodField()
    other_user = serializers.SerializerMethodField()
    last_message = MessagePreviewSerializer(read_only=True, allow_null=True)

    class Meta:
        model = Conversation
        fields = [
            "id",
            "is_group",
            "name",
            "other_user",
            "unread_count",
            "last_message",
            "created_at",
        ]
        read_only_fields = fields

    def get_unread_count(self, obj: Conversation) -> int:
        return getattr(obj, "unread_count", 0)

    def get_other_user(self, obj: Conversation) -> dict | None:
        other_user = getattr(obj, "other_user", None)
        if other_user is None:
            return None
        return UserSerializer(other_user).data


class ConversationDetailSerializer(ConversationListSerializer):
    """Adds every other member, used for the single-conversation view."""

    other_users = serializers.SerializerMethodField()

    class Meta(ConversationListSerializer.Meta):
        fields = ConversationListSerializer.Meta.fields + ["other_users"]
        read_only_fields = fields

    def get_other_users(self, obj: Conversation) -> list[dict]:
        return UserSerializer(getattr(obj, "other_users", []), many=True).data


class ConversationCreateSerializer(serializers.Serializer):
    """
    Serializer for creating conversations.

    Supports both direct (1:1) and group conversations:
    - Direct: ``{"other_user_id": ...}``, finds existing or creates new
    - Group: ``{"name": ..., "member_ids": [...]}``
    """

    other_user_id = serializers.UUIDField(
        required=False,
        help_text="The other participant of a direct conversation",
    )
    name = serializers.CharField(
        max_length=CONVERSATION_CONFIG.MAX_GROUP_NAME_LENGTH,
        required=False,
        allow_blank=True,
        help_text="Group name (creates a group conversation)",
    )
    member_ids = serializers.ListField(
        child=serializers.UUIDField(),
        required=False,
        default=list,
        help_text="Users to add to the group, excluding yourself",
    )

    def validate(self, attrs: dict) -> dict:
        has_other = attrs.get("other_user_id") is not None
        has_name = "name" in attrs

        if has_other == has_name:
            raise serializers.ValidationError(
                "Provide either other_user_id (direct) or name (group)"
            )
        return attrs

    @property
    def is_group(self) -> bool:
        return "name" in self.validated_data


class MemberAddSerializer(serializers.Serializer):
    member_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1)


class TypingSetSerializer(serializers.Serializer):
    is_typing = serializers.BooleanField()
