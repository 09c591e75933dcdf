"""
Chat system models.

This module defines the data models for the chat system supporting:
- Direct (1:1) conversations between exactly two users
- Named group conversations

Models:
    Conversation: Container for messages between members
    DirectConversationPair: Helper for enforcing uniqueness of direct conversations
    Membership: User membership in a conversation with its unread counter
    Message: Individual message within a conversation
    Reaction: One user's emoji on one message
    TypingIndicator: Per (conversation, user) typing flag with a freshness stamp

Design Decisions:
    - Direct conversations keep the same two members for their lifetime
    - Only group conversations are ever deleted (hard delete, cascading)
    - Messages are soft deleted: content is cleared, the row stays in order
    - Unread counters live on Membership and are only changed with relative
      UPDATEs (F expressions), never read-modify-write
    - Uniqueness races are closed by database constraints, not by locks
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F, Q
from django.utils import timezone

from chat.constants import CONVERSATION_CONFIG, REACTION_CONFIG
from core.models import BaseModel


class Conversation(BaseModel):
    """
    A conversation between two or more users.

    Kinds:
        Direct (is_group=False): exactly 2 members, no name, unique per user
            pair (enforced via DirectConversationPair). Never deleted.

        Group (is_group=True): a unique name and any number of members.
            Any member may delete it, which removes all its data.

    Fields:
        is_group: Whether this is a group conversation
        name: Group name (NULL for direct conversations, unique when set)
        last_message: Most recent message (for previews and sorting)

    Relationships:
        memberships: All Membership records for this conversation
        messages: All Message records for this conversation
        direct_pair: DirectConversationPair if not a group
    """

    is_group = models.BooleanField(
        default=False,
        help_text="Whether this is a group conversation",
    )

    name = models.CharField(
        max_length=CONVERSATION_CONFIG.MAX_GROUP_NAME_LENGTH,
        null=True,
        blank=True,
        unique=True,
        help_text="Group name (null for direct conversations)",
    )

    last_message = models.ForeignKey(
        "chat.Message",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
        help_text="Most recent message in this conversation",
    )

    class Meta:
        db_table = "chat_conversation"
        ordering = ["-created_at"]
        constraints = [
            # Groups are named, direct conversations are not
            models.CheckConstraint(
                condition=(
                    Q(is_group=True, name__isnull=False)
                    | Q(is_group=False, name__isnull=True)
                ),
                name="chat_conversation_name_iff_group",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        if self.is_group:
            return f"Group: {self.name}"
        return f"Direct({self.pk})"

    def has_member(self, user) -> bool:
        """Check if ``user`` holds a membership in this conversation."""
        if user is None:
            return False
        return self.memberships.filter(user=user).exists()


class DirectConversationPair(models.Model):
    """
    Enforces uniqueness of direct conversations between two users.

    This helper table stores user pairs in canonical order (lower user_id first)
    to prevent duplicate direct conversations between the same two users.

    Two users opening a conversation with each other at the same moment both
    try to insert the same (user_lower, user_higher) row; exactly one insert
    succeeds and the other transaction rolls back.

    Fields:
        conversation: The direct conversation (OneToOne, serves as PK)
        user_lower: User with lower ID
        user_higher: User with higher ID

    Constraints:
        - UniqueConstraint(user_lower, user_higher): One conversation per pair
        - CheckConstraint(user_lower_id < user_higher_id): Enforce canonical order
    """

    conversation = models.OneToOneField(
        Conversation,
        on_delete=models.CASCADE,
        primary_key=True,
        related_name="direct_pair",
        help_text="The direct conversation this pair represents",
    )

    user_lower = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with lower ID in this conversation pair",
    )

    user_higher = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="+",
        help_text="User with higher ID in this conversation pair",
    )

    class Meta:
        db_table = "chat_direct_conversation_pair"
        constraints = [
            models.UniqueConstraint(
                fields=["user_lower", "user_higher"],
                name="unique_direct_conversation_pair",
            ),
            models.CheckConstraint(
                condition=Q(user_lower_id__lt=F("user_higher_id")),
                name="user_lower_less_than_higher",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"DirectPair({self.user_lower_id}, {self.user_higher_id})"

    @staticmethod
    def canonical(user_a, user_b) -> tuple:
        """Order two users as (lower, higher) by primary key."""
        if user_a.pk < user_b.pk:
            return user_a, user_b
        return user_b, user_a


class Membership(BaseModel):
    """
    A user's membership in a conversation.

    The unread counter is incremented for every other member when a message
    is sent and reset to zero by mark-as-read. Both writes are single
    UPDATE statements, so concurrent senders never lose an increment.

    Fields:
        conversation: Conversation this membership belongs to
        user: Member
        unread_count: Messages from others since the last mark-as-read

    Constraints:
        - UniqueConstraint(conversation, user)
        - CheckConstraint(unread_count >= 0)
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Conversation this membership belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="memberships",
        help_text="Member of the conversation",
    )

    unread_count = models.PositiveIntegerField(
        default=0,
        help_text="Messages from other members not yet marked as read",
    )

    class Meta:
        db_table = "chat_membership"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_conversation_membership",
            ),
            models.CheckConstraint(
                condition=Q(unread_count__gte=0),
                name="membership_unread_count_non_negative",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        return f"Membership: {self.user_id} in {self.conversation_id} [{self.unread_count} unread]"


class Message(BaseModel):
    """
    A message within a conversation.

    Soft Delete Behavior:
        When is_deleted=True the content is cleared to "" and cannot be
        edited again. The row keeps its place in the conversation and its
        reactions.

    Fields:
        conversation: Conversation this message belongs to
        sender: User who sent the message
        content: Message text (empty iff deleted)
        is_deleted: Soft delete flag (never reset)
        is_edited: Set on the first edit
        reply_to: Message this one replies to (same conversation)
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="messages",
        help_text="Conversation this message belongs to",
    )

    sender = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="sent_messages",
        help_text="User who sent this message",
    )

    content = models.TextField(
        blank=True,
        help_text="Message text (empty once the message is deleted)",
    )

    is_deleted = models.BooleanField(
        default=False,
        help_text="Whether the sender deleted this message",
    )

    is_edited = models.BooleanField(
        default=False,
        help_text="Whether the content was changed after sending",
    )

    reply_to = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="replies",
        help_text="Message this one replies to",
    )

    class Meta:
        db_table = "chat_message"
        ordering = ["created_at", "id"]
        indexes = [
            models.Index(
                fields=["conversation", "created_at", "id"],
                name="chat_msg_conv_created_idx",
            ),
        ]
        constraints = [
            # Deleted messages carry no content, live messages always do
            models.CheckConstraint(
                condition=(
                    Q(is_deleted=True, content="")
                    | (Q(is_deleted=False) & ~Q(content=""))
                ),
                name="chat_message_content_iff_live",
            ),
        ]

    def __str__(self) -> str:
        """Return human-readable representation."""
        content_preview = (
            self.content[:50] + "..." if len(self.content) > 50 else self.content
        )
        deleted_str = " [deleted]" if self.is_deleted else ""
        return f"User {self.sender_id}: {content_preview}{deleted_str}"


class Reaction(BaseModel):
    """
    A user's emoji reaction on a message.

    A user may react with several different emojis on the same message but
    with each emoji at most once; toggling the same emoji removes it.

    Constraints:
        - UniqueConstraint(message, user, emoji)
    """

    message = models.ForeignKey(
        Message,
        on_delete=models.CASCADE,
        related_name="reactions",
        help_text="Message this reaction belongs to",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reactions",
        help_text="User who added this reaction",
    )

    emoji = models.CharField(
        max_length=REACTION_CONFIG.MAX_EMOJI_LENGTH,
        help_text="Emoji character(s) used for this reaction",
    )

    class Meta:
        db_table = "chat_reaction"
        ordering = ["created_at", "id"]
        constraints = [
            models.UniqueConstraint(
                fields=["message", "user", "emoji"],
                name="unique_user_message_emoji_reaction",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.emoji} by {self.user_id} on {self.message_id}"


class TypingIndicator(BaseModel):
    """
    Whether a user is typing in a conversation.

    One row per (conversation, user), overwritten on every keystroke burst.
    A row is only meaningful while now - updated_at is inside the freshness
    window (TYPING_CONFIG.FRESHNESS_MS); readers filter on that, and a
    periodic task removes rows that aged out.

    Fields:
        conversation: Conversation being typed in
        user: Typing user
        is_typing: Last reported state
        updated_at: Stamped explicitly by every write
    """

    conversation = models.ForeignKey(
        Conversation,
        on_delete=models.CASCADE,
        related_name="typing_indicators",
        help_text="Conversation being typed in",
    )

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="typing_indicators",
        help_text="User who is typing",
    )

    is_typing = models.BooleanField(
        default=False,
        help_text="Last reported typing state",
    )

    updated_at = models.DateTimeField(
        default=timezone.now,
        db_index=True,
        help_text="When the typing state was last reported",
    )

    class Meta:
        db_table = "chat_typing_indicator"
        ordering = ["-updated_at"]
        constraints = [
            models.UniqueConstraint(
                fields=["conversation", "user"],
                name="unique_conversation_typing_indicator",
            ),
        ]

    def __str__(self) -> str:
        state = "typing" if self.is_typing else "idle"
        return f"{self.user_id} {state} in {self.conversation_id}"
