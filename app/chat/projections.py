"""
Read-side joins for conversation lists and message history.

Services own every write; this module only assembles what the client reads:
conversations decorated with the caller's unread count and the other
member(s), and message history with senders and reactions attached. The
results are plain model instances with extra attributes, rendered by the
serializers in chat.serializers.

Attributes set on each Conversation:
    unread_count: The caller's unread counter
    other_users: Every member except the caller
    other_user: The single other member of a direct conversation (None for groups)
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING

from chat.models import Membership, Message

if TYPE_CHECKING:
    from accounts.models import User
    from chat.models import Conversation


class ConversationProjection:
    """Conversations as seen by one member."""

    @staticmethod
    def _memberships(user: User):
        return Membership.objects.filter(user=user).select_related(
            "conversation",
            "conversation__last_message",
            "conversation__last_message__sender",
        )

    @staticmethod
    def _decorate(user: User, memberships) -> list[Conversation]:
        conversation_ids = [m.conversation_id for m in memberships]

        others = defaultdict(list)
        peer_memberships = (
            Membership.objects.filter(conversation_id__in=conversation_ids)
            .exclude(user=user)
            .select_related("user")
            .order_by("created_at", "id")
        )
        for peer in peer_memberships:
            others[peer.conversation_id].append(peer.user)

        conversations = []
        for membership in memberships:
            conversation = membership.conversation
            conversation.unread_count = membership.unread_count
            conversation.other_users = others[conversation.id]
            conversation.other_user = (
                None
                if conversation.is_group
                else next(iter(conversation.other_users), None)
            )
            conversations.append(conversation)

        return conversations

    @staticmethod
    def _activity_key(conversation: Conversation):
        if conversation.last_message is not None:
            return conversation.last_message.created_at
        return conversation.created_at

    @classmethod
    def list_for_user(cls, user: User) -> list[Conversation]:
        """
        All conversations ``user`` belongs to, most recent activity first.

        Activity is the last message's timestamp, or the conversation's
        creation time when it has no messages yet.
        """
        conversations = cls._decorate(user, list(cls._memberships(user)))
        conversations.sort(key=cls._activity_key, reverse=True)
        return conversations

    @classmethod
    def get_for_user(cls, user: User, conversation_id) -> Conversation | None:
        """One conversation, or None when ``user`` is not a member."""
        membership = cls._memberships(user).filter(conversation_id=conversation_id).first()
        if membership is None:
            return None

        return cls._decorate(user, [membership])[0]


class MessageProjection:
    """Message history with senders and reactions attached."""

    @staticmethod
    def list_for_conversation(conversation_id) -> list[Message]:
        return list(
            Message.objects.filter(conversation_id=conversation_id)
            .select_related("sender", "reply_to")
            .prefetch_related("reactions")
            .order_by("created_at", "id")
        )
