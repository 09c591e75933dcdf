"""
Chat system service layer.

This module provides the business logic for the chat system, encapsulating
all writes to conversations, memberships, messages, reactions and typing
indicators.

Services:
    ConversationService: Direct/group conversation lifecycle, membership, read state
    MessageService: Send, edit, soft delete and list messages
    ReactionService: Toggle emoji reactions
    TypingService: Typing indicator upsert, fresh-window reads, stale sweep

Design Principles:
    - Services are stateless (use class methods)
    - The resolved caller is passed in explicitly; None means "not logged in"
    - Writes without a caller fail with UNAUTHENTICATED, reads degrade to
      empty results
    - Expected failures return ServiceResult.failure()
    - Unexpected failures raise exceptions
    - Each operation is one transaction; uniqueness races are settled by
      database constraints and reported as CONFLICT or DUPLICATE_NAME

Usage:
    from chat.services import ConversationService, MessageService

    result = ConversationService.get_or_create_direct(user, other_user.id)
    if result.success:
        conversation = result.data

    result = MessageService.send_message(user, conversation.id, "Hello!")
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import IntegrityError
from django.db.models import F
from django.utils import timezone

from accounts.models import User
from chat.constants import MESSAGE_CONFIG, REACTION_CONFIG, TYPING_CONFIG
from chat.models import (
    Conversation,
    DirectConversationPair,
    Membership,
    Message,
    Reaction,
    TypingIndicator,
)
from chat.projections import ConversationProjection, MessageProjection
from core.constants import ErrorCode
from core.services import BaseService, ServiceResult

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


def _unauthenticated() -> ServiceResult:
    return ServiceResult.failure(
        "Authentication required", error_code=ErrorCode.UNAUTHENTICATED
    )


def _user_pk(value):
    """Coerce a user id in any accepted UUID spelling to a primary key, None if malformed."""
    try:
        return User._meta.pk.to_python(value)
    except ValidationError:
        return None


def _not_a_member(user: User, conversation_id) -> ServiceResult:
    logger.info(f"User {user.id} denied: not a member of conversation {conversation_id}")
    return ServiceResult.failure(
        "You are not a member of this conversation",
        error_code=ErrorCode.FORBIDDEN,
    )


def _resolve_users(user_ids: Iterable) -> tuple[list[User], list[str]]:
    """
    Load users by id.

    Ids are compared as primary keys, so any UUID spelling of an existing
    user resolves to that user.

    Returns:
        (users found, ids that matched no user)
    """
    requested = [(user_id, _user_pk(user_id)) for user_id in user_ids]
    users = list(
        User.objects.filter(pk__in=[pk for _, pk in requested if pk is not None])
    )
    found = {user.pk for user in users}
    missing = [str(user_id) for user_id, pk in requested if pk not in found]
    return users, missing


class ConversationService(BaseService):
    """
    Service for conversation lifecycle operations.

    Methods:
        get_or_create_direct: The unique direct conversation between two users
        list_for_user: Caller's conversations, most recent activity first
        get_for_user: One conversation the caller belongs to
        create_group: Create a named group
        delete_group: Delete a group and everything in it
        add_group_members: Add users to a group
        mark_as_read: Reset the caller's unread counter
    """

    @classmethod
    def get_or_create_direct(
        cls,
        user: User | None,
        other_user_id,
    ) -> ServiceResult[Conversation]:
        """
        Return the direct conversation between the caller and another user,
        creating it on first contact.

        Implementation:
            1. Intersect both users' conversations, keep the first non-group
            2. If found, return it without writing
            3. Otherwise create conversation, pair row and both memberships
               in one transaction
            4. If the pair insert loses a race, return the winner's
               conversation

        Args:
            user: Caller
            other_user_id: Id of the other participant

        Returns:
            ServiceResult with Conversation (existing or new)

        Error codes:
            UNAUTHENTICATED: No caller
            INVALID_OPERATION: Other user is the caller
            NOT_FOUND: Other user does not exist
            CONFLICT: Concurrent creation, and the winner could not be read
        """
        if user is None:
            return _unauthenticated()

        other_pk = _user_pk(other_user_id)
        if other_pk == user.pk:
            return ServiceResult.failure(
                "Cannot create a direct conversation with yourself",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        other = None if other_pk is None else User.objects.filter(pk=other_pk).first()
        if other is None:
            return ServiceResult.failure(
                "User not found", error_code=ErrorCode.NOT_FOUND
            )

        existing = (
            Conversation.objects.filter(is_group=False, memberships__user=user)
            .filter(memberships__user=other)
            .order_by("created_at", "id")
            .first()
        )
        if existing is not None:
            cls.get_logger().debug(
                f"Found existing direct conversation {existing.id} "
                f"between users {user.id} and {other.id}"
            )
            return ServiceResult.success(existing)

        user_lower, user_higher = DirectConversationPair.canonical(user, other)

        try:
            with cls.atomic():
                conversation = Conversation.objects.create(is_group=False)
                DirectConversationPair.objects.create(
                    conversation=conversation,
                    user_lower=user_lower,
                    user_higher=user_higher,
                )
                Membership.objects.bulk_create(
                    [
                        Membership(conversation=conversation, user=user),
                        Membership(conversation=conversation, user=other),
                    ]
                )
        except IntegrityError:
            pair = (
                DirectConversationPair.objects.select_related("conversation")
                .filter(user_lower=user_lower, user_higher=user_higher)
                .first()
            )
            if pair is None:
                cls.get_logger().warning(
                    f"Direct conversation insert between {user.id} and "
                    f"{other.id} failed and no existing pair was found"
                )
                return ServiceResult.failure(
                    "Conversation could not be created, try again",
                    error_code=ErrorCode.CONFLICT,
                )
            cls.get_logger().info(
                f"Concurrent direct conversation creation between {user.id} "
                f"and {other.id}, using {pair.conversation_id}"
            )
            return ServiceResult.success(pair.conversation)

        cls.get_logger().info(
            f"Created direct conversation {conversation.id} "
            f"between users {user.id} and {other.id}"
        )
        return ServiceResult.success(conversation)

    @classmethod
    def list_for_user(cls, user: User | None) -> list[Conversation]:
        """
        List the caller's conversations, most recent activity first.

        Each conversation carries ``unread_count``, ``other_users`` and
        ``other_user`` (see chat.projections). Empty when unauthenticated.
        """
        if user is None:
            return []
        return ConversationProjection.list_for_user(user)

    @classmethod
    def get_for_user(cls, user: User | None, conversation_id) -> Conversation | None:
        """One conversation, or None if absent or the caller is not a member."""
        if user is None:
            return None
        return ConversationProjection.get_for_user(user, conversation_id)

    @classmethod
    def create_group(
        cls,
        user: User | None,
        name: str,
        member_ids: Iterable = (),
    ) -> ServiceResult[Conversation]:
        """
        Create a new group conversation.

        The creator and every listed member get a membership with an unread
        count of zero, all in one transaction.

        Args:
            user: Creator
            name: Group name, unique across all conversations
            member_ids: Ids of the other members (must not include the creator)

        Returns:
            ServiceResult with new Conversation

        Error codes:
            UNAUTHENTICATED: No caller
            VALIDATION_ERROR: Name is blank
            DUPLICATE_NAME: A conversation with this name exists
            NOT_FOUND: A member id matches no user
            CONFLICT: Member ids repeat or include the creator
        """
        if user is None:
            return _unauthenticated()

        name = (name or "").strip()
        if not name:
            return ServiceResult.failure(
                "Group name is required", error_code=ErrorCode.VALIDATION_ERROR
            )

        if Conversation.objects.filter(name=name).exists():
            cls.get_logger().info(f"Group name '{name}' already taken")
            return ServiceResult.failure(
                f"A group named '{name}' already exists",
                error_code=ErrorCode.DUPLICATE_NAME,
            )

        member_ids = list(member_ids)
        members, missing = _resolve_users(member_ids)
        if missing:
            return ServiceResult.failure(
                f"Users not found: {', '.join(missing)}",
                error_code=ErrorCode.NOT_FOUND,
            )

        requested = [_user_pk(member_id) for member_id in member_ids]
        if user.pk in requested or len(set(requested)) != len(requested):
            return ServiceResult.failure(
                "Each member may be listed once and not include the creator",
                error_code=ErrorCode.CONFLICT,
            )

        try:
            with cls.atomic():
                conversation = Conversation.objects.create(is_group=True, name=name)
                Membership.objects.bulk_create(
                    [Membership(conversation=conversation, user=user)]
                    + [
                        Membership(conversation=conversation, user=member)
                        for member in members
                    ]
                )
        except IntegrityError:
            if Conversation.objects.filter(name=name).exists():
                cls.get_logger().info(f"Group name '{name}' taken concurrently")
                return ServiceResult.failure(
                    f"A group named '{name}' already exists",
                    error_code=ErrorCode.DUPLICATE_NAME,
                )
            raise

        cls.get_logger().info(
            f"Created group conversation {conversation.id} '{name}' "
            f"by user {user.id} with {len(members)} members"
        )
        return ServiceResult.success(conversation)

    @classmethod
    def delete_group(cls, user: User | None, conversation_id) -> ServiceResult[None]:
        """
        Delete a group conversation with all its data.

        Any member may delete a group. Removes, in one transaction: the
        last-message pointer, reactions on the group's messages, typing
        indicators, memberships, messages and finally the conversation.

        Error codes:
            UNAUTHENTICATED: No caller
            NOT_FOUND: Conversation does not exist
            INVALID_OPERATION: Conversation is not a group
            FORBIDDEN: Caller is not a member
        """
        if user is None:
            return _unauthenticated()

        conversation = Conversation.objects.filter(pk=conversation_id).first()
        if conversation is None:
            return ServiceResult.failure(
                "Conversation not found", error_code=ErrorCode.NOT_FOUND
            )

        if not conversation.is_group:
            return ServiceResult.failure(
                "Only group conversations can be deleted",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        if not conversation.has_member(user):
            return _not_a_member(user, conversation.pk)

        with cls.atomic():
            Conversation.objects.filter(pk=conversation.pk).update(last_message=None)
            Reaction.objects.filter(message__conversation=conversation).delete()
            TypingIndicator.objects.filter(conversation=conversation).delete()
            Membership.objects.filter(conversation=conversation).delete()
            Message.objects.filter(conversation=conversation).delete()
            conversation.delete()

        cls.get_logger().info(f"User {user.id} deleted group conversation {conversation_id}")
        return ServiceResult.success(None)

    @classmethod
    def add_group_members(
        cls,
        user: User | None,
        conversation_id,
        member_ids: Iterable,
    ) -> ServiceResult[list]:
        """
        Add users to a group conversation.

        Idempotent per member: users already in the group are skipped, and a
        concurrent add of the same user is absorbed by the unique
        (conversation, user) constraint.

        Returns:
            ServiceResult with the ids of users that were added

        Error codes:
            UNAUTHENTICATED: No caller
            NOT_FOUND: Conversation or a member does not exist
            INVALID_OPERATION: Conversation is not a group
            FORBIDDEN: Caller is not a member
        """
        if user is None:
            return _unauthenticated()

        conversation = Conversation.objects.filter(pk=conversation_id).first()
        if conversation is None:
            return ServiceResult.failure(
                "Conversation not found", error_code=ErrorCode.NOT_FOUND
            )

        if not conversation.is_group:
            return ServiceResult.failure(
                "Members can only be added to group conversations",
                error_code=ErrorCode.INVALID_OPERATION,
            )

        if not conversation.has_member(user):
            return _not_a_member(user, conversation.pk)

        members, missing = _resolve_users(member_ids)
        if missing:
            return ServiceResult.failure(
                f"Users not found: {', '.join(missing)}",
                error_code=ErrorCode.NOT_FOUND,
            )

        existing = set(
            Membership.objects.filter(
                conversation=conversation, user__in=members
            ).values_list("user_id", flat=True)
        )
        to_add = [member for member in members if member.pk not in existing]

        with cls.atomic():
            Membership.objects.bulk_create(
                [Membership(conversation=conversation, user=member) for member in to_add],
                ignore_conflicts=True,
            )

        added_ids = [member.pk for member in to_add]
        cls.get_logger().info(
            f"User {user.id} added {len(added_ids)} members to conversation {conversation.id}"
        )
        return ServiceResult.success(added_ids)

    @classmethod
    def mark_as_read(cls, user: User | None, conversation_id) -> ServiceResult[bool]:
        """
        Reset the caller's unread counter in a conversation.

        A single conditional UPDATE; when the counter is already zero, the
        caller is anonymous, or the caller is not a member, nothing is
        written and the result carries False.
        """
        if user is None:
            return ServiceResult.success(False)

        updated = Membership.objects.filter(
            conversation_id=conversation_id, user=user, unread_count__gt=0
        ).update(unread_count=0, updated_at=timezone.now())

        return ServiceResult.success(updated > 0)


class MessageService(BaseService):
    """
    Service for message operations.

    Methods:
        send_message: Append a message and bump other members' unread counts
        edit_message: Change content of own, live message
        delete_message: Soft delete own message
        list_messages: Conversation history in send order
    """

    @staticmethod
    def _validate_content(content: str | None) -> ServiceResult | None:
        if not content or not content.strip():
            return ServiceResult.failure(
                "Message content cannot be empty",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        if len(content) > MESSAGE_CONFIG.MAX_CONTENT_LENGTH:
            return ServiceResult.failure(
                f"Message content cannot exceed "
                f"{MESSAGE_CONFIG.MAX_CONTENT_LENGTH} characters",
                error_code=ErrorCode.VALIDATION_ERROR,
            )
        return None

    @classmethod
    def send_message(
        cls,
        user: User | None,
        conversation_id,
        content: str,
        reply_to_id=None,
    ) -> ServiceResult[Message]:
        """
        Send a message to a conversation.

        In one transaction: insert the message, point the conversation's
        last_message at it, and increment unread_count of every member other
        than the sender with a relative UPDATE. Concurrent senders therefore
        never lose increments.

        Args:
            user: Sender
            conversation_id: Target conversation
            content: Message text
            reply_to_id: Optional message (same conversation) being replied to

        Returns:
            ServiceResult with the new Message

        Error codes:
            UNAUTHENTICATED: No caller
            NOT_FOUND: Conversation or reply target does not exist
            FORBIDDEN: Caller is not a member
            VALIDATION_ERROR: Content blank or too long
        """
        if user is None:
            return _unauthenticated()

        conversation = Conversation.objects.filter(pk=conversation_id).first()
        if conversation is None:
            return ServiceResult.failure(
                "Conversation not found", error_code=ErrorCode.NOT_FOUND
            )

        if not conversation.has_member(user):
            return _not_a_member(user, conversation.pk)

        invalid = cls._validate_content(content)
        if invalid is not None:
            return invalid

        reply_to = None
        if reply_to_id is not None:
            reply_to = Message.objects.filter(
                pk=reply_to_id, conversation=conversation
            ).first()
            if reply_to is None:
                return ServiceResult.failure(
                    "Message being replied to not found",
                    error_code=ErrorCode.NOT_FOUND,
                )

        with cls.atomic():
            message = Message.objects.create(
                conversation=conversation,
                sender=user,
                content=content,
                reply_to=reply_to,
            )
            Conversation.objects.filter(pk=conversation.pk).update(
                last_message=message, updated_at=timezone.now()
            )
            Membership.objects.filter(conversation=conversation).exclude(
                user=user
            ).update(unread_count=F("unread_count") + 1)

        cls.get_logger().debug(
            f"User {user.id} sent message {message.id} to conversation {conversation.id}"
        )
        return ServiceResult.success(message)

    @classmethod
    def edit_message(
        cls,
        user: User | None,
        message_id,
        content: str,
    ) -> ServiceResult[Message]:
        """
        Replace the content of the caller's own message.

        Error codes:
            UNAUTHENTICATED: No caller
            NOT_FOUND: Message does not exist
            FORBIDDEN: Caller is not the sender
            INVALID_OPERATION: Message was deleted
            VALIDATION_ERROR: Content blank or too long
        """
        if user is None:
            return _unauthenticated()

        with cls.atomic():
            message = Message.objects.select_for_update().filter(pk=message_id).first()
            if message is None:
                return ServiceResult.failure(
                    "Message not found", error_code=ErrorCode.NOT_FOUND
                )

            if message.sender_id != user.pk:
                cls.get_logger().info(
                    f"User {user.id} denied: cannot edit message {message.id} "
                    f"sent by {message.sender_id}"
                )
                return ServiceResult.failure(
                    "You can only edit your own messages",
                    error_code=ErrorCode.FORBIDDEN,
                )

            if message.is_deleted:
                return ServiceResult.failure(
                    "Deleted messages cannot be edited",
                    error_code=ErrorCode.INVALID_OPERATION,
                )

            invalid = cls._validate_content(content)
            if invalid is not None:
                return invalid

            message.content = content
            message.is_edited = True
            message.save(update_fields=["content", "is_edited", "updated_at"])

        cls.get_logger().debug(f"User {user.id} edited message {message.id}")
        return ServiceResult.success(message)

    @classmethod
    def delete_message(cls, user: User | None, message_id) -> ServiceResult[Message]:
        """
        Soft delete the caller's own message.

        Content is cleared and is_deleted set; the row keeps its position.
        Deleting an already deleted message succeeds without writing.

        Error codes:
            UNAUTHENTICATED: No caller
            NOT_FOUND: Message does not exist
            FORBIDDEN: Caller is not the sender
        """
        if user is None:
            return _unauthenticated()

        with cls.atomic():
            message = Message.objects.select_for_update().filter(pk=message_id).first()
            if message is None:
                return ServiceResult.failure(
                    "Message not found", error_code=ErrorCode.NOT_FOUND
                )

            if message.sender_id != user.pk:
                cls.get_logger().info(
                    f"User {user.id} denied: cannot delete message {message.id} "
                    f"sent by {message.sender_id}"
                )
                return ServiceResult.failure(
                    "You can only delete your own messages",
                    error_code=ErrorCode.FORBIDDEN,
                )

            if message.is_deleted:
                return ServiceResult.success(message)

            message.is_deleted = True
            message.content = ""
            message.save(update_fields=["is_deleted", "content", "updated_at"])

        cls.get_logger().info(f"User {user.id} deleted message {message.id}")
        return ServiceResult.success(message)

    @classmethod
    def list_messages(cls, user: User | None, conversation_id) -> list[Message]:
        """Messages of a conversation in send order; empty when unauthenticated."""
        if user is None:
            return []
        return MessageProjection.list_for_conversation(conversation_id)


class ReactionService(BaseService):
    """Service for emoji reactions on messages."""

    @classmethod
    def toggle_reaction(
        cls,
        user: User | None,
        message_id,
        emoji: str,
    ) -> ServiceResult[tuple[bool, Reaction | None]]:
        """
        Add the reaction if absent, remove it if present.

        The message row is locked for the duration of the toggle, so toggles
        on the same message run one after another. The unique
        (message, user, emoji) constraint backs this up where row locks are
        unavailable.

        Returns:
            ServiceResult with (added, reaction); reaction is None on removal

        Error codes:
            UNAUTHENTICATED: No caller
            VALIDATION_ERROR: Emoji blank or too long
            NOT_FOUND: Message does not exist
            FORBIDDEN: Caller is not a member of the message's conversation
            CONFLICT: A concurrent toggle inserted the same reaction
        """
        if user is None:
            return _unauthenticated()

        emoji = (emoji or "").strip()
        if not emoji:
            return ServiceResult.failure(
                "Emoji is required", error_code=ErrorCode.VALIDATION_ERROR
            )
        if len(emoji) > REACTION_CONFIG.MAX_EMOJI_LENGTH:
            return ServiceResult.failure(
                f"Emoji cannot exceed {REACTION_CONFIG.MAX_EMOJI_LENGTH} characters",
                error_code=ErrorCode.VALIDATION_ERROR,
            )

        with cls.atomic():
            message = Message.objects.select_for_update().filter(pk=message_id).first()
            if message is None:
                return ServiceResult.failure(
                    "Message not found", error_code=ErrorCode.NOT_FOUND
                )

            if not message.conversation.has_member(user):
                return _not_a_member(user, message.conversation_id)

            existing = Reaction.objects.filter(
                message=message, user=user, emoji=emoji
            ).first()
            if existing is not None:
                existing.delete()
                cls.get_logger().debug(
                    f"User {user.id} removed {emoji} from message {message.id}"
                )
                return ServiceResult.success((False, None))

            try:
                with cls.atomic():
                    reaction = Reaction.objects.create(
                        message=message, user=user, emoji=emoji
                    )
            except IntegrityError:
                return ServiceResult.failure(
                    "Reaction changed concurrently, try again",
                    error_code=ErrorCode.CONFLICT,
                )

        cls.get_logger().debug(f"User {user.id} added {emoji} to message {message.id}")
        return ServiceResult.success((True, reaction))


class TypingService(BaseService):
    """
    Service for typing indicators.

    Freshness is evaluated when reading: an indicator counts while
    now - updated_at is below the freshness window. purge_stale() only
    keeps the table small.
    """

    @staticmethod
    def freshness_window() -> timedelta:
        return timedelta(
            milliseconds=getattr(
                settings, "TYPING_FRESHNESS_MS", TYPING_CONFIG.FRESHNESS_MS
            )
        )

    @classmethod
    def set_typing(
        cls,
        user: User | None,
        conversation_id,
        is_typing: bool,
    ) -> ServiceResult[TypingIndicator | None]:
        """
        Record whether the caller is typing, stamping updated_at=now.

        No-op success without a caller.

        Error codes:
            NOT_FOUND: Conversation does not exist
        """
        if user is None:
            return ServiceResult.success(None)

        if not Conversation.objects.filter(pk=conversation_id).exists():
            return ServiceResult.failure(
                "Conversation not found", error_code=ErrorCode.NOT_FOUND
            )

        indicator, _ = TypingIndicator.objects.update_or_create(
            conversation_id=conversation_id,
            user=user,
            defaults={"is_typing": is_typing, "updated_at": timezone.now()},
        )
        return ServiceResult.success(indicator)

    @classmethod
    def list_typing(cls, user: User | None, conversation_id) -> list[User]:
        """Users other than the caller typing in the conversation right now."""
        if user is None:
            return []

        cutoff = timezone.now() - cls.freshness_window()
        indicators = (
            TypingIndicator.objects.filter(
                conversation_id=conversation_id,
                is_typing=True,
                updated_at__gt=cutoff,
            )
            .exclude(user=user)
            .select_related("user")
            .order_by("updated_at")
        )
        return [indicator.user for indicator in indicators]

    @classmethod
    def purge_stale(cls, older_than: timedelta | None = None) -> int:
        """
        Delete indicators that fell out of the freshness window.

        Args:
            older_than: Age threshold, defaults to the freshness window

        Returns:
            Number of indicators deleted
        """
        cutoff = timezone.now() - (older_than or cls.freshness_window())
        deleted, _ = TypingIndicator.objects.filter(updated_at__lte=cutoff).delete()
        if deleted:
            cls.get_logger().debug(f"Purged {deleted} stale typing indicators")
        return deleted
