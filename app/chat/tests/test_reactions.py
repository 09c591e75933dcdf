"""
Tests for ReactionService.toggle_reaction().

Verifies:
- Toggling adds an absent reaction and removes a present one
- A user may hold several different emojis on one message
- Emoji, message and membership are validated
"""

from unittest.mock import patch

from django.db import IntegrityError

from chat.models import Reaction
from chat.services import MessageService, ReactionService
from chat.tests.factories import MessageFactory, ReactionFactory
from core.constants import ErrorCode


class TestToggleReaction:
    """Tests for ReactionService.toggle_reaction()."""

    def test_adds_absent_reaction(self, alice, bob, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(bob, message.id, "👍")

        assert result.success is True
        added, reaction = result.data
        assert added is True
        assert reaction.emoji == "👍"
        assert reaction.user == bob
        assert reaction.message_id == message.id

    def test_removes_present_reaction(self, alice, bob, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)
        ReactionFactory(message=message, user=bob, emoji="👍")

        result = ReactionService.toggle_reaction(bob, message.id, "👍")

        assert result.data == (False, None)
        assert not Reaction.objects.filter(message=message).exists()

    def test_toggling_twice_restores_original_state(self, alice, bob, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)
        ReactionFactory(message=message, user=alice, emoji="❤️")
        before = set(message.reactions.values_list("user_id", "emoji"))

        ReactionService.toggle_reaction(bob, message.id, "🎉")
        ReactionService.toggle_reaction(bob, message.id, "🎉")

        assert set(message.reactions.values_list("user_id", "emoji")) == before

    def test_different_emojis_coexist(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        ReactionService.toggle_reaction(alice, message.id, "👍")
        ReactionService.toggle_reaction(alice, message.id, "😂")

        assert set(message.reactions.values_list("emoji", flat=True)) == {"👍", "😂"}

    def test_removal_only_affects_own_reaction(self, alice, bob, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)
        ReactionFactory(message=message, user=alice, emoji="👍")
        ReactionFactory(message=message, user=bob, emoji="👍")

        ReactionService.toggle_reaction(bob, message.id, "👍")

        assert list(message.reactions.values_list("user_id", flat=True)) == [alice.id]

    def test_surrounding_whitespace_is_ignored(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)
        ReactionService.toggle_reaction(alice, message.id, "👍")

        result = ReactionService.toggle_reaction(alice, message.id, " 👍 ")

        assert result.data == (False, None)

    def test_multi_codepoint_emoji(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(alice, message.id, "👍🏽")

        assert result.data[1].emoji == "👍🏽"

    def test_deleted_message_accepts_reactions(self, alice, bob, direct_conversation):
        message = MessageService.send_message(alice, direct_conversation.id, "gone").data
        MessageService.delete_message(alice, message.id)

        result = ReactionService.toggle_reaction(bob, message.id, "😢")

        assert result.success is True
        assert result.data[0] is True

    def test_blank_emoji_is_validation_error(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(alice, message.id, "  ")

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_oversized_emoji_is_validation_error(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(alice, message.id, "x" * 17)

        assert result.error_code == ErrorCode.VALIDATION_ERROR

    def test_missing_message_is_not_found(self, alice):
        result = ReactionService.toggle_reaction(alice, 999999, "👍")

        assert result.error_code == ErrorCode.NOT_FOUND

    def test_non_member_is_forbidden(self, alice, outsider, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(outsider, message.id, "👍")

        assert result.error_code == ErrorCode.FORBIDDEN
        assert not message.reactions.exists()

    def test_anonymous_is_unauthenticated(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        result = ReactionService.toggle_reaction(None, message.id, "👍")

        assert result.error_code == ErrorCode.UNAUTHENTICATED

    def test_concurrent_insert_is_conflict(self, alice, direct_conversation):
        message = MessageFactory(conversation=direct_conversation, sender=alice)

        with patch.object(Reaction.objects, "create", side_effect=IntegrityError):
            result = ReactionService.toggle_reaction(alice, message.id, "👍")

        assert result.error_code == ErrorCode.CONFLICT
        assert not message.reactions.exists()
