"""
Factory Boy factories for chat models.

Provides realistic test data generation for:
- Conversation: Direct and group conversations
- Membership: User membership with unread counter
- Message: Text messages
- Reaction: Emoji reactions
- TypingIndicator: Typing state rows

Usage:
    from chat.tests.factories import (
        DirectConversationFactory,
        GroupConversationFactory,
        MembershipFactory,
        MessageFactory,
    )

    # Direct conversation between two specific users
    conversation = DirectConversationFactory(user1=alice, user2=bob)

    # Group with members
    conversation = GroupConversationFactory(members=[alice, bob, carol])

    # Message in a conversation
    message = MessageFactory(conversation=conversation, sender=alice)

Factories write rows directly. They do not bump unread counters or
last_message; use MessageService.send_message() when a test depends on that.
"""

import factory

from accounts.tests.factories import UserFactory
from chat.models import (
    Conversation,
    DirectConversationPair,
    Membership,
    Message,
    Reaction,
    TypingIndicator,
)


class GroupConversationFactory(factory.django.DjangoModelFactory):
    """
    Factory for group conversations.

    Examples:
        # Empty group
        conversation = GroupConversationFactory()

        # Group with specific name and members
        conversation = GroupConversationFactory(name="Team", members=[alice, bob])
    """

    class Meta:
        model = Conversation
        skip_postgeneration_save = True

    is_group = True
    name = factory.Sequence(lambda n: f"Group Chat {n}")

    @factory.post_generation
    def members(self, create, extracted, **kwargs):
        """Add a membership for each user passed as ``members``."""
        if not create or not extracted:
            return

        for user in extracted:
            MembershipFactory(conversation=self, user=user)


class DirectConversationFactory(factory.django.DjangoModelFactory):
    """
    Factory for direct (1:1) conversations.

    Creates the conversation, its DirectConversationPair and both
    memberships.

    Examples:
        # Direct conversation between two random users
        conversation = DirectConversationFactory()

        # Direct conversation between specific users
        conversation = DirectConversationFactory(user1=alice, user2=bob)
    """

    class Meta:
        model = Conversation

    is_group = False
    name = None

    @classmethod
    def _create(cls, model_class, *args, **kwargs):
        """Create direct conversation with memberships and pair."""
        user1 = kwargs.pop("user1", None) or UserFactory()
        user2 = kwargs.pop("user2", None) or UserFactory()
        user_lower, user_higher = DirectConversationPair.canonical(user1, user2)

        conversation = super()._create(model_class, *args, **kwargs)

        DirectConversationPair.objects.create(
            conversation=conversation,
            user_lower=user_lower,
            user_higher=user_higher,
        )
        MembershipFactory(conversation=conversation, user=user_lower)
        MembershipFactory(conversation=conversation, user=user_higher)

        return conversation


class MembershipFactory(factory.django.DjangoModelFactory):
    """
    Factory for Membership model.

    Examples:
        membership = MembershipFactory(conversation=conversation, user=user)
        membership = MembershipFactory(unread_count=3)
    """

    class Meta:
        model = Membership

    conversation = factory.SubFactory(GroupConversationFactory)
    user = factory.SubFactory(UserFactory)
    unread_count = 0


class MessageFactory(factory.django.DjangoModelFactory):
    """
    Factory for Message model.

    Examples:
        message = MessageFactory(conversation=conversation, sender=user)
        reply = MessageFactory(conversation=conversation, reply_to=message)
        deleted = MessageFactory(is_deleted=True, content="")
    """

    class Meta:
        model = Message

    conversation = factory.SubFactory(GroupConversationFactory)
    sender = factory.SubFactory(UserFactory)
    content = factory.Faker("sentence", nb_words=6)
    is_deleted = False
    is_edited = False
    reply_to = None


class ReactionFactory(factory.django.DjangoModelFactory):
    """
    Factory for Reaction model.

    Examples:
        reaction = ReactionFactory(message=message, user=user, emoji="🎉")
    """

    class Meta:
        model = Reaction

    message = factory.SubFactory(MessageFactory)
    user = factory.SubFactory(UserFactory)
    emoji = "👍"


class TypingIndicatorFactory(factory.django.DjangoModelFactory):
    """
    Factory for TypingIndicator model.

    updated_at defaults to now; pass an explicit value to create stale rows.
    """

    class Meta:
        model = TypingIndicator

    conversation = factory.SubFactory(GroupConversationFactory)
    user = factory.SubFactory(UserFactory)
    is_typing = True
