"""
Chat app for direct and group messaging.

This app handles:
- Conversations (direct and group) and their membership
- Message sending, editing, soft deletion and history
- Unread counts and mark-as-read
- Emoji reactions and typing indicators

Related apps:
    - accounts: User model and caller resolution

Usage:
    from chat.services import ConversationService, MessageService

    # Find or create the 1:1 conversation with another user
    result = ConversationService.get_or_create_direct(user, other_user.id)
    conversation = result.data

    # Send message
    result = MessageService.send_message(user, conversation.id, "Hello!")
"""
