"""
Tests for chat app.

This package contains test modules for:
- test_models.py: Model constraints and helpers
- test_services.py: ConversationService tests
- test_messages.py: MessageService tests
- test_reactions.py: ReactionService tests
- test_typing.py: TypingService tests
- test_serializers.py: Request serializer validation
- test_views.py: REST API endpoint tests
- test_tasks.py: Celery maintenance tasks

Usage:
    pytest chat/tests/
    pytest chat/tests/test_messages.py
"""
