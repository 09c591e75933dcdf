"""
Constants and configuration for chat module features.

This module centralizes configuration values for:
- Message operations (content limits)
- Reaction management (emoji limits)
- Typing indicators (freshness window)

These values can be overridden via Django settings if needed.
Import example:
    from chat.constants import MESSAGE_CONFIG, REACTION_CONFIG, TYPING_CONFIG
"""

from typing import Final


# =============================================================================
# Message Configuration
# =============================================================================


class MESSAGE_CONFIG:
    """Configuration for message operations."""

    MAX_CONTENT_LENGTH: Final[int] = 10000  # Characters


# =============================================================================
# Conversation Configuration
# =============================================================================


class CONVERSATION_CONFIG:
    """Configuration for conversations."""

    MAX_GROUP_NAME_LENGTH: Final[int] = 100


# =============================================================================
# Reaction Configuration
# =============================================================================


class REACTION_CONFIG:
    """Configuration for message reactions."""

    MAX_EMOJI_LENGTH: Final[int] = (
        16  # Characters; ZWJ sequences and skin tones take several code points
    )

    # Common quick reactions for UI hints (suggestions only, not restrictions)
    QUICK_REACTIONS: Final[tuple] = ("👍", "❤️", "😂", "😮", "😢", "🎉")


# =============================================================================
# Typing Configuration
# =============================================================================


class TYPING_CONFIG:
    """
    Configuration for typing indicators.

    An indicator counts as live while now - updated_at < FRESHNESS_MS.
    Override with settings.TYPING_FRESHNESS_MS.
    """

    FRESHNESS_MS: Final[int] = 3000
