"""
Error codes shared by every service.

Services report expected failures as ``ServiceResult.failure(...)`` with one
of these codes; views translate them to HTTP status codes (see
core.views.service_failure_response).

Import example:
    from core.constants import ErrorCode
"""

from typing import Final


class ErrorCode:
    """Machine-readable failure codes returned in ``ServiceResult.error_code``."""

    # No caller identity on the request
    UNAUTHENTICATED: Final[str] = "UNAUTHENTICATED"
    # Identity present but no backing user record
    USER_NOT_FOUND: Final[str] = "USER_NOT_FOUND"
    # Referenced conversation, message or user does not exist
    NOT_FOUND: Final[str] = "NOT_FOUND"
    # Caller lacks the required relationship (not the sender, not a member)
    FORBIDDEN: Final[str] = "FORBIDDEN"
    # Operation does not apply to the entity's kind or state
    INVALID_OPERATION: Final[str] = "INVALID_OPERATION"
    # Group name already taken
    DUPLICATE_NAME: Final[str] = "DUPLICATE_NAME"
    # Concurrent write violated a uniqueness invariant; safe to retry
    CONFLICT: Final[str] = "CONFLICT"
    # Blank or oversized input
    VALIDATION_ERROR: Final[str] = "VALIDATION_ERROR"
