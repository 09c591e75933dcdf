"""
Service-layer primitives used by every domain app.

- ServiceResult: outcome of one service call (value or coded failure)
- BaseService: per-service logger and transaction boundary

Views parse requests and render responses, models store rows, services
decide. Anything a client can cause (not a member, duplicate group name,
blank message) comes back as ``ServiceResult.failure`` with an ErrorCode;
anything it cannot (database gone, programming error) raises.

Usage:
    from core.constants import ErrorCode
    from core.services import BaseService, ServiceResult

    class MessageService(BaseService):
        @classmethod
        def send_message(cls, user, conversation_id, content) -> ServiceResult[Message]:
            if not content.strip():
                return ServiceResult.failure(
                    "Message content cannot be empty",
                    error_code=ErrorCode.VALIDATION_ERROR,
                )

            with cls.atomic():
                message = Message.objects.create(...)

            cls.get_logger().info(f"Created message {message.id}")
            return ServiceResult.success(message)

    # In a view
    result = MessageService.send_message(user, conversation_id, content)
    if not result.success:
        return service_failure_response(result)
    return Response(MessageSerializer(result.data).data, status=201)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction

if TYPE_CHECKING:
    from collections.abc import Generator

T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Value or failure returned by a service method.

    Attributes:
        success: True when the operation took effect (or was a valid no-op)
        data: Payload on success, may legitimately be None
        error: Message for humans, set on failure
        error_code: core.constants.ErrorCode value, set on failure

    A result is truthy exactly when it succeeded:
        result = ConversationService.create_group(user, "Team")
        if not result:
            logger.warning(f"{result.error_code}: {result.error}")
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T) -> ServiceResult[T]:
        return cls(success=True, data=data)

    @classmethod
    def failure(cls, error: str, error_code: str | None = None) -> ServiceResult[T]:
        """
        Build a failed result.

        Args:
            error: Message for humans
            error_code: ErrorCode value views map to an HTTP status
        """
        return cls(success=False, error=error, error_code=error_code)

    def __bool__(self) -> bool:
        return self.success


class BaseService:
    """
    Parent of all domain services.

    Services hold no state: every public method is a classmethod and the
    resolved caller is passed in explicitly.
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Logger named ``<module>.<ServiceClass>``, e.g. ``chat.services.MessageService``."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Run the block in a database transaction.

        Nested use creates a savepoint, so an IntegrityError caught around an
        inner block leaves the outer transaction usable.
        """
        with transaction.atomic():
            yield
