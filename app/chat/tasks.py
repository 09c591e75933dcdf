"""
Celery tasks for chat app.

This module defines periodic maintenance tasks:
- Typing indicator cleanup

Typing indicators expire at read time, so these tasks only keep the table
small; nothing depends on them running on schedule.

Related files:
    - services.py: TypingService
    - config/settings.py: CELERY_BEAT_SCHEDULE

Usage:
    from chat.tasks import purge_stale_typing_indicators

    purge_stale_typing_indicators.delay()
"""

import logging

from celery import shared_task

from chat.services import TypingService

logger = logging.getLogger(__name__)


@shared_task(
    bind=True,
    autoretry_for=(Exception,),
    retry_backoff=True,
    retry_kwargs={"max_retries": 3},
)
def purge_stale_typing_indicators(self) -> int:
    """
    Delete typing indicators older than the freshness window.

    Returns:
        Number of indicators deleted
    """
    deleted = TypingService.purge_stale()
    logger.info(f"Purged {deleted} stale typing indicators")
    return deleted
