"""
Abstract timestamped model shared by the accounts and chat apps.

Every persisted entity records when it was inserted and when it last
changed. Chat relies on both: messages are ordered by (created_at, id), and
conversations without messages sort by their own created_at.

Usage:
    from core.models import BaseModel

    class Membership(BaseModel):
        unread_count = models.PositiveIntegerField(default=0)

Note:
    Put mixins (core.model_mixins) first in the bases, BaseModel last.
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Adds created_at/updated_at to a concrete model.

    Fields:
        created_at: Insert time, indexed for time-ordered reads
        updated_at: Refreshed by every save(); pass it in update_fields
            when saving a subset of fields
    """

    created_at = models.DateTimeField(
        auto_now_add=True,
        db_index=True,
        help_text="When the row was inserted",
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="When the row last changed",
    )

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{type(self).__name__} #{self.pk}"
