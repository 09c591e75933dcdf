"""
Abstract field mixins for models that need more than BaseModel.

Usage:
    from core.model_mixins import UUIDPrimaryKeyMixin
    from core.models import BaseModel

    class User(UUIDPrimaryKeyMixin, AbstractBaseUser, BaseModel):
        ...
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Random UUID primary key.

    User ids travel to clients (conversation peers, typing lists, reaction
    authors), so they should not reveal signup order or user count.
    """

    id = models.UUIDField(
        primary_key=True,
        default=uuid.uuid4,
        editable=False,
        help_text="Random identifier, safe to expose to clients",
    )

    class Meta:
        abstract = True
