"""
Abstract mixins combined with core.models.BaseModel.

List mixins before BaseModel so their fields win.
"""

from __future__ import annotations

import uuid

from django.db import models


class UUIDPrimaryKeyMixin(models.Model):
    """
    Random UUID primary key.

    Ids returned to clients reveal nothing about volume. Orders are looked
    up by order code on the webhook path, never by id.
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    class Meta:
        abstract = True
