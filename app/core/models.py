"""
Abstract base model.

Usage:
    class Subscription(UUIDPrimaryKeyMixin, BaseModel):
        order_code = models.CharField(max_length=32, unique=True)
"""

from __future__ import annotations

from django.db import models


class BaseModel(models.Model):
    """
    Adds created_at and updated_at.

    QuerySet.update() skips auto_now, so bulk and conditional updates
    must pass updated_at themselves (see Subscription.save_transition).
    """

    created_at = models.DateTimeField(auto_now_add=True, db_index=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{type(self).__name__}({self.pk})"
