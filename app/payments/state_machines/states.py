"""
State enums for payment models.

This module defines the state enums used by payment models with django-fsm.
These are Django TextChoices for database storage and admin integration.

State Machines Overview:

Subscription (order) States:
    PENDING → ACTIVE     (confirmed bank transfer, webhook reconciler)
    PENDING → EXPIRED    (grace window elapsed, external sweep)
    PENDING → CANCELLED  (external cancellation)
"""

from django.db import models


class SubscriptionStatus(models.TextChoices):
    """
    States for the Subscription (order) lifecycle.

    Terminal states: ACTIVE, EXPIRED, CANCELLED
    Only PENDING orders can transition, and each order leaves PENDING
    at most once.

    Values are stored upper-case; they are part of the history API
    payload consumed by the frontend.
    """

    PENDING = "PENDING", "Pending"
    ACTIVE = "ACTIVE", "Active"
    EXPIRED = "EXPIRED", "Expired"
    CANCELLED = "CANCELLED", "Cancelled"


TERMINAL_SUBSCRIPTION_STATUSES = frozenset(
    {
        SubscriptionStatus.ACTIVE,
        SubscriptionStatus.EXPIRED,
        SubscriptionStatus.CANCELLED,
    }
)


class SubscriptionPackage(models.TextChoices):
    """
    Subscription packages that can be purchased.

    The codes are shown to payers and sent back by the frontend
    verbatim, so they keep their original Vietnamese spelling
    ("THANG" = month).
    """

    THREE_MONTHS = "3_THANG", "3 months"
    SIX_MONTHS = "6_THANG", "6 months"
    TWELVE_MONTHS = "12_THANG", "12 months"


__all__ = [
    "SubscriptionPackage",
    "SubscriptionStatus",
    "TERMINAL_SUBSCRIPTION_STATUSES",
]
