"""
State machine enums and helpers for payment models.

This module defines the state enums used by payment models with django-fsm.
"""

from payments.state_machines.states import (
    TERMINAL_SUBSCRIPTION_STATUSES,
    SubscriptionPackage,
    SubscriptionStatus,
)

__all__ = [
    "SubscriptionPackage",
    "SubscriptionStatus",
    "TERMINAL_SUBSCRIPTION_STATUSES",
]
