"""
Payment domain models.

This module contains the payment-related models:
- Subscription: A subscription order paid by bank transfer, tracked from
  PENDING to its terminal state
"""

from payments.models.subscription import Subscription

__all__ = [
    "Subscription",
]
