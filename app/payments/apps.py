"""
Payments app configuration.

This app provides bank transfer subscription billing:
- Order creation with transfer instructions
- SePay webhook reconciliation
- Payment history
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
