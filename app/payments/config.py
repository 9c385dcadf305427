"""
Bank transfer gateway configuration.

Settings are read once from django.conf.settings (populated by
django-environ at startup) and handed to services as an immutable
object, so services never read process-wide configuration ad hoc.

Usage:
    from payments.config import BankTransferConfig

    config = BankTransferConfig.from_settings()
    reconciler = WebhookReconciler(config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import timedelta

from django.conf import settings


@dataclass(frozen=True)
class BankTransferConfig:
    """
    Immutable SePay configuration.

    Attributes:
        webhook_api_key: Shared secret expected in the webhook
            Authorization header, stored stripped. Excluded from repr so it never
            reaches logs.
        bank_account: Receiving account number shown to the payer
        bank_name: Receiving bank shown to the payer
        pending_grace: How long a new order stays PENDING before the
            external sweep may expire it
    """

    webhook_api_key: str = field(repr=False)
    bank_account: str = ""
    bank_name: str = ""
    pending_grace: timedelta = timedelta(seconds=60)

    def __post_init__(self):
        # Both the configured check and the header match use the stripped value
        object.__setattr__(self, "webhook_api_key", (self.webhook_api_key or "").strip())

    @classmethod
    def from_settings(cls) -> BankTransferConfig:
        """Build the configuration from Django settings."""
        return cls(
            webhook_api_key=getattr(settings, "SEPAY_API_KEY", "") or "",
            bank_account=getattr(settings, "SEPAY_BANK_ACCOUNT", "") or "",
            bank_name=getattr(settings, "SEPAY_BANK_NAME", "") or "",
            pending_grace=timedelta(
                seconds=getattr(settings, "SEPAY_PENDING_GRACE_SECONDS", 60)
            ),
        )

    @property
    def has_webhook_secret(self) -> bool:
        """Whether a non-empty webhook secret is configured."""
        return bool(self.webhook_api_key)
