"""
Entitlement services.

This module provides the EntitlementService class, the only write path for
an account's tier. Payment flows call it from inside their own database
transaction so the tier change commits or rolls back together with the
order that paid for it.

Related files:
    - models.py: User, AccountTier
    - payments/services/reconciler.py: Upgrades the tier on order activation
"""

from __future__ import annotations

from django.utils import timezone

from core.exceptions import NotFoundError
from core.services import BaseService

from authentication.models import AccountTier, User


class EntitlementService(BaseService):
    """
    Reads and upgrades account tiers.

    Usage:
        from authentication.services import EntitlementService

        with transaction.atomic():
            order.save()
            EntitlementService.upgrade_tier(order.account_id, AccountTier.PREMIUM)
    """

    @classmethod
    def get_tier(cls, account_id) -> str:
        """
        Return the current tier of an account.

        Raises:
            NotFoundError: If the account does not exist
        """
        tier = User.objects.filter(pk=account_id).values_list("tier", flat=True).first()
        if tier is None:
            raise NotFoundError(
                "Account not found",
                error_code="ACCOUNT_NOT_FOUND",
                details={"account_id": str(account_id)},
            )
        return tier

    @classmethod
    def upgrade_tier(cls, account_id, tier: str = AccountTier.PREMIUM) -> None:
        """
        Set the tier of an account.

        The write is a single UPDATE so it joins whatever transaction the
        caller has open. Setting the tier the account already holds is a
        no-op apart from touching ``updated_at``.

        Args:
            account_id: Primary key of the account
            tier: Target tier (defaults to PREMIUM)

        Raises:
            NotFoundError: If no account row was updated
        """
        updated = User.objects.filter(pk=account_id).update(
            tier=tier,
            updated_at=timezone.now(),
        )
        if updated != 1:
            raise NotFoundError(
                "Account not found",
                error_code="ACCOUNT_NOT_FOUND",
                details={"account_id": str(account_id)},
            )

        cls.get_logger().info(
            "Account tier upgraded",
            extra={"account_id": str(account_id), "tier": str(tier)},
        )
