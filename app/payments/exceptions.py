"""
Errors raised by order creation and webhook reconciliation.

Outcomes a webhook is expected to produce (no order code in the memo, no
matching pending order, short transfer) are not errors; ReconcileResult
reports them.

    PaymentError
    ├── OrderPersistenceError      order row could not be written
    └── EntitlementUpgradeError    tier upgrade failed mid-activation

    WebhookAuthenticationError     credential rejected (a PermissionDeniedError)
    └── WebhookConfigurationError  no secret configured at all
"""

from __future__ import annotations

from core.exceptions import BaseApplicationError, PermissionDeniedError


# =============================================================================
# Orders
# =============================================================================


class PaymentError(BaseApplicationError):
    """Root of the payments errors."""

    default_error_code: str = "PAYMENT_ERROR"


class OrderPersistenceError(PaymentError):
    """
    Raised when a new order cannot be written to the database.

    Surfaced to the API caller as a server error. Covers both database
    failures and running out of order-code attempts.

    Example:
        except DatabaseError as exc:
            raise OrderPersistenceError(
                "Could not store order",
                details={"account_id": str(account.pk)},
            ) from exc
    """

    default_error_code: str = "ORDER_PERSISTENCE_ERROR"


class EntitlementUpgradeError(PaymentError):
    """
    Raised inside the activation transaction when the tier upgrade fails.

    Raising rolls back the order's PENDING -> ACTIVE transition, so an
    order is never ACTIVE while its account is still on the old tier.
    """

    default_error_code: str = "ENTITLEMENT_UPGRADE_FAILED"


# =============================================================================
# Webhook
# =============================================================================


class WebhookAuthenticationError(PermissionDeniedError):
    """
    Raised when a webhook does not carry the configured shared secret.

    The webhook view answers 401 so the gateway retries delivery.
    No order is looked at before this check passes.
    """

    default_error_code: str = "WEBHOOK_UNAUTHORIZED"


class WebhookConfigurationError(WebhookAuthenticationError):
    """
    Raised when no webhook secret is configured.

    Treated as an authentication failure for every notification and
    logged at ERROR so the misconfiguration is noticed.
    """

    default_error_code: str = "WEBHOOK_SECRET_NOT_CONFIGURED"
