"""
Webhook reconciler for SePay bank transfer notifications.

SePay calls the webhook for every incoming transfer on the receiving
account, including transfers that have nothing to do with this system.
The reconciler decides what, if anything, a notification means:

1. Authenticate the notification against the shared secret
2. Extract an order code from the free-text transfer memo
3. Lock the PENDING order with that code
4. Check the transferred amount against the order's stored amount
5. Activate the order and upgrade the account tier in one transaction

Only step 1 can fail the delivery. Every other outcome, including "this
transfer is not ours", is acknowledged so the gateway does not retry it,
and is reported through ReconcileResult for logging.

Usage:
    from payments.services import WebhookNotification, WebhookReconciler

    notification = WebhookNotification.from_payload(
        authorization=request.headers.get("Authorization"),
        payload=json.loads(request.body),
    )
    result = WebhookReconciler(config).reconcile(notification)
    result.outcome  # ReconcileOutcome.ACTIVATED
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

from django.db import DatabaseError, models
from django.utils import timezone

from core.exceptions import BaseApplicationError, NotFoundError
from core.services import BaseService

from authentication.models import AccountTier
from authentication.services import EntitlementService

from payments.config import BankTransferConfig
from payments.exceptions import (
    EntitlementUpgradeError,
    WebhookAuthenticationError,
    WebhookConfigurationError,
)
from payments.models import Subscription
from payments.order_codes import extract_order_code
from payments.state_machines import SubscriptionStatus

if TYPE_CHECKING:
    from datetime import datetime


# =============================================================================
# Types
# =============================================================================


class ReconcileOutcome(models.TextChoices):
    """
    What a webhook notification resolved to.

    All outcomes except PERSISTENCE_FAILURE are normal, acknowledged
    results. PERSISTENCE_FAILURE is acknowledged too, but needs follow-up.
    """

    ACTIVATED = "activated", "Order activated"
    NO_CONTENT = "no_content", "No transfer memo"
    NO_CORRELATION = "no_correlation", "No order code in memo"
    NO_MATCHING_ORDER = "no_matching_order", "No pending order for code"
    INSUFFICIENT_AMOUNT = "insufficient_amount", "Transferred amount too low"
    UNPRICED_ORDER = "unpriced_order", "Order has no price to compare against"
    PERSISTENCE_FAILURE = "persistence_failure", "Could not persist activation"


@dataclass(frozen=True)
class WebhookNotification:
    """
    One inbound transfer notification. Never persisted.

    Attributes:
        authorization: Raw Authorization header value (may be None)
        content: Free-text transfer memo
        transfer_amount: Transferred amount as sent by the gateway
        received_at: When the notification reached us
        payload: Full JSON body, kept for handlers that need more fields
    """

    authorization: str | None = field(repr=False)
    content: str | None
    transfer_amount: Any
    received_at: datetime = field(default_factory=timezone.now)
    payload: dict = field(default_factory=dict, repr=False)

    @classmethod
    def from_payload(
        cls,
        authorization: str | None,
        payload: dict | None,
        received_at: datetime | None = None,
    ) -> WebhookNotification:
        """Build a notification from the webhook's JSON body."""
        payload = payload if isinstance(payload, dict) else {}
        content = payload.get("content")
        return cls(
            authorization=authorization,
            content=content if isinstance(content, str) else None,
            transfer_amount=payload.get("transferAmount"),
            received_at=received_at or timezone.now(),
            payload=payload,
        )

    @property
    def amount(self) -> int:
        """Transferred amount as an integer number of VND; 0 if unparseable."""
        if isinstance(self.transfer_amount, bool):
            return 0
        try:
            return int(Decimal(str(self.transfer_amount)))
        except (InvalidOperation, ValueError, OverflowError):
            return 0


@dataclass(frozen=True)
class ReconcileResult:
    """
    Outcome of reconciling one notification.

    Attributes:
        outcome: What the notification resolved to
        order_code: Order code found in the memo, if any
        order_id: Internal id of the matched order, if any
    """

    outcome: ReconcileOutcome
    order_code: str | None = None
    order_id: Any = None

    @property
    def activated(self) -> bool:
        return self.outcome == ReconcileOutcome.ACTIVATED

    @property
    def failed(self) -> bool:
        """Whether processing hit an error that needs operator follow-up."""
        return self.outcome == ReconcileOutcome.PERSISTENCE_FAILURE


# =============================================================================
# Reconciler
# =============================================================================


class WebhookReconciler(BaseService):
    """
    Matches bank transfer notifications to PENDING orders.

    Concurrency:
        The matching order row is locked with SELECT ... FOR UPDATE and the
        PENDING -> ACTIVE transition is written with a conditional update
        (Subscription.save_transition). Of two concurrent deliveries for the
        same order, the second either finds no PENDING row or sees its
        conditional update affect zero rows; both resolve to
        NO_MATCHING_ORDER and the tier is upgraded once.

    Atomicity:
        The order transition and the tier upgrade share one transaction.
        If the upgrade fails, EntitlementUpgradeError rolls the transition
        back and the order stays PENDING.
    """

    UPGRADE_TIER = AccountTier.PREMIUM

    def __init__(
        self,
        config: BankTransferConfig | None = None,
        entitlements: type[EntitlementService] = EntitlementService,
    ):
        self.config = config or BankTransferConfig.from_settings()
        self.entitlements = entitlements

    # -------------------------------------------------------------------------
    # Public API
    # -------------------------------------------------------------------------

    def authenticate(self, authorization: str | None) -> None:
        """
        Check the notification's credential against the shared secret.

        The credential passes when it contains the configured secret
        (SePay sends "Apikey <secret>").

        Raises:
            WebhookConfigurationError: If no secret is configured
            WebhookAuthenticationError: If the credential does not match
        """
        logger = self.get_logger()

        if not self.config.has_webhook_secret:
            logger.error("SePay webhook secret is not configured; rejecting notification")
            raise WebhookConfigurationError("Webhook secret is not configured")

        credential_present = bool(authorization)
        credential_matches = credential_present and self.config.webhook_api_key in authorization

        if not credential_matches:
            logger.warning(
                "SePay webhook rejected",
                extra={
                    "credential_present": credential_present,
                    "credential_matches": False,
                },
            )
            raise WebhookAuthenticationError("Webhook credential rejected")

    def reconcile(self, notification: WebhookNotification) -> ReconcileResult:
        """
        Process one notification end to end.

        Returns:
            ReconcileResult describing the outcome. Database and entitlement
            failures are caught, logged, and reported as PERSISTENCE_FAILURE.

        Raises:
            WebhookAuthenticationError: If the notification is not authentic
        """
        self.authenticate(notification.authorization)

        logger = self.get_logger()

        if not notification.content:
            return self._report(ReconcileOutcome.NO_CONTENT)

        order_code = extract_order_code(notification.content)
        if order_code is None:
            return self._report(ReconcileOutcome.NO_CORRELATION)

        try:
            return self._activate(order_code, notification)
        except (DatabaseError, BaseApplicationError):
            logger.error(
                "Failed to reconcile SePay notification",
                extra={
                    "order_code": order_code,
                    "outcome": ReconcileOutcome.PERSISTENCE_FAILURE.value,
                },
                exc_info=True,
            )
            return ReconcileResult(
                outcome=ReconcileOutcome.PERSISTENCE_FAILURE,
                order_code=order_code,
            )

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _activate(
        self, order_code: str, notification: WebhookNotification
    ) -> ReconcileResult:
        """Match, validate, and activate inside one transaction."""
        transferred = notification.amount

        with self.atomic():
            order = (
                Subscription.objects.select_for_update()
                .filter(order_code=order_code, status=SubscriptionStatus.PENDING)
                .first()
            )
            if order is None:
                return self._report(ReconcileOutcome.NO_MATCHING_ORDER, order_code)

            expected = order.expected_amount
            if expected <= 0:
                return self._report(
                    ReconcileOutcome.UNPRICED_ORDER, order_code, order,
                    package=order.package,
                )
            if transferred < expected:
                return self._report(
                    ReconcileOutcome.INSUFFICIENT_AMOUNT, order_code, order,
                    expected_amount=expected,
                    transferred_amount=transferred,
                )

            order.activate(
                transferred_amount=transferred,
                activated_at=notification.received_at,
            )
            if not order.save_transition(source=SubscriptionStatus.PENDING):
                return self._report(ReconcileOutcome.NO_MATCHING_ORDER, order_code, order)

            try:
                self.entitlements.upgrade_tier(order.account_id, self.UPGRADE_TIER)
            except NotFoundError as exc:
                raise EntitlementUpgradeError(
                    "Account for order no longer exists",
                    details={
                        "order_code": order_code,
                        "account_id": str(order.account_id),
                    },
                ) from exc

        return self._report(
            ReconcileOutcome.ACTIVATED, order_code, order,
            account_id=str(order.account_id),
            transferred_amount=transferred,
        )

    def _report(
        self,
        outcome: ReconcileOutcome,
        order_code: str | None = None,
        order: Subscription | None = None,
        **context,
    ) -> ReconcileResult:
        """Log an outcome with its context and wrap it in a ReconcileResult."""
        extra = {"outcome": outcome.value, "order_code": order_code, **context}
        self.get_logger().info(f"SePay notification: {outcome.label}", extra=extra)
        return ReconcileResult(
            outcome=outcome,
            order_code=order_code,
            order_id=order.pk if order is not None else None,
        )
