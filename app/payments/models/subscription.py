"""
Subscription model: one purchase attempt of a subscription package.

A Subscription row is created PENDING when the payer asks to buy a
package, and is the single source of truth the webhook reconciler
matches bank transfers against. Its ``order_code`` is the only link
between the row and the payer's transfer memo.

Usage:
    from payments.models import Subscription
    from payments.state_machines import SubscriptionStatus

    order = Subscription.objects.create(
        account=user,
        order_code="DH1700000000000",
        package="3_THANG",
        amount=99000,
        start_date=now,
        expiry_date=now + timedelta(minutes=1),
    )

    # State transitions using django-fsm, persisted with a conditional
    # update so only one writer can move the order out of PENDING
    order.activate(transferred_amount=99000)
    if not order.save_transition():
        ...  # another process already moved the order
"""

from __future__ import annotations

from django.conf import settings
from django.db import models
from django.db.models import F
from django.utils import timezone

from django_fsm import FSMField, transition

from core.models import BaseModel
from core.model_mixins import UUIDPrimaryKeyMixin

from payments.pricing import expiry_of, price_of
from payments.state_machines import (
    TERMINAL_SUBSCRIPTION_STATUSES,
    SubscriptionPackage,
    SubscriptionStatus,
)


class SubscriptionQuerySet(models.QuerySet):
    """QuerySet helpers for order lookups."""

    def pending(self):
        return self.filter(status=SubscriptionStatus.PENDING)

    def for_account(self, account):
        return self.filter(account=account)


class Subscription(UUIDPrimaryKeyMixin, BaseModel):
    """
    A subscription order paid by bank transfer.

    Uses django-fsm for state machine management and a version field
    incremented on every persisted change.

    State Flow:
        PENDING -> ACTIVE (confirmed transfer, set by the webhook reconciler)
        PENDING -> EXPIRED (grace window elapsed, set by an external sweep)
        PENDING -> CANCELLED (external cancellation)

    Fields:
        account: Account that placed the order and receives the tier
        order_code: Human-visible order id (``DH`` + digits), unique
        package: Purchased package code
        amount: Price captured at creation; never recomputed
        status: Current FSM state
        start_date: When the order was placed
        expiry_date: End of the PENDING grace window, replaced by the end
            of the package's validity period on activation
        activated_at: When the confirming transfer was processed
        transferred_amount: Amount reported by the gateway on activation
        version: Incremented on each persisted change
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    account = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="subscriptions",
        help_text="Account that placed the order",
    )

    # ==========================================================================
    # Order Identity
    # ==========================================================================

    order_code = models.CharField(
        max_length=32,
        unique=True,
        help_text="Order code the payer puts in the transfer memo (DH + digits)",
    )

    package = models.CharField(
        max_length=16,
        choices=SubscriptionPackage.choices,
        help_text="Purchased subscription package",
    )

    # ==========================================================================
    # Amount
    # ==========================================================================

    amount = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Price in VND captured when the order was placed",
    )

    transferred_amount = models.PositiveBigIntegerField(
        null=True,
        blank=True,
        help_text="Amount in VND reported by the gateway on activation",
    )

    # ==========================================================================
    # State
    # ==========================================================================

    status = FSMField(
        default=SubscriptionStatus.PENDING,
        choices=SubscriptionStatus.choices,
        db_index=True,
        protected=True,
        help_text="Current state of the order (managed by FSM)",
    )

    # ==========================================================================
    # Validity Period
    # ==========================================================================

    start_date = models.DateTimeField(
        default=timezone.now,
        help_text="When the order was placed",
    )

    expiry_date = models.DateTimeField(
        help_text="End of the pending window, or of the package once active",
    )

    activated_at = models.DateTimeField(
        null=True,
        blank=True,
        help_text="When the confirming bank transfer was processed",
    )

    # ==========================================================================
    # Concurrency Control
    # ==========================================================================

    version = models.PositiveIntegerField(
        default=1,
        help_text="Incremented on each persisted change",
    )

    objects = SubscriptionQuerySet.as_manager()

    # Fields written when a transition is persisted
    TRANSITION_FIELDS = (
        "status",
        "expiry_date",
        "activated_at",
        "transferred_amount",
    )

    # ==========================================================================
    # Meta & Methods
    # ==========================================================================

    class Meta:
        ordering = ["-start_date"]
        verbose_name = "Subscription"
        verbose_name_plural = "Subscriptions"
        indexes = [
            models.Index(fields=["account", "start_date"], name="sub_account_start_idx"),
            models.Index(fields=["status", "expiry_date"], name="sub_status_expiry_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(amount__isnull=True) | models.Q(amount__gt=0),
                name="subscription_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        """Return string representation with order code, state, and package."""
        return f"Subscription({self.order_code}, {self.status}, {self.package})"

    def save(self, *args, **kwargs):
        """
        Save with version auto-increment.
        """
        is_update = not self._state.adding and not kwargs.get("force_insert", False)
        if is_update:
            self.version = F("version") + 1
        super().save(*args, **kwargs)
        if is_update:
            self.refresh_from_db(fields=["version"])

    # ==========================================================================
    # State Transitions (django-fsm)
    # ==========================================================================

    @transition(
        field=status,
        source=SubscriptionStatus.PENDING,
        target=SubscriptionStatus.ACTIVE,
    )
    def activate(self, transferred_amount: int, activated_at=None):
        """
        Activate the order after a sufficient bank transfer.

        Transition: PENDING -> ACTIVE

        The package's validity period starts at activation, replacing
        the short pending window in ``expiry_date``.
        """
        activated_at = activated_at or timezone.now()
        self.activated_at = activated_at
        self.transferred_amount = transferred_amount
        self.expiry_date = expiry_of(self.package, activated_at)

    @transition(
        field=status,
        source=SubscriptionStatus.PENDING,
        target=SubscriptionStatus.EXPIRED,
    )
    def expire(self):
        """
        Expire an order whose transfer never arrived.

        Transition: PENDING -> EXPIRED
        """

    @transition(
        field=status,
        source=SubscriptionStatus.PENDING,
        target=SubscriptionStatus.CANCELLED,
    )
    def cancel(self):
        """
        Cancel an unpaid order.

        Transition: PENDING -> CANCELLED
        """

    def save_transition(self, source: str = SubscriptionStatus.PENDING) -> bool:
        """
        Persist an in-memory transition only if the row is still in ``source``.

        Issues ``UPDATE ... WHERE id = pk AND status = source``: a
        compare-and-swap on the status column. Returns False when the row
        had already left ``source`` (another writer won), in which case
        nothing is written.

        Args:
            source: Status the row must still hold in the database

        Returns:
            True if this call moved the row, False otherwise
        """
        now = timezone.now()
        values = {name: getattr(self, name) for name in self.TRANSITION_FIELDS}
        updated = (
            type(self)
            .objects.filter(pk=self.pk, status=source)
            .update(**values, version=F("version") + 1, updated_at=now)
        )
        if updated != 1:
            return False
        self.refresh_from_db(fields=["version", "updated_at"])
        return True

    # ==========================================================================
    # Helper Properties
    # ==========================================================================

    @property
    def expected_amount(self) -> int:
        """
        Amount a transfer must reach to activate this order.

        The stored amount when present; otherwise the current price of the
        package (0 when the package is unknown, meaning "unpriced").
        """
        if self.amount:
            return int(self.amount)
        return price_of(self.package)

    @property
    def is_pending(self) -> bool:
        """Check if the order is still awaiting payment."""
        return self.status == SubscriptionStatus.PENDING

    @property
    def is_active(self) -> bool:
        """Check if the order has been paid and activated."""
        return self.status == SubscriptionStatus.ACTIVE

    @property
    def is_terminal(self) -> bool:
        """Check if the order can no longer transition."""
        return self.status in TERMINAL_SUBSCRIPTION_STATUSES
