"""
Order creation service for bank transfer subscriptions.

This module provides the OrderService class which opens a PENDING order
for an account and returns what the payer needs to make the transfer:
the order code to put in the memo, the amount, and the receiving bank
account. It does not move money; the order is settled later by the
webhook reconciler.

Usage:
    from payments.config import BankTransferConfig
    from payments.services import OrderService

    service = OrderService(BankTransferConfig.from_settings())
    result = service.create_order(request.user, "3_THANG", 99000)

    if result.success:
        receipt = result.data
        receipt.order_code  # "DH1700000000000"
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable

from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from core.services import BaseService, ServiceResult

from payments.config import BankTransferConfig
from payments.exceptions import OrderPersistenceError
from payments.models import Subscription
from payments.order_codes import build_order_code, timestamp_ms
from payments.pricing import parse_package, price_of
from payments.state_machines import SubscriptionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from authentication.models import User


@dataclass(frozen=True)
class OrderReceipt:
    """
    What the payer is shown after placing an order.

    Attributes:
        order_code: Code to put in the bank transfer memo
        amount: Amount to transfer, in VND
        bank_account: Receiving account number
        bank_name: Receiving bank
        expires_at: End of the pending window
    """

    order_code: str
    amount: int
    bank_account: str
    bank_name: str
    expires_at: datetime


class OrderService(BaseService):
    """
    Opens PENDING subscription orders.

    Order codes are ``DH`` + the creation time in milliseconds. The unique
    constraint on ``order_code`` is the uniqueness check: when two orders
    are placed in the same millisecond the later insert fails and is
    retried with the next millisecond.
    """

    MAX_ORDER_CODE_ATTEMPTS = 5

    def __init__(
        self,
        config: BankTransferConfig | None = None,
        clock: Callable[[], datetime] = timezone.now,
    ):
        self.config = config or BankTransferConfig.from_settings()
        self.clock = clock

    def create_order(
        self,
        account: User,
        package_details: str | None,
        amount: Any,
    ) -> ServiceResult[OrderReceipt]:
        """
        Create a PENDING order for an account.

        Args:
            account: Authenticated account placing the order
            package_details: Package code (e.g. "3_THANG")
            amount: Amount the client claims to pay, in VND; must reach the
                package price and becomes the activation threshold

        Returns:
            ServiceResult with an OrderReceipt, or a failure with error_code
            INVALID_REQUEST when the package or amount is missing, invalid,
            or below the package price

        Raises:
            OrderPersistenceError: If the order could not be stored
        """
        logger = self.get_logger()

        invalid = self.validate_required(package_details=package_details, amount=amount)
        if invalid:
            logger.info(
                "Order rejected: missing fields",
                extra={"account_id": str(account.pk), "fields": sorted(invalid.errors)},
            )
            return invalid

        package = parse_package(package_details)
        if package is None:
            return ServiceResult.failure(
                "Unknown subscription package",
                error_code="INVALID_REQUEST",
                errors={"package_details": [f"'{package_details}' is not a valid package."]},
            )

        try:
            amount = int(amount)
        except (TypeError, ValueError):
            amount = 0
        if amount <= 0:
            return ServiceResult.failure(
                "Amount must be a positive number",
                error_code="INVALID_REQUEST",
                errors={"amount": ["Amount must be a positive number."]},
            )

        list_price = price_of(package)
        if amount < list_price:
            logger.info(
                "Order rejected: amount below package price",
                extra={
                    "account_id": str(account.pk),
                    "package": package.value,
                    "amount": amount,
                    "list_price": list_price,
                },
            )
            return ServiceResult.failure(
                "Amount is below the package price",
                error_code="INVALID_REQUEST",
                errors={"amount": [f"Amount must be at least {list_price} VND."]},
            )

        now = self.clock()
        try:
            order = self._insert_pending_order(account, package, amount, now)
        except DatabaseError as exc:
            logger.error(
                "Failed to store order",
                extra={"account_id": str(account.pk), "package": package.value},
                exc_info=True,
            )
            raise OrderPersistenceError(
                "Could not store order",
                details={"account_id": str(account.pk)},
            ) from exc

        logger.info(
            "Created pending order",
            extra={
                "order_code": order.order_code,
                "account_id": str(account.pk),
                "package": order.package,
                "amount": order.amount,
            },
        )

        return ServiceResult.success(
            OrderReceipt(
                order_code=order.order_code,
                amount=order.amount,
                bank_account=self.config.bank_account,
                bank_name=self.config.bank_name,
                expires_at=order.expiry_date,
            )
        )

    def _insert_pending_order(
        self,
        account: User,
        package: str,
        amount: int,
        now: datetime,
    ) -> Subscription:
        """
        Insert the order, moving to the next millisecond on a code collision.

        Each attempt runs in its own savepoint so a failed insert does not
        poison an enclosing transaction.
        """
        base_millis = timestamp_ms(now)
        expiry_date = now + self.config.pending_grace

        for attempt in range(self.MAX_ORDER_CODE_ATTEMPTS):
            order_code = build_order_code(base_millis + attempt)
            try:
                with transaction.atomic():
                    return Subscription.objects.create(
                        account=account,
                        order_code=order_code,
                        package=package,
                        amount=amount,
                        status=SubscriptionStatus.PENDING,
                        start_date=now,
                        expiry_date=expiry_date,
                    )
            except IntegrityError:
                if not Subscription.objects.filter(order_code=order_code).exists():
                    raise
                self.get_logger().info(
                    "Order code collision, retrying",
                    extra={"order_code": order_code, "attempt": attempt + 1},
                )

        raise OrderPersistenceError(
            "Could not allocate a unique order code",
            details={
                "account_id": str(account.pk),
                "attempts": self.MAX_ORDER_CODE_ATTEMPTS,
            },
        )
