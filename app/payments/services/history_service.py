"""
Payment history for an account.

Read-only. Lists an account's orders newest first with a display label
for each status, as shown in the account's billing page.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from core.services import BaseService

from payments.models import Subscription
from payments.state_machines import SubscriptionStatus

if TYPE_CHECKING:
    from datetime import datetime

    from authentication.models import User


STATUS_TEXT = {
    SubscriptionStatus.PENDING: "Đang xử lý",
    SubscriptionStatus.ACTIVE: "Thành công",
    SubscriptionStatus.CANCELLED: "Thanh toán thất bại",
    SubscriptionStatus.EXPIRED: "Đã hết hạn",
}

UNKNOWN_STATUS_TEXT = "Không xác định"


def status_text(status: str | None) -> str:
    """Display label for an order status; unknown values get a fixed fallback."""
    try:
        return STATUS_TEXT[SubscriptionStatus(status)]
    except ValueError:
        return UNKNOWN_STATUS_TEXT


@dataclass(frozen=True)
class HistoryEntry:
    """
    One row of an account's payment history.

    ``amount`` is the price stored on the order, or the package's current
    price for orders stored without one.
    """

    id: Any
    order_code: str
    package: str
    amount: int
    status: str
    status_text: str
    start_date: datetime
    expiry_date: datetime

    @classmethod
    def from_subscription(cls, order: Subscription) -> HistoryEntry:
        return cls(
            id=order.pk,
            order_code=order.order_code,
            package=order.package,
            amount=order.expected_amount,
            status=order.status,
            status_text=status_text(order.status),
            start_date=order.start_date,
            expiry_date=order.expiry_date,
        )


class HistoryService(BaseService):
    """Reads an account's orders."""

    @classmethod
    def list_for_account(cls, account: User) -> list[HistoryEntry]:
        """
        All orders of an account, newest first.

        Returns an empty list for an account with no orders.
        """
        orders = Subscription.objects.for_account(account).order_by("-start_date")
        return [HistoryEntry.from_subscription(order) for order in orders]
