"""
Payment services for bank transfer subscriptions.

This module provides:
- OrderService: Opens PENDING orders and returns transfer instructions
- WebhookReconciler: Matches SePay transfer notifications to orders
- HistoryService: Lists an account's orders

Usage:
    from payments.services import OrderService

    result = OrderService().create_order(user, "3_THANG", 99000)

    # Reconcile a webhook notification
    from payments.services import WebhookNotification, WebhookReconciler

    notification = WebhookNotification.from_payload(authorization, payload)
    result = WebhookReconciler().reconcile(notification)

    # Read payment history
    from payments.services import HistoryService

    entries = HistoryService.list_for_account(user)
"""

from payments.services.history_service import (
    HistoryEntry,
    HistoryService,
    status_text,
)
from payments.services.order_service import (
    OrderReceipt,
    OrderService,
)
from payments.services.reconciler import (
    ReconcileOutcome,
    ReconcileResult,
    WebhookNotification,
    WebhookReconciler,
)

__all__ = [
    # Orders
    "OrderReceipt",
    "OrderService",
    # Webhook reconciliation
    "ReconcileOutcome",
    "ReconcileResult",
    "WebhookNotification",
    "WebhookReconciler",
    # History
    "HistoryEntry",
    "HistoryService",
    "status_text",
]
