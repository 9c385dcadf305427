"""
Webhook handling for bank transfer notifications from SePay.

Notifications are authenticated and reconciled synchronously by
payments.services.WebhookReconciler.

Usage:
    # In urls.py
    from payments.webhooks.views import sepay_webhook

    urlpatterns = [
        path("webhooks/sepay/", sepay_webhook, name="sepay_webhook"),
    ]
"""

from payments.webhooks.views import sepay_webhook

__all__ = [
    "sepay_webhook",
]
