"""
URL configuration for the payments app.

Routes:
    - POST /sepay/orders/ - Create a bank transfer order
    - GET /history/ - Payment history of the caller
    - POST /webhooks/sepay/ - SePay webhook endpoint

All routes are prefixed with /api/v1/payments/ when included in the main URLconf.

Usage:
    # In config/urls.py
    api_v1_patterns = [
        path("payments/", include("payments.urls")),
    ]
"""

from django.urls import path

from payments.views import PaymentHistoryView, SepayOrderCreateView
from payments.webhooks.views import sepay_webhook

app_name = "payments"

urlpatterns = [
    # Orders
    path("sepay/orders/", SepayOrderCreateView.as_view(), name="sepay_order_create"),
    path("history/", PaymentHistoryView.as_view(), name="history"),
    # Webhook endpoints
    path("webhooks/sepay/", sepay_webhook, name="sepay_webhook"),
]
