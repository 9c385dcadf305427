"""
Payments app for bank transfer subscriptions via SePay.

This app handles:
- Subscription orders paid by bank transfer
- Webhook reconciliation of incoming transfers to PENDING orders
- Account tier upgrade on activation
- Payment history

Related apps:
    - authentication: User model and EntitlementService (account tier)

Usage:
    from payments.services import OrderService, WebhookReconciler

    # Create an order
    result = OrderService().create_order(user, "3_THANG", 99000)

    # Reconcile a webhook notification
    result = WebhookReconciler().reconcile(notification)
"""
