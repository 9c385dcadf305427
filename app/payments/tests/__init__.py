"""
Tests for payments app.

This package contains test modules for:
- test_pricing.py: Package prices, expiry, and order codes
- test_models.py: Subscription transitions and conditional updates
- test_order_service.py: OrderService tests
- test_reconciler.py: WebhookReconciler tests
- test_history_service.py: HistoryService tests
- test_views.py: API endpoint and webhook view tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_reconciler.py
"""
