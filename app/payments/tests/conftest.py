"""
Pytest fixtures for payment tests.

This module provides fixtures for creating orders in various states and a
SePay configuration with a known webhook secret.

Usage:
    def test_activation(pending_order, reconciler, make_notification):
        result = reconciler.reconcile(make_notification(content=pending_order.order_code))
        assert result.outcome == ReconcileOutcome.ACTIVATED
"""

from datetime import timedelta

import pytest

from payments.config import BankTransferConfig
from payments.services import WebhookNotification, WebhookReconciler
from payments.state_machines import SubscriptionStatus
from payments.tests.factories import SubscriptionFactory, UserFactory

WEBHOOK_SECRET = "test-sepay-secret"


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def bank_config():
    """SePay configuration with a known secret and receiving account."""
    return BankTransferConfig(
        webhook_api_key=WEBHOOK_SECRET,
        bank_account="0123456789",
        bank_name="MB Bank",
        pending_grace=timedelta(seconds=60),
    )


@pytest.fixture
def sepay_settings(settings):
    """Django settings carrying the same SePay configuration."""
    settings.SEPAY_API_KEY = WEBHOOK_SECRET
    settings.SEPAY_BANK_ACCOUNT = "0123456789"
    settings.SEPAY_BANK_NAME = "MB Bank"
    settings.SEPAY_PENDING_GRACE_SECONDS = 60
    return settings


@pytest.fixture
def reconciler(bank_config):
    return WebhookReconciler(bank_config)


@pytest.fixture
def make_notification():
    """Build a notification carrying the valid credential by default."""

    def _make(content=None, transfer_amount=99_000, authorization=f"Apikey {WEBHOOK_SECRET}"):
        return WebhookNotification.from_payload(
            authorization=authorization,
            payload={"content": content, "transferAmount": transfer_amount},
        )

    return _make


# =============================================================================
# Account and Order Fixtures
# =============================================================================


@pytest.fixture
def user(db):
    """Create a free-tier user."""
    return UserFactory()


@pytest.fixture
def pending_order(db, user):
    """PENDING 3-month order with the order code used in the memo examples."""
    return SubscriptionFactory(account=user, order_code="DH1700000000000")


@pytest.fixture
def active_order(db, user):
    return SubscriptionFactory(
        account=user,
        status=SubscriptionStatus.ACTIVE,
        transferred_amount=99_000,
    )
