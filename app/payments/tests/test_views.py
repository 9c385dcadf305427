"""
Tests for payment API views and the SePay webhook view.

Tests cover:
- Order creation endpoint
- Payment history endpoint
- Webhook authentication, acknowledgement, and error responses
"""

import json
from unittest.mock import patch

import pytest
from django.test import RequestFactory
from rest_framework.test import APIClient

from authentication.models import AccountTier, User
from payments.exceptions import OrderPersistenceError
from payments.models import Subscription
from payments.services import ReconcileOutcome, ReconcileResult
from payments.state_machines import SubscriptionStatus
from payments.tests.conftest import WEBHOOK_SECRET
from payments.tests.factories import SubscriptionFactory
from payments.webhooks.views import sepay_webhook

ORDERS_URL = "/api/v1/payments/sepay/orders/"
HISTORY_URL = "/api/v1/payments/history/"
WEBHOOK_URL = "/api/v1/payments/webhooks/sepay/"


# =============================================================================
# Setup
# =============================================================================


@pytest.fixture
def api_client(user, sepay_settings):
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def rf():
    """Request factory for creating test requests."""
    return RequestFactory()


def make_webhook_request(rf, payload, authorization=f"Apikey {WEBHOOK_SECRET}"):
    """Create a POST request to the webhook endpoint."""
    headers = {}
    if authorization is not None:
        headers["HTTP_AUTHORIZATION"] = authorization
    body = payload if isinstance(payload, (bytes, str)) else json.dumps(payload)
    return rf.post(WEBHOOK_URL, data=body, content_type="application/json", **headers)


# =============================================================================
# Order Creation
# =============================================================================


class TestSepayOrderCreateView:
    """Tests for POST /api/v1/payments/sepay/orders/."""

    def test_creates_order(self, api_client, user):
        response = api_client.post(
            ORDERS_URL, {"package_details": "3_THANG", "amount": 99000}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["data"]["orderId"].startswith("DH")
        assert body["data"]["amount"] == 99000
        assert body["data"]["bankAccount"] == "0123456789"
        assert body["data"]["bankName"] == "MB Bank"

        order = Subscription.objects.get(order_code=body["data"]["orderId"])
        assert order.account == user
        assert order.status == SubscriptionStatus.PENDING

    @pytest.mark.parametrize(
        "payload",
        [
            {"amount": 99000},
            {"package_details": "3_THANG"},
            {"package_details": "LIFETIME", "amount": 99000},
            {"package_details": "3_THANG", "amount": 0},
            {"package_details": "3_THANG", "amount": "abc"},
            {"package_details": "12_THANG", "amount": 1},
        ],
    )
    def test_invalid_request(self, api_client, payload):
        response = api_client.post(ORDERS_URL, payload, format="json")

        assert response.status_code == 400
        assert response.json()["success"] is False
        assert response.json()["message"]
        assert not Subscription.objects.exists()

    def test_persistence_failure_returns_500(self, api_client):
        with patch(
            "payments.views.OrderService.create_order",
            side_effect=OrderPersistenceError("Could not store order"),
        ):
            response = api_client.post(
                ORDERS_URL, {"package_details": "3_THANG", "amount": 99000}, format="json"
            )

        assert response.status_code == 500
        assert response.json() == {"success": False, "message": "Could not create order"}

    def test_requires_authentication(self, db, sepay_settings):
        response = APIClient().post(
            ORDERS_URL, {"package_details": "3_THANG", "amount": 99000}, format="json"
        )

        assert response.status_code == 401


# =============================================================================
# History
# =============================================================================


class TestPaymentHistoryView:
    """Tests for GET /api/v1/payments/history/."""

    def test_lists_own_orders(self, api_client, user):
        order = SubscriptionFactory(account=user)
        SubscriptionFactory()

        response = api_client.get(HISTORY_URL)

        assert response.status_code == 200
        history = response.json()["data"]["history"]
        assert len(history) == 1
        row = history[0]
        assert row["id"] == str(order.pk)
        assert row["transactionId"] == order.order_code
        assert row["package"] == "3_THANG"
        assert row["amount"] == 99000
        assert row["status"] == "PENDING"
        assert row["statusText"] == "Đang xử lý"
        assert row["startDate"]
        assert row["expiryDate"]

    def test_empty_history(self, api_client):
        response = api_client.get(HISTORY_URL)

        assert response.json() == {"success": True, "data": {"history": []}}


# =============================================================================
# Webhook
# =============================================================================


class TestSepayWebhook:
    """Tests for POST /api/v1/payments/webhooks/sepay/."""

    def test_activates_order(self, rf, sepay_settings, pending_order):
        request = make_webhook_request(
            rf, {"content": "CK tới DH1700000000000 noi dung", "transferAmount": 99000}
        )

        response = sepay_webhook(request)

        assert response.status_code == 200
        assert json.loads(response.content) == {"success": True}
        assert Subscription.objects.get(pk=pending_order.pk).status == SubscriptionStatus.ACTIVE
        assert User.objects.get(pk=pending_order.account_id).tier == AccountTier.PREMIUM

    def test_insufficient_amount_is_acknowledged(self, rf, sepay_settings, pending_order):
        request = make_webhook_request(
            rf, {"content": "CK tới DH1700000000000 noi dung", "transferAmount": 50000}
        )

        response = sepay_webhook(request)

        assert response.status_code == 200
        assert json.loads(response.content) == {"success": True}
        assert Subscription.objects.get(pk=pending_order.pk).status == SubscriptionStatus.PENDING

    def test_unrelated_transfer_is_acknowledged(self, rf, sepay_settings, db):
        response = sepay_webhook(
            make_webhook_request(rf, {"content": "tien nha", "transferAmount": 5000})
        )

        assert response.status_code == 200
        assert json.loads(response.content) == {"success": True}

    def test_invalid_json_is_acknowledged(self, rf, sepay_settings, db):
        response = sepay_webhook(make_webhook_request(rf, b"{not json"))

        assert response.status_code == 200

    @pytest.mark.parametrize("authorization", [None, "Apikey wrong", ""])
    def test_unauthorized(self, rf, sepay_settings, pending_order, authorization):
        request = make_webhook_request(
            rf,
            {"content": "DH1700000000000", "transferAmount": 99000},
            authorization=authorization,
        )

        response = sepay_webhook(request)

        assert response.status_code == 401
        assert json.loads(response.content) == {"success": False, "message": "Unauthorized"}
        assert Subscription.objects.get(pk=pending_order.pk).status == SubscriptionStatus.PENDING

    def test_missing_secret_configuration_is_unauthorized(self, rf, settings, pending_order):
        settings.SEPAY_API_KEY = ""

        response = sepay_webhook(
            make_webhook_request(rf, {"content": "DH1700000000000"}, authorization="Apikey ")
        )

        assert response.status_code == 401

    def test_persistence_failure_answers_server_error(self, rf, sepay_settings, db):
        failed = ReconcileResult(
            outcome=ReconcileOutcome.PERSISTENCE_FAILURE, order_code="DH1"
        )
        with patch(
            "payments.webhooks.views.WebhookReconciler.reconcile", return_value=failed
        ):
            response = sepay_webhook(make_webhook_request(rf, {"content": "DH1"}))

        assert response.status_code == 200
        assert json.loads(response.content) == {"success": False, "message": "Server error"}

    def test_unexpected_error_answers_server_error(self, rf, sepay_settings, db):
        with patch(
            "payments.webhooks.views.WebhookReconciler.reconcile",
            side_effect=RuntimeError("boom"),
        ):
            response = sepay_webhook(make_webhook_request(rf, {"content": "DH1"}))

        assert response.status_code == 200
        assert json.loads(response.content)["success"] is False

    def test_get_not_allowed(self, rf):
        response = sepay_webhook(rf.get(WEBHOOK_URL))

        assert response.status_code == 405

    def test_routed_without_csrf(self, sepay_settings, pending_order):
        client = APIClient(enforce_csrf_checks=True)

        response = client.post(
            WEBHOOK_URL,
            {"content": "DH1700000000000", "transferAmount": 99000},
            format="json",
            HTTP_AUTHORIZATION=f"Apikey {WEBHOOK_SECRET}",
        )

        assert response.status_code == 200
        assert Subscription.objects.get(pk=pending_order.pk).status == SubscriptionStatus.ACTIVE
