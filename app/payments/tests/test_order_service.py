"""
Tests for OrderService.

Tests cover:
- Successful order creation and the returned receipt
- Validation failures
- Order code collisions within one millisecond
- Persistence failures
"""

from datetime import datetime, timedelta, timezone
from unittest.mock import patch

import pytest
from django.db import OperationalError
from freezegun import freeze_time

from payments.exceptions import OrderPersistenceError
from payments.models import Subscription
from payments.pricing import price_of
from payments.services import OrderReceipt, OrderService
from payments.state_machines import SubscriptionStatus
from payments.tests.factories import SubscriptionFactory

FIXED_NOW = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)


@pytest.fixture
def order_service(bank_config):
    return OrderService(bank_config, clock=lambda: FIXED_NOW)


class TestCreateOrder:
    """Tests for the happy path."""

    def test_returns_receipt(self, order_service, user):
        result = order_service.create_order(user, "3_THANG", 99_000)

        assert result.success is True
        assert result.data == OrderReceipt(
            order_code="DH1700000000000",
            amount=99_000,
            bank_account="0123456789",
            bank_name="MB Bank",
            expires_at=FIXED_NOW + timedelta(seconds=60),
        )

    def test_stores_pending_order(self, order_service, user):
        order_service.create_order(user, "6_THANG", 179_000)

        order = Subscription.objects.get(order_code="DH1700000000000")
        assert order.account == user
        assert order.package == "6_THANG"
        assert order.amount == 179_000
        assert order.status == SubscriptionStatus.PENDING
        assert order.start_date == FIXED_NOW
        assert order.expiry_date == FIXED_NOW + timedelta(seconds=60)
        assert order.activated_at is None

    def test_accepts_numeric_string_amount(self, order_service, user):
        result = order_service.create_order(user, "3_THANG", "99000")

        assert result.success is True
        assert result.data.amount == 99_000

    def test_stores_client_amount_as_given(self, order_service, user):
        """An amount above the list price is stored and becomes the threshold."""
        result = order_service.create_order(user, "3_THANG", 120_000)

        assert result.data.amount == 120_000

    @freeze_time("2023-11-14 22:13:20.123")
    def test_default_clock_uses_current_time(self, bank_config, user):
        result = OrderService(bank_config).create_order(user, "12_THANG", 299_000)

        assert result.data.order_code == "DH1700000000123"


class TestCreateOrderValidation:
    """Tests for rejected requests."""

    @pytest.mark.parametrize(
        ("package", "amount", "field"),
        [
            (None, 99_000, "package_details"),
            ("", 99_000, "package_details"),
            ("3_THANG", None, "amount"),
        ],
    )
    def test_missing_fields(self, order_service, user, package, amount, field):
        result = order_service.create_order(user, package, amount)

        assert result.success is False
        assert result.error_code == "INVALID_REQUEST"
        assert field in result.errors
        assert not Subscription.objects.exists()

    def test_unknown_package(self, order_service, user):
        result = order_service.create_order(user, "LIFETIME", 99_000)

        assert result.success is False
        assert result.error_code == "INVALID_REQUEST"
        assert "package_details" in result.errors

    @pytest.mark.parametrize("amount", [0, -5, "abc"])
    def test_non_positive_amount(self, order_service, user, amount):
        result = order_service.create_order(user, "3_THANG", amount)

        assert result.success is False
        assert "amount" in result.errors
        assert not Subscription.objects.exists()

    @pytest.mark.parametrize(
        ("package", "amount"),
        [("12_THANG", 1), ("6_THANG", 178_999), ("3_THANG", 98_999)],
    )
    def test_amount_below_package_price(self, order_service, user, package, amount):
        result = order_service.create_order(user, package, amount)

        assert result.success is False
        assert result.error_code == "INVALID_REQUEST"
        assert result.errors["amount"] == [f"Amount must be at least {price_of(package)} VND."]
        assert not Subscription.objects.exists()

    def test_amount_equal_to_package_price(self, order_service, user):
        result = order_service.create_order(user, "12_THANG", 299_000)

        assert result.success is True


class TestOrderCodeCollisions:
    """Tests for retries on duplicate order codes."""

    def test_moves_to_next_millisecond(self, order_service, user):
        SubscriptionFactory(order_code="DH1700000000000")

        result = order_service.create_order(user, "3_THANG", 99_000)

        assert result.data.order_code == "DH1700000000001"
        assert Subscription.objects.filter(account=user).count() == 1

    def test_two_orders_in_same_millisecond(self, order_service, user):
        first = order_service.create_order(user, "3_THANG", 99_000)
        second = order_service.create_order(user, "6_THANG", 179_000)

        assert first.data.order_code != second.data.order_code
        assert Subscription.objects.filter(account=user).count() == 2

    def test_gives_up_after_max_attempts(self, order_service, user):
        for offset in range(OrderService.MAX_ORDER_CODE_ATTEMPTS):
            SubscriptionFactory(order_code=f"DH{1_700_000_000_000 + offset}")

        with pytest.raises(OrderPersistenceError) as exc_info:
            order_service.create_order(user, "3_THANG", 99_000)

        assert exc_info.value.details["attempts"] == OrderService.MAX_ORDER_CODE_ATTEMPTS


class TestPersistenceFailure:
    """Tests for database errors."""

    def test_database_error_raises_persistence_error(self, order_service, user):
        with patch.object(
            Subscription.objects, "create", side_effect=OperationalError("database is down")
        ):
            with pytest.raises(OrderPersistenceError) as exc_info:
                order_service.create_order(user, "3_THANG", 99_000)

        assert exc_info.value.error_code == "ORDER_PERSISTENCE_ERROR"
        assert isinstance(exc_info.value.__cause__, OperationalError)
