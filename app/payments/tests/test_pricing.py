"""
Tests for package pricing, expiry computation, and order codes.
"""

from datetime import datetime, timezone

import pytest

from payments.order_codes import build_order_code, extract_order_code, timestamp_ms
from payments.pricing import add_months, duration_months, expiry_of, parse_package, price_of
from payments.state_machines import SubscriptionPackage


class TestPriceOf:
    """Tests for price lookup."""

    @pytest.mark.parametrize(
        ("package", "price"),
        [
            ("3_THANG", 99_000),
            ("6_THANG", 179_000),
            ("12_THANG", 299_000),
        ],
    )
    def test_known_packages(self, package, price):
        assert price_of(package) == price

    @pytest.mark.parametrize("package", ["LIFETIME", "3_thang", "", None])
    def test_unknown_package_is_unpriced(self, package):
        assert price_of(package) == 0

    def test_parse_package(self):
        assert parse_package("6_THANG") is SubscriptionPackage.SIX_MONTHS
        assert parse_package("6 THANG") is None

    def test_duration_months(self):
        assert duration_months("12_THANG") == 12
        assert duration_months("UNKNOWN") == 0


class TestExpiryOf:
    """Tests for package expiry."""

    def test_adds_package_months(self):
        start = datetime(2024, 1, 15, 8, 30, tzinfo=timezone.utc)

        assert expiry_of("3_THANG", start) == datetime(2024, 4, 15, 8, 30, tzinfo=timezone.utc)
        assert expiry_of("6_THANG", start) == datetime(2024, 7, 15, 8, 30, tzinfo=timezone.utc)
        assert expiry_of("12_THANG", start) == datetime(2025, 1, 15, 8, 30, tzinfo=timezone.utc)

    def test_clamps_to_end_of_month(self):
        start = datetime(2023, 11, 30, tzinfo=timezone.utc)

        assert expiry_of("3_THANG", start) == datetime(2024, 2, 29, tzinfo=timezone.utc)

    def test_unknown_package_returns_start(self):
        start = datetime(2024, 1, 15, tzinfo=timezone.utc)

        assert expiry_of("LIFETIME", start) == start

    def test_add_months_crosses_year(self):
        start = datetime(2024, 12, 31, 23, 59, tzinfo=timezone.utc)

        assert add_months(start, 2) == datetime(2025, 2, 28, 23, 59, tzinfo=timezone.utc)


class TestOrderCodes:
    """Tests for order code construction and extraction."""

    def test_build_from_timestamp(self):
        moment = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

        assert timestamp_ms(moment) == 1_700_000_000_000
        assert build_order_code(timestamp_ms(moment)) == "DH1700000000000"

    def test_extracts_code_from_memo(self):
        assert extract_order_code("CK tới DH1700000000000 noi dung") == "DH1700000000000"

    def test_extracts_code_without_word_boundary(self):
        assert extract_order_code("MBVCB.123.DH42.CT") == "DH42"

    def test_first_code_wins(self):
        assert extract_order_code("DH111 then DH222") == "DH111"

    @pytest.mark.parametrize(
        "content",
        [None, "", "chuyen tien", "DH", "dh123", "D H123"],
    )
    def test_no_code(self, content):
        assert extract_order_code(content) is None
