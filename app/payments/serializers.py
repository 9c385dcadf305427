"""
DRF serializers for payments app.

This module provides serializers for:
- Order creation requests
- Order receipts (transfer instructions)
- Payment history

Response serializers emit camelCase keys, which is what the mobile and
web clients read.

Related files:
    - services/: OrderService, HistoryService
    - views.py: Payment API views

Usage:
    serializer = CreateOrderSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
"""

from __future__ import annotations

from rest_framework import serializers


class CreateOrderSerializer(serializers.Serializer):
    """
    Serializer for order creation.

    Both fields are optional at this layer so that a missing field is
    reported by OrderService like any other invalid order.

    Fields:
        package_details: Package code ("3_THANG", "6_THANG", "12_THANG")
        amount: Amount the client expects to pay, in VND

    Usage:
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        result = OrderService().create_order(
            request.user, **serializer.validated_data
        )
    """

    package_details = serializers.CharField(
        required=False,
        allow_null=True,
        allow_blank=True,
        max_length=32,
        help_text="Subscription package code (e.g. 3_THANG)",
    )
    amount = serializers.IntegerField(
        required=False,
        allow_null=True,
        help_text="Amount in VND",
    )


class OrderReceiptSerializer(serializers.Serializer):
    """
    Transfer instructions returned after an order is created.

    Usage:
        serializer = OrderReceiptSerializer(result.data)
    """

    orderId = serializers.CharField(source="order_code", read_only=True)
    amount = serializers.IntegerField(read_only=True)
    bankAccount = serializers.CharField(source="bank_account", read_only=True)
    bankName = serializers.CharField(source="bank_name", read_only=True)


class PaymentHistorySerializer(serializers.Serializer):
    """
    One row of the caller's payment history.

    Usage:
        entries = HistoryService.list_for_account(request.user)
        serializer = PaymentHistorySerializer(entries, many=True)
    """

    id = serializers.CharField(read_only=True)
    transactionId = serializers.CharField(source="order_code", read_only=True)
    package = serializers.CharField(read_only=True)
    amount = serializers.IntegerField(read_only=True)
    status = serializers.CharField(read_only=True)
    statusText = serializers.CharField(source="status_text", read_only=True)
    startDate = serializers.DateTimeField(source="start_date", read_only=True)
    expiryDate = serializers.DateTimeField(source="expiry_date", read_only=True)
