"""
DRF views for payments app.

This module provides API views for:
- Bank transfer order creation
- Payment history of the authenticated account

The SePay webhook is a plain Django view in payments.webhooks.views.

Related files:
    - services/: OrderService, HistoryService
    - serializers.py: Request/response serializers
    - urls.py: URL routing

Endpoints:
    POST /api/v1/payments/sepay/orders/ - Create a bank transfer order
    GET /api/v1/payments/history/ - List the caller's orders

Security:
    - Both endpoints require authentication
"""

from __future__ import annotations

import logging

from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.exceptions import OrderPersistenceError
from payments.serializers import (
    CreateOrderSerializer,
    OrderReceiptSerializer,
    PaymentHistorySerializer,
)
from payments.services import HistoryService, OrderService

logger = logging.getLogger(__name__)


class SepayOrderCreateView(APIView):
    """
    Create a PENDING order to be paid by bank transfer.

    POST /api/v1/payments/sepay/orders/

    Request:
        - package_details (required): Package code (3_THANG, 6_THANG, 12_THANG)
        - amount (required): Amount in VND

    Response:
        200 OK: Order created, body carries the transfer instructions
        400 Bad Request: Missing or invalid package or amount
        401 Unauthorized: Not authenticated
        500 Internal Server Error: Order could not be stored
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="create_sepay_order",
        summary="Create bank transfer order",
        description=(
            "Open a PENDING subscription order. The returned orderId must be "
            "put in the bank transfer memo so the payment can be matched."
        ),
        request=CreateOrderSerializer,
        responses={
            200: OpenApiResponse(
                response=OrderReceiptSerializer,
                description="Order created",
            ),
            400: OpenApiResponse(description="Missing or invalid package or amount"),
            401: OpenApiResponse(description="Authentication required"),
            500: OpenApiResponse(description="Order could not be stored"),
        },
        tags=["Payments"],
    )
    def post(self, request):
        serializer = CreateOrderSerializer(data=request.data)
        if not serializer.is_valid():
            return Response(
                {
                    "success": False,
                    "message": "Invalid order request",
                    "errors": serializer.errors,
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        try:
            result = OrderService().create_order(
                request.user,
                package_details=serializer.validated_data.get("package_details"),
                amount=serializer.validated_data.get("amount"),
            )
        except OrderPersistenceError:
            return Response(
                {"success": False, "message": "Could not create order"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        if not result:
            return Response(result.to_response(), status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {"success": True, "data": OrderReceiptSerializer(result.data).data},
            status=status.HTTP_200_OK,
        )


class PaymentHistoryView(APIView):
    """
    List the authenticated account's orders, newest first.

    GET /api/v1/payments/history/
    """

    permission_classes = [IsAuthenticated]

    @extend_schema(
        operation_id="list_payment_history",
        summary="Payment history",
        responses={
            200: OpenApiResponse(
                response=PaymentHistorySerializer(many=True),
                description="Orders of the caller",
            ),
            401: OpenApiResponse(description="Authentication required"),
        },
        tags=["Payments"],
    )
    def get(self, request):
        entries = HistoryService.list_for_account(request.user)
        serializer = PaymentHistorySerializer(entries, many=True)
        return Response({"success": True, "data": {"history": serializer.data}})
