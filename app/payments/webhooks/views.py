"""
Webhook endpoint view for SePay.

This module provides the HTTP endpoint SePay calls for every transfer
into the receiving bank account. The view:
1. Parses the JSON body
2. Hands the notification to WebhookReconciler
3. Answers 401 if the credential is rejected, 200 otherwise

Processing is synchronous. Activation is a single short transaction, and
SePay needs an answer to stop retrying.

Usage:
    # In urls.py
    from payments.webhooks.views import sepay_webhook

    urlpatterns = [
        path("webhooks/sepay/", sepay_webhook, name="sepay_webhook"),
    ]
"""

from __future__ import annotations

import json
import logging

from django.http import HttpRequest, JsonResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from payments.exceptions import WebhookAuthenticationError
from payments.services import WebhookNotification, WebhookReconciler


logger = logging.getLogger(__name__)


@csrf_exempt
@require_POST
def sepay_webhook(request: HttpRequest) -> JsonResponse:
    """
    Receive and reconcile a SePay transfer notification.

    Security:
    - The Authorization header must contain the configured shared secret
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - Only PENDING orders are matched, so a redelivered notification for
      an already activated order is acknowledged without side effects

    Returns:
        JsonResponse with status:
        - 200 {"success": true}: Notification acknowledged (activated or ignored)
        - 200 {"success": false, "message": "Server error"}: Processing failed
        - 401 {"success": false, "message": "Unauthorized"}: Credential rejected

    Example Authorization header:
        Apikey <secret>
    """
    try:
        payload = json.loads(request.body or b"{}")
    except (ValueError, UnicodeDecodeError):
        logger.warning("SePay webhook body is not valid JSON")
        payload = {}

    notification = WebhookNotification.from_payload(
        authorization=request.headers.get("Authorization"),
        payload=payload,
    )

    try:
        result = WebhookReconciler().reconcile(notification)
    except WebhookAuthenticationError:
        return JsonResponse({"success": False, "message": "Unauthorized"}, status=401)
    except Exception as e:
        # Answer 200 so the gateway does not keep retrying a broken delivery
        logger.error(
            f"Unexpected error processing SePay webhook: {type(e).__name__}",
            exc_info=True,
        )
        return JsonResponse({"success": False, "message": "Server error"}, status=200)

    if result.failed:
        return JsonResponse({"success": False, "message": "Server error"}, status=200)

    return JsonResponse({"success": True}, status=200)
