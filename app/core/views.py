"""Infrastructure endpoints outside the billing API."""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Liveness probe for load balancers and container orchestration.

    Orders and webhooks both need the database, so that is the one thing
    checked. 200 {"status": "healthy", "database": "connected"} when a
    trivial query succeeds, 503 with "unhealthy"/"disconnected" otherwise.
    """
    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except DatabaseError:
        logger.warning("Health check could not reach the database", exc_info=True)
        return JsonResponse({"status": "unhealthy", "database": "disconnected"}, status=503)

    return JsonResponse({"status": "healthy", "database": "connected"})
