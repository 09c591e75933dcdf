"""
Core views providing infrastructure endpoints.

This module contains views that are not part of the messaging domain but are
essential for running the service (health checks), plus the shared helper
that turns a failed ServiceResult into an API error response.
"""

import logging

from django.db import DatabaseError, connection
from django.http import JsonResponse
from rest_framework import status
from rest_framework.response import Response

from core.constants import ErrorCode
from core.services import ServiceResult

logger = logging.getLogger(__name__)


def health_check(request):
    """
    Health check endpoint for load balancers and container orchestration.

    Returns:
        JsonResponse with status and component health:
        - status: "healthy" or "unhealthy"
        - database: "connected" or "disconnected"

    HTTP Status Codes:
        200: All systems operational
        503: Database unreachable
    """
    health_status = {"status": "healthy", "database": "unknown"}

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
        health_status["database"] = "connected"
    except DatabaseError:
        logger.exception("Health check could not reach the database")
        health_status["database"] = "disconnected"
        health_status["status"] = "unhealthy"

    status_code = 200 if health_status["status"] == "healthy" else 503
    return JsonResponse(health_status, status=status_code)


# HTTP status for each service error code; unknown codes map to 400
ERROR_STATUS_CODES = {
    ErrorCode.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.INVALID_OPERATION: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_NAME: status.HTTP_409_CONFLICT,
    ErrorCode.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
}


def service_failure_response(result: ServiceResult) -> Response:
    """
    Build the error response for a failed ServiceResult.

    Body format matches the rest of the API:
        {"error": "...", "error_code": "..."}
    """
    return Response(
        {"error": result.error, "error_code": result.error_code},
        status=ERROR_STATUS_CODES.get(result.error_code, status.HTTP_400_BAD_REQUEST),
    )
