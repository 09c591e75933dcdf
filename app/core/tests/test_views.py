"""
Tests for core views: health check and service failure responses.
"""

from unittest.mock import patch

import pytest
from django.db import OperationalError
from rest_framework import status

from core.constants import ErrorCode
from core.services import ServiceResult
from core.views import service_failure_response


class TestHealthCheck:
    """Tests for GET /health/."""

    def test_healthy(self, db, client):
        response = client.get("/health/")

        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "database": "connected"}

    def test_database_down(self, db, client):
        with patch("core.views.connection") as connection:
            connection.cursor.side_effect = OperationalError

            response = client.get("/health/")

        assert response.status_code == 503
        assert response.json()["database"] == "disconnected"


class TestServiceFailureResponse:
    @pytest.mark.parametrize(
        ("error_code", "expected_status"),
        [
            (ErrorCode.UNAUTHENTICATED, status.HTTP_401_UNAUTHORIZED),
            (ErrorCode.USER_NOT_FOUND, status.HTTP_404_NOT_FOUND),
            (ErrorCode.NOT_FOUND, status.HTTP_404_NOT_FOUND),
            (ErrorCode.FORBIDDEN, status.HTTP_403_FORBIDDEN),
            (ErrorCode.INVALID_OPERATION, status.HTTP_400_BAD_REQUEST),
            (ErrorCode.DUPLICATE_NAME, status.HTTP_409_CONFLICT),
            (ErrorCode.CONFLICT, status.HTTP_409_CONFLICT),
            (ErrorCode.VALIDATION_ERROR, status.HTTP_400_BAD_REQUEST),
        ],
    )
    def test_maps_error_code_to_status(self, error_code, expected_status):
        response = service_failure_response(ServiceResult.failure("x", error_code=error_code))

        assert response.status_code == expected_status

    def test_body_carries_error_and_code(self):
        response = service_failure_response(
            ServiceResult.failure("Group exists", error_code=ErrorCode.DUPLICATE_NAME)
        )

        assert response.data == {"error": "Group exists", "error_code": "DUPLICATE_NAME"}

    def test_unknown_code_is_400(self):
        response = service_failure_response(ServiceResult.failure("?", error_code="SOMETHING"))

        assert response.status_code == status.HTTP_400_BAD_REQUEST
