"""Unit tests for the HTTP error mapping."""

import json

import pytest
from starlette.exceptions import HTTPException

from linkauth.domain.error import (
    CannotDeleteLastUserError,
    NotFoundError,
    ProviderHandshakeError,
    UnauthorizedError,
    ValidationError,
)
from linkauth.interface.error import error_body, error_response, status_for


class TestStatusFor:
    """Tests for status_for()."""

    @pytest.mark.parametrize(
        ("exc", "status_code"),
        [
            (NotFoundError("Provider", "myspace"), 404),
            (UnauthorizedError(), 401),
            (CannotDeleteLastUserError(), 403),
            (ValidationError("bad callback"), 400),
            (ProviderHandshakeError("github", "boom"), 500),
            (HTTPException(status_code=418), 418),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_maps_exceptions(self, exc, status_code):
        assert status_for(exc) == status_code


class TestErrorResponse:
    """Tests for error_body() and error_response()."""

    def test_body_uses_reason_phrase(self):
        assert error_body(403, "Last User Error") == {
            "message": "Last User Error",
            "error": "Forbidden",
            "statusCode": 403,
        }

    def test_domain_error_keeps_its_message(self):
        response = error_response(CannotDeleteLastUserError())

        assert response.status_code == 403
        assert json.loads(response.body) == {
            "message": "Last User Error",
            "error": "Forbidden",
            "statusCode": 403,
        }

    def test_unknown_error_hides_details(self):
        """Should not leak the message of an unexpected exception."""
        response = error_response(RuntimeError("password=hunter2"))

        body = json.loads(response.body)
        assert response.status_code == 500
        assert body["statusCode"] == 500
        assert "hunter2" not in body["message"]

    def test_handshake_error_hides_provider_detail(self):
        """Should answer with a fixed message, not the adapter's reason."""
        exc = ProviderHandshakeError(
            "github", "Request to https://api.github.com/user failed: 502"
        )

        response = error_response(exc)

        assert response.status_code == 500
        assert json.loads(response.body) == {
            "message": "Login with github failed",
            "error": "Internal Server Error",
            "statusCode": 500,
        }
