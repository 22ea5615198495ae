"""
Tests for error mapping, the error envelope and detail sanitization.
"""

from unittest.mock import patch

import httpx
import pytest

from geac_api.core.config import AppEnvironment
from geac_api.core.errors import (
    ERROR_STATUS_MAP,
    GeacError,
    NotFoundError,
    UserNotFoundError,
    get_status_code,
)
from geac_api.main import _sanitize_error_details, create_app


class TestGetStatusCode:
    @pytest.mark.parametrize(
        ("error", "expected"),
        [
            (NotFoundError("missing"), 404),
            (UserNotFoundError("alice"), 404),
            (GeacError("generic"), 500),
            (RuntimeError("boom"), 500),
        ],
    )
    def test_maps_exception_to_status(self, error: Exception, expected: int) -> None:
        assert get_status_code(error) == expected

    def test_only_not_found_has_a_client_status(self) -> None:
        assert ERROR_STATUS_MAP == {NotFoundError: 404}


class TestSanitizeErrorDetails:
    def test_returns_all_details_outside_production(self) -> None:
        details = {"sql_query": "SELECT * FROM users WHERE id = 1"}

        with patch("geac_api.main.settings") as mock_settings:
            mock_settings.app_env = AppEnvironment.TEST
            assert _sanitize_error_details(details) == details

    def test_redacts_paths_and_sql_in_production(self) -> None:
        details = {
            "file": "/srv/geac_api/repos/user_repo.py",
            "query": "SELECT id FROM categories",
            "line": 42,
            "nested": {"where": "C:\\srv\\geac_api\\main.py"},
            "items": [{"q": "DELETE FROM users"}, "kept"],
            "message": "Database connection failed",
        }

        with patch("geac_api.main.settings") as mock_settings:
            mock_settings.app_env = AppEnvironment.PROD
            result = _sanitize_error_details(details)

        assert result == {
            "file": "[REDACTED]",
            "query": "[REDACTED]",
            "line": 42,
            "nested": {"where": "[REDACTED]"},
            "items": [{"q": "[REDACTED]"}, "kept"],
            "message": "Database connection failed",
        }


@pytest.mark.anyio
async def test_domain_errors_use_error_envelope() -> None:
    app = create_app()

    @app.get("/__raise-not-found")
    async def _raise_not_found():
        raise UserNotFoundError("ghost")

    transport = httpx.ASGITransport(app=app)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        response = await client.get("/__raise-not-found")

    assert response.status_code == 404
    assert response.json() == {
        "error": "UserNotFoundError",
        "message": "User 'ghost' not found",
        "details": {"username": "ghost"},
    }
