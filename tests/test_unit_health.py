"""
Unit tests for health check endpoints.

Tests cover:
- Public health endpoints (when HEALTH_TOKEN is not set)
- Token-protected health endpoints
- Database connectivity checks in readyz
"""

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest
from fastapi.testclient import TestClient

from geac_api.core.config import settings
from geac_api.core.db import reset_async_engine
from geac_api.main import create_app

# ============================================================================
# Tests: Public Health Endpoints (HEALTH_TOKEN not set)
# ============================================================================


def test_health_ok() -> None:
    """Health endpoint returns 200 when no authentication is required."""
    client = TestClient(create_app())
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


@pytest.mark.anyio
async def test_readyz_ok_with_db() -> None:
    """Readiness endpoint reaches the configured (in-memory) database."""
    await reset_async_engine()
    transport = httpx.ASGITransport(app=create_app())
    try:
        async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
            resp = await client.get("/readyz")
        assert resp.status_code == 200
        assert resp.json() == {"ok": True, "db": "ok"}
    finally:
        await reset_async_engine()


# ============================================================================
# Tests: Database Connectivity in readyz
# ============================================================================


@patch("geac_api.api.routes.health.get_async_engine")
def test_readyz_returns_200_when_db_connection_succeeds(mock_get_engine: MagicMock) -> None:
    mock_engine = MagicMock()
    mock_conn = AsyncMock()
    mock_engine.connect.return_value.__aenter__.return_value = mock_conn
    mock_get_engine.return_value = mock_engine

    client = TestClient(create_app())
    resp = client.get("/readyz")

    assert resp.status_code == 200
    mock_conn.execute.assert_awaited_once()


@patch("geac_api.api.routes.health.get_async_engine")
def test_readyz_returns_503_when_db_connection_fails(mock_get_engine: MagicMock) -> None:
    mock_engine = MagicMock()
    mock_engine.connect.return_value.__aenter__.side_effect = ConnectionRefusedError("db down")
    mock_get_engine.return_value = mock_engine

    client = TestClient(create_app())
    resp = client.get("/readyz")

    assert resp.status_code == 503
    assert resp.json() == {"ok": False, "db": "unavailable"}


@patch("geac_api.api.routes.health.get_async_engine")
def test_readyz_does_not_leak_error_details(mock_get_engine: MagicMock) -> None:
    mock_get_engine.side_effect = RuntimeError("password=hunter2 host=db.internal")

    client = TestClient(create_app())
    resp = client.get("/readyz")

    assert resp.status_code == 503
    assert "hunter2" not in resp.text


# ============================================================================
# Tests: Token-Protected Health Endpoints
# ============================================================================


class TestHealthToken:
    @pytest.fixture(autouse=True)
    def _health_token(self):
        with patch.object(settings, "health_token", "s3cret"):
            yield

    def test_missing_token_is_rejected(self) -> None:
        resp = TestClient(create_app()).get("/health")
        assert resp.status_code == 401
        assert resp.json()["message"] == "Health token required"

    def test_wrong_token_is_forbidden(self) -> None:
        resp = TestClient(create_app()).get("/health", headers={"X-Health-Token": "nope"})
        assert resp.status_code == 403

    def test_correct_token_is_accepted(self) -> None:
        resp = TestClient(create_app()).get("/health", headers={"X-Health-Token": "s3cret"})
        assert resp.status_code == 200
        assert resp.json() == {"ok": True}
