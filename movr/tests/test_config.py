"""
Settings and application wiring tests.
"""

import pytest
from pydantic import ValidationError

from movr.app.core.config import Settings
from movr.app.db.session import build_connect_args, build_engine_kwargs


def test_defaults():
    settings = Settings(_env_file=None)

    assert settings.api_prefix == "/api"
    assert settings.default_max_vehicles == 20
    assert settings.location_history_enabled is True
    assert settings.user_rides_enabled is True


def test_rides_require_location_history():
    with pytest.raises(ValidationError):
        Settings(_env_file=None, location_history_enabled=False, user_rides_enabled=True)


def test_vehicle_only_mode_without_history():
    settings = Settings(_env_file=None, location_history_enabled=False, user_rides_enabled=False)
    assert settings.user_rides_enabled is False


def test_toggles_read_from_environment(monkeypatch):
    monkeypatch.setenv("USER_RIDES_ENABLED", "false")
    monkeypatch.setenv("DEFAULT_MAX_VEHICLES", "5")

    settings = Settings(_env_file=None)

    assert settings.user_rides_enabled is False
    assert settings.default_max_vehicles == 5


def test_no_tls_without_certificate():
    assert build_connect_args(None) == {}


def test_sqlite_engine_skips_pool_sizing():
    kwargs = build_engine_kwargs("sqlite+aiosqlite:///:memory:")

    assert "pool_size" not in kwargs
    assert "connect_args" not in kwargs


@pytest.mark.asyncio
async def test_health_reports_features_and_tracing_headers(client):
    response = await client.get("/health", headers={"X-Correlation-ID": "trace-123"})

    assert response.status_code == 200
    assert response.json()["features"] == {"location_history": True, "user_rides": True}
    assert response.headers["X-Correlation-ID"] == "trace-123"
    assert float(response.headers["X-Process-Time"]) >= 0


@pytest.mark.asyncio
async def test_generated_correlation_id(client):
    response = await client.get("/")

    assert response.status_code == 200
    assert len(response.headers["X-Correlation-ID"]) == 36
