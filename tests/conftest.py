"""pytest configuration and fixtures."""

import os

# Deterministic environment before any app import
os.environ.pop("DATABASE_URL", None)
os.environ.pop("NFL_TZ", None)
os.environ.pop("NFL_WEEK_OVERRIDES_FILE", None)
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest  # noqa: E402

from fantasy_nexus.services.nfl_weeks import configured_overrides  # noqa: E402


@pytest.fixture(autouse=True)
def _reset_overrides_cache():
    configured_overrides.cache_clear()
    yield
    configured_overrides.cache_clear()


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from fantasy_nexus.main import app

    # no `with`: lifespan (DB engine) stays off in unit tests
    return TestClient(app)
