"""Test configuration and fixtures"""

import pytest
from fastapi.testclient import TestClient

from app.core.config import DEFAULTS, Config
from app.main import create_app


@pytest.fixture
def clean_env(monkeypatch) -> pytest.MonkeyPatch:
    """Remove every declared configuration key from the process environment"""
    for key in DEFAULTS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


@pytest.fixture
def config() -> Config:
    """Configuration built from an empty environment (all defaults)"""
    return Config.load({"APP_ENV": "test"})


@pytest.fixture
def app(config):
    """Application wired with the test configuration"""
    return create_app(config)


@pytest.fixture
def client(app):
    """HTTP client running the full middleware stack"""
    with TestClient(app) as test_client:
        yield test_client


# Test markers for different test types
def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "integration: integration tests"
    )
    config.addinivalue_line(
        "markers", "unit: unit tests"
    )
