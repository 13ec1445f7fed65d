"""
Shared fixtures for Auth service tests.
"""

import pytest
from fastapi.testclient import TestClient

from shared.config import get_config
from shared.metrics import MetricsCollector
from shared.test_helpers import TEST_BOT_TOKEN, TEST_JWT_SECRET, TestDataFactory, TestUser
from service_auth.app.main import create_app
from service_auth.app.validation.launch_validator import LaunchValidator


@pytest.fixture
def factory():
    return TestDataFactory()


@pytest.fixture
def alice():
    return TestUser(user_id=42, username="alice")


@pytest.fixture
def config():
    """Service config built without reading the process environment file."""
    return get_config(
        "auth",
        8010,
        bot_token=TEST_BOT_TOKEN,
        jwt_secret=TEST_JWT_SECRET,
        env="test",
        _env_file=None
    )


@pytest.fixture
def metrics():
    return MetricsCollector("auth")


@pytest.fixture
def validator(config, metrics):
    return LaunchValidator.from_config(config, metrics=metrics)


@pytest.fixture
def client(config):
    """Create test client."""
    return TestClient(create_app(config))
