from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from rpc_relay.common.config import MetricsConfig, RelayConfig
from rpc_relay.forwarder.client import Forwarder
from rpc_relay.gateway.server import create_app

from fake_upstreams import FALLBACK_TARGETS, PREFERRED_TARGET, FakeUpstreams


@pytest.fixture
def upstreams():
    """Fixture that patches aiohttp with scripted upstreams."""
    fake = FakeUpstreams()
    with patch("aiohttp.ClientSession", side_effect=fake.session):
        yield fake


@pytest.fixture
def forwarder():
    """Fixture that provides a forwarder with test fallbacks and a short timeout."""
    return Forwarder(fallback_targets=FALLBACK_TARGETS, timeout=0.05)


@pytest.fixture
def relay_config():
    """Fixture that provides a relay configuration without a preferred target."""
    return RelayConfig(
        host="0.0.0.0",
        port=8000,
        log_level="INFO",
        timeout=0.05,
        metrics=MetricsConfig(enabled=False),
    )


@pytest.fixture
def preferred_config(relay_config):
    """Fixture that provides a relay configuration with a preferred target."""
    return relay_config.model_copy(update={"preferred_target": PREFERRED_TARGET})


def _app_for(config, forwarder):
    with patch("rpc_relay.gateway.app.get_app_config") as mock_get_config, patch(
        "rpc_relay.gateway.app.get_forwarder"
    ) as mock_get_forwarder:
        mock_get_config.return_value = config
        mock_get_forwarder.return_value = forwarder
        yield create_app(config)


@pytest.fixture
def relay_app(relay_config, forwarder):
    """Fixture that provides a configured relay FastAPI app."""
    yield from _app_for(relay_config, forwarder)


@pytest.fixture
def relay_client(relay_app):
    """Fixture that provides a test client for the relay API."""
    return TestClient(relay_app)


@pytest.fixture
def preferred_client(preferred_config, forwarder):
    """Fixture that provides a test client for a relay with a preferred target."""
    for app in _app_for(preferred_config, forwarder):
        yield TestClient(app)
