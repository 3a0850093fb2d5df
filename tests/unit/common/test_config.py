import pytest
from pydantic import ValidationError

from rpc_relay.common.config import MetricsConfig, RelayConfig


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in ("SOLANA_RPC_URL", "RPC_RELAY_PREFERRED_TARGET", "RPC_RELAY_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)


class TestRelayConfig:

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = RelayConfig()
        assert config.log_level == "INFO"
        assert config.host == "0.0.0.0"
        assert config.port == 8000
        assert config.preferred_target is None
        assert config.timeout == 8.0
        assert config.metrics == MetricsConfig()

    def test_preferred_target_by_name(self):
        config = RelayConfig(preferred_target="https://mainnet.helius-rpc.com/?api-key=k")
        assert config.preferred_target == "https://mainnet.helius-rpc.com/?api-key=k"

    def test_blank_preferred_target_is_absent(self):
        """Test that an empty provider string counts as not configured."""
        assert RelayConfig(preferred_target="").preferred_target is None
        assert RelayConfig(preferred_target="   ").preferred_target is None

    def test_invalid_timeout(self):
        """Test that a non-positive timeout is rejected."""
        with pytest.raises(ValidationError, match="timeout must be greater than zero"):
            RelayConfig(timeout=0)

    def test_env_variables(self, monkeypatch):
        """Test that environment variables are correctly loaded."""
        monkeypatch.setenv("RPC_RELAY_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("RPC_RELAY_PORT", "9000")
        monkeypatch.setenv("RPC_RELAY_TIMEOUT", "2.5")
        monkeypatch.setenv("RPC_RELAY_PREFERRED_TARGET", "https://rpc.example.com")
        monkeypatch.setenv("RPC_RELAY_METRICS__ENABLED", "false")
        monkeypatch.setenv("RPC_RELAY_METRICS__PORT", "9191")

        config = RelayConfig()
        assert config.log_level == "DEBUG"
        assert config.port == 9000
        assert config.timeout == 2.5
        assert config.preferred_target == "https://rpc.example.com"
        assert config.metrics.enabled is False
        assert config.metrics.port == 9191

    def test_solana_rpc_url_env_variable(self, monkeypatch):
        """Test that the provider URL can come from SOLANA_RPC_URL."""
        monkeypatch.setenv("SOLANA_RPC_URL", "https://solana-mainnet.g.alchemy.com/v2/key")

        config = RelayConfig()
        assert config.preferred_target == "https://solana-mainnet.g.alchemy.com/v2/key"

    def test_empty_env_variable_is_absent(self, monkeypatch):
        monkeypatch.setenv("SOLANA_RPC_URL", "")

        assert RelayConfig().preferred_target is None

    def test_model_validate(self):
        """Test that a plain mapping, as loaded from YAML, is accepted."""
        config = RelayConfig.model_validate(
            {"preferred_target": "https://rpc.example.com", "metrics": {"enabled": False}}
        )
        assert config.preferred_target == "https://rpc.example.com"
        assert config.metrics.enabled is False


class TestMetricsConfig:

    def test_default_values(self):
        """Test that default values are set correctly."""
        config = MetricsConfig()
        assert config.enabled is True
        assert config.host == "127.0.0.1"
        assert config.port == 9090

    def test_custom_values(self):
        """Test that custom values are set correctly."""
        config = MetricsConfig(
            enabled=False,
            host="0.0.0.0",
            port=8000,
        )
        assert config.enabled is False
        assert config.host == "0.0.0.0"
        assert config.port == 8000
