import sys
from pathlib import Path
from typing import Optional

import click
import yaml
from loguru import logger

from rpc_relay.common.config import RelayConfig
from rpc_relay.common.logs import configure_logging
from rpc_relay.forwarder.client import Forwarder
from rpc_relay.gateway.server import run_server


_app_config: Optional[RelayConfig] = None
_forwarder: Optional[Forwarder] = None


def get_app_config() -> RelayConfig:
    global _app_config
    if not _app_config:
        raise RuntimeError("Application config not initialized")
    return _app_config


def get_forwarder() -> Forwarder:
    global _forwarder
    if not _forwarder:
        raise RuntimeError("Forwarder not initialized")
    return _forwarder


def load_config_from_file(config_path: str) -> RelayConfig:
    """Load configuration from a YAML file."""
    file_path = Path(config_path)
    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(file_path, "r") as f:
        config_data = yaml.safe_load(f) or {}

    return RelayConfig.model_validate(config_data)


def setup_app(config: RelayConfig):
    """Initialize the application with the given config."""
    global _app_config, _forwarder

    configure_logging(config.log_level)

    # The forwarder holds no per-call state, so one instance serves every request
    _forwarder = Forwarder(timeout=config.timeout)
    _app_config = config

    logger.info("RPC Relay initialized")


@click.group()
def cli():
    """RPC Relay CLI"""
    pass


@cli.command("serve")
@click.option(
    "--config",
    "-c",
    default=None,
    help="Path to configuration file (settings are read from the environment when omitted)",
)
def serve(config: Optional[str]):
    """Start the relay server."""
    try:
        config_obj = load_config_from_file(config) if config else RelayConfig()
        setup_app(config_obj)
        run_server(config_obj)
    except Exception as e:
        logger.error(f"Failed to start relay: {e}")
        sys.exit(1)


if __name__ == "__main__":
    cli()
