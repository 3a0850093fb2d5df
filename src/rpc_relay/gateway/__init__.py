"""HTTP gateway exposing the rpc relay."""

from rpc_relay.gateway.app import (
    cli,
    get_app_config,
    get_forwarder,
    load_config_from_file,
    setup_app,
)
from rpc_relay.gateway.server import create_app, run_server

__all__ = [
    "get_app_config",
    "get_forwarder",
    "load_config_from_file",
    "setup_app",
    "cli",
    "create_app",
    "run_server",
]
