"""Forwarding core of the rpc relay."""

from rpc_relay.forwarder.client import (
    DEFAULT_FALLBACK_TARGETS,
    DEFAULT_TIMEOUT,
    Forwarder,
)

__all__ = [
    "DEFAULT_FALLBACK_TARGETS",
    "DEFAULT_TIMEOUT",
    "Forwarder",
]
