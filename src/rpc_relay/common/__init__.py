"""Common configuration, models and metrics for the rpc relay."""

from rpc_relay.common.config import MetricsConfig, RelayConfig
from rpc_relay.common.logs import LOG_FORMAT, configure_logging
from rpc_relay.common.metrics import (
    MetricsRegistry,
    measure_time,
    metrics,
    start_metrics_server,
)
from rpc_relay.common.models import (
    AllFailed,
    AttemptOutcome,
    Completed,
    Failed,
    ForwardResult,
)

__all__ = [
    # Config
    "MetricsConfig",
    "RelayConfig",
    # Logging
    "LOG_FORMAT",
    "configure_logging",
    # Models
    "AllFailed",
    "AttemptOutcome",
    "Completed",
    "Failed",
    "ForwardResult",
    # Metrics
    "MetricsRegistry",
    "metrics",
    "measure_time",
    "start_metrics_server",
]
