import time
from functools import wraps
from typing import Callable, Dict, Optional, Union

from loguru import logger
from prometheus_client import REGISTRY, Counter, Gauge, Histogram, start_http_server


class MetricsRegistry:
    def __init__(self, registry=None):
        # Use a provided registry or the default one
        self.registry = registry or REGISTRY

        # Gateway metrics
        self.requests_total = Counter(
            "rpc_relay_requests_total",
            "Total number of inbound requests",
            ["method"],
            registry=self.registry,
        )
        self.request_latency = Histogram(
            "rpc_relay_request_seconds",
            "Time spent relaying a POST request",
            ["path"],
            registry=self.registry,
        )

        # Forwarder metrics
        self.attempt_total = Counter(
            "rpc_relay_attempt_total",
            "Total number of upstream delivery attempts",
            ["target", "outcome"],
            registry=self.registry,
        )
        self.attempt_latency = Histogram(
            "rpc_relay_attempt_seconds",
            "Time spent on a single upstream delivery attempt",
            ["target"],
            registry=self.registry,
        )
        self.all_failed_total = Counter(
            "rpc_relay_all_failed_total",
            "Total number of calls where no upstream returned a response",
            registry=self.registry,
        )

        # Common metrics
        self.up = Gauge(
            "rpc_relay_up",
            "Whether the rpc relay service is up",
            ["component"],
            registry=self.registry,
        )


# Global metrics registry
metrics = MetricsRegistry()


def start_metrics_server(port: int = 9090, host: str = "127.0.0.1"):
    """Start the Prometheus metrics server."""
    start_http_server(port, host)


def measure_time(
    metric: Histogram, labels: Optional[Union[Dict[str, str], Callable]] = None
) -> Callable:
    """Decorator to measure the execution time of a coroutine function.

    ``labels`` is either a static dict or a callable receiving the first
    positional argument (usually ``self``) and returning the label dict.
    """

    def decorator(func):
        @wraps(func)
        async def wrapper(*args, **kwargs):
            labels_dict = {}
            if callable(labels) and args:
                try:
                    labels_dict = labels(args[0])
                except Exception as e:
                    logger.error(f"Error getting labels from function: {e}")
            elif isinstance(labels, dict):
                labels_dict = labels

            start_time = time.time()
            try:
                return await func(*args, **kwargs)
            finally:
                duration = time.time() - start_time
                try:
                    metric.labels(**labels_dict).observe(duration)
                except Exception as e:
                    logger.error(f"Error recording metric: {e}")

        return wrapper

    return decorator
