import asyncio
from typing import Optional, Sequence, Tuple
from urllib.parse import urlparse

import aiohttp
from loguru import logger

from rpc_relay.common.metrics import metrics
from rpc_relay.common.models import (
    AllFailed,
    AttemptOutcome,
    Completed,
    Failed,
    ForwardResult,
)


# Public endpoints tried in this order when no provider is configured
DEFAULT_FALLBACK_TARGETS: Tuple[str, ...] = (
    "https://api.mainnet-beta.solana.com",
    "https://rpc.ankr.com/solana",
    "https://solana.public-rpc.com",
)

DEFAULT_TIMEOUT = 8.0  # seconds
TIMEOUT_ERROR = "timeout"


def target_label(target: str) -> str:
    parsed_url = urlparse(target)
    return f"{parsed_url.netloc}{parsed_url.path}" or target


class Forwarder:
    """Relays an opaque payload to a preferred target or a fallback sequence.

    A configured preferred target is trusted exclusively: if it fails, the
    failure is reported and the fallback sequence is never touched. Without
    one, fallback targets are tried strictly one after another until an
    upstream returns any HTTP response.
    """

    def __init__(
        self,
        fallback_targets: Sequence[str] = DEFAULT_FALLBACK_TARGETS,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        if not fallback_targets:
            raise ValueError("At least one fallback target is required")
        self.fallback_targets = tuple(fallback_targets)
        self.timeout = timeout

    def select_targets(self, preferred_target: Optional[str] = None) -> Tuple[str, ...]:
        if preferred_target:
            return (preferred_target,)
        return self.fallback_targets

    async def _post(self, target: str, payload: bytes) -> Completed:
        async with aiohttp.ClientSession() as session:
            async with session.post(
                target,
                headers={"Content-Type": "application/json"},
                data=payload,
            ) as response:
                body = await response.read()
                return Completed(
                    status_code=response.status,
                    content_type=response.headers.get("Content-Type"),
                    body=body,
                )

    async def deliver(self, target: str, payload: bytes) -> AttemptOutcome:
        """Send one request to ``target``, giving up after ``self.timeout``.

        The request is cancelled when the deadline passes first, which also
        closes its session; its result is never observed.
        """
        label = target_label(target)
        with metrics.attempt_latency.labels(target=label).time():
            try:
                outcome = await asyncio.wait_for(
                    self._post(target, payload), timeout=self.timeout
                )
            except asyncio.TimeoutError:
                metrics.attempt_total.labels(target=label, outcome="timeout").inc()
                logger.warning(f"Timed out after {self.timeout}s waiting for {label}")
                return Failed(error=TIMEOUT_ERROR)
            except Exception as e:
                metrics.attempt_total.labels(target=label, outcome="error").inc()
                logger.warning(f"Error delivering to {label}: {e!r}")
                return Failed(error=str(e))

        metrics.attempt_total.labels(target=label, outcome="completed").inc()
        logger.debug(f"{label} answered with status {outcome.status_code}")
        return outcome

    async def forward(
        self, payload: bytes, preferred_target: Optional[str] = None
    ) -> ForwardResult:
        targets = self.select_targets(preferred_target)
        logger.debug(
            f"Forwarding {len(payload)} bytes to {', '.join(map(target_label, targets))}"
        )

        last_error = None
        for target in targets:
            outcome = await self.deliver(target, payload)
            if isinstance(outcome, Completed):
                return outcome
            last_error = outcome.error

        metrics.all_failed_total.inc()
        logger.error(f"No upstream returned a response (last error: {last_error})")
        if last_error:
            return AllFailed(error=last_error)
        return AllFailed()
