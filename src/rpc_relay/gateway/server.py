from contextlib import asynccontextmanager
from typing import Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger
from starlette.exceptions import HTTPException as StarletteHTTPException

from rpc_relay.common.config import RelayConfig
from rpc_relay.common.logs import configure_logging
from rpc_relay.common.metrics import metrics, start_metrics_server
from rpc_relay.forwarder.client import target_label
from rpc_relay.gateway.routes import relay_http_exception_handler, router


def create_app(config: RelayConfig) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        configure_logging(config.log_level)

        # Start metrics server if enabled
        if config.metrics.enabled:
            start_metrics_server(config.metrics.port, config.metrics.host)
            logger.info(
                f"Metrics server started on {config.metrics.host}:{config.metrics.port}"
            )

        metrics.up.labels(component="gateway").set(1)

        logger.info(f"RPC Relay started on {config.host}:{config.port}")
        if config.preferred_target:
            logger.info(f"Relaying exclusively to {target_label(config.preferred_target)}")
        else:
            logger.info("No preferred target configured, using public fallback endpoints")

        yield

        metrics.up.labels(component="gateway").set(0)
        logger.info("RPC Relay shutting down")

    app = FastAPI(
        title="RPC Relay",
        description="Forwards JSON-RPC calls to a provider or to public fallback endpoints",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.include_router(router)
    app.add_exception_handler(StarletteHTTPException, relay_http_exception_handler)

    return app


def run_server(config: Optional[RelayConfig] = None):
    if not config:
        from rpc_relay.gateway.app import get_app_config

        config = get_app_config()

    app = create_app(config)

    uvicorn.run(
        app,
        host=config.host,
        port=config.port,
        log_level="info",
    )
