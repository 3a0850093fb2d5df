from fastapi import APIRouter, Depends, Request, Response
from fastapi.exception_handlers import http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from loguru import logger

from rpc_relay.common.config import RelayConfig
from rpc_relay.common.metrics import metrics, measure_time
from rpc_relay.common.models import AllFailed
from rpc_relay.forwarder.client import Forwarder


router = APIRouter()

ALLOW_ORIGIN = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **ALLOW_ORIGIN,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}
EMPTY_BODY = b"{}"


def method_not_allowed() -> PlainTextResponse:
    return PlainTextResponse(
        "Method Not Allowed",
        status_code=405,
        headers={**ALLOW_ORIGIN, "Allow": "POST, OPTIONS"},
    )


async def relay_http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Methods the router does not list are rejected by Starlette before reaching rpc_endpoint
    if exc.status_code == 405:
        return method_not_allowed()
    return await http_exception_handler(request, exc)


async def get_config() -> RelayConfig:
    from rpc_relay.gateway.app import get_app_config
    return get_app_config()


async def get_forwarder() -> Forwarder:
    from rpc_relay.gateway.app import get_forwarder
    return get_forwarder()


@measure_time(metrics.request_latency, {"path": "/rpc"})
async def relay(body: bytes, config: RelayConfig, forwarder: Forwarder) -> Response:
    try:
        result = await forwarder.forward(body, config.preferred_target)
    except Exception as e:
        logger.exception(f"Unexpected error while relaying request: {e}")
        result = AllFailed(error=str(e))

    if isinstance(result, AllFailed):
        return JSONResponse(
            status_code=502, content=result.to_body(), headers=ALLOW_ORIGIN
        )

    # Setting Content-Type explicitly keeps Starlette from appending a charset
    return Response(
        content=result.body,
        status_code=result.status_code,
        headers={**ALLOW_ORIGIN, "Content-Type": result.media_type},
    )


@router.api_route(
    "/rpc",
    methods=["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
)
async def rpc_endpoint(
    request: Request,
    config: RelayConfig = Depends(get_config),
    forwarder: Forwarder = Depends(get_forwarder),
):
    method = request.method.upper()
    metrics.requests_total.labels(method=method).inc()

    if method == "OPTIONS":
        return Response(status_code=204, headers=PREFLIGHT_HEADERS)

    if method != "POST":
        return method_not_allowed()

    body = await request.body()
    return await relay(body or EMPTY_BODY, config, forwarder)


@router.get("/health")
async def health_check():
    return {"status": "ok"}
