import logging

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import PlainTextResponse, Response

from gaxy.config import ProxyConfig
from gaxy.errors import ProxyError
from gaxy.proxy.client import UpstreamClient
from gaxy.proxy.pipeline import forward_request
from gaxy.utils.exception_logging import (
    format_exception_message,
    log_exception_with_details,
)

logger = logging.getLogger("uvicorn.error")

PROXY_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"]


def build_router(config: ProxyConfig, client: UpstreamClient) -> APIRouter:
    """
    Build the proxy routes bound to ``config`` and ``client``.

    /ping answers directly, both at the root and under ROUTE_PREFIX. Every
    other path is forwarded; prefix stripping happens in the pipeline, so a
    single catch-all serves both mounts.
    """
    router = APIRouter()

    async def ping() -> PlainTextResponse:
        return PlainTextResponse("pong")

    if config.route_prefix:
        router.add_api_route(f"{config.route_prefix}/ping", ping, methods=["GET"])
    router.add_api_route("/ping", ping, methods=["GET"])

    @router.api_route("/{path:path}", methods=PROXY_METHODS)
    async def proxy_all(request: Request, path: str) -> Response:
        """Catch-all route that forwards to the Google upstream."""
        try:
            return await forward_request(request, config, client)
        except ProxyError as e:
            log_exception_with_details(logger, "[Proxy]", e)
            raise HTTPException(
                status_code=e.status_code, detail=format_exception_message(e)
            ) from e

    return router
