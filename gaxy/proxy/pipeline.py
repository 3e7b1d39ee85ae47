from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import Request
from fastapi.responses import Response
from opentelemetry import trace

from gaxy.errors import ProxyError
from gaxy.proxy.assembler import assemble_response
from gaxy.proxy.client import UpstreamClient
from gaxy.proxy.decoder import body_text, decode_body, text_body
from gaxy.proxy.origin import resolve_origin
from gaxy.proxy.rewriter import get_proxy_host, rewrite_body, should_rewrite
from gaxy.proxy.transform import (
    build_upstream_request,
    raw_request_path,
    strip_route_prefix,
)
from gaxy.utils.traced_requests import traced_request

if TYPE_CHECKING:
    from gaxy.config import ProxyConfig

tracer = trace.get_tracer(__name__)
logger = logging.getLogger("uvicorn.error")


async def forward_request(
    request: Request, config: ProxyConfig, client: UpstreamClient
) -> Response:
    """
    Forward an inbound request to Google and build the client response.

    Raises ProxyError for every pipeline failure; the caller turns it into
    an HTTP error response.
    """
    path = strip_route_prefix(raw_request_path(request), config.route_prefix)
    origin = resolve_origin(path, config)

    body = await request.body()
    upstream_request = build_upstream_request(request, body, config, origin)

    with traced_request(
        tracer,
        operation="proxy_request",
        start_message=f"{request.method} {request.url.path} -> making request to {upstream_request.url}",
        extra_attrs={
            "proxy.target_url": upstream_request.url,
            "proxy.method": request.method,
        },
    ) as span:
        try:
            upstream_response = await client.send(upstream_request)
            span.set_attribute("proxy.status_code", upstream_response.status_code)

            content = decode_body(
                upstream_response.content, upstream_response.content_encoding
            )
        except ProxyError as e:
            span.set_attribute("proxy.error", e.kind.value)
            raise

        content_type = upstream_response.content_type
        rewritten = should_rewrite(content_type)
        span.set_attribute("proxy.rewritten", rewritten)
        if rewritten:
            text = rewrite_body(
                body_text(content),
                content_type,
                get_proxy_host(request),
                config.route_prefix,
            )
            content = text_body(text)

        return assemble_response(content, content_type, upstream_response.status_code)
