from urllib.parse import unquote

import httpx
import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from gaxy.config import ProxyConfig
from gaxy.proxy.client import UpstreamClient
from gaxy.server import create_app


@pytest.fixture
def make_request():
    """
    Build a real Starlette Request from an ASGI scope.

    ``path`` is the raw path as sent on the wire, percent-escapes included.
    """

    def _make(
        path="/collect",
        query="",
        method="GET",
        headers=None,
        client=("203.0.113.7", 51234),
    ):
        raw_headers = [
            (k.lower().encode("latin-1"), v.encode("latin-1"))
            for k, v in (headers or {"host": "proxy.example.com"}).items()
        ]
        scope = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "https",
            "path": unquote(path),
            "raw_path": path.encode(),
            "query_string": query.encode(),
            "headers": raw_headers,
            "client": client,
            "server": ("proxy.example.com", 443),
        }
        return Request(scope)

    return _make


def raw_response(status_code, headers=None, body=b""):
    # stream= keeps the body unread so the proxy sees the raw encoded bytes
    return httpx.Response(
        status_code, headers=headers or {}, stream=httpx.ByteStream(body)
    )


@pytest.fixture
def upstream():
    """
    Recording upstream backed by httpx.MockTransport.

    Configure the answer with ``upstream.respond(...)`` (or replace
    ``upstream.reply`` with a callable for error cases). Every request the
    proxy sends is appended to ``upstream.requests``.
    """

    class _Upstream:
        def __init__(self):
            self.requests = []
            self.respond(200, {"content-type": "text/plain"}, b"ok")

        def respond(self, status_code, headers=None, body=b""):
            self.reply = lambda request: raw_response(status_code, headers, body)

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return self.reply(request)

    return _Upstream()


@pytest.fixture
def make_client(upstream):
    """TestClient for an app whose upstream is the recording mock."""

    def _make(config=None):
        client = UpstreamClient(transport=httpx.MockTransport(upstream.handler))
        app = create_app(config or ProxyConfig(), upstream_client=client)
        return TestClient(app)

    return _make


