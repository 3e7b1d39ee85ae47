from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, NamedTuple, Optional, Tuple
from urllib.parse import quote, quote_plus, unquote_plus

from fastapi import Request

from gaxy.proxy.origin import Origin

if TYPE_CHECKING:
    from gaxy.config import ProxyConfig

logger = logging.getLogger("uvicorn.error")

RENAME_SEPARATOR = "__"

# Recomputed for the upstream hop: Host comes from the origin, the body
# length from the buffered content.
REPLACED_HEADERS = {"host", "content-length", "transfer-encoding"}

# Query strings are handled as latin-1 text so every byte, valid UTF-8 or
# not, survives the parse and re-encode unchanged.
QUERY_ENCODING = "latin-1"

QueryParam = Tuple[str, Optional[str]]


class InjectionRule(NamedTuple):
    source_header: str
    target_param: str


@dataclass
class UpstreamRequest:
    method: str
    origin: Origin
    path: str
    params: List[QueryParam] = field(default_factory=list)
    headers: List[Tuple[str, str]] = field(default_factory=list)
    content: bytes = b""

    @property
    def url(self) -> str:
        query = encode_query(self.params)
        return f"{self.origin}{self.path}" + (f"?{query}" if query else "")

    def add_param(self, name: str, value: str) -> None:
        self.params.append((name, value))

    def delete_param(self, name: str) -> None:
        self.params = [(k, v) for k, v in self.params if k != name]


def raw_request_path(request: Request) -> str:
    """
    Path of the inbound request exactly as the client sent it, still escaped.

    Falls back to re-quoting the decoded path when the server gives no
    raw_path.
    """
    raw_path = request.scope.get("raw_path")
    if raw_path:
        return raw_path.split(b"?", 1)[0].decode(QUERY_ENCODING)
    return quote(request.url.path, safe="/:@!$&'()*+,;=-._~")


def parse_query(query: str) -> List[QueryParam]:
    """
    Split a raw query string into (name, value) pairs, keeping order and
    duplicates. A bare flag such as ``?v`` has the value None.
    """
    params: List[QueryParam] = []
    for piece in query.split("&"):
        if not piece:
            continue
        name, sep, value = piece.partition("=")
        params.append(
            (
                unquote_plus(name, encoding=QUERY_ENCODING),
                unquote_plus(value, encoding=QUERY_ENCODING) if sep else None,
            )
        )
    return params


def encode_query(params: Iterable[QueryParam]) -> str:
    pieces = []
    for name, value in params:
        piece = quote_plus(name, encoding=QUERY_ENCODING)
        if value is not None:
            piece += "=" + quote_plus(value, encoding=QUERY_ENCODING)
        pieces.append(piece)
    return "&".join(pieces)


def strip_route_prefix(path: str, route_prefix: str) -> str:
    """Remove ``route_prefix`` when the path lives below it, keeping the slash."""
    if route_prefix and path.startswith(route_prefix + "/"):
        return path[len(route_prefix):]
    return path


def parse_injection_rule(rule: str) -> InjectionRule:
    """
    Parse ``header`` or ``header__param`` into an InjectionRule.

    e.g. ``x-email__uip`` reads the x-email header into the uip parameter,
    ``user-agent`` reads user-agent into a parameter of the same name.
    """
    if RENAME_SEPARATOR in rule:
        parts = rule.split(RENAME_SEPARATOR)
        return InjectionRule(parts[0], parts[1])
    return InjectionRule(rule, rule)


def _copy_headers(request: Request, origin: Origin) -> List[Tuple[str, str]]:
    headers = [
        (name, value)
        for name, value in request.headers.items()
        if name.lower() not in REPLACED_HEADERS
    ]
    headers.append(("host", origin.host))
    return headers


def inject_params(
    upstream: UpstreamRequest, request: Request, rules: Iterable[str]
) -> None:
    for raw in rules:
        if not raw:
            continue
        rule = parse_injection_rule(raw)
        value = request.headers.get(rule.source_header, "")
        upstream.add_param(rule.target_param, value)
        logger.debug(f"Added {rule.target_param}={value} to query string")


def skip_params(upstream: UpstreamRequest, names: Iterable[str]) -> None:
    for name in names:
        if not name:
            continue
        upstream.delete_param(name)
        logger.debug(f"Removed {name} from query string")


def build_upstream_request(
    request: Request, body: bytes, config: ProxyConfig, origin: Origin
) -> UpstreamRequest:
    """
    Derive the upstream request from the inbound one.

    Query parameters are mutated in a fixed order: header injection, then
    skipped names are deleted, then ``uip``/``ua`` are appended so that the
    client's own IP and User-Agent are always the last values sent.
    """
    upstream = UpstreamRequest(
        method=request.method,
        origin=origin,
        path=strip_route_prefix(raw_request_path(request), config.route_prefix),
        params=parse_query(
            request.scope.get("query_string", b"").decode(QUERY_ENCODING)
        ),
        headers=_copy_headers(request, origin),
        content=body,
    )

    inject_params(upstream, request, config.inject_params_from_req_headers)
    skip_params(upstream, config.skip_params_from_req_headers)

    client_ip = request.client.host if request.client else ""
    upstream.add_param("uip", client_ip)
    upstream.add_param("ua", request.headers.get("user-agent", ""))
    return upstream
