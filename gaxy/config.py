import logging
import os
from dataclasses import dataclass, field
from typing import Mapping, Optional, Tuple

from gaxy.proxy.origin import parse_origin
from gaxy.vars import DEFAULT_GOOGLE_ORIGIN, DEFAULT_PORT, DEFAULT_UPSTREAM_TIMEOUT

logger = logging.getLogger("uvicorn.error")


@dataclass(frozen=True)
class ProxyConfig:
    """Settings resolved once at startup and shared read-only by every handler."""

    route_prefix: str = ""
    google_origin: str = DEFAULT_GOOGLE_ORIGIN
    inject_params_from_req_headers: Tuple[str, ...] = field(default_factory=tuple)
    skip_params_from_req_headers: Tuple[str, ...] = field(default_factory=tuple)
    port: int = DEFAULT_PORT
    upstream_timeout: float = DEFAULT_UPSTREAM_TIMEOUT


def _split_list(raw: str) -> Tuple[str, ...]:
    return tuple(t.strip() for t in raw.split(",") if t.strip())


def normalize_route_prefix(raw: str) -> str:
    """Return the prefix as ``/segment`` without a trailing slash, or ``""``."""
    prefix = raw.strip().rstrip("/")
    if prefix and not prefix.startswith("/"):
        prefix = "/" + prefix
    return prefix


def load_config(environ: Optional[Mapping[str, str]] = None) -> ProxyConfig:
    """
    Build a ProxyConfig from environment variables.

    GOOGLE_ORIGIN is validated here so that a bad value stops the process
    before it accepts traffic.
    """
    env = os.environ if environ is None else environ

    google_origin = env.get("GOOGLE_ORIGIN", "").strip() or DEFAULT_GOOGLE_ORIGIN
    parse_origin(google_origin)

    config = ProxyConfig(
        route_prefix=normalize_route_prefix(env.get("ROUTE_PREFIX", "")),
        google_origin=google_origin.rstrip("/"),
        inject_params_from_req_headers=_split_list(
            env.get("INJECT_PARAMS_FROM_REQ_HEADERS", "")
        ),
        skip_params_from_req_headers=_split_list(
            env.get("SKIP_PARAMS_FROM_REQ_HEADERS", "")
        ),
        port=int(env.get("PORT", "") or DEFAULT_PORT),
        upstream_timeout=float(
            env.get("UPSTREAM_TIMEOUT", "") or DEFAULT_UPSTREAM_TIMEOUT
        ),
    )

    if config.route_prefix:
        logger.info(f"Using ROUTE_PREFIX: {config.route_prefix}")
    else:
        logger.info("No ROUTE_PREFIX set, using root path")
    return config
