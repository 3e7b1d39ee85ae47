from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple
from urllib.parse import urlparse

from gaxy.errors import InvalidOriginError
from gaxy.vars import GOOGLE_ANALYTICS_ORIGIN

if TYPE_CHECKING:
    from gaxy.config import ProxyConfig

# GA4 hits land on www.google-analytics.com even when the tag is served from
# another Google origin.
COLLECT_PATH_PREFIX = "/g/collect"


class Origin(NamedTuple):
    scheme: str
    host: str

    def __str__(self) -> str:
        return f"{self.scheme}://{self.host}"


def parse_origin(url: str) -> Origin:
    """Parse ``scheme://host[:port]`` into an Origin, rejecting anything else."""
    try:
        parsed = urlparse(url)
    except ValueError as e:
        raise InvalidOriginError(f"cannot parse origin {url!r}: {e}") from e

    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise InvalidOriginError(f"origin must be an absolute http(s) URL, got {url!r}")
    return Origin(parsed.scheme, parsed.netloc)


def resolve_origin(path: str, config: ProxyConfig) -> Origin:
    """
    Pick the upstream origin for a (prefix-stripped) request path.

    This is a hard-coded special case rather than a routing table: collection
    hits go to the Google Analytics origin, everything else to the configured
    GOOGLE_ORIGIN.
    """
    if path.startswith(COLLECT_PATH_PREFIX):
        return parse_origin(GOOGLE_ANALYTICS_ORIGIN)
    return parse_origin(config.google_origin)
