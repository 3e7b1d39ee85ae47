import logging
from dataclasses import dataclass
from typing import Optional

import httpx

from gaxy.errors import (
    UpstreamProtocolError,
    UpstreamTimeoutError,
    UpstreamUnreachableError,
)
from gaxy.proxy.transform import UpstreamRequest
from gaxy.vars import DEFAULT_UPSTREAM_TIMEOUT

logger = logging.getLogger("uvicorn.error")


@dataclass
class UpstreamResponse:
    status_code: int
    headers: httpx.Headers
    content: bytes

    @property
    def content_type(self) -> str:
        return self.headers.get("content-type", "")

    @property
    def content_encoding(self) -> str:
        return self.headers.get("content-encoding", "")


class UpstreamClient:
    """
    Pooled HTTP client for the Google upstreams.

    One instance is owned by the application and shared by all handlers; the
    underlying httpx connection pool is safe for concurrent use.
    """

    def __init__(
        self,
        timeout: float = DEFAULT_UPSTREAM_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            follow_redirects=False,
            transport=transport,
        )

    async def send(self, upstream: UpstreamRequest) -> UpstreamResponse:
        """Send the request once, returning the still-encoded response body."""
        request = self._client.build_request(
            method=upstream.method,
            url=upstream.url,
            headers=upstream.headers,
            content=upstream.content,
        )
        try:
            response = await self._client.send(request, stream=True)
            try:
                # Raw bytes: decoding is left to gaxy.proxy.decoder
                content = b"".join([chunk async for chunk in response.aiter_raw()])
            finally:
                await response.aclose()
        except httpx.TimeoutException as e:
            raise UpstreamTimeoutError(f"timeout calling {upstream.url}: {e}") from e
        except httpx.ConnectError as e:
            raise UpstreamUnreachableError(
                f"cannot connect to {upstream.origin}: {e}"
            ) from e
        except httpx.NetworkError as e:
            raise UpstreamUnreachableError(
                f"network error calling {upstream.origin}: {e}"
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamProtocolError(
                f"invalid response from {upstream.origin}: {e}"
            ) from e

        return UpstreamResponse(
            status_code=response.status_code,
            headers=response.headers,
            content=content,
        )

    async def aclose(self) -> None:
        await self._client.aclose()
