from enum import Enum


class ErrorKind(str, Enum):
    INVALID_ORIGIN = "InvalidOrigin"
    UPSTREAM_UNREACHABLE = "UpstreamUnreachable"
    UPSTREAM_TIMEOUT = "UpstreamTimeout"
    UPSTREAM_PROTOCOL_ERROR = "UpstreamProtocolError"
    DECODE_ERROR = "DecodeError"


class ProxyError(Exception):
    """Base class for failures of the forwarding pipeline."""

    kind: ErrorKind
    status_code: int = 502

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.message}"


class InvalidOriginError(ProxyError):
    """Raised when the configured upstream origin is not an absolute http(s) URL."""

    kind = ErrorKind.INVALID_ORIGIN
    status_code = 500


class UpstreamUnreachableError(ProxyError):
    kind = ErrorKind.UPSTREAM_UNREACHABLE
    status_code = 502


class UpstreamTimeoutError(ProxyError):
    kind = ErrorKind.UPSTREAM_TIMEOUT
    status_code = 504


class UpstreamProtocolError(ProxyError):
    kind = ErrorKind.UPSTREAM_PROTOCOL_ERROR
    status_code = 502


class DecodeError(ProxyError):
    """Raised when a response body cannot be decompressed."""

    kind = ErrorKind.DECODE_ERROR
    status_code = 502
