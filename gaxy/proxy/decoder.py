import gzip
import zlib

import brotli

from gaxy.errors import DecodeError


def _gunzip(content: bytes) -> bytes:
    return gzip.decompress(content)


def _inflate(content: bytes) -> bytes:
    return zlib.decompress(content)


def _unbrotli(content: bytes) -> bytes:
    return brotli.decompress(content)


DECODERS = {
    "gzip": _gunzip,
    "br": _unbrotli,
    "deflate": _inflate,
}


def decode_body(content: bytes, content_encoding: str) -> bytes:
    """
    Undo the upstream Content-Encoding.

    Unknown or missing encodings and empty bodies (HEAD, 204) pass through
    untouched. A body that fails to decode raises DecodeError; no partial
    body is ever returned.
    """
    decoder = DECODERS.get(content_encoding.strip().lower())
    if decoder is None or not content:
        return content
    try:
        return decoder(content)
    except (OSError, EOFError, zlib.error, brotli.error) as e:
        raise DecodeError(f"cannot decode {content_encoding} body: {e}") from e


def body_text(content: bytes) -> str:
    # surrogateescape keeps undecodable bytes intact through a later encode
    return content.decode("utf-8", errors="surrogateescape")


def text_body(text: str) -> bytes:
    return text.encode("utf-8", errors="surrogateescape")
