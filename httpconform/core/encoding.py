"""Content-encoding decoders for negotiated response bodies."""

import gzip
import zlib
from typing import List

import brotli

from httpconform.core.errors import DecodeError

IDENTITY = "identity"


def _deflate(data: bytes) -> bytes:
    try:
        return zlib.decompress(data)
    except zlib.error:
        # Some servers send raw deflate without the zlib wrapper.
        return zlib.decompress(data, -zlib.MAX_WBITS)


_DECODERS = {
    "br": brotli.decompress,
    "gzip": gzip.decompress,
    "x-gzip": gzip.decompress,
    "deflate": _deflate,
    IDENTITY: lambda data: data,
}


def tokens(header: str) -> List[str]:
    """Split a Content-Encoding value into lower-cased tokens, in applied order."""
    return [t.strip().lower() for t in (header or "").split(",") if t.strip()]


def decode(body: bytes, header: str) -> bytes:
    """Undo every encoding named in ``header``, last applied first."""
    for token in reversed(tokens(header)):
        decoder = _DECODERS.get(token)
        if decoder is None:
            raise DecodeError(f"unsupported content-encoding {token!r}")
        try:
            body = decoder(body)
        except (OSError, EOFError, zlib.error, brotli.error) as e:
            raise DecodeError(f"failed to uncompress ({token}): {e}") from e
    return body
