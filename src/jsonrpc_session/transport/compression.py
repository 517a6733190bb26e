"""Response decompression for the JSON-RPC session transport.

When compression is enabled on a session it advertises
``Accept-Encoding: gzip, deflate`` and transparently decodes response bodies
the server compressed with either algorithm. Bodies in any other encoding
are handed back unchanged together with the reported encoding.

Example:
    >>> import gzip
    >>> from jsonrpc_session.transport.compression import decompress_payload
    >>>
    >>> decompress_payload(gzip.compress(b'{"result": 1}'), "gzip")
    b'{"result": 1}'
"""

import gzip
import zlib
from enum import Enum

from jsonrpc_session.observability import get_logger

# Module logger
logger = get_logger(__name__)


class CompressionAlgorithm(str, Enum):
    """Content encodings the session can decode."""

    GZIP = "gzip"
    DEFLATE = "deflate"
    IDENTITY = "identity"  # No compression


# Content-Encoding aliases per RFC 9110 section 8.4.1
_ENCODING_ALIASES: dict[str, CompressionAlgorithm] = {
    "gzip": CompressionAlgorithm.GZIP,
    "x-gzip": CompressionAlgorithm.GZIP,
    "deflate": CompressionAlgorithm.DEFLATE,
    "identity": CompressionAlgorithm.IDENTITY,
    "": CompressionAlgorithm.IDENTITY,
}

ACCEPT_ENCODING_COMPRESSED = "gzip, deflate"
ACCEPT_ENCODING_IDENTITY = "identity"


def get_accept_encoding_header(enable_compression: bool) -> str:
    """Return the Accept-Encoding value for the session's compression setting."""
    return ACCEPT_ENCODING_COMPRESSED if enable_compression else ACCEPT_ENCODING_IDENTITY


def resolve_encoding(encoding: str | None) -> CompressionAlgorithm | None:
    """Map a Content-Encoding header value to a decodable algorithm.

    Returns None for encodings the session does not decode (e.g. ``br``).
    """
    if encoding is None:
        return CompressionAlgorithm.IDENTITY
    return _ENCODING_ALIASES.get(encoding.strip().lower())


def decompress_gzip(data: bytes) -> bytes:
    try:
        return gzip.decompress(data)
    except (EOFError, zlib.error) as e:
        raise OSError(f"gzip decompression failed: {e}") from e


def decompress_deflate(data: bytes) -> bytes:
    # "deflate" is zlib-wrapped per RFC 9110; some servers send raw DEFLATE
    try:
        return zlib.decompress(data)
    except zlib.error:
        try:
            return zlib.decompress(data, -zlib.MAX_WBITS)
        except zlib.error as e:
            raise OSError(f"deflate decompression failed: {e}") from e


def decompress_payload(data: bytes, encoding: str | None) -> bytes:
    """Decompress a response body based on its Content-Encoding header.

    Args:
        data: Body bytes as received
        encoding: Content-Encoding header value, None if absent

    Returns:
        Decompressed bytes, or ``data`` unchanged for identity and for
        encodings the session does not decode

    Raises:
        OSError: If the body is not valid gzip/deflate data
    """
    algorithm = resolve_encoding(encoding)

    if algorithm is None:
        logger.debug(
            "jsonrpc_session.decompression.skipped",
            encoding=encoding,
            reason="unsupported_encoding",
        )
        return data

    if algorithm == CompressionAlgorithm.IDENTITY or not data:
        return data

    if algorithm == CompressionAlgorithm.GZIP:
        decompressed = decompress_gzip(data)
    else:
        decompressed = decompress_deflate(data)

    logger.debug(
        "jsonrpc_session.decompression.applied",
        encoding=algorithm.value,
        compressed_size=len(data),
        decompressed_size=len(decompressed),
    )
    return decompressed
