"""Unit tests for response decompression."""

import gzip
import zlib

import pytest

from jsonrpc_session.transport.compression import (
    ACCEPT_ENCODING_COMPRESSED,
    ACCEPT_ENCODING_IDENTITY,
    CompressionAlgorithm,
    decompress_deflate,
    decompress_gzip,
    decompress_payload,
    get_accept_encoding_header,
    resolve_encoding,
)

PAYLOAD = b'{"jsonrpc":"2.0","result":"' + b"x" * 512 + b'","id":1}'


class TestAcceptEncoding:
    """Tests for the Accept-Encoding header value."""

    def test_enabled(self) -> None:
        assert get_accept_encoding_header(True) == ACCEPT_ENCODING_COMPRESSED == "gzip, deflate"

    def test_disabled(self) -> None:
        assert get_accept_encoding_header(False) == ACCEPT_ENCODING_IDENTITY == "identity"


class TestResolveEncoding:
    """Tests for Content-Encoding resolution."""

    @pytest.mark.parametrize(
        ("header", "expected"),
        [
            (None, CompressionAlgorithm.IDENTITY),
            ("", CompressionAlgorithm.IDENTITY),
            ("identity", CompressionAlgorithm.IDENTITY),
            ("gzip", CompressionAlgorithm.GZIP),
            ("X-GZIP", CompressionAlgorithm.GZIP),
            (" deflate ", CompressionAlgorithm.DEFLATE),
        ],
    )
    def test_known_encodings(self, header: str | None, expected: CompressionAlgorithm) -> None:
        assert resolve_encoding(header) is expected

    def test_unsupported_encoding(self) -> None:
        """Encodings the session cannot decode resolve to None."""
        assert resolve_encoding("br") is None


class TestDecompress:
    """Tests for gzip and deflate decoding."""

    def test_gzip(self) -> None:
        assert decompress_payload(gzip.compress(PAYLOAD), "gzip") == PAYLOAD

    def test_zlib_wrapped_deflate(self) -> None:
        assert decompress_payload(zlib.compress(PAYLOAD), "deflate") == PAYLOAD

    def test_raw_deflate(self) -> None:
        """Raw DEFLATE streams without the zlib wrapper are accepted too."""
        compressor = zlib.compressobj(wbits=-zlib.MAX_WBITS)
        raw = compressor.compress(PAYLOAD) + compressor.flush()

        assert decompress_deflate(raw) == PAYLOAD

    def test_identity_and_unsupported_pass_through(self) -> None:
        assert decompress_payload(PAYLOAD, None) == PAYLOAD
        assert decompress_payload(PAYLOAD, "identity") == PAYLOAD
        assert decompress_payload(b"\x00\x01", "br") == b"\x00\x01"

    def test_empty_body(self) -> None:
        """An empty compressed body decodes to an empty body."""
        assert decompress_payload(b"", "gzip") == b""

    def test_corrupt_gzip_raises_oserror(self) -> None:
        with pytest.raises(OSError):
            decompress_gzip(b"definitely not gzip")

    def test_truncated_gzip_raises_oserror(self) -> None:
        with pytest.raises(OSError):
            decompress_payload(gzip.compress(PAYLOAD)[:20], "gzip")

    def test_corrupt_deflate_raises_oserror(self) -> None:
        with pytest.raises(OSError, match="deflate"):
            decompress_payload(b"\xff\xff\xff\xff", "deflate")
