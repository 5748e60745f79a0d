"""gzip codec for compressed markdown documents.

``decompress`` accepts both gzip and raw zlib streams, matching what the
documents written by older tools contain. All decoding failures are raised
as a single ``MdzError`` so callers handle one exception type at the load
boundary.
"""

from __future__ import annotations

import gzip
import zlib

from mdzview.errors import ErrorCode, MdzError

# 32 + MAX_WBITS: auto-detect gzip or zlib header
_AUTODETECT_WBITS = 32 + zlib.MAX_WBITS


def compress(text: str, level: int = 6) -> bytes:
    """Gzip UTF-8 text. Output is deterministic (header mtime fixed to 0)."""
    return gzip.compress(text.encode("utf-8"), compresslevel=level, mtime=0)


def decompress(data: bytes) -> str:
    """Inflate a gzip or zlib stream back to text."""
    try:
        decompressor = zlib.decompressobj(wbits=_AUTODETECT_WBITS)
        raw = decompressor.decompress(data) + decompressor.flush()
        if not decompressor.eof:
            raise zlib.error("incomplete or truncated stream")
        return raw.decode("utf-8")
    except (zlib.error, UnicodeDecodeError) as exc:
        raise MdzError(
            code=ErrorCode.DECOMPRESSION_FAILED,
            message=f"Could not decompress document: {exc}",
            suggestion="Check that the file is a gzip-compressed UTF-8 markdown document.",
            recoverable=False,
        ) from exc
