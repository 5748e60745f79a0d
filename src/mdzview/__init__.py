"""mdzview: outline navigation for gzip-compressed markdown documents."""

from __future__ import annotations

import warnings
from importlib.metadata import PackageNotFoundError, version

from mdzview.codec import compress, decompress
from mdzview.errors import ErrorCode, MdzError
from mdzview.parser import extract_headings
from mdzview.store import OutlineStore

try:
    __version__ = version("mdzview")
except PackageNotFoundError:
    # Running from a source checkout
    warnings.warn(
        "mdzview is not installed; reporting version 0.0.0+unknown. Run 'pip install -e .'.",
        RuntimeWarning,
        stacklevel=2,
    )
    __version__ = "0.0.0+unknown"

__all__ = [
    "ErrorCode",
    "MdzError",
    "OutlineStore",
    "__version__",
    "compress",
    "decompress",
    "extract_headings",
]
