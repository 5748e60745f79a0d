from __future__ import annotations

from mdzview.models.files import CompressionResult, FileRef
from mdzview.models.outline import (
    DocumentMetadata,
    HeadingNode,
    HeadingRecord,
    VisibleNode,
)

__all__ = [
    # outline
    "HeadingRecord",
    "HeadingNode",
    "VisibleNode",
    "DocumentMetadata",
    # files
    "FileRef",
    "CompressionResult",
]
