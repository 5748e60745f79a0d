"""Structural metadata providers.

The host's metadata lookup is an injectable ``MetadataProviderProtocol``.
``CompressedMetadataProvider`` decorates whichever provider the host uses:
for compressed documents it answers from the headings derived here, and
delegates everything else. Nothing global is patched, so there is nothing to
restore on teardown beyond dropping the decorator.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from mdzview.models.files import FileRef
    from mdzview.models.outline import DocumentMetadata
    from mdzview.protocols import MetadataProviderProtocol

log = structlog.get_logger()


class NativeMetadataProvider:
    """In-memory stand-in for the host's own metadata index."""

    def __init__(self, entries: dict[str, DocumentMetadata] | None = None) -> None:
        self._entries = dict(entries or {})

    def index(self, file: FileRef, metadata: DocumentMetadata) -> None:
        self._entries[file.path] = metadata

    def get_file_cache(self, file: FileRef) -> DocumentMetadata | None:
        return self._entries.get(file.path)


class CompressedMetadataProvider:
    """Override-then-delegate metadata provider for compressed documents."""

    def __init__(self, delegate: MetadataProviderProtocol, extension: str) -> None:
        self._delegate = delegate
        self._extension = extension
        self._derived: dict[str, DocumentMetadata] = {}

    def get_file_cache(self, file: FileRef) -> DocumentMetadata | None:
        if file.extension == self._extension:
            derived = self._derived.get(file.path)
            if derived is not None:
                return derived
        return self._delegate.get_file_cache(file)

    def set(self, file: FileRef, metadata: DocumentMetadata) -> None:
        self._derived[file.path] = metadata
        log.debug("metadata_set", path=file.path, headings=len(metadata.headings))

    def get(self, file: FileRef) -> DocumentMetadata | None:
        """Return the derived metadata only, without delegating."""
        return self._derived.get(file.path)

    def clear(self, file: FileRef) -> None:
        self._derived.pop(file.path, None)

    def clear_all(self) -> None:
        self._derived.clear()
