"""Compressed document binding.

Hooks the host calls when a compressed document is loaded into or unloaded
from a document view. Holds exactly one decompressed text snapshot, replaced
wholesale on every load.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mdzview.codec import decompress
from mdzview.errors import MdzError
from mdzview.models.outline import DocumentMetadata
from mdzview.parser import extract_headings

if TYPE_CHECKING:
    from collections.abc import Callable

    from mdzview.metadata import CompressedMetadataProvider
    from mdzview.models.files import FileRef
    from mdzview.protocols import DocumentViewProtocol, NotifierProtocol, VaultProtocol


class CompressedDocument:
    """Read-only markdown document backed by a gzip-compressed file."""

    can_save = False

    def __init__(
        self,
        view: DocumentViewProtocol,
        vault: VaultProtocol,
        metadata: CompressedMetadataProvider,
        notifier: NotifierProtocol,
        *,
        on_metadata_changed: Callable[[FileRef], None] | None = None,
    ) -> None:
        self.view = view
        self._vault = vault
        self._metadata = metadata
        self._notifier = notifier
        self._on_metadata_changed = on_metadata_changed
        self.file: FileRef | None = None
        self.text = ""

    @property
    def display_text(self) -> str:
        return self.file.basename if self.file is not None else "Compressed Markdown"

    def view_data(self) -> str:
        return self.text

    async def load(self, file: FileRef) -> bool:
        """Read, decompress and publish a document. Returns False on failure.

        A read or decompression failure is reported once as a notice. The
        previous snapshot and its metadata are dropped and
        ``on_metadata_changed`` still fires, so a bound outline falls back to
        its empty state. Re-opening the document is the retry path.
        """
        log = structlog.get_logger().bind(path=file.path)
        self.file = file
        try:
            data = await self._vault.read_binary(file)
            text = decompress(data)
        except MdzError as exc:
            log.warning("document_load_failed", code=exc.code, message=exc.message)
            self.text = ""
            self.view.set_view_data("")
            self._metadata.clear(file)
            self._notifier.notify(f"Error loading compressed file: {exc.message}")
            if self._on_metadata_changed is not None:
                self._on_metadata_changed(file)
            return False

        self.text = text
        headings = extract_headings(text)
        self._metadata.set(file, DocumentMetadata(headings=headings))
        if self._on_metadata_changed is not None:
            self._on_metadata_changed(file)

        self.view.set_view_data(text)
        log.info("document_loaded", chars=len(text), headings=len(headings))
        return True

    def unload(self, file: FileRef) -> None:
        self._metadata.clear(file)
        if self.file == file:
            self.file = None
            self.text = ""
        structlog.get_logger().debug("document_unloaded", path=file.path)
