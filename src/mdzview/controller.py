"""Integration controller.

Responsibilities (and nothing more):
- React to the host's "file-open" and "active-leaf-change" events
- Own the outline panel lifecycle (show, rebind, hide)
- Create document bindings for compressed files
- Run the compress commands
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from mdzview.codec import compress
from mdzview.document import CompressedDocument
from mdzview.errors import MdzError
from mdzview.models.files import CompressionResult
from mdzview.view import OutlinePanel

if TYPE_CHECKING:
    from collections.abc import Callable

    from mdzview.models.files import FileRef
    from mdzview.protocols import DocumentViewProtocol
    from mdzview.state import AppState

log = structlog.get_logger()

MARKDOWN_EXTENSION = "md"


def format_bytes(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"


class OutlineController:
    """Keeps the outline panel in step with the host's active document."""

    def __init__(self, state: AppState) -> None:
        self._state = state
        self.panel: OutlinePanel | None = None
        self._subscriptions: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def attach(self) -> None:
        """Subscribe to workspace events. Call once when the host loads the integration."""
        workspace = self._state.workspace
        self._subscriptions = [
            workspace.subscribe("file-open", self.handle_file_open),
            workspace.subscribe("active-leaf-change", self.handle_active_leaf_change),
        ]
        log.info("controller_attached", extension=self._state.settings.compression.extension)

    def detach(self) -> None:
        for unsubscribe in self._subscriptions:
            unsubscribe()
        self._subscriptions = []
        self._state.metadata.clear_all()
        self.hide_outline()
        log.info("controller_detached")

    def is_compressed(self, file: FileRef | None) -> bool:
        return file is not None and file.extension == self._state.settings.compression.extension

    def create_document(self, view: DocumentViewProtocol) -> CompressedDocument:
        """Document binding for a view the host opened on a compressed file."""
        return CompressedDocument(
            view,
            self._state.vault,
            self._state.metadata,
            self._state.notifier,
            on_metadata_changed=lambda _file: self.update_outline(),
        )

    # ------------------------------------------------------------------
    # Workspace events
    # ------------------------------------------------------------------

    def handle_file_open(self, file: FileRef | None) -> None:
        if self.is_compressed(file):
            if self._state.settings.outline.auto_show:
                self.ensure_outline_visible()
            self.update_outline()
        elif self._state.settings.outline.auto_hide:
            self.hide_outline()

    def handle_active_leaf_change(self, view: DocumentViewProtocol | None) -> None:
        file = view.file if view is not None else None
        if self.is_compressed(file):
            if self._state.settings.outline.auto_show:
                self.ensure_outline_visible()
            self.update_outline()
        elif file is not None and self._state.settings.outline.auto_hide:
            self.hide_outline()

    # ------------------------------------------------------------------
    # Panel
    # ------------------------------------------------------------------

    def update_outline(self) -> None:
        """Rebind the panel to the active document's derived headings."""
        if self.panel is None:
            return

        file = self._state.workspace.active_file()
        if file is None or not self.is_compressed(file):
            self.panel.bind(None, None)
            return

        metadata = self._state.metadata.get(file)
        self.panel.bind(file, metadata.headings if metadata is not None else [])

    def ensure_outline_visible(self) -> OutlinePanel:
        if self.panel is not None:
            return self.panel
        self.panel = OutlinePanel(
            self._state.workspace,
            self._state.notifier,
            follow_cursor=self._state.settings.outline.follow_cursor,
        )
        self._state.workspace.show_panel(self.panel)
        log.debug("outline_panel_shown")
        return self.panel

    def hide_outline(self) -> None:
        if self.panel is None:
            return
        self._state.workspace.detach_panel(self.panel)
        self.panel.close()
        self.panel = None
        log.debug("outline_panel_hidden")

    def toggle_outline(self) -> None:
        if self.panel is not None:
            self.hide_outline()
            return
        self.ensure_outline_visible()
        self.update_outline()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    async def compress_file(self, file: FileRef) -> CompressionResult | None:
        """Write ``<stem>.<extension>`` next to a markdown file and report the savings.

        Failures are reported as a notice and logged; nothing is raised.
        """
        notifier = self._state.notifier
        if file.extension != MARKDOWN_EXTENSION:
            notifier.notify(f"Not a markdown file: {file.name}")
            return None

        settings = self._state.settings.compression
        target = file.with_extension(settings.extension)
        try:
            content = await self._state.vault.read(file)
            data = compress(content, settings.level)
            await self._state.vault.create_binary(target, data)
        except MdzError as exc:
            log.warning("compress_failed", path=file.path, code=exc.code, message=exc.message)
            notifier.notify(f"Error compressing file: {exc.message}")
            return None

        result = CompressionResult(
            source=file.path,
            target=target.path,
            original_size=len(content.encode("utf-8")),
            compressed_size=len(data),
        )
        log.info(
            "file_compressed",
            source=result.source,
            target=result.target,
            original_size=result.original_size,
            compressed_size=result.compressed_size,
        )
        notifier.notify(
            f"Compressed: {file.name}\n"
            f"Original: {format_bytes(result.original_size)}\n"
            f"Compressed: {format_bytes(result.compressed_size)}\n"
            f"Saved: {result.saved_ratio:.1f}%"
        )
        return result

    async def bulk_compress(self, folder: str | None = None) -> list[CompressionResult]:
        """Compress every markdown file directly inside ``folder``.

        Defaults to the folder of the active file.
        """
        notifier = self._state.notifier
        if folder is None:
            active = self._state.workspace.active_file()
            if active is None:
                notifier.notify("No active file/folder")
                return []
            folder = active.parent

        try:
            files = await self._state.vault.list_folder(folder)
        except MdzError as exc:
            log.warning("bulk_compress_failed", folder=folder, code=exc.code)
            notifier.notify(exc.message)
            return []

        markdown = [f for f in files if f.extension == MARKDOWN_EXTENSION]
        if not markdown:
            notifier.notify("No markdown files in current folder")
            return []

        results: list[CompressionResult] = []
        for file in markdown:
            result = await self.compress_file(file)
            if result is not None:
                results.append(result)

        notifier.notify(f"Compressed {len(results)} files")
        return results
