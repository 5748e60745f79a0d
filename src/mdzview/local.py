"""Filesystem-backed host collaborators.

Concrete implementations of the protocols in ``protocols.py`` for running the
outline engine outside a GUI: a vault rooted at a directory, notices printed
to stderr, an in-process workspace with event subscriptions, and a plain
text document view whose "rendered" headings are its heading lines.
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path
from typing import TYPE_CHECKING, TextIO

import structlog

from mdzview.errors import ErrorCode, MdzError
from mdzview.metadata import CompressedMetadataProvider, NativeMetadataProvider
from mdzview.models.files import FileRef
from mdzview.parser import extract_headings
from mdzview.state import AppState

if TYPE_CHECKING:
    from collections.abc import Callable

    from mdzview.config import Settings
    from mdzview.controller import OutlineController
    from mdzview.document import CompressedDocument
    from mdzview.view import OutlinePanel

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Vault
# ---------------------------------------------------------------------------


class LocalVault:
    """VaultProtocol over a directory. Blocking I/O runs in worker threads."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def _path(self, file: FileRef) -> Path:
        return self.root / file.path

    def exists(self, file: FileRef) -> bool:
        return self._path(file).is_file()

    async def read(self, file: FileRef) -> str:
        data = await self.read_binary(file)
        try:
            return data.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MdzError(
                code=ErrorCode.NOT_MARKDOWN,
                message=f"Not a UTF-8 text file: {file.path}",
                suggestion="Only UTF-8 markdown files can be compressed.",
            ) from exc

    async def read_binary(self, file: FileRef) -> bytes:
        try:
            return await asyncio.to_thread(self._path(file).read_bytes)
        except FileNotFoundError as exc:
            raise _not_found(file.path) from exc
        except OSError as exc:
            raise _os_error(ErrorCode.FILE_UNREADABLE, "Cannot read file", file.path, exc) from exc

    async def create_binary(self, file: FileRef, data: bytes) -> None:
        path = self._path(file)
        try:
            await asyncio.to_thread(_write_new, path, data)
        except FileExistsError as exc:
            raise MdzError(
                code=ErrorCode.FILE_EXISTS,
                message=f"File already exists: {file.path}",
                suggestion="Delete or rename the existing file first.",
                recoverable=True,
            ) from exc
        except OSError as exc:
            raise _os_error(ErrorCode.FILE_UNWRITABLE, "Cannot write file", file.path, exc) from exc
        log.debug("vault_file_created", path=file.path, size=len(data))

    async def list_folder(self, folder: str) -> list[FileRef]:
        directory = self.root / folder
        if not directory.is_dir():
            raise _not_found(folder or ".")
        try:
            entries = await asyncio.to_thread(lambda: sorted(directory.iterdir()))
        except OSError as exc:
            raise _os_error(
                ErrorCode.FILE_UNREADABLE, "Cannot list folder", folder or ".", exc
            ) from exc
        return [
            FileRef(entry.relative_to(self.root).as_posix())
            for entry in entries
            if entry.is_file()
        ]


def _write_new(path: Path, data: bytes) -> None:
    # "xb" fails instead of overwriting an existing file
    with path.open("xb") as fh:
        fh.write(data)


def _not_found(path: str) -> MdzError:
    return MdzError(
        code=ErrorCode.FILE_NOT_FOUND,
        message=f"File not found: {path}",
        suggestion="Check the path; it is resolved relative to the vault root.",
    )


def _os_error(code: ErrorCode, action: str, path: str, exc: OSError) -> MdzError:
    log.debug("vault_os_error", path=path, errno=exc.errno, error=exc.strerror)
    return MdzError(
        code=code,
        message=f"{action}: {path}",
        suggestion=f"Check that the path is a regular file you have access to ({exc.strerror}).",
        recoverable=True,
    )


# ---------------------------------------------------------------------------
# Notices
# ---------------------------------------------------------------------------


class ConsoleNotifier:
    """Prints notices to a stream (stderr by default) and remembers them."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream
        self.messages: list[str] = []

    def notify(self, message: str) -> None:
        self.messages.append(message)
        print(message, file=self._stream or sys.stderr)


# ---------------------------------------------------------------------------
# Document view
# ---------------------------------------------------------------------------


class TextEditor:
    """Cursor-positioning capability of TextDocumentView."""

    def __init__(self) -> None:
        self.cursor: tuple[int, int] = (0, 0)
        self.scrolled_to: int | None = None

    def set_cursor(self, line: int, ch: int = 0) -> None:
        self.cursor = (line, ch)

    def scroll_into_view(self, line: int, *, center: bool = True) -> None:
        self.scrolled_to = line


class RenderedHeading:
    """A rendered heading element of TextDocumentView."""

    def __init__(self, view: TextDocumentView, text: str, line: int) -> None:
        self._view = view
        self._text = text
        self.line = line

    @property
    def text(self) -> str:
        return self._text

    def scroll_into_view(self) -> None:
        self._view.scrolled_to = self.line


class TextDocumentView:
    """Read-only view over markdown text.

    With ``editable=False`` the view has no editor, so navigation has to go
    through its rendered heading elements.
    """

    def __init__(self, file: FileRef | None, *, editable: bool = True) -> None:
        self._file = file
        self._editor = TextEditor() if editable else None
        self.text = ""
        self.scrolled_to: int | None = None

    @property
    def file(self) -> FileRef | None:
        return self._file

    @property
    def editor(self) -> TextEditor | None:
        return self._editor

    def set_view_data(self, text: str) -> None:
        self.text = text

    def heading_elements(self) -> list[RenderedHeading]:
        return [RenderedHeading(self, h.text, h.line) for h in extract_headings(self.text)]


# ---------------------------------------------------------------------------
# Workspace
# ---------------------------------------------------------------------------


class LocalWorkspace:
    """Single-leaf workspace with synchronous event dispatch."""

    def __init__(self, vault: LocalVault) -> None:
        self._vault = vault
        self._view: TextDocumentView | None = None
        self._documents: dict[str, CompressedDocument] = {}
        self._listeners: dict[str, list[Callable[..., None]]] = {}
        self.panels: list[OutlinePanel] = []

    def active_file(self) -> FileRef | None:
        return self._view.file if self._view is not None else None

    def active_view(self) -> TextDocumentView | None:
        return self._view

    def subscribe(self, event: str, callback: Callable[..., None]) -> Callable[[], None]:
        listeners = self._listeners.setdefault(event, [])
        listeners.append(callback)

        def unsubscribe() -> None:
            if callback in listeners:
                listeners.remove(callback)

        return unsubscribe

    def emit(self, event: str, *args: object) -> None:
        for callback in list(self._listeners.get(event, [])):
            callback(*args)

    def show_panel(self, panel: OutlinePanel) -> None:
        self.panels.append(panel)

    def detach_panel(self, panel: OutlinePanel) -> None:
        if panel in self.panels:
            self.panels.remove(panel)

    async def open_file(
        self,
        file: FileRef,
        controller: OutlineController,
        *,
        editable: bool = True,
    ) -> TextDocumentView:
        """Open ``file`` in the single leaf, replacing whatever was there.

        The previous view stays active until the new document is loaded, so a
        reload of the same file rebinds the outline in place.
        """
        previous = self.active_file()

        view = TextDocumentView(file, editable=editable)
        if controller.is_compressed(file):
            document = controller.create_document(view)
            self._documents[file.path] = document
            await document.load(file)
        else:
            view.set_view_data(await self._vault.read(file))

        if previous is not None and previous != file:
            self._release(previous)

        self._view = view
        self.emit("active-leaf-change", view)
        self.emit("file-open", file)
        return view

    def close_file(self) -> None:
        if self._view is None:
            return
        if self._view.file is not None:
            self._release(self._view.file)
        self._view = None
        self.emit("file-open", None)

    def _release(self, file: FileRef) -> None:
        document = self._documents.pop(file.path, None)
        if document is not None:
            document.unload(file)


def create_local_state(root: Path, settings: Settings, stream: TextIO | None = None) -> AppState:
    """Wire an AppState over a directory."""
    vault = LocalVault(root)
    return AppState(
        settings=settings,
        vault=vault,
        workspace=LocalWorkspace(vault),
        notifier=ConsoleNotifier(stream),
        metadata=CompressedMetadataProvider(
            NativeMetadataProvider(), settings.compression.extension
        ),
    )
