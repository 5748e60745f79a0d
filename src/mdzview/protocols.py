"""Protocol interfaces for the host collaborators.

The outline engine references these protocols, not concrete host classes.
This allows:
- Tests to use lightweight in-memory implementations
- The local filesystem host (local.py) and a GUI host to be swapped without
  changing engine code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from mdzview.models.files import FileRef
    from mdzview.models.outline import DocumentMetadata
    from mdzview.view import OutlinePanel


class VaultProtocol(Protocol):
    """File I/O inside the host's document folder."""

    async def read(self, file: FileRef) -> str: ...

    async def read_binary(self, file: FileRef) -> bytes: ...

    async def create_binary(self, file: FileRef, data: bytes) -> None: ...

    async def list_folder(self, folder: str) -> list[FileRef]: ...

    def exists(self, file: FileRef) -> bool: ...


class EditorProtocol(Protocol):
    """Optional cursor-positioning capability of a document view."""

    def set_cursor(self, line: int, ch: int = 0) -> None: ...

    def scroll_into_view(self, line: int, *, center: bool = True) -> None: ...


class RenderedHeadingProtocol(Protocol):
    """A heading element of the rendered document (fallback navigation target)."""

    @property
    def text(self) -> str: ...

    def scroll_into_view(self) -> None: ...


class DocumentViewProtocol(Protocol):
    """Read-only markdown view of one open document."""

    @property
    def file(self) -> FileRef | None: ...

    @property
    def editor(self) -> EditorProtocol | None: ...

    def heading_elements(self) -> Iterable[RenderedHeadingProtocol]: ...

    def set_view_data(self, text: str) -> None: ...


class MetadataProviderProtocol(Protocol):
    """Structural metadata lookup other host features read from."""

    def get_file_cache(self, file: FileRef) -> DocumentMetadata | None: ...


class NotifierProtocol(Protocol):
    """Transient user-visible notices."""

    def notify(self, message: str) -> None: ...


class WorkspaceProtocol(Protocol):
    """Host workspace: active document, navigation events and panel placement.

    Events are ``"file-open"`` (callback receives ``FileRef | None``) and
    ``"active-leaf-change"`` (callback receives ``DocumentViewProtocol | None``).
    """

    def active_file(self) -> FileRef | None: ...

    def active_view(self) -> DocumentViewProtocol | None: ...

    def subscribe(self, event: str, callback: Callable[..., None]) -> Callable[[], None]: ...

    def show_panel(self, panel: OutlinePanel) -> None: ...

    def detach_panel(self, panel: OutlinePanel) -> None: ...
