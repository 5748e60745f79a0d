"""Outline panel: projects OutlineStore output into navigable rows.

The panel only reads derived output and dispatches user gestures back into
the store as commands. Rendering is a flat list of ``OutlineRow`` values (what
a GUI host draws) plus a plain-text form for terminals.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog

from mdzview.store import OutlineStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

    from mdzview.models.files import FileRef
    from mdzview.models.outline import HeadingRecord, VisibleNode
    from mdzview.protocols import NotifierProtocol, WorkspaceProtocol

log = structlog.get_logger()

EMPTY_NO_DOCUMENT = "Open a compressed document to see its outline"
EMPTY_NO_HEADINGS = "No headings found"


@dataclass(frozen=True)
class OutlineRow:
    """One rendered outline entry."""

    key: int
    text: str
    line: int
    depth: int
    collapsible: bool
    collapsed: bool
    active: bool


class OutlinePanel:
    """Interactive outline for the active compressed document."""

    def __init__(
        self,
        workspace: WorkspaceProtocol,
        notifier: NotifierProtocol,
        *,
        follow_cursor: bool = False,
        on_render: Callable[[OutlinePanel], None] | None = None,
    ) -> None:
        self._workspace = workspace
        self._notifier = notifier
        self._on_render = on_render
        self.store = OutlineStore()
        self.file: FileRef | None = None
        self.search_visible = False
        self.follow_cursor = follow_cursor
        self._rows: list[OutlineRow] = []
        self._unsubscribe: Callable[[], None] | None = self.store.subscribe(self._rerender)

    @property
    def display_text(self) -> str:
        return f"Outline of {self.file.basename}" if self.file is not None else "Compressed outline"

    # ------------------------------------------------------------------
    # Binding
    # ------------------------------------------------------------------

    def bind(self, file: FileRef | None, headings: Sequence[HeadingRecord] | None) -> None:
        """Show ``headings`` for ``file``; ``None`` headings mean no document."""
        if file != self.file and self.file is not None:
            # Different document: its transient state must not leak over
            self.store.state.reset()
        self.file = file
        self.store.set_document(headings)

    def close(self) -> None:
        """Reset all outline state and stop listening to the store."""
        self.store.reset()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self.file = None

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def empty_message(self) -> str | None:
        if not self.store.has_document:
            return EMPTY_NO_DOCUMENT
        if not self.store.headings:
            return EMPTY_NO_HEADINGS
        return None

    def rows(self) -> list[OutlineRow]:
        return list(self._rows)

    def render_text(self) -> str:
        """Plain-text outline: two spaces per level, ▾/▸ disclosure, '*' on the active row."""
        message = self.empty_message()
        if message is not None:
            return message

        lines: list[str] = []
        for row in self._rows:
            if row.collapsible:
                disclosure = "▸" if row.collapsed else "▾"
            else:
                disclosure = " "
            marker = "*" if row.active else " "
            lines.append(f"{marker} {'  ' * row.depth}{disclosure} {row.text}")
        return "\n".join(lines)

    def _rerender(self) -> None:
        self._rows = list(_visible_rows(self.store.derive_visible_forest()))
        if self._on_render is not None:
            self._on_render(self)

    # ------------------------------------------------------------------
    # Gestures
    # ------------------------------------------------------------------

    def click_disclosure(self, key: int) -> None:
        self.store.toggle_collapse(key)

    def click_label(self, key: int) -> bool:
        return self.navigate(key)

    def input_search(self, text: str) -> None:
        self.store.set_search_query(text)

    def clear_search(self) -> None:
        self.store.set_search_query("")

    def click_collapse_all(self) -> None:
        self.store.collapse_all()

    def toggle_search_visible(self) -> None:
        self.search_visible = not self.search_visible

    def toggle_follow_cursor(self) -> None:
        self.follow_cursor = not self.follow_cursor
        self._notifier.notify(f"Auto-scroll: {'ON' if self.follow_cursor else 'OFF'}")

    def cursor_moved(self, line: int) -> None:
        """Track the heading enclosing the cursor while follow-cursor is on."""
        if not self.follow_cursor:
            return
        heading = self.store.heading_at(line)
        active = heading.line if heading is not None else None
        if active != self.store.state.active_line:
            self.store.set_active_line(active)

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def navigate(self, key: int) -> bool:
        """Scroll the active document to a heading and mark it active.

        Uses the view's editor when it can position a cursor. Otherwise falls
        back to the first rendered heading whose text equals the heading text.
        Heading text is not unique, so a miss is expected and silently ignored.
        """
        record = self.store.record_for(key)
        view = self._workspace.active_view()
        if record is None or view is None:
            return False

        editor = view.editor
        if editor is not None:
            editor.set_cursor(record.line, 0)
            editor.scroll_into_view(record.line, center=True)
            self.store.set_active_line(record.line)
            return True

        for element in view.heading_elements():
            if element.text.strip() == record.text:
                element.scroll_into_view()
                self.store.set_active_line(record.line)
                return True

        log.debug("navigation_target_not_found", heading=record.text, line=record.line)
        return False


def _visible_rows(forest: Sequence[VisibleNode]) -> Iterator[OutlineRow]:
    for node in forest:
        if not node.visible:
            continue
        yield OutlineRow(
            key=node.key,
            text=node.record.text,
            line=node.record.line,
            depth=node.depth,
            collapsible=node.has_children,
            collapsed=node.collapsed,
            active=node.active,
        )
        yield from _visible_rows(node.children)
