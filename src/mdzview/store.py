"""Outline state store.

Owns the per-panel OutlineState (collapse set, search query, active line) and
derives the render-ready visible forest from the current document's headings.
Holds no reference to any rendering surface: the view layer subscribes to
changes and reads ``derive_visible_forest()``.

Node keys are positions in the pre-order traversal of the freshly parsed,
unfiltered tree. They are only meaningful for one heading structure, so
collapse state is dropped whenever a reload changes the (level, text)
sequence of the document's headings.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import structlog

from mdzview.models.outline import VisibleNode
from mdzview.tree import build_forest

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from mdzview.models.outline import HeadingNode, HeadingRecord

log = structlog.get_logger()


@dataclass
class OutlineState:
    """Transient per-panel view state. Never persisted, never shared."""

    collapsed_keys: set[int] = field(default_factory=set)
    search_query: str = ""
    active_line: int | None = None

    def reset(self) -> None:
        self.collapsed_keys.clear()
        self.search_query = ""
        self.active_line = None


class OutlineStore:
    """Pure state store behind one outline panel.

    Every mutation notifies subscribers synchronously; there is no batching.
    """

    def __init__(self) -> None:
        self.state = OutlineState()
        self._headings: tuple[HeadingRecord, ...] | None = None
        self._listeners: list[Callable[[], None]] = []

    # ------------------------------------------------------------------
    # Document binding
    # ------------------------------------------------------------------

    @property
    def headings(self) -> tuple[HeadingRecord, ...] | None:
        """The bound document's headings, or None when no document is bound."""
        return self._headings

    @property
    def has_document(self) -> bool:
        return self._headings is not None

    def set_document(self, headings: Sequence[HeadingRecord] | None) -> None:
        """Install a freshly parsed heading list, replacing the previous one wholesale."""
        new = tuple(headings) if headings is not None else None

        if _structure(new) != _structure(self._headings):
            if self.state.collapsed_keys:
                log.debug("outline_collapse_state_dropped", count=len(self.state.collapsed_keys))
            self.state.collapsed_keys.clear()

        if self.state.active_line is not None and not any(
            h.line == self.state.active_line for h in new or ()
        ):
            self.state.active_line = None

        self._headings = new
        self._changed()

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def set_search_query(self, text: str) -> None:
        self.state.search_query = text
        self._changed()

    def toggle_collapse(self, key: int) -> None:
        """Flip collapse membership. Unknown keys simply become collapsed."""
        if key in self.state.collapsed_keys:
            self.state.collapsed_keys.discard(key)
        else:
            self.state.collapsed_keys.add(key)
        self._changed()

    def collapse_all(self) -> None:
        """Collapse every heading below level 1. Level-1 headings are never collapsed."""
        for key, heading in enumerate(self._headings or ()):
            if heading.level > 1:
                self.state.collapsed_keys.add(key)
        self._changed()

    def expand_all(self) -> None:
        self.state.collapsed_keys.clear()
        self._changed()

    def set_active_line(self, line: int | None) -> None:
        """Record the most recently navigated-to heading line. Highlighting only."""
        self.state.active_line = line
        self._changed()

    def reset(self) -> None:
        """Clear collapse set, query and active line (panel closed)."""
        self.state.reset()
        self._changed()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def heading_at(self, line: int) -> HeadingRecord | None:
        """Return the last heading at or before ``line``, or None."""
        found: HeadingRecord | None = None
        for heading in self._headings or ():
            if heading.line > line:
                break
            found = heading
        return found

    def record_for(self, key: int) -> HeadingRecord | None:
        headings = self._headings or ()
        if 0 <= key < len(headings):
            return headings[key]
        return None

    def derive_visible_forest(self) -> list[VisibleNode]:
        """Return the (search-filtered) forest annotated for rendering.

        Filtering runs on the flat heading list before the tree is rebuilt:
        a heading is kept iff its own text contains the query, ignoring case.
        A match whose ancestors do not match attaches to the nearest preceding
        shallower match, or becomes a root.
        """
        headings = self._headings or ()
        query = self.state.search_query.lower()

        keys = [
            key for key, heading in enumerate(headings)
            if not query or query in heading.text.lower()
        ]
        forest = build_forest([headings[key] for key in keys], keys)
        return [self._annotate(node, depth=0, visible=True) for node in forest]

    def _annotate(self, node: HeadingNode, *, depth: int, visible: bool) -> VisibleNode:
        collapsed = node.key in self.state.collapsed_keys
        return VisibleNode(
            key=node.key,
            record=node.record,
            depth=depth,
            collapsed=collapsed,
            active=node.record.line == self.state.active_line,
            visible=visible,
            children=[
                self._annotate(child, depth=depth + 1, visible=visible and not collapsed)
                for child in node.children
            ],
        )

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self, listener: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener. Returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener()


def _structure(headings: Sequence[HeadingRecord] | None) -> list[tuple[int, str]] | None:
    if headings is None:
        return None
    return [(h.level, h.text) for h in headings]
