"""Outline tree construction.

Pure business logic. Converts the flat, ordered heading list into a forest
of HeadingNode roots. No knowledge of view state or I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdzview.models.outline import HeadingNode

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from mdzview.models.outline import HeadingRecord


def build_forest(
    records: Sequence[HeadingRecord],
    keys: Sequence[int] | None = None,
) -> list[HeadingNode]:
    """Build the outline forest in a single left-to-right pass.

    A heading's parent is the nearest preceding heading with a strictly
    smaller level; without one it is a root. ``keys`` default to the record
    positions; pass explicit keys when building from a filtered subset so
    nodes keep the keys of the full document.
    """
    if keys is None:
        keys = range(len(records))

    roots: list[HeadingNode] = []
    # Open ancestors, root first
    stack: list[HeadingNode] = []

    for record, key in zip(records, keys, strict=True):
        node = HeadingNode(record=record, key=key)

        while stack and stack[-1].level >= record.level:
            stack.pop()

        if stack:
            stack[-1].children.append(node)
        else:
            roots.append(node)

        stack.append(node)

    return roots


def iter_preorder(forest: Sequence[HeadingNode]) -> Iterator[HeadingNode]:
    """Yield every node of the forest in pre-order (document order)."""
    pending = list(reversed(forest))
    while pending:
        node = pending.pop()
        yield node
        pending.extend(reversed(node.children))


def flatten(forest: Sequence[HeadingNode]) -> list[HeadingRecord]:
    """Inverse of build_forest: the records in pre-order."""
    return [node.record for node in iter_preorder(forest)]
