from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class HeadingRecord(BaseModel):
    """Single heading line detected in a document."""

    model_config = ConfigDict(frozen=True)

    level: int = Field(ge=1, le=6)  # Number of leading '#' characters
    text: str  # Marker and surrounding whitespace stripped
    line: int = Field(ge=0)  # 0-based source line
    start_offset: int = Field(ge=0)
    end_offset: int = Field(ge=0)  # Exclusive: start_offset + len(line)


class DocumentMetadata(BaseModel):
    """Structural metadata handed to the host in place of its own index.

    Only ``headings`` is derived; the remaining fields mirror the shape of the
    host's cached metadata so readers see empty collections instead of none.
    """

    headings: list[HeadingRecord] = []
    sections: list[Any] = []
    links: list[Any] = []
    embeds: list[Any] = []
    tags: list[Any] = []
    frontmatter: dict[str, Any] | None = None


@dataclass
class HeadingNode:
    """Outline tree node. Owns its children exclusively.

    ``key`` is the node's position in the pre-order traversal of the unfiltered
    tree, i.e. the record's index in the document's heading list.
    """

    record: HeadingRecord
    key: int
    children: list[HeadingNode] = field(default_factory=list)

    @property
    def level(self) -> int:
        return self.record.level


@dataclass
class VisibleNode:
    """Render-ready node produced by OutlineStore.derive_visible_forest()."""

    key: int
    record: HeadingRecord
    depth: int
    collapsed: bool
    active: bool
    # False when any ancestor is collapsed
    visible: bool
    children: list[VisibleNode] = field(default_factory=list)

    @property
    def has_children(self) -> bool:
        return bool(self.children)
