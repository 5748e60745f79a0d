"""Heading extractor for decompressed markdown documents.

Single-pass algorithm that extracts H1–H6 headings from Markdown content,
suppressing headings inside fenced code blocks. Produces ``HeadingRecord``
objects with 0-based line numbers and character offsets into the source text.
"""

from __future__ import annotations

import re

from mdzview.models.outline import HeadingRecord

_HEADING_RE = re.compile(r"(#{1,6})\s+(.+)")
_FENCE = "```"


def extract_headings(content: str) -> list[HeadingRecord]:
    """Extract heading records from Markdown content, in document order.

    A line whose stripped form starts with a backtick fence toggles the
    "inside code block" flag. There is no pairing of fence styles, so an
    unterminated fence hides every heading that follows it.
    """
    headings: list[HeadingRecord] = []

    in_code_block = False
    offset = 0

    for lineno, line in enumerate(content.split("\n")):
        start = offset
        offset += len(line) + 1

        # Rule 1: code block tracking
        if line.strip().startswith(_FENCE):
            in_code_block = not in_code_block
            continue

        if in_code_block:
            continue

        # Rule 2: heading detection (H1–H6, whitespace after the run, non-empty text)
        match = _HEADING_RE.match(line)
        if not match:
            continue

        text = match.group(2).strip()
        if not text:
            continue

        headings.append(
            HeadingRecord(
                level=len(match.group(1)),
                text=text,
                line=lineno,
                start_offset=start,
                end_offset=start + len(line),
            )
        )

    return headings


def format_headings(headings: list[HeadingRecord]) -> str:
    """Render a plain-text heading map, one ``"<lineno>: <## text>"`` per heading.

    Line numbers are 1-based. Returns an empty string for no headings.
    """
    return "\n".join(f"{h.line + 1}: {'#' * h.level} {h.text}" for h in headings)
