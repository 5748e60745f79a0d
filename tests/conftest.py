"""Shared test fixtures for the mdzview test suite."""

from __future__ import annotations

import pytest

from mdzview.models.outline import HeadingRecord
from mdzview.parser import extract_headings

SAMPLE_MARKDOWN = "# A\n## B\ntext\n### C\n## D\n# E\n"


@pytest.fixture()
def sample_markdown() -> str:
    """Two roots; A has children B (with child C) and D."""
    return SAMPLE_MARKDOWN


@pytest.fixture()
def sample_headings(sample_markdown: str) -> list[HeadingRecord]:
    """Keys 0..4 are A, B, C, D, E."""
    return extract_headings(sample_markdown)
