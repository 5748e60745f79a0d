"""Unit tests for the heading extractor."""

from __future__ import annotations

from mdzview.models.outline import HeadingRecord
from mdzview.parser import extract_headings, format_headings


def _summary(content: str) -> list[tuple[int, str, int]]:
    return [(h.level, h.text, h.line) for h in extract_headings(content)]


class TestHeadingDetection:
    """Verify H1–H6 detection and the rejection rules."""

    def test_h1_record(self) -> None:
        assert extract_headings("# Title") == [
            HeadingRecord(level=1, text="Title", line=0, start_offset=0, end_offset=7)
        ]

    def test_all_six_levels(self) -> None:
        content = "\n".join(f"{'#' * n} Level {n}" for n in range(1, 7))
        assert _summary(content) == [(n, f"Level {n}", n - 1) for n in range(1, 7)]

    def test_h7_ignored(self) -> None:
        assert extract_headings("####### Too deep") == []

    def test_heading_requires_whitespace_after_hashes(self) -> None:
        assert extract_headings("##NoSpace") == []

    def test_tab_counts_as_whitespace(self) -> None:
        assert _summary("##\tTabbed") == [(2, "Tabbed", 0)]

    def test_empty_remainder_ignored(self) -> None:
        assert extract_headings("#") == []
        assert extract_headings("# ") == []
        assert extract_headings("##     ") == []

    def test_indented_hash_is_not_a_heading(self) -> None:
        assert extract_headings("  # Indented") == []

    def test_text_is_trimmed(self) -> None:
        assert _summary("##   Spaced out   ") == [(2, "Spaced out", 0)]

    def test_inline_formatting_kept(self) -> None:
        content = "## Using `stream()` for **real-time** output"
        assert _summary(content) == [(2, "Using `stream()` for **real-time** output", 0)]

    def test_crlf_heading_accepted_leniently(self) -> None:
        # A CRLF line is still a heading; the "\r" is not part of its text
        (heading,) = extract_headings("# Title\r\nbody\r\n")
        assert heading.text == "Title"
        assert heading.end_offset == len("# Title\r")

    def test_no_headings_returns_empty(self) -> None:
        assert extract_headings("Just a paragraph.\nAnother line.") == []

    def test_lines_strictly_increasing(self) -> None:
        content = "# A\n\n## B\nbody\n### C\n# D"
        lines = [h.line for h in extract_headings(content)]
        assert lines == sorted(set(lines))


class TestOffsets:
    """Verify 0-based lines and character offsets."""

    def test_offsets_track_previous_lines(self) -> None:
        content = "ab\n## X\ntail"
        (heading,) = extract_headings(content)
        assert heading.line == 1
        assert heading.start_offset == 3
        assert heading.end_offset == 7
        assert content[heading.start_offset : heading.end_offset] == "## X"

    def test_offsets_continue_through_fences(self) -> None:
        content = "```\n# code\n```\n# After"
        (heading,) = extract_headings(content)
        assert heading.line == 3
        assert content[heading.start_offset : heading.end_offset] == "# After"

    def test_blank_lines_counted(self) -> None:
        assert _summary("\n\n# Third line") == [(1, "Third line", 2)]


class TestCodeFenceSuppression:
    """Verify headings inside backtick fences are excluded."""

    def test_backtick_fence_suppresses(self) -> None:
        content = "# Real heading\n```\n# Not a heading\n```\n## Another real"
        assert _summary(content) == [(1, "Real heading", 0), (2, "Another real", 4)]

    def test_fence_with_language_specifier(self) -> None:
        content = "# Top\n```python\n# comment, not heading\n```\n## Bottom"
        assert _summary(content) == [(1, "Top", 0), (2, "Bottom", 4)]

    def test_indented_fence_toggles(self) -> None:
        content = "# Top\n   ```\n# hidden\n   ```\n# Bottom"
        assert _summary(content) == [(1, "Top", 0), (1, "Bottom", 4)]

    def test_tilde_fence_is_not_a_fence(self) -> None:
        content = "~~~\n# Visible\n~~~"
        assert _summary(content) == [(1, "Visible", 1)]

    def test_multiple_code_blocks(self) -> None:
        content = "# H1\n```\n# code\n```\n## H2\n```\n# code\n```\n### H3"
        assert _summary(content) == [(1, "H1", 0), (2, "H2", 4), (3, "H3", 8)]

    def test_unclosed_fence_suppresses_rest(self) -> None:
        # Known behavior: a stray fence hides every later heading
        content = "# Before\n```\n# Inside\n## Also inside"
        assert _summary(content) == [(1, "Before", 0)]

    def test_only_code_blocks(self) -> None:
        assert extract_headings("```\n# heading\n## heading\n```") == []


class TestEdgeCases:
    """Edge cases: empty input, whitespace, large documents."""

    def test_empty_string(self) -> None:
        assert extract_headings("") == []

    def test_only_whitespace_lines(self) -> None:
        assert extract_headings("   \n  \n   ") == []

    def test_heading_at_last_line_no_trailing_newline(self) -> None:
        assert _summary("Some text\n## Final heading") == [(2, "Final heading", 1)]

    def test_large_document_over_1mb(self) -> None:
        num_lines = 9_000
        body_line = "Line " + ("x" * 120)
        lines = [
            f"## Section {i // 100}" if i % 100 == 0 else body_line
            for i in range(num_lines)
        ]
        content = "\n".join(lines)
        assert len(content.encode("utf-8")) > 1_048_576

        assert len(extract_headings(content)) == num_lines // 100


class TestFormatHeadings:
    def test_one_based_heading_map(self) -> None:
        headings = extract_headings("# Title\n\n## Overview")
        assert format_headings(headings) == "1: # Title\n3: ## Overview"

    def test_empty(self) -> None:
        assert format_headings([]) == ""
