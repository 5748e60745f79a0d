"""Unit tests for outline tree construction."""

from __future__ import annotations

from typing import TYPE_CHECKING

from mdzview.parser import extract_headings
from mdzview.tree import build_forest, flatten, iter_preorder

if TYPE_CHECKING:
    from mdzview.models.outline import HeadingNode, HeadingRecord


def _shape(forest: list[HeadingNode]) -> list[tuple[str, list]]:
    return [(node.record.text, _shape(node.children)) for node in forest]


def _assert_invariants(forest: list[HeadingNode]) -> None:
    for node in iter_preorder(forest):
        for child in node.children:
            assert child.level > node.level
        lines = [child.record.line for child in node.children]
        assert lines == sorted(lines)


class TestBuildForest:
    def test_scenario_two_roots(self, sample_headings: list[HeadingRecord]) -> None:
        forest = build_forest(sample_headings)
        assert _shape(forest) == [
            ("A", [("B", [("C", [])]), ("D", [])]),
            ("E", []),
        ]

    def test_empty_input(self) -> None:
        assert build_forest([]) == []

    def test_same_level_siblings_never_nest(self) -> None:
        forest = build_forest(extract_headings("## One\n## Two\n## Three"))
        assert _shape(forest) == [("One", []), ("Two", []), ("Three", [])]

    def test_skipped_level_attaches_to_nearest_shallower(self) -> None:
        forest = build_forest(extract_headings("# A\n### B\n## C\n#### D"))
        assert _shape(forest) == [("A", [("B", []), ("C", [("D", [])])])]

    def test_leading_deep_heading_is_root(self) -> None:
        forest = build_forest(extract_headings("### Deep\n# Top\n## Child"))
        assert _shape(forest) == [("Deep", []), ("Top", [("Child", [])])]

    def test_invariants_hold(self) -> None:
        content = "## x\n# a\n### b\n## c\n###### d\n#### e\n# f\n## g\n## h"
        _assert_invariants(build_forest(extract_headings(content)))

    def test_default_keys_are_positions(self, sample_headings: list[HeadingRecord]) -> None:
        keys = [node.key for node in iter_preorder(build_forest(sample_headings))]
        assert keys == [0, 1, 2, 3, 4]

    def test_explicit_keys_preserved(self, sample_headings: list[HeadingRecord]) -> None:
        subset = [sample_headings[2], sample_headings[4]]
        forest = build_forest(subset, keys=[2, 4])
        assert [node.key for node in forest] == [2, 4]


class TestPreorder:
    def test_flatten_round_trip(self, sample_headings: list[HeadingRecord]) -> None:
        assert flatten(build_forest(sample_headings)) == sample_headings

    def test_round_trip_irregular_levels(self) -> None:
        records = extract_headings("### a\n# b\n###### c\n## d\n## e\n# f\n#### g")
        flat = flatten(build_forest(records))
        assert [(r.level, r.line) for r in flat] == [(r.level, r.line) for r in records]
