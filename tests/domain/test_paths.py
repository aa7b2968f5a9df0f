"""Tests for folder-pattern matching and path helpers."""

from __future__ import annotations

import pytest

from sitectl.domain.paths import (
    directory_depth,
    join_path,
    matches_folder_pattern,
    normalize_path,
    pattern_depth,
    sort_by_specificity,
    split_parent,
    strip_pattern_prefix,
)
from sitectl.domain.types import ContentTypeConfig


class TestMatchesFolderPattern:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [("notes.md", True), ("posts/a.md", False)],
    )
    def test_root_pattern(self, path: str, expected: bool) -> None:
        assert matches_folder_pattern(path, "") is expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("docs", True),
            ("docs/a.md", True),
            ("docs/a/b/c.md", True),
            ("docsx/a.md", False),
            ("other/docs/a.md", False),
        ],
    )
    def test_literal_pattern(self, path: str, expected: bool) -> None:
        assert matches_folder_pattern(path, "docs") is expected

    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            ("docs/guides", True),
            ("docs/guides/setup.md", True),
            ("docs", False),
            ("blog/guides", False),
        ],
    )
    def test_wildcard_pattern(self, path: str, expected: bool) -> None:
        assert matches_folder_pattern(path, "docs/*") is expected

    def test_wildcard_is_one_segment(self) -> None:
        assert matches_folder_pattern("docs/a/b", "docs/*/*")
        assert not matches_folder_pattern("docs/a", "docs/*/*")

    def test_case_insensitive(self) -> None:
        assert matches_folder_pattern("Docs/Guides/Intro.md", "docs/*")
        assert matches_folder_pattern("posts/a.md", "Posts")

    def test_pattern_slashes_ignored(self) -> None:
        assert matches_folder_pattern("posts/a.md", "/posts/")


class TestPatternDepth:
    @pytest.mark.parametrize(
        ("pattern", "depth"),
        [("", 0), ("docs", 1), ("docs/*", 2), ("docs/*/*", 3), ("/posts/", 1)],
    )
    def test_depth(self, pattern: str, depth: int) -> None:
        assert pattern_depth(pattern) == depth

    def test_sort_is_stable_and_deepest_first(self) -> None:
        configs = [
            ContentTypeConfig(id="root", folder_pattern=""),
            ContentTypeConfig(id="a", folder_pattern="docs"),
            ContentTypeConfig(id="deep", folder_pattern="docs/*/*"),
            ContentTypeConfig(id="b", folder_pattern="blog"),
        ]
        ordered = [ct.id for ct in sort_by_specificity(configs)]
        assert ordered == ["deep", "a", "b", "root"]


class TestPathHelpers:
    def test_normalize_path(self) -> None:
        assert normalize_path("./posts\\hello.md/") == "posts/hello.md"
        assert normalize_path("/posts/hello.md") == "posts/hello.md"

    def test_directory_depth(self) -> None:
        assert directory_depth("notes.md") == 0
        assert directory_depth("docs/a/b/c.md") == 3

    def test_strip_pattern_prefix(self) -> None:
        assert strip_pattern_prefix("docs/guide/intro", "docs/*") == "intro"
        assert strip_pattern_prefix("posts/hello", "posts") == "hello"
        assert strip_pattern_prefix("posts/hello", "") == "posts/hello"

    def test_strip_pattern_prefix_no_match(self) -> None:
        assert strip_pattern_prefix("blog/hello", "posts") == "blog/hello"

    def test_split_parent(self) -> None:
        assert split_parent("a/b/c.md") == ("a/b", "c.md")
        assert split_parent("c.md") == ("", "c.md")
        assert split_parent("") == ("", "")

    def test_join_path_drops_empty_parts(self) -> None:
        assert join_path("posts/", "", "/hello.md") == "posts/hello.md"
        assert join_path("", "hello.md") == "hello.md"
