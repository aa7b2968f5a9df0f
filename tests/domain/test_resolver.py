"""Tests for content-type resolution."""

from __future__ import annotations

from sitectl.domain.resolver import (
    conflict_message,
    find_content_type,
    overlapping_patterns,
    resolve,
    resolve_content_type,
)
from sitectl.domain.types import ContentTypeConfig, CreationMode


def _types(*patterns: str) -> list[ContentTypeConfig]:
    return [
        ContentTypeConfig(id=pattern.replace("/", "-").replace("*", "x") or "root", folder_pattern=pattern)
        for pattern in patterns
    ]


class TestSpecificity:
    def test_most_specific_pattern_wins(self) -> None:
        configs = _types("", "docs", "docs/*", "docs/*/*")
        assert resolve("docs/a/b/c.md", configs) == "docs-x-x"
        assert resolve("docs/a.md", configs) == "docs"
        assert resolve("notes.md", configs) == "root"

    def test_declaration_order_is_irrelevant(self) -> None:
        configs = _types("docs/*/*", "", "docs/*", "docs")
        assert resolve("docs/a/b/c.md", configs) == "docs-x-x"
        assert resolve("docs/a/c.md", configs) == "docs-x"

    def test_wildcard_never_consumes_file_name(self) -> None:
        configs = _types("docs/*")
        assert resolve("docs/a.md", configs) is None
        assert resolve("docs/a/b.md", configs) == "docs-x"

    def test_root_type_only_claims_root_files(self) -> None:
        configs = _types("")
        assert resolve("notes.md", configs) == "root"
        assert resolve("other/notes.md", configs) is None

    def test_candidates_are_ordered(self) -> None:
        resolution = resolve_content_type("docs/a/b.md", _types("", "docs", "docs/*"))
        assert [ct.id for ct in resolution.candidates] == ["docs-x", "docs"]
        assert resolution.matched
        assert resolution.conflicts == ()


class TestNoMatch:
    def test_unmatched_path(self) -> None:
        resolution = resolve_content_type("misc/a.md", _types("posts"))
        assert resolution.content_type is None
        assert resolution.id is None
        assert not resolution.matched
        assert conflict_message(resolution) is None

    def test_disabled_types_are_skipped(self) -> None:
        configs = [
            ContentTypeConfig(id="posts", folder_pattern="posts", enabled=False),
            ContentTypeConfig(id="root", folder_pattern=""),
        ]
        assert resolve("posts/a.md", configs) is None

    def test_empty_config_list(self) -> None:
        assert resolve("posts/a.md", []) is None


class TestConflicts:
    def test_equal_specificity_keeps_declaration_order(self) -> None:
        configs = [
            ContentTypeConfig(id="blog", name="Blog", folder_pattern="posts"),
            ContentTypeConfig(id="news", name="News", folder_pattern="posts"),
        ]
        resolution = resolve_content_type("posts/a.md", configs)
        assert resolution.id == "blog"
        assert [ct.id for ct in resolution.conflicts] == ["news"]
        assert conflict_message(resolution) == (
            "multiple content types matched at equal specificity: Blog, News (using Blog)"
        )

    def test_overlapping_patterns(self) -> None:
        configs = [
            ContentTypeConfig(id="blog", folder_pattern="posts"),
            ContentTypeConfig(id="docs", folder_pattern="docs"),
            ContentTypeConfig(id="news", folder_pattern="Posts/"),
            ContentTypeConfig(id="old", folder_pattern="posts", enabled=False),
        ]
        groups = overlapping_patterns(configs)
        assert [[ct.id for ct in group] for group in groups] == [["blog", "news"]]


class TestIgnoreSubfolders:
    def test_file_mode_restricted_to_pattern_depth(self) -> None:
        configs = [ContentTypeConfig(id="posts", folder_pattern="posts", ignore_subfolders=True)]
        assert resolve("posts/a.md", configs) == "posts"
        assert resolve("posts/2024/a.md", configs) is None

    def test_folder_mode_allows_entry_folder(self) -> None:
        configs = [
            ContentTypeConfig(
                id="work",
                folder_pattern="work",
                creation_mode=CreationMode.FOLDER,
                ignore_subfolders=True,
            )
        ]
        assert resolve("work/app/index.md", configs) == "work"
        assert resolve("work/overview.md", configs) == "work"
        assert resolve("work/app/assets/index.md", configs) is None


class TestFindContentType:
    def test_by_id(self) -> None:
        configs = _types("posts", "docs")
        found = find_content_type("docs", configs)
        assert found is not None
        assert found.folder_pattern == "docs"

    def test_unknown_id(self) -> None:
        assert find_content_type("missing", _types("posts")) is None
