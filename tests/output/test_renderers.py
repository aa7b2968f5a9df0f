"""Tests for the per-operation Rich renderers."""

from __future__ import annotations

from sitectl.output.renderers import render_quiet, render_result
from sitectl.services.result import ServiceResult


class TestRenderResult:
    def test_resolve_candidates_verbose(self) -> None:
        result = ServiceResult(
            ok=True,
            op="resolve",
            data={
                "path": "posts/a.md",
                "content_type": "blog",
                "name": "Blog",
                "folder_pattern": "posts",
                "candidates": ["blog", "news", "pages"],
                "conflicts": ["news"],
            },
        )
        plain = render_result(result)
        assert "content_type: blog" in plain
        assert "selected" not in plain

        verbose = render_result(result, verbose=True)
        assert "selected" in verbose
        assert "conflict" in verbose
        assert "less specific" in verbose

    def test_resolve_unmatched(self) -> None:
        result = ServiceResult(
            ok=True, op="resolve", data={"path": "x.md", "content_type": None, "candidates": []}
        )
        assert "content_type: -" in render_result(result)

    def test_types_table(self) -> None:
        result = ServiceResult(
            ok=True,
            op="list_types",
            data={
                "count": 1,
                "types": [
                    {
                        "id": "pages",
                        "name": "Pages",
                        "folder_pattern": "",
                        "depth": 0,
                        "creation_mode": "file",
                        "enabled": False,
                        "link_base_path": "",
                    }
                ],
            },
        )
        text = render_result(result, verbose=True)
        assert "(root)" in text
        assert "no" in text
        assert "Link base" in text

    def test_no_types(self) -> None:
        result = ServiceResult(ok=True, op="list_types", data={"count": 0, "types": []})
        assert "No content types configured." in render_result(result)

    def test_mutation_unchanged(self) -> None:
        result = ServiceResult(
            ok=True,
            op="standardize",
            data={"path": "posts/a.md", "added": [], "written": False, "dry_run": False},
        )
        text = render_result(result)
        assert "unchanged" in text
        assert "added: -" in text

    def test_convert_dry_run(self) -> None:
        result = ServiceResult(
            ok=True,
            op="convert_links",
            data={
                "path": "posts/a.md",
                "summary": "converted 2, skipped 1",
                "skipped_refs": ["images/cat.png"],
                "dry_run": True,
            },
        )
        assert "converted 2, skipped 1 (dry run)" in render_result(result)
        assert "skipped: images/cat.png" in render_result(result, verbose=True)

    def test_link_first(self) -> None:
        result = ServiceResult(
            ok=True, op="heading_link", data={"link": "[[posts/a#Intro|Intro]]", "heading": "Intro"}
        )
        assert render_result(result) == "[[posts/a#Intro|Intro]]"

    def test_error_detail_verbose(self) -> None:
        result = ServiceResult.failure(
            "rename", "PATH_EXISTS", "Path already exists: posts/b.md", detail={"path": "posts/b.md"}
        )
        assert render_result(result).startswith("ERROR")
        assert "detail:" not in render_result(result)
        assert "path: posts/b.md" in render_result(result, verbose=True)

    def test_meta_timing(self) -> None:
        result = ServiceResult(
            ok=True,
            op="inspect_new_file",
            data={"path": "posts/a.md", "candidate": True, "reason": "new note"},
            meta={"telemetry": {"name": "AutoCreateService.inspect", "duration_ms": 1.5}},
        )
        text = render_result(result, verbose=True)
        assert "reason: new note" in text
        assert "AutoCreateService.inspect" in text

    def test_unknown_op_generic(self) -> None:
        result = ServiceResult(ok=True, op="custom", data={"answer": 42})
        assert "answer: 42" in render_result(result)


class TestRenderQuiet:
    def test_prefers_new_path(self) -> None:
        result = ServiceResult(
            ok=True, op="rename", data={"path": "posts/a.md", "new_path": "posts/b.md"}
        )
        assert render_quiet(result) == "posts/b.md"

    def test_url(self) -> None:
        result = ServiceResult(ok=True, op="rewrite_link", data={"ref": "a", "url": "/blog/a"})
        assert render_quiet(result) == "/blog/a"

    def test_fallback(self) -> None:
        assert render_quiet(ServiceResult(ok=True, op="list_types", data={"count": 0})) == (
            "OK: list_types"
        )
