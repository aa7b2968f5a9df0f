"""Tests for the Vault and its compensating transactions."""

from __future__ import annotations

from pathlib import Path

import pytest

from sitectl.infrastructure.vault import PathConflictError, Vault


class TestVaultAccess:
    def test_root_and_content_types(self, vault: Vault, site_root: Path) -> None:
        assert vault.root == site_root
        assert [ct.id for ct in vault.content_types] == ["pages", "posts", "work", "snippets", "docs"]

    def test_read_and_exists(self, vault: Vault, site_root: Path) -> None:
        (site_root / "posts" / "a.md").write_text("hello", encoding="utf-8")
        assert vault.exists("posts/a.md")
        assert vault.is_file("posts/a.md")
        assert not vault.is_file("posts")
        assert vault.read("posts/a.md") == "hello"

    def test_path_guard(self, vault: Vault) -> None:
        with pytest.raises(ValueError):
            vault.path("../escape.md")

    def test_relative(self, vault: Vault, site_root: Path) -> None:
        assert vault.relative(site_root / "posts" / "a.md") == "posts/a.md"


class TestTransaction:
    def test_commit_records_recent(self, vault: Vault, site_root: Path) -> None:
        with vault.transaction() as txn:
            txn.write_file("posts/new/a.md", "x")
        assert (site_root / "posts" / "new" / "a.md").read_text() == "x"
        assert "posts/new/a.md" in vault.recent

    def test_rollback_restores_and_removes(self, vault: Vault, site_root: Path) -> None:
        existing = site_root / "posts" / "keep.md"
        existing.write_text("original", encoding="utf-8")

        with pytest.raises(RuntimeError), vault.transaction() as txn:
            txn.write_file("posts/keep.md", "changed")
            txn.write_file("posts/fresh/new.md", "new")
            raise RuntimeError("boom")

        assert existing.read_text() == "original"
        assert not (site_root / "posts" / "fresh").exists()
        assert "posts/keep.md" not in vault.recent

    def test_rollback_undoes_move(self, vault: Vault, site_root: Path) -> None:
        entry = site_root / "work" / "old-app"
        entry.mkdir()
        (entry / "index.mdx").write_text("body", encoding="utf-8")

        with pytest.raises(RuntimeError), vault.transaction() as txn:
            txn.move("work/old-app", "work/archive/new-app")
            raise RuntimeError("boom")

        assert (entry / "index.mdx").read_text() == "body"
        assert not (site_root / "work" / "archive").exists()

    def test_create_file_refuses_overwrite(self, vault: Vault, site_root: Path) -> None:
        (site_root / "posts" / "a.md").write_text("x", encoding="utf-8")
        with pytest.raises(PathConflictError) as excinfo, vault.transaction() as txn:
            txn.create_file("posts/a.md", "y")
        assert excinfo.value.rel_path == "posts/a.md"
        assert (site_root / "posts" / "a.md").read_text() == "x"

    def test_move_refuses_overwrite(self, vault: Vault, site_root: Path) -> None:
        (site_root / "posts" / "a.md").write_text("a", encoding="utf-8")
        (site_root / "posts" / "b.md").write_text("b", encoding="utf-8")
        with pytest.raises(PathConflictError), vault.transaction() as txn:
            txn.move("posts/a.md", "posts/b.md")
        assert (site_root / "posts" / "a.md").exists()
