"""Tests for MigrationService."""

from __future__ import annotations

import json
from pathlib import Path

from sitectl.infrastructure.vault import Vault
from sitectl.services.migrate import MigrationService

LEGACY = {
    "automatePostCreation": True,
    "postsFolder": "content/posts",
    "postsLinkBasePath": "/blog/",
    "enablePages": True,
    "pagesFolder": "content/pages",
    "dateFormat": "DD/MM/YYYY",
}


class TestMigrate:
    def test_writes_output(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text(json.dumps(LEGACY))
        output = tmp_path / "content-types.json"

        result = MigrationService(vault).migrate(str(legacy), output=str(output))
        assert result.ok
        assert result.data["migrated"] == ["posts", "pages"]
        assert result.data["blocked"] == []
        assert result.data["site"] == {"date_format": "DD/MM/YYYY"}
        assert result.data["output"] == str(output)

        records = json.loads(output.read_text())
        assert [record["id"] for record in records] == ["posts", "pages"]
        assert records[0]["folder_pattern"] == "content/posts"
        assert records[0]["link_base_path"] == "/blog/"

    def test_without_output(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text(json.dumps(LEGACY))
        result = MigrationService(vault).migrate(str(legacy))
        assert result.data["output"] is None
        assert len(result.data["content_types"]) == 2

    def test_blocked_category_warns(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text(
            json.dumps(
                {
                    "automatePostCreation": True,
                    "contentTypes": [{"id": "mine", "name": "Posts", "folder_pattern": "blog"}],
                }
            )
        )
        result = MigrationService(vault).migrate(str(legacy))
        assert result.ok
        assert result.data["migrated"] == []
        assert result.data["blocked"] == ["Posts"]
        assert len(result.warnings) == 1
        assert "posts migration skipped" in result.warnings[0]


class TestMigrateErrors:
    def test_missing_file(self, vault: Vault, tmp_path: Path) -> None:
        result = MigrationService(vault).migrate(str(tmp_path / "nope.json"))
        assert result.error is not None
        assert result.error.code == "NOT_FOUND"

    def test_invalid_json(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text("{not json")
        result = MigrationService(vault).migrate(str(legacy))
        assert result.error is not None
        assert result.error.code == "INVALID_LEGACY_SETTINGS"

    def test_not_an_object(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text("[1, 2]")
        result = MigrationService(vault).migrate(str(legacy))
        assert result.error is not None
        assert result.error.code == "INVALID_LEGACY_SETTINGS"

    def test_validation_errors_reported(self, vault: Vault, tmp_path: Path) -> None:
        legacy = tmp_path / "data.json"
        legacy.write_text(json.dumps({"creationMode": "sideways"}))
        result = MigrationService(vault).migrate(str(legacy))
        assert result.error is not None
        assert result.error.code == "INVALID_LEGACY_SETTINGS"
        assert result.error.detail["errors"]
