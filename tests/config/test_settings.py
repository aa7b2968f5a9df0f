"""Tests for SiteSettings — unified settings with TOML source."""

from __future__ import annotations

import json
from pathlib import Path

import click
import pytest

from sitectl.config.settings import SiteSettings
from sitectl.domain.types import CreationMode, HeadingLinkFormat


class TestSiteSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        """With no TOML and no env vars, all fields use code defaults."""
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.site_root == tmp_path
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.site.date_format == "YYYY-MM-DD"
        assert settings.site.alt_extension == "mdx"
        assert settings.site.heading_link_format is HeadingLinkFormat.WIKI
        assert settings.watch.debounce_ms == 500
        assert settings.content_types == []
        assert settings.list_keys == frozenset()

    def test_frozen(self, tmp_path: Path) -> None:
        settings = SiteSettings.from_cli(site_root=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]

    def test_cli_flags_win(self, tmp_path: Path) -> None:
        settings = SiteSettings.from_cli(site_root=tmp_path, json_output=True, verbose=True)
        assert settings.json_output is True
        assert settings.verbose is True


class TestTomlSource:
    def test_loads_content_types(self, tmp_path: Path) -> None:
        (tmp_path / "sitectl.toml").write_text(
            '[site]\ntrailing_slash = true\n\n'
            '[[content_types]]\nid = "posts"\nfolder_pattern = "posts"\n\n'
            '[[content_types]]\nid = "work"\nfolder_pattern = "work"\ncreation_mode = "folder"\n'
        )
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.site.trailing_slash is True
        assert settings.site.date_format == "YYYY-MM-DD"  # default preserved
        assert [ct.id for ct in settings.content_types] == ["posts", "work"]
        assert settings.content_types[1].creation_mode is CreationMode.FOLDER

    def test_walk_up_discovery_sets_root(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "sitectl.toml").write_text('[site]\ndate_format = "DD/MM/YYYY"\n')
        nested = tmp_path / "posts" / "2024"
        nested.mkdir(parents=True)
        monkeypatch.chdir(nested)
        settings = SiteSettings.from_cli()
        assert settings.site_root == tmp_path.resolve()
        assert settings.site.date_format == "DD/MM/YYYY"

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "site.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[frontmatter]\nlist_keys = ["tags", "aliases"]\n')
        settings = SiteSettings.from_cli(config_path=str(custom), site_root=tmp_path)
        assert settings.config_path == custom
        assert settings.list_keys == frozenset({"tags", "aliases"})

    def test_missing_explicit_config(self, tmp_path: Path) -> None:
        with pytest.raises(click.ClickException, match="Config file not found"):
            SiteSettings.from_cli(config_path=str(tmp_path / "nope.toml"), site_root=tmp_path)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        (tmp_path / "sitectl.toml").write_text("[site\n")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            SiteSettings.from_cli(site_root=tmp_path)

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / "sitectl.toml").write_text('[site]\nheading_link_format = "fancy"\n')
        with pytest.raises(click.ClickException, match="Invalid settings"):
            SiteSettings.from_cli(site_root=tmp_path)

    def test_duplicate_ids(self, tmp_path: Path) -> None:
        (tmp_path / "sitectl.toml").write_text(
            '[[content_types]]\nid = "posts"\n\n[[content_types]]\nid = "posts"\n'
        )
        with pytest.raises(click.ClickException, match="duplicate content type id"):
            SiteSettings.from_cli(site_root=tmp_path)


class TestEnvOverrides:
    def test_nested_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SITECTL_SITE__TRAILING_SLASH", "true")
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.site.trailing_slash is True

    def test_config_env_var(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        elsewhere = tmp_path / "elsewhere.toml"
        elsewhere.write_text('[site]\nalt_extension = ".markdown"\n')
        monkeypatch.setenv("SITECTL_CONFIG", str(elsewhere))
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert settings.site.alt_extension == "markdown"


class TestContentTypesFile:
    def test_records_appended(self, tmp_path: Path) -> None:
        (tmp_path / "types.json").write_text(
            json.dumps([{"id": "pages", "folderPattern": "pages", "useMdxExtension": True}])
        )
        (tmp_path / "sitectl.toml").write_text(
            '[site]\ncontent_types_file = "types.json"\n\n'
            '[[content_types]]\nid = "posts"\nfolder_pattern = "posts"\n'
        )
        settings = SiteSettings.from_cli(site_root=tmp_path)
        assert [ct.id for ct in settings.content_types] == ["posts", "pages"]
        assert settings.content_types[1].use_alt_extension is True

    def test_duplicate_across_sources(self, tmp_path: Path) -> None:
        (tmp_path / "types.json").write_text(json.dumps([{"id": "posts"}]))
        (tmp_path / "sitectl.toml").write_text(
            '[site]\ncontent_types_file = "types.json"\n\n[[content_types]]\nid = "posts"\n'
        )
        with pytest.raises(click.ClickException, match="duplicate content type id"):
            SiteSettings.from_cli(site_root=tmp_path)

    def test_missing_file(self, tmp_path: Path) -> None:
        (tmp_path / "sitectl.toml").write_text('[site]\ncontent_types_file = "gone.json"\n')
        with pytest.raises(click.ClickException, match="not found"):
            SiteSettings.from_cli(site_root=tmp_path)

    def test_invalid_json(self, tmp_path: Path) -> None:
        (tmp_path / "types.json").write_text("{not json")
        (tmp_path / "sitectl.toml").write_text('[site]\ncontent_types_file = "types.json"\n')
        with pytest.raises(click.ClickException, match="Invalid JSON"):
            SiteSettings.from_cli(site_root=tmp_path)
