"""Unified settings — CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — CLI flags passed by Click
  2. Env vars     — ``SITECTL_*`` prefix, nested with ``__``
  3. TOML file    — ``sitectl.toml`` discovered via walk-up
  4. Code defaults — baked into the section models

Content types declared in ``[[content_types]]`` may be extended by a JSON
file named in ``[site] content_types_file`` (for example the output of
``sitectl migrate``); its records are appended after the TOML ones.
"""

from __future__ import annotations

import json
import threading
import tomllib
from collections import Counter
from pathlib import Path
from typing import Any

import click
from pydantic import Field, TypeAdapter, ValidationError, model_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from sitectl.config.discovery import find_config
from sitectl.config.models import FrontmatterConfig, SiteConfig, WatchConfig
from sitectl.domain.types import ContentTypeConfig

_CONTENT_TYPES = TypeAdapter(list[ContentTypeConfig])


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from a ``sitectl.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            raw = toml_path.read_text(encoding="utf-8")
            try:
                self._data = tomllib.loads(raw)
            except tomllib.TOMLDecodeError as exc:
                msg = f"Invalid TOML in {toml_path}: {exc}"
                raise click.ClickException(msg) from exc

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


def duplicate_ids(content_types: list[ContentTypeConfig]) -> list[str]:
    counts = Counter(ct.id for ct in content_types)
    return sorted(type_id for type_id, count in counts.items() if count > 1)


def load_content_types_file(path: Path) -> list[ContentTypeConfig]:
    """Load a JSON array of content type records.

    Raises:
        click.ClickException: The file is missing, not JSON, or invalid.
    """
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        msg = f"Content types file not found: {path}"
        raise click.ClickException(msg) from exc
    except json.JSONDecodeError as exc:
        msg = f"Invalid JSON in {path}: {exc}"
        raise click.ClickException(msg) from exc
    try:
        return _CONTENT_TYPES.validate_python(raw)
    except ValidationError as exc:
        msg = f"Invalid content types in {path}: {exc}"
        raise click.ClickException(msg) from exc


class SiteSettings(BaseSettings):
    """Unified settings for the entire sitectl CLI.

    Attributes:
        site_root: Resolved site directory (parent of ``sitectl.toml``,
            or CWD if no config found). All content paths are relative to it.
        config_path: The config file in use, or None when running on defaults.
        content_types: Configured content types in declaration order.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "SITECTL_",
        "env_nested_delimiter": "__",
    }

    # --- Resolved path (not in TOML, derived from config location) ---
    site_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False
    no_interact: bool = False

    # --- TOML sections ---
    site: SiteConfig = Field(default_factory=SiteConfig)
    frontmatter: FrontmatterConfig = Field(default_factory=FrontmatterConfig)
    watch: WatchConfig = Field(default_factory=WatchConfig)
    content_types: list[ContentTypeConfig] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_ids(self) -> SiteSettings:
        dupes = duplicate_ids(self.content_types)
        if dupes:
            msg = f"duplicate content type id(s): {', '.join(dupes)}"
            raise ValueError(msg)
        return self

    @property
    def list_keys(self) -> frozenset[str]:
        return frozenset(self.frontmatter.list_keys)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        site_root: Path | None = None,
        **cli_flags: Any,
    ) -> SiteSettings:
        """Construct settings from CLI invocation.

        Discovers ``sitectl.toml`` via walk-up (or explicit *config_path*),
        resolves *site_root* from the config file's parent directory, merges
        CLI flags as highest-priority overrides, then appends any content
        types from ``[site] content_types_file``.

        Raises:
            click.ClickException: Invalid TOML, JSON or settings values.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if not p.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
            toml_path = p
        else:
            toml_path = find_config(site_root)

        resolved_root = site_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            settings = cls(
                site_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        except ValidationError as exc:
            msg = f"Invalid settings: {exc}"
            raise click.ClickException(msg) from exc
        finally:
            _tls.toml_path = None

        extra_file = settings.site.content_types_file
        if not extra_file:
            return settings

        extra_path = Path(extra_file)
        if not extra_path.is_absolute():
            extra_path = resolved_root / extra_path
        combined = [*settings.content_types, *load_content_types_file(extra_path)]
        dupes = duplicate_ids(combined)
        if dupes:
            msg = f"duplicate content type id(s): {', '.join(dupes)}"
            raise click.ClickException(msg)
        return settings.model_copy(update={"content_types": combined})
