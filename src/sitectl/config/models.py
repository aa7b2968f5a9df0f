"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, sitectl.toml only contains
overrides. A fresh site needs only its ``[[content_types]]`` tables.
"""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from sitectl.domain.types import HeadingLinkFormat

# --- sitectl.toml sections ---


class SiteConfig(BaseModel):
    """[site] section."""

    model_config = {"frozen": True}

    date_format: str = "YYYY-MM-DD"
    trailing_slash: bool = False
    alt_extension: str = "mdx"
    heading_link_format: HeadingLinkFormat = HeadingLinkFormat.WIKI
    content_types_file: str | None = None

    @field_validator("alt_extension")
    @classmethod
    def _strip_dot(cls, value: str) -> str:
        return value.strip().lstrip(".") or "mdx"


class FrontmatterConfig(BaseModel):
    """[frontmatter] section."""

    model_config = {"frozen": True}

    list_keys: list[str] = Field(default_factory=list)


class WatchConfig(BaseModel):
    """[watch] section."""

    model_config = {"frozen": True}

    debounce_ms: int = Field(default=500, ge=0)
    self_write_ttl_seconds: int = Field(default=300, ge=0)
    new_file_window_ms: int = Field(default=1000, ge=0)
    poll_interval_ms: int = Field(default=200, gt=0)
