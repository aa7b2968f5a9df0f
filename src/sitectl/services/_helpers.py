"""Shared service-layer helper functions."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import TYPE_CHECKING

from sitectl.domain.dates import format_date
from sitectl.domain.frontmatter import decode
from sitectl.domain.paths import normalize_path
from sitectl.domain.types import ContentTypeConfig, CreationMode

if TYPE_CHECKING:
    from sitectl.infrastructure.vault import Vault


def today_formatted(fmt: str, *, now: datetime | None = None) -> str:
    """Local date/time rendered with a moment-style format string."""
    return format_date(now or datetime.now(), fmt)


def site_path(vault: Vault, raw: str) -> str:
    """Normalize a user-supplied path to a site-relative one.

    Paths that exist relative to the working directory (or are absolute)
    are made relative to the site root; anything else is taken as already
    site-relative.

    Raises:
        ValueError: The path lies outside the site root.
    """
    candidate = Path(raw)
    if candidate.is_absolute() or candidate.exists():
        return vault.relative(candidate)
    rel_path = normalize_path(raw)
    vault.path(rel_path)
    return rel_path


def note_extension(content_type: ContentTypeConfig, alt_extension: str) -> str:
    """File suffix for new entries of *content_type*.

    Examples:
        >>> note_extension(ContentTypeConfig(id="docs", use_alt_extension=True), "mdx")
        '.mdx'
    """
    return f".{alt_extension}" if content_type.use_alt_extension else ".md"


def is_index_file(rel_path: str, content_type: ContentTypeConfig) -> bool:
    """True when *rel_path* is the index file of a folder-mode entry."""
    return (
        content_type.creation_mode is CreationMode.FOLDER
        and PurePosixPath(rel_path).stem == content_type.effective_index_name
    )


def is_placeholder_note(text: str) -> bool:
    """True for a freshly created note: empty, or a lone ``title:`` line and no body."""
    if not text.strip():
        return True
    parsed = decode(text)
    if not parsed.has_block or parsed.malformed:
        return False
    lines = [line.strip() for line in parsed.raw_block.splitlines() if line.strip()]
    if len(lines) > 1 or (lines and not lines[0].startswith("title:")):
        return False
    return not parsed.body.strip()
