"""Filesystem helpers for site content.

INVARIANT: Files are truth. Nothing is cached between commands; every
operation reads the current file contents.

Pure parsing/rendering lives in :mod:`sitectl.domain` (correct dependency
direction: infrastructure -> domain). This module handles path
resolution and file classification only.
"""

from __future__ import annotations

from pathlib import Path, PurePosixPath

NOTE_EXTENSION = ".md"

# Directories never treated as site content.
SKIP_DIRS = frozenset({".git", ".obsidian", ".trash", "node_modules"})


def note_extensions(alt_extension: str) -> tuple[str, ...]:
    """Accepted note suffixes: ``.md`` plus the configured alternative."""
    alt = f".{alt_extension.lstrip('.')}"
    return (NOTE_EXTENSION,) if alt == NOTE_EXTENSION else (NOTE_EXTENSION, alt)


def is_note_file(rel_path: str, alt_extension: str) -> bool:
    """True for markdown-like files outside skipped or hidden folders."""
    parts = PurePosixPath(rel_path).parts
    if any(part in SKIP_DIRS or part.startswith(".") for part in parts[:-1]):
        return False
    return PurePosixPath(rel_path).suffix.lower() in note_extensions(alt_extension)


def note_stem(rel_path: str) -> str:
    return PurePosixPath(rel_path).stem


def resolve_site_path(site_root: Path, rel_path: str) -> Path:
    """Absolute path for a site-relative path.

    Raises:
        ValueError: The path escapes the site root.
    """
    result = site_root / rel_path
    if not result.resolve().is_relative_to(site_root.resolve()):
        msg = f"Path escapes site root: {rel_path}"
        raise ValueError(msg)
    return result


def to_relative(site_root: Path, path: Path) -> str:
    """Forward-slash path of *path* relative to *site_root*.

    Raises:
        ValueError: *path* lies outside the site root.
    """
    resolved = path if path.is_absolute() else Path.cwd() / path
    return resolved.resolve().relative_to(site_root.resolve()).as_posix()
