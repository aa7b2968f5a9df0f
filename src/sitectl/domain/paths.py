"""Folder-pattern matching for vault-relative paths.

Patterns are folder paths relative to the vault root:

- ``""`` matches files in the vault root only.
- ``docs`` matches ``docs/`` and anything below it, at any depth.
- ``docs/*`` matches ``docs/<one segment>/`` and anything below it.
- ``docs/*/*`` matches two wildcard levels, and so on.

Matching is case-insensitive. Paths always use ``/`` separators.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from functools import lru_cache
from typing import Protocol, TypeVar

_SEP = "/"
_WILDCARD = "*"


class _HasPattern(Protocol):
    @property
    def folder_pattern(self) -> str: ...


_T = TypeVar("_T", bound=_HasPattern)


def normalize_path(path: str) -> str:
    """Normalize a vault-relative path: forward slashes, no leading ``./`` or ``/``."""
    normalized = path.strip().replace("\\", _SEP)
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized.strip(_SEP)


def normalize_pattern(pattern: str) -> str:
    return pattern.strip().replace("\\", _SEP).strip(_SEP)


def path_segments(path: str) -> list[str]:
    """Split *path* into its non-empty segments."""
    return [part for part in normalize_path(path).split(_SEP) if part]


def directory_depth(path: str) -> int:
    """Number of folders above the file named by *path* (0 for a root file)."""
    return max(len(path_segments(path)) - 1, 0)


def pattern_depth(pattern: str) -> int:
    """Specificity rank of a folder pattern: its segment count (0 for root)."""
    normalized = normalize_pattern(pattern)
    if not normalized:
        return 0
    return len(normalized.split(_SEP))


@lru_cache(maxsize=256)
def _compile_wildcard(pattern: str) -> re.Pattern[str]:
    parts = [
        "[^/]+" if segment == _WILDCARD else re.escape(segment).replace(r"\*", "[^/]+")
        for segment in pattern.split(_SEP)
    ]
    return re.compile("^" + "/".join(parts) + "(?:/|$)", re.IGNORECASE)


def matches_folder_pattern(path: str, pattern: str) -> bool:
    """Return True when *path* lies under the folder described by *pattern*."""
    normalized_path = normalize_path(path).lower()
    normalized_pattern = normalize_pattern(pattern).lower()

    if not normalized_pattern:
        return _SEP not in normalized_path

    if _WILDCARD not in normalized_pattern:
        return normalized_path == normalized_pattern or normalized_path.startswith(
            normalized_pattern + _SEP
        )

    return _compile_wildcard(normalized_pattern).match(normalized_path) is not None


def strip_pattern_prefix(path: str, pattern: str) -> str:
    """Remove the leading segments of *path* consumed by *pattern*.

    Returns *path* unchanged (normalized) when it does not match.

    Examples:
        >>> strip_pattern_prefix("docs/guide/intro", "docs/*")
        'intro'
        >>> strip_pattern_prefix("posts/hello", "")
        'posts/hello'
    """
    normalized = normalize_path(path)
    depth = pattern_depth(pattern)
    if depth == 0 or not matches_folder_pattern(normalized, pattern):
        return normalized
    return _SEP.join(normalized.split(_SEP)[depth:])


def sort_by_specificity(items: Iterable[_T]) -> list[_T]:
    """Order items deepest-pattern first; equal depths keep declaration order."""
    return sorted(items, key=lambda item: pattern_depth(item.folder_pattern), reverse=True)


def join_path(*parts: str) -> str:
    """Join vault-relative parts, dropping empty ones."""
    return _SEP.join(p.strip(_SEP) for p in parts if p and p.strip(_SEP))


def split_parent(path: str) -> tuple[str, str]:
    """Return ``(parent_folder, name)`` for a vault-relative path."""
    segments: Sequence[str] = path_segments(path)
    if not segments:
        return "", ""
    return _SEP.join(segments[:-1]), segments[-1]
