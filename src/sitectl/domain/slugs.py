"""Slug and file-name rules.

Examples:
    >>> to_kebab_case("My Awesome Post!! 2024")
    'my-awesome-post-2024'
    >>> generate_filename("Hello World", underscore_prefix=True)
    '_hello-world'
"""

from __future__ import annotations

import re
import unicodedata

FALLBACK_NAME = "untitled"
DRAFT_PREFIX = "_"

_UNSAFE = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")

# Characters that force double quotes when the value is written as a scalar.
_NEEDS_DOUBLE = (" ", ":", "#", "@")
# Characters that force single quotes (YAML escapes nothing inside them).
_NEEDS_SINGLE = ('"', "'", "\n", "\\")


def to_kebab_case(text: str) -> str:
    """Lowercase, fold accents, drop punctuation, hyphenate whitespace."""
    folded = unicodedata.normalize("NFKD", text)
    folded = "".join(ch for ch in folded if not unicodedata.combining(ch))
    slug = _UNSAFE.sub("", folded.lower()).strip()
    slug = _WHITESPACE.sub("-", slug)
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


def generate_filename(title: str, underscore_prefix: bool = False) -> str:
    """File (or folder) stem for a new entry titled *title*."""
    stem = to_kebab_case(title) or FALLBACK_NAME
    return f"{DRAFT_PREFIX}{stem}" if underscore_prefix else stem


def strip_draft_prefix(name: str) -> str:
    return name[len(DRAFT_PREFIX) :] if name.startswith(DRAFT_PREFIX) else name


def title_from_filename(stem: str) -> str:
    """Recover a title from a file stem, ignoring the draft underscore."""
    return strip_draft_prefix(stem).strip()


def quote_scalar(value: str) -> str:
    """Quote *value* for a single-line ``key: value`` frontmatter entry.

    Values containing quotes, backslashes or newlines are single-quoted
    (with embedded single quotes doubled and newlines folded to spaces).
    Values containing spaces, colons, ``#`` or ``@`` are double-quoted.
    Anything else is returned as-is.

    Examples:
        >>> quote_scalar("Hello")
        'Hello'
        >>> quote_scalar("Hello World")
        '"Hello World"'
        >>> quote_scalar("It's")
        "'It''s'"
    """
    if any(ch in value for ch in _NEEDS_SINGLE):
        flattened = value.replace("\r\n", " ").replace("\n", " ")
        return "'" + flattened.replace("'", "''") + "'"
    if any(ch in value for ch in _NEEDS_DOUBLE):
        return '"' + value.replace('"', '\\"') + '"'
    return value
