"""Heading lookup and heading-link generation."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import quote

from sitectl.domain.links import resolve_link_target
from sitectl.domain.paths import normalize_path, split_parent
from sitectl.domain.slugs import to_kebab_case
from sitectl.domain.types import ContentTypeConfig

_ATX_HEADING = re.compile(r"^ {0,3}(#{1,6})[ \t]+(.+?)(?:[ \t]+#+)?[ \t]*$")
_FENCE = re.compile(r"^ {0,3}(`{3,}|~{3,})")
_NOTE_EXTENSION = re.compile(r"\.mdx?$", re.IGNORECASE)


@dataclass(frozen=True)
class Heading:
    text: str
    level: int
    line: int  # zero-based


def iter_headings(text: str) -> list[Heading]:
    """ATX headings of *text*, skipping fenced code blocks."""
    headings: list[Heading] = []
    fence: str | None = None
    for number, line in enumerate(text.splitlines()):
        fence_match = _FENCE.match(line)
        if fence_match:
            marker = fence_match.group(1)
            if fence is None:
                fence = marker[0] * 3
            elif marker.startswith(fence):
                fence = None
            continue
        if fence is not None:
            continue
        match = _ATX_HEADING.match(line)
        if match:
            headings.append(Heading(text=match.group(2).strip(), level=len(match.group(1)), line=number))
    return headings


def find_heading_at_line(text: str, line: int) -> Heading | None:
    """The nearest heading at or above zero-based *line*."""
    found: Heading | None = None
    for heading in iter_headings(text):
        if heading.line > line:
            break
        found = heading
    return found


def heading_anchor(heading_text: str) -> str:
    return to_kebab_case(heading_text)


def wiki_heading_link(path: str, heading_text: str) -> str:
    """``[[path#Heading|Heading]]`` with the note extension dropped."""
    target = _NOTE_EXTENSION.sub("", normalize_path(path))
    return f"[[{target}#{heading_text}|{heading_text}]]"


def markdown_heading_link(path: str, heading_text: str) -> str:
    """``[Heading](file.md#heading)``, file name percent-encoded."""
    _folder, name = split_parent(path)
    return f"[{heading_text}]({quote(name)}#{quote(heading_anchor(heading_text))})"


def site_heading_link(
    path: str,
    heading_text: str,
    configs: Sequence[ContentTypeConfig],
    *,
    trailing_slash: bool = False,
) -> str:
    """``[Heading](/base/slug#heading)`` using the site URL of *path*.

    A path no content type owns falls back to a root URL built from its
    kebab-cased segments, extension dropped.
    """
    anchor = f"#{heading_anchor(heading_text)}"
    target = resolve_link_target(
        f"{normalize_path(path)}{anchor}", None, configs, trailing_slash=trailing_slash
    )
    if target is not None:
        return f"[{heading_text}]({target.url})"
    stem = _NOTE_EXTENSION.sub("", normalize_path(path))
    slug = "/".join(filter(None, (to_kebab_case(segment) for segment in stem.split("/"))))
    slash = "/" if slug and trailing_slash else ""
    return f"[{heading_text}](/{slug}{slash}{anchor})"
