"""Link rewriter — internal note references to site-relative URLs.

A reference such as ``posts/My Post.md#Intro`` is resolved to the content
type that owns it, the type's folder prefix is stripped, a trailing index
file is elided (with a trailing slash), each remaining segment is
kebab-cased, and the result is composed as::

    {base path}{slug}{/ if trailing}{#anchor}

Images and external URLs are never rewritten. References that resolve to
no content type are left untouched and reported as skipped.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence
from dataclasses import dataclass
from urllib.parse import unquote

from sitectl.domain.paths import normalize_path, strip_pattern_prefix
from sitectl.domain.resolver import resolve_content_type
from sitectl.domain.slugs import to_kebab_case
from sitectl.domain.types import ContentTypeConfig, CreationMode

logger = logging.getLogger(__name__)

_EXTERNAL = re.compile(r"^(?:[a-z][a-z0-9+.-]*:)?//|^mailto:", re.IGNORECASE)
_IMAGE = re.compile(r"\.(?:png|jpe?g|gif|svg|webp|avif|bmp)$", re.IGNORECASE)
_NOTE_EXTENSION = re.compile(r"\.mdx?$", re.IGNORECASE)

_TOKEN_RE = re.compile(
    r"(?P<wiki_embed>!\[\[[^\]]*\]\])"
    r"|\[\[(?P<wiki>[^\]|]+)(?:\|(?P<wiki_display>[^\]]+))?\]\]"
    r"|(?P<image>!\[[^\]]*\]\([^)]*\))"
    r"|\[(?P<md_text>[^\]]+)\]\((?P<md_target>[^)]+)\)"
    r"|\{\{(?P<embed>[^}]+)\}\}"
)


@dataclass(frozen=True)
class LinkTarget:
    """A single resolved internal reference."""

    raw_path: str
    anchor: str
    content_type_id: str
    slug: str
    trailing_slash: bool
    url: str


@dataclass(frozen=True)
class ConversionResult:
    text: str
    converted: int = 0
    skipped: int = 0
    skipped_refs: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return self.converted > 0

    def summary(self) -> str:
        return f"converted {self.converted}, skipped {self.skipped}"


def split_reference(raw: str) -> tuple[str, str]:
    """Split ``path#anchor`` into ``(path, "#anchor")``; anchor may be empty."""
    path, sep, fragment = raw.strip().partition("#")
    return path, f"#{fragment}" if sep else ""


def is_external(ref: str) -> bool:
    return _EXTERNAL.match(ref.strip()) is not None


def is_image(ref: str) -> bool:
    path, _anchor = split_reference(ref)
    return _IMAGE.search(path.strip()) is not None


def normalize_base_path(base: str) -> str:
    """``""`` becomes ``/``; anything else gains leading and trailing slashes.

    Examples:
        >>> normalize_base_path("blog")
        '/blog/'
        >>> normalize_base_path("")
        '/'
    """
    stripped = base.strip().strip("/")
    return f"/{stripped}/" if stripped else "/"


def _owning_type(
    path: str,
    source_path: str | None,
    configs: Sequence[ContentTypeConfig],
) -> tuple[ContentTypeConfig | None, bool]:
    """Return the owning type and whether *path* is a bare reference."""
    bare = "/" not in path
    if bare and source_path:
        source = resolve_content_type(normalize_path(source_path), configs)
        if source.content_type is not None:
            return source.content_type, True
    return resolve_content_type(path, configs).content_type, bare


def resolve_link_target(
    raw_ref: str,
    source_path: str | None,
    configs: Sequence[ContentTypeConfig],
    *,
    trailing_slash: bool = False,
) -> LinkTarget | None:
    """Resolve *raw_ref* to a site URL, or None when it must not be rewritten.

    Bare references (no folder) take the content type of *source_path*
    first and fall back to their own resolution. *trailing_slash* forces a
    trailing ``/`` on every non-empty slug.
    """
    if is_external(raw_ref) or is_image(raw_ref):
        return None

    raw_path, anchor = split_reference(raw_ref)
    decoded = unquote(raw_path.strip().strip("<>"))
    path = _NOTE_EXTENSION.sub("", normalize_path(decoded))
    if not path:
        return None

    config, bare = _owning_type(path, source_path, configs)
    if config is None:
        logger.debug("no content type owns link target %r", raw_ref)
        return None

    remaining = path if bare else strip_pattern_prefix(path, config.folder_pattern)
    segments = [segment for segment in remaining.split("/") if segment]

    elided = False
    if (
        config.creation_mode is CreationMode.FOLDER
        and segments
        and segments[-1] == config.effective_index_name
    ):
        segments.pop()
        elided = True

    slug = "/".join(filter(None, (to_kebab_case(segment) for segment in segments)))
    slash = "/" if slug and (elided or trailing_slash) else ""
    url = f"{normalize_base_path(config.link_base_path)}{slug}{slash}{anchor}"
    return LinkTarget(
        raw_path=decoded,
        anchor=anchor,
        content_type_id=config.id,
        slug=slug,
        trailing_slash=elided or trailing_slash,
        url=url,
    )


def rewrite_reference(
    raw_ref: str,
    source_path: str | None,
    configs: Sequence[ContentTypeConfig],
    *,
    trailing_slash: bool = False,
) -> str:
    """Rewritten URL for *raw_ref*, or *raw_ref* unchanged when skipped."""
    target = resolve_link_target(raw_ref, source_path, configs, trailing_slash=trailing_slash)
    return target.url if target else raw_ref


def convert_links(
    text: str,
    source_path: str | None,
    configs: Sequence[ContentTypeConfig],
    *,
    trailing_slash: bool = False,
) -> ConversionResult:
    """Rewrite every internal reference in *text* in a single pass.

    - ``[[target|display]]`` becomes ``[display](url)``;
    - ``[text](note.md)`` keeps its text and gets the URL;
    - ``{{name}}`` becomes ``[Embedded: name](url)``.

    Markdown links to anything other than ``.md``/``.mdx`` files are left
    alone and not counted. Images, ``![[...]]`` embeds, external links and
    unresolvable references are left alone and counted as skipped.
    """
    converted = 0
    skipped: list[str] = []

    def _rewrite(ref: str) -> str | None:
        target = resolve_link_target(ref, source_path, configs, trailing_slash=trailing_slash)
        if target is None:
            skipped.append(ref)
            return None
        return target.url

    def _replace(match: re.Match[str]) -> str:
        nonlocal converted
        original = match.group(0)

        if match.group("wiki_embed") or match.group("image"):
            skipped.append(original)
            return original

        wiki = match.group("wiki")
        if wiki is not None:
            url = _rewrite(wiki)
            if url is None:
                return original
            display = match.group("wiki_display") or _NOTE_EXTENSION.sub("", wiki.strip())
            converted += 1
            return f"[{display}]({url})"

        md_target = match.group("md_target")
        if md_target is not None:
            target = md_target.strip()
            if is_external(target) or is_image(target):
                skipped.append(target)
                return original
            path, _anchor = split_reference(target)
            if not _NOTE_EXTENSION.search(path.strip("<> ")):
                return original
            url = _rewrite(target)
            if url is None:
                return original
            converted += 1
            return f"[{match.group('md_text')}]({url})"

        embed = match.group("embed").strip()
        url = _rewrite(embed)
        if url is None:
            return original
        converted += 1
        return f"[Embedded: {embed}]({url})"

    new_text = _TOKEN_RE.sub(_replace, text)
    return ConversionResult(
        text=new_text,
        converted=converted,
        skipped=len(skipped),
        skipped_refs=tuple(skipped),
    )
