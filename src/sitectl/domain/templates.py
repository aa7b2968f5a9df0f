"""Template engine — placeholder expansion and declared-property extraction.

A template is a frontmatter block plus an optional body. Only the block
is inspected when extracting properties; the body matters only when a
brand-new document is rendered from the template.

Placeholders are the literal tokens ``{{title}}``, ``{{date}}`` and
``{{slug}}``. The date is formatted by the caller before rendering.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from sitectl.domain.frontmatter import (
    ListValue,
    PropertyValue,
    Scalar,
    is_delimiter,
    scan_block,
)
from sitectl.domain.slugs import to_kebab_case

TITLE_PLACEHOLDER = "{{title}}"
DATE_PLACEHOLDER = "{{date}}"
SLUG_PLACEHOLDER = "{{slug}}"


@dataclass(frozen=True)
class TemplateContext:
    title: str
    date: str = ""
    slug: str = ""

    @classmethod
    def for_title(cls, title: str, date: str = "") -> TemplateContext:
        """Build a context whose slug is the kebab-case form of *title*."""
        return cls(title=title, date=date, slug=to_kebab_case(title))


@dataclass(frozen=True)
class TemplateRenderResult:
    """Properties declared by a template, placeholders already substituted.

    The list/scalar classification of each key depends only on the
    template text, never on the context values.
    """

    declared_keys: tuple[str, ...] = ()
    values: Mapping[str, PropertyValue] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def list_keys(self) -> frozenset[str]:
        return frozenset(k for k, v in self.values.items() if isinstance(v, ListValue))


def expand_placeholders(text: str, context: TemplateContext) -> str:
    return (
        text.replace(TITLE_PLACEHOLDER, context.title)
        .replace(DATE_PLACEHOLDER, context.date)
        .replace(SLUG_PLACEHOLDER, context.slug)
    )


def _skip_leading_blanks(template: str) -> str:
    """*template* from its opening delimiter when only blank lines precede it."""
    lines = template.splitlines(keepends=True)
    start = next((i for i, line in enumerate(lines) if line.strip()), len(lines))
    if start < len(lines) and is_delimiter(lines[start]):
        return "".join(lines[start:])
    return template


def _block_lines(template: str) -> list[str]:
    lines = _skip_leading_blanks(template).splitlines()
    if not lines or not is_delimiter(lines[0]):
        return []
    block: list[str] = []
    for line in lines[1:]:
        if is_delimiter(line):
            break
        block.append(line)
    return block


def render_template(template: str, context: TemplateContext) -> TemplateRenderResult:
    """Extract the properties *template* declares, substituting placeholders.

    Lines outside the recognised ``key: value`` / ``- item`` shapes are
    ignored. A key declared twice keeps its first position and its last
    value. Never raises; an empty or malformed template yields no keys.
    """
    properties, _unparsed = scan_block(_block_lines(template), allow_fallback=False)
    values: dict[str, PropertyValue] = {
        key: Scalar(expand_placeholders(value.value, context)) if isinstance(value, Scalar) else value
        for key, value in properties.items()
    }
    return TemplateRenderResult(declared_keys=tuple(values), values=MappingProxyType(values))


def render_new_document(template: str, context: TemplateContext) -> str:
    """Full text of a new document: placeholders expanded everywhere."""
    return expand_placeholders(_skip_leading_blanks(template), context)


def title_key(template: str) -> str | None:
    """First property key whose template value contains ``{{title}}``.

    ``None`` means the template carries no title placeholder, so title
    updates must be skipped rather than guessed.
    """
    properties, _unparsed = scan_block(_block_lines(template), allow_fallback=False)
    for key, value in properties.items():
        if isinstance(value, Scalar) and TITLE_PLACEHOLDER in value.value:
            return key
    return None
