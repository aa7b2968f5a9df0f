"""Frontmatter codec — a line-oriented reader/writer for the leading block.

Only the subset of YAML that static-site frontmatter actually uses is
supported: single-line ``key: value`` scalars, block lists (``key:``
followed by ``- item`` lines) and inline bracket lists (``[a, "b"]``).
No anchors, nested maps, multi-line scalars or multiple documents.

Decoding is an explicit two-state scanner (outside / inside the block)
driven by :func:`classify_line`. It never raises: unclosed blocks and
unexpected lines degrade to a best-effort result.

Scalar values are kept exactly as written (quotes included) so that
``encode(decode(text).properties)`` reproduces the block. List items are
unquoted on read, whether they come from a bracket list or a ``- item``
line, and quoted on write when they would not read back unchanged.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

logger = logging.getLogger(__name__)

DELIMITER = "---"

_KEY_LINE = re.compile(r"^([A-Za-z_][A-Za-z0-9_-]*):\s*(.*)$")
_FALLBACK_LINE = re.compile(r"^([^:]+):\s*(.*)$")


# ---------------------------------------------------------------------------
# Value model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Scalar:
    """A single-line scalar value, stored verbatim."""

    value: str


@dataclass(frozen=True)
class ListValue:
    """A list of single-line string items."""

    items: tuple[str, ...] = ()

    @classmethod
    def of(cls, items: Iterable[str]) -> ListValue:
        return cls(tuple(items))


PropertyValue = Scalar | ListValue
Properties = Mapping[str, PropertyValue]


@dataclass(frozen=True)
class ParsedFrontmatter:
    """Result of decoding a document's leading block.

    Attributes:
        properties: Ordered, read-only mapping of key to value.
        raw_block: Text between the delimiters (or everything after the
            opening delimiter when the block is unclosed).
        block_end: Offset just past the closing delimiter line.
        body: Document text after the block, verbatim.
        has_block: Whether the document opened with a delimiter line.
        malformed: True when no closing delimiter was found.
        unparsed_lines: Block lines that could not be interpreted.
    """

    properties: Properties = field(default_factory=lambda: MappingProxyType({}))
    raw_block: str = ""
    block_end: int = 0
    body: str = ""
    has_block: bool = False
    malformed: bool = False
    unparsed_lines: tuple[str, ...] = ()


# ---------------------------------------------------------------------------
# Line classification
# ---------------------------------------------------------------------------


class LineKind(Enum):
    BLANK = "blank"
    COMMENT = "comment"
    PROPERTY = "property"
    ITEM = "item"
    FALLBACK = "fallback"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    key: str = ""
    value: str = ""


def classify_line(line: str) -> ClassifiedLine:
    """Classify a single block line.

    - ``PROPERTY``: identifier-like key followed by a colon.
    - ``ITEM``: ``- item`` (or a bare ``-``); value is the item text.
    - ``FALLBACK``: any other line with a colon; key is the text before it.
    - ``IGNORED``: other ``-`` prefixed lines and colon-less text.
    """
    stripped = line.strip()
    if not stripped:
        return ClassifiedLine(LineKind.BLANK)
    if stripped.startswith("#"):
        return ClassifiedLine(LineKind.COMMENT)
    if stripped == "-" or stripped.startswith("- "):
        return ClassifiedLine(LineKind.ITEM, value=stripped[1:].strip())
    if stripped.startswith("-"):
        return ClassifiedLine(LineKind.IGNORED, value=stripped)

    match = _KEY_LINE.match(stripped)
    if match:
        return ClassifiedLine(LineKind.PROPERTY, key=match.group(1), value=match.group(2).strip())

    match = _FALLBACK_LINE.match(stripped)
    if match and match.group(1).strip():
        return ClassifiedLine(
            LineKind.FALLBACK, key=match.group(1).strip(), value=match.group(2).strip()
        )
    return ClassifiedLine(LineKind.IGNORED, value=stripped)


def is_delimiter(line: str) -> bool:
    return line.strip() == DELIMITER


# ---------------------------------------------------------------------------
# Inline bracket lists
# ---------------------------------------------------------------------------


def _unquote(item: str) -> str:
    if len(item) >= 2 and item[0] == item[-1] and item[0] in "\"'":
        quote = item[0]
        inner = item[1:-1]
        if quote == "'":
            return inner.replace("''", "'")
        return re.sub(r"\\(.)", r"\1", inner)
    return item


def parse_inline_list(value: str) -> list[str]:
    """Split a bracket list such as ``[a, "b, c", 'it''s']`` into items.

    Commas inside single or double quotes do not split. Inside double
    quotes a backslash escapes the next character; inside single quotes a
    doubled quote stands for one. Surrounding matching quotes are removed
    from each item and empty items are dropped.
    """
    text = value.strip()
    if text.startswith("["):
        text = text[1:]
    if text.endswith("]"):
        text = text[:-1]

    items: list[str] = []
    current: list[str] = []
    quote: str | None = None
    i = 0
    while i < len(text):
        char = text[i]
        if quote is None:
            if char in "\"'":
                quote = char
            elif char == ",":
                items.append("".join(current))
                current = []
                i += 1
                continue
        elif quote == '"' and char == "\\" and i + 1 < len(text):
            current.append(char)
            current.append(text[i + 1])
            i += 2
            continue
        elif char == quote:
            if quote == "'" and i + 1 < len(text) and text[i + 1] == "'":
                current.append("''")
                i += 2
                continue
            quote = None
        current.append(char)
        i += 1
    items.append("".join(current))

    return [unquoted for unquoted in (_unquote(raw.strip()) for raw in items) if unquoted]


def _is_bracket_list(value: str) -> bool:
    return value.startswith("[") and value.endswith("]")


def classify_value(value: str) -> PropertyValue:
    """Turn the text after ``key:`` into a Scalar or a (possibly empty) list."""
    if not value or value == "[]":
        return ListValue()
    if _is_bracket_list(value):
        return ListValue.of(parse_inline_list(value))
    return Scalar(value)


# ---------------------------------------------------------------------------
# Block scanning (shared with the template engine)
# ---------------------------------------------------------------------------


@dataclass
class _BlockScanner:
    """Accumulates properties while walking block lines."""

    list_keys: frozenset[str] = frozenset()
    allow_fallback: bool = True
    properties: dict[str, PropertyValue] = field(default_factory=dict)
    unparsed: list[str] = field(default_factory=list)
    current_key: str | None = None

    def feed(self, line: str) -> None:
        classified = classify_line(line)
        kind = classified.kind

        if kind is LineKind.PROPERTY:
            value = classify_value(classified.value)
            if classified.key in self.list_keys and isinstance(value, Scalar):
                value = ListValue((value.value,))
            self.properties[classified.key] = value
            self.current_key = classified.key
        elif kind is LineKind.ITEM:
            current = self.properties.get(self.current_key) if self.current_key else None
            if isinstance(current, ListValue):
                item = _unquote(classified.value)
                if item:
                    self.properties[self.current_key] = ListValue((*current.items, item))
            else:
                logger.debug("list item outside a list property: %r", line)
                self.unparsed.append(line)
        elif kind is LineKind.FALLBACK and self.allow_fallback:
            if classified.key not in self.properties:
                self.properties[classified.key] = Scalar(classified.value)
            self.current_key = classified.key
        elif kind in (LineKind.FALLBACK, LineKind.IGNORED):
            self.unparsed.append(line)


def scan_block(
    lines: Iterable[str],
    *,
    list_keys: frozenset[str] = frozenset(),
    allow_fallback: bool = True,
) -> tuple[dict[str, PropertyValue], list[str]]:
    """Parse the lines of a frontmatter block (delimiters excluded)."""
    scanner = _BlockScanner(list_keys=list_keys, allow_fallback=allow_fallback)
    for line in lines:
        scanner.feed(line)
    return scanner.properties, scanner.unparsed


# ---------------------------------------------------------------------------
# Public codec
# ---------------------------------------------------------------------------


def decode(text: str, *, list_keys: Iterable[str] = ()) -> ParsedFrontmatter:
    """Decode the leading frontmatter block of *text*.

    Documents that do not open with a delimiter line yield no properties
    and the full text as body. An unclosed block consumes the rest of the
    document and is flagged ``malformed``.
    """
    lines = text.splitlines(keepends=True)
    if not lines or not is_delimiter(lines[0]):
        return ParsedFrontmatter(body=text)

    offset = len(lines[0])
    block_lines: list[str] = []
    block_end: int | None = None
    for line in lines[1:]:
        offset += len(line)
        if is_delimiter(line):
            block_end = offset
            break
        block_lines.append(line.rstrip("\r\n"))

    malformed = block_end is None
    if malformed:
        logger.debug("frontmatter block has no closing delimiter")
        block_end = len(text)

    properties, unparsed = scan_block(block_lines, list_keys=frozenset(list_keys))
    return ParsedFrontmatter(
        properties=MappingProxyType(properties),
        raw_block="\n".join(block_lines),
        block_end=block_end,
        body=text[block_end:],
        has_block=True,
        malformed=malformed,
        unparsed_lines=tuple(unparsed),
    )


def _encode_item(item: str) -> str:
    """Quote a list item that would not read back unchanged from a ``- item`` line.

    Same quoting as :func:`sitectl.domain.slugs.quote_scalar`: single quotes
    when the item holds a quote or backslash, double quotes otherwise.
    """
    if item == item.strip() and not item.startswith(("'", '"')):
        return item
    if any(ch in item for ch in ("'", '"', "\\")):
        return "'" + item.replace("'", "''") + "'"
    return f'"{item}"'


def encode(properties: Properties) -> str:
    """Serialize *properties* into a delimited block ending with a newline.

    Lists are written as ``key:`` followed by ``  - item`` lines (an empty
    list is a bare ``key:``); items with edge whitespace or a leading quote
    are quoted. Scalars are written verbatim; callers quote
    values that need it (see :func:`sitectl.domain.slugs.quote_scalar`).
    """
    lines = [DELIMITER]
    for key, value in properties.items():
        if isinstance(value, ListValue):
            lines.append(f"{key}:")
            lines.extend(f"  - {_encode_item(item)}" for item in value.items)
        else:
            lines.append(f"{key}: {value.value}".rstrip())
    lines.append(DELIMITER)
    return "\n".join(lines) + "\n"


def compose(properties: Properties, body: str) -> str:
    """Encode *properties* and reattach *body* unchanged."""
    return encode(properties) + body


def to_plain(properties: Properties) -> dict[str, str | list[str]]:
    """JSON-friendly view of *properties*."""
    return {
        key: list(value.items) if isinstance(value, ListValue) else value.value
        for key, value in properties.items()
    }
