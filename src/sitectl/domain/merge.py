"""Property merger — reconcile existing frontmatter with a rendered template.

Rules, per key the template declares:

- absent from the document: added after all existing keys, in template order;
- present, template value is a list: union, existing items first, no duplicates;
- present, template value is a scalar: the existing value is kept.

Keys the template does not mention are carried through in place. An
existing scalar meeting a template list becomes the first item of the
resulting list. Merging is pure and idempotent.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from sitectl.domain.frontmatter import ListValue, Properties, PropertyValue, Scalar
from sitectl.domain.templates import TemplateRenderResult


@dataclass(frozen=True)
class MergeResult:
    """Merged properties plus what changed relative to the existing ones.

    Attributes:
        properties: Merged mapping, existing keys first in their original order.
        list_keys: Every output key whose value serializes as a list.
        added: Template keys that were missing from the document.
        extended: List keys that gained items from the template.
        changed: True when ``properties`` differs from the input.
    """

    properties: Mapping[str, PropertyValue] = field(default_factory=lambda: MappingProxyType({}))
    list_keys: frozenset[str] = frozenset()
    added: tuple[str, ...] = ()
    extended: tuple[str, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.added or self.extended)


def _union(existing: tuple[str, ...], extra: tuple[str, ...]) -> tuple[str, ...]:
    merged = list(existing)
    for item in extra:
        if item not in merged:
            merged.append(item)
    return tuple(merged)


def merge_properties(existing: Properties, rendered: TemplateRenderResult) -> MergeResult:
    merged: dict[str, PropertyValue] = dict(existing)
    added: list[str] = []
    extended: list[str] = []

    for key in rendered.declared_keys:
        template_value = rendered.values[key]
        current = merged.get(key)

        if current is None:
            merged[key] = template_value
            added.append(key)
            continue
        if not isinstance(template_value, ListValue):
            continue

        current_items = current.items if isinstance(current, ListValue) else (current.value,)
        if isinstance(current, Scalar) and not current.value:
            current_items = ()
        union = _union(current_items, template_value.items)
        if isinstance(current, ListValue) and union == current.items:
            continue
        merged[key] = ListValue(union)
        extended.append(key)

    list_keys = frozenset(k for k, v in merged.items() if isinstance(v, ListValue))
    return MergeResult(
        properties=MappingProxyType(merged),
        list_keys=list_keys,
        added=tuple(added),
        extended=tuple(extended),
    )
