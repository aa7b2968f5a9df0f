"""Content-type resolution — which configured type owns a path.

Pure functions over an explicit list of :class:`ContentTypeConfig`.
Absence of a match is an expected outcome (``None``), never an error.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from sitectl.domain.paths import (
    directory_depth,
    matches_folder_pattern,
    normalize_pattern,
    pattern_depth,
    sort_by_specificity,
    split_parent,
)
from sitectl.domain.types import ContentTypeConfig, CreationMode


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving one path.

    ``candidates`` holds every enabled type that matched, most specific
    first. ``conflicts`` holds the other candidates sharing the winner's
    specificity; a non-empty tuple is a configuration ambiguity.
    """

    path: str
    content_type: ContentTypeConfig | None = None
    candidates: tuple[ContentTypeConfig, ...] = field(default_factory=tuple)

    @property
    def id(self) -> str | None:
        return self.content_type.id if self.content_type else None

    @property
    def matched(self) -> bool:
        return self.content_type is not None

    @property
    def conflicts(self) -> tuple[ContentTypeConfig, ...]:
        if self.content_type is None:
            return ()
        rank = pattern_depth(self.content_type.folder_pattern)
        return tuple(
            ct
            for ct in self.candidates[1:]
            if pattern_depth(ct.folder_pattern) == rank
        )


def _depth_allowed(path: str, config: ContentTypeConfig) -> bool:
    if not config.ignore_subfolders:
        return True
    expected = pattern_depth(config.folder_pattern)
    depth = directory_depth(path)
    if config.creation_mode is CreationMode.FOLDER:
        # <type-folder>/<entry-folder>/<index file>
        return depth in (expected, expected + 1)
    return depth == expected


def config_matches(path: str, config: ContentTypeConfig) -> bool:
    """Return True when an enabled *config* claims the file at *path*.

    The pattern is tested against the file's folder, so a wildcard segment
    never consumes the file name itself. The root pattern claims root-level
    files only.
    """
    if not config.enabled:
        return False
    folder, _name = split_parent(path)
    if not normalize_pattern(config.folder_pattern):
        if folder:
            return False
    elif not matches_folder_pattern(folder, config.folder_pattern):
        return False
    return _depth_allowed(path, config)


def resolve_content_type(path: str, configs: Sequence[ContentTypeConfig]) -> Resolution:
    """Resolve *path* against *configs*, most specific pattern first."""
    candidates = tuple(ct for ct in sort_by_specificity(configs) if config_matches(path, ct))
    winner = candidates[0] if candidates else None
    return Resolution(path=path, content_type=winner, candidates=candidates)


def resolve(path: str, configs: Sequence[ContentTypeConfig]) -> str | None:
    """Return the id of the content type owning *path*, or None."""
    return resolve_content_type(path, configs).id


def conflict_message(resolution: Resolution) -> str | None:
    """Advisory text for an equal-specificity conflict, or None."""
    if resolution.content_type is None or not resolution.conflicts:
        return None
    names = [resolution.content_type.display_name]
    names.extend(ct.display_name for ct in resolution.conflicts)
    return (
        "multiple content types matched at equal specificity: "
        f"{', '.join(names)} (using {resolution.content_type.display_name})"
    )


def find_content_type(
    type_id: str,
    configs: Sequence[ContentTypeConfig],
) -> ContentTypeConfig | None:
    """Look up a content type by id."""
    for config in configs:
        if config.id == type_id:
            return config
    return None


def overlapping_patterns(configs: Sequence[ContentTypeConfig]) -> list[list[ContentTypeConfig]]:
    """Group enabled types that declare the same folder pattern.

    Returns only groups with more than one member, in declaration order.
    """
    groups: dict[str, list[ContentTypeConfig]] = {}
    for config in configs:
        if not config.enabled:
            continue
        groups.setdefault(normalize_pattern(config.folder_pattern).lower(), []).append(config)
    return [group for group in groups.values() if len(group) > 1]
