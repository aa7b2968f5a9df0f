"""ResolveService — which content type owns a path, and what is configured."""

from __future__ import annotations

from typing import Any

from sitectl.domain.paths import pattern_depth
from sitectl.domain.resolver import overlapping_patterns
from sitectl.domain.types import ContentTypeConfig
from sitectl.services._helpers import site_path
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced


def _describe(config: ContentTypeConfig) -> dict[str, Any]:
    return {
        "id": config.id,
        "name": config.display_name,
        "folder_pattern": config.folder_pattern,
        "depth": pattern_depth(config.folder_pattern),
        "enabled": config.enabled,
        "creation_mode": config.creation_mode.value,
        "index_file_name": config.effective_index_name,
        "ignore_subfolders": config.ignore_subfolders,
        "link_base_path": config.link_base_path,
        "use_alt_extension": config.use_alt_extension,
        "underscore_prefix": config.underscore_prefix,
    }


class ResolveService(BaseService):
    """Read-only queries over the configured content types."""

    @traced
    def resolve(self, path: str) -> ServiceResult:
        """Resolve *path* to its owning content type.

        An unmatched path is a successful result carrying the
        ``no content type matched`` advisory.
        """
        op = "resolve"
        warnings: list[str] = []
        try:
            rel_path = site_path(self._vault, path)
        except ValueError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": path})

        resolution = self._resolve(rel_path, warnings)
        if not resolution.matched:
            warnings.append(NO_MATCH_WARNING)

        content_type = resolution.content_type
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": rel_path,
                "content_type": content_type.id if content_type else None,
                "name": content_type.display_name if content_type else None,
                "folder_pattern": content_type.folder_pattern if content_type else None,
                "candidates": [ct.id for ct in resolution.candidates],
                "conflicts": [ct.id for ct in resolution.conflicts],
            },
            warnings=warnings,
        )

    @traced
    def list_types(self) -> ServiceResult:
        """Configured content types, in declaration order."""
        warnings = [
            "content types "
            + ", ".join(ct.display_name for ct in group)
            + f" share folder pattern {group[0].folder_pattern!r}"
            for group in overlapping_patterns(self.content_types)
        ]
        return ServiceResult(
            ok=True,
            op="list_types",
            data={
                "count": len(self.content_types),
                "types": [_describe(ct) for ct in self.content_types],
            },
            warnings=warnings,
        )
