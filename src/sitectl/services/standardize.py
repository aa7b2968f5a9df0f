"""StandardizeService — bring a note's frontmatter in line with its type template.

Pipeline: READ → RESOLVE → DECODE → RENDER → MERGE → ENCODE → WRITE

Existing scalar values always win, list values gain missing template
items, template-only keys are appended. Running it twice changes nothing
the second time.
"""

from __future__ import annotations

from pathlib import PurePosixPath

import structlog

from sitectl.domain.frontmatter import compose, to_plain
from sitectl.domain.merge import merge_properties
from sitectl.domain.paths import split_parent
from sitectl.domain.slugs import title_from_filename
from sitectl.domain.templates import TemplateContext, render_template
from sitectl.domain.types import ContentTypeConfig
from sitectl.services._helpers import is_index_file, site_path, today_formatted
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced

log = structlog.get_logger(__name__)


def derive_title(rel_path: str, content_type: ContentTypeConfig) -> str:
    """Title for template rendering: the file stem, or the entry folder for index files."""
    if is_index_file(rel_path, content_type):
        folder, _name = split_parent(rel_path)
        _parent, folder_name = split_parent(folder)
        if folder_name:
            return title_from_filename(folder_name)
    return title_from_filename(PurePosixPath(rel_path).stem)


class StandardizeService(BaseService):
    """Merges type templates into existing notes."""

    @traced
    def standardize(self, path: str, *, dry_run: bool = False) -> ServiceResult:
        op = "standardize"
        warnings: list[str] = []

        # ── READ ─────────────────────────────────────────────
        try:
            rel_path = site_path(self._vault, path)
        except ValueError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": path})
        if not self._vault.is_file(rel_path):
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No file found at {rel_path}", detail={"path": rel_path}
            )
        text = self._vault.read(rel_path)

        # ── RESOLVE ──────────────────────────────────────────
        resolution = self._resolve(rel_path, warnings)
        content_type = resolution.content_type
        if content_type is None:
            return ServiceResult.failure(
                op,
                "NO_CONTENT_TYPE",
                f"{rel_path} is not a managed content type",
                detail={"path": rel_path},
                warnings=[*warnings, NO_MATCH_WARNING],
            )

        # ── DECODE ───────────────────────────────────────────
        parsed = self._decode(text, warnings)
        if parsed.malformed:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "path": rel_path,
                    "content_type": content_type.id,
                    "changed": False,
                    "written": False,
                    "dry_run": dry_run,
                },
                warnings=warnings,
            )

        # ── RENDER / MERGE ───────────────────────────────────
        context = TemplateContext.for_title(
            derive_title(rel_path, content_type),
            today_formatted(self._vault.settings.site.date_format),
        )
        rendered = render_template(content_type.template, context)
        merged = merge_properties(parsed.properties, rendered)

        # ── ENCODE ───────────────────────────────────────────
        body = parsed.body if parsed.has_block else text
        new_text = compose(merged.properties, body)
        changed = new_text != text

        # ── WRITE ────────────────────────────────────────────
        written = False
        if changed and not dry_run:
            try:
                with self._vault.transaction() as txn:
                    txn.write_file(rel_path, new_text)
            except OSError as exc:
                return ServiceResult.failure(
                    op, "WRITE_FAILED", f"Failed to write {rel_path}: {exc}", detail={"path": rel_path}
                )
            written = True
            log.info("standardized", path=rel_path, added=merged.added, extended=merged.extended)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": rel_path,
                "content_type": content_type.id,
                "added": list(merged.added),
                "extended": list(merged.extended),
                "changed": changed,
                "written": written,
                "dry_run": dry_run,
                "properties": to_plain(merged.properties),
            },
            warnings=warnings,
        )
