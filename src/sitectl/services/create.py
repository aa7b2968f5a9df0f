"""CreateService — new content entries from a title and a content type.

Pipeline: VALIDATE → PLACE → RENDER → WRITE → RESPOND

A new entry either starts from nothing or adopts an existing source file
(typically an empty note the editor just created). An adopted source is
moved to the generated location; if it already has content, the type's
template is merged into its frontmatter instead of replacing it.
"""

from __future__ import annotations

from pathlib import PurePosixPath

import structlog

from sitectl.domain.frontmatter import compose
from sitectl.domain.merge import merge_properties
from sitectl.domain.paths import join_path, split_parent
from sitectl.domain.resolver import find_content_type
from sitectl.domain.slugs import generate_filename
from sitectl.domain.templates import TemplateContext, render_new_document, render_template
from sitectl.domain.types import ContentTypeConfig, CreationMode
from sitectl.infrastructure.vault import PathConflictError
from sitectl.services._helpers import is_placeholder_note, note_extension, site_path, today_formatted
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced

log = structlog.get_logger(__name__)


class CreateService(BaseService):
    """Creates content entries laid out per their content type."""

    @traced
    def create(
        self,
        title: str,
        *,
        type_id: str | None = None,
        folder: str | None = None,
        source: str | None = None,
    ) -> ServiceResult:
        """Create an entry titled *title*.

        Args:
            title: Display title; the file name is its kebab-case form.
            type_id: Content type to use. Defaults to the type owning *source*.
            folder: Target folder, overriding the default placement.
            source: Existing note to adopt (moved and templated in place).
        """
        op = "create"
        warnings: list[str] = []

        # ── VALIDATE ─────────────────────────────────────────
        title = title.strip()
        if not title:
            return ServiceResult.failure(op, "TITLE_REQUIRED", "Title is required to create content.")

        source_rel: str | None = None
        if source is not None:
            try:
                source_rel = site_path(self._vault, source)
            except ValueError as exc:
                return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": source})
            if not self._vault.is_file(source_rel):
                return ServiceResult.failure(
                    op,
                    "NOT_FOUND",
                    f"No file found at {source_rel}",
                    detail={"path": source_rel},
                )

        picked = self._pick_type(op, type_id, folder, source_rel, warnings)
        if isinstance(picked, ServiceResult):
            return picked
        content_type = picked

        # ── PLACE ────────────────────────────────────────────
        target_folder = self._target_folder(content_type, folder, source_rel)
        if target_folder is None:
            return ServiceResult.failure(
                op,
                "NO_TARGET_FOLDER",
                f"Content type {content_type.id!r} has wildcard pattern "
                f"{content_type.folder_pattern!r}; pass --folder to choose a location.",
                detail={"content_type": content_type.id},
            )

        stem = generate_filename(title, content_type.underscore_prefix)
        extension = note_extension(content_type, self._vault.settings.site.alt_extension)
        if content_type.creation_mode is CreationMode.FOLDER:
            target = join_path(target_folder, stem, f"{content_type.effective_index_name}{extension}")
        else:
            target = join_path(target_folder, f"{stem}{extension}")

        if target != source_rel and self._vault.exists(target):
            return ServiceResult.failure(
                op,
                "PATH_EXISTS",
                f"File already exists at {target}",
                detail={"path": target},
            )

        # ── RENDER ───────────────────────────────────────────
        context = TemplateContext.for_title(
            title, today_formatted(self._vault.settings.site.date_format)
        )
        merged = False
        content = render_new_document(content_type.template, context)
        if source_rel is not None:
            existing = self._vault.read(source_rel)
            if not is_placeholder_note(existing):
                parsed = self._decode(existing, warnings)
                if not parsed.malformed:
                    result = merge_properties(
                        parsed.properties, render_template(content_type.template, context)
                    )
                    body = parsed.body if parsed.has_block else existing
                    content = compose(result.properties, body)
                    merged = True
                else:
                    content = existing

        # ── WRITE ────────────────────────────────────────────
        try:
            with self._vault.transaction() as txn:
                if source_rel is not None and source_rel != target:
                    txn.move(source_rel, target)
                if source_rel is None:
                    txn.create_file(target, content)
                else:
                    txn.write_file(target, content)
        except PathConflictError as exc:
            return ServiceResult.failure(
                op, "PATH_EXISTS", str(exc), detail={"path": exc.rel_path}
            )
        except OSError as exc:
            log.warning("create_failed", path=target, error=str(exc))
            return ServiceResult.failure(
                op, "WRITE_FAILED", f"Failed to write {target}: {exc}", detail={"path": target}
            )

        # ── RESPOND ──────────────────────────────────────────
        log.info("created", path=target, content_type=content_type.id)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": target,
                "title": title,
                "slug": context.slug,
                "content_type": content_type.id,
                "creation_mode": content_type.creation_mode.value,
                "source": source_rel,
                "merged": merged,
            },
            warnings=warnings,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _pick_type(
        self,
        op: str,
        type_id: str | None,
        folder: str | None,
        source_rel: str | None,
        warnings: list[str],
    ) -> ContentTypeConfig | ServiceResult:
        if type_id:
            found = find_content_type(type_id, self.content_types)
            if found is None:
                known = ", ".join(ct.id for ct in self.content_types) or "none configured"
                return ServiceResult.failure(
                    op,
                    "UNKNOWN_TYPE",
                    f"Unknown content type: {type_id!r} (known: {known})",
                    detail={"type": type_id},
                )
            if not found.enabled:
                warnings.append(f"content type {found.id!r} is disabled")
            return found

        probe = source_rel
        if probe is None and folder:
            probe = join_path(folder, "untitled.md")
        if probe is not None:
            resolution = self._resolve(probe, warnings)
            if resolution.content_type is not None:
                return resolution.content_type

        return ServiceResult.failure(
            op,
            "NO_CONTENT_TYPE",
            "No content type applies; pass --type or place the note in a content folder.",
            warnings=[NO_MATCH_WARNING],
        )

    @staticmethod
    def _target_folder(
        content_type: ContentTypeConfig,
        folder: str | None,
        source_rel: str | None,
    ) -> str | None:
        if folder is not None:
            return folder.strip().strip("/")
        if source_rel is not None:
            source_folder, _name = split_parent(source_rel)
            if source_folder:
                # An adopted index file lives in its entry folder; place beside that folder.
                if (
                    content_type.creation_mode is CreationMode.FOLDER
                    and PurePosixPath(source_rel).stem == content_type.effective_index_name
                ):
                    return split_parent(source_folder)[0]
                return source_folder
        if "*" in content_type.folder_pattern:
            return None
        return content_type.folder_pattern

