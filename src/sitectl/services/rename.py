"""RenameService — retitle an entry, renaming its file or folder to match.

Index files of folder-mode entries rename their folder; other files are
renamed in place. A leading draft underscore on the renamed name is kept.
The title property (the template key carrying ``{{title}}``) is rewritten
in place with YAML-safe quoting; other properties and the body are
untouched.
"""

from __future__ import annotations

from pathlib import PurePosixPath

import structlog

from sitectl.domain.frontmatter import Scalar, compose
from sitectl.domain.paths import join_path, split_parent
from sitectl.domain.slugs import DRAFT_PREFIX, quote_scalar, to_kebab_case
from sitectl.domain.templates import title_key
from sitectl.infrastructure.vault import PathConflictError
from sitectl.services._helpers import is_index_file, site_path
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced

log = structlog.get_logger(__name__)

NO_TITLE_PLACEHOLDER_WARNING = "template has no title placeholder — rename skipped"


def _renamed(name: str, slug: str, suffix: str = "") -> str:
    prefix = DRAFT_PREFIX if name.startswith(DRAFT_PREFIX) else ""
    return f"{prefix}{slug}{suffix}"


class RenameService(BaseService):
    """Retitles entries."""

    @traced
    def rename(self, path: str, title: str) -> ServiceResult:
        op = "rename"
        warnings: list[str] = []

        title = title.strip()
        if not title:
            return ServiceResult.failure(op, "TITLE_REQUIRED", "Title is required to rename content.")

        try:
            rel_path = site_path(self._vault, path)
        except ValueError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": path})
        if not self._vault.is_file(rel_path):
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No file found at {rel_path}", detail={"path": rel_path}
            )

        content_type = self._resolve(rel_path, warnings).content_type
        if content_type is None:
            return ServiceResult.failure(
                op,
                "NO_CONTENT_TYPE",
                f"{rel_path} is not a managed content type",
                detail={"path": rel_path},
                warnings=[*warnings, NO_MATCH_WARNING],
            )

        key = title_key(content_type.template)
        if key is None:
            warnings.append(NO_TITLE_PLACEHOLDER_WARNING)
            return ServiceResult(
                ok=True,
                op=op,
                data={"path": rel_path, "new_path": rel_path, "renamed": False},
                warnings=warnings,
            )

        text = self._vault.read(rel_path)
        parsed = self._decode(text, warnings)
        if parsed.malformed or key not in parsed.properties:
            return ServiceResult.failure(
                op,
                "MISSING_TITLE_PROPERTY",
                f"{rel_path} has no {key!r} property to update",
                detail={"path": rel_path, "title_key": key},
                warnings=warnings,
            )

        # ── Compute new location ─────────────────────────────
        slug = to_kebab_case(title) or "untitled"
        folder, name = split_parent(rel_path)
        move_from = move_to = rel_path
        if is_index_file(rel_path, content_type) and folder:
            parent, folder_name = split_parent(folder)
            move_from = folder
            move_to = join_path(parent, _renamed(folder_name, slug))
            new_path = join_path(move_to, name)
        else:
            suffix = PurePosixPath(name).suffix
            new_path = move_to = join_path(folder, _renamed(PurePosixPath(name).stem, slug, suffix))

        if move_to != move_from and self._vault.exists(move_to):
            return ServiceResult.failure(
                op,
                "PATH_EXISTS",
                f"Path already exists: {move_to}",
                detail={"path": move_to},
            )

        # ── Rewrite title and apply ──────────────────────────
        properties = dict(parsed.properties)
        properties[key] = Scalar(quote_scalar(title))
        new_text = compose(properties, parsed.body)

        try:
            with self._vault.transaction() as txn:
                if move_to != move_from:
                    txn.move(move_from, move_to)
                txn.write_file(new_path, new_text)
        except PathConflictError as exc:
            return ServiceResult.failure(op, "PATH_EXISTS", str(exc), detail={"path": exc.rel_path})
        except OSError as exc:
            log.warning("rename_failed", path=rel_path, error=str(exc))
            return ServiceResult.failure(
                op, "WRITE_FAILED", f"Failed to rename {rel_path}: {exc}", detail={"path": rel_path}
            )

        log.info("renamed", old=rel_path, new=new_path)
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": rel_path,
                "new_path": new_path,
                "title": title,
                "title_key": key,
                "content_type": content_type.id,
                "renamed": True,
            },
            warnings=warnings,
        )
