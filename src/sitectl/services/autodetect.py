"""AutoCreateService — recognise freshly created notes and turn them into entries.

A path is a candidate when it is a note file, belongs to a content type,
and is still a placeholder (empty, or only a lone ``title:`` line). The
``watch`` command asks :meth:`inspect` for every creation event, prompts
for a title, then calls :meth:`process`.
"""

from __future__ import annotations

import time

from sitectl.infrastructure.filesystem import is_note_file
from sitectl.services._helpers import is_placeholder_note, site_path
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.create import CreateService
from sitectl.services.result import ServiceResult
from sitectl.services.standardize import derive_title
from sitectl.services.telemetry import traced


class AutoCreateService(BaseService):
    """Decides whether a new file should be adopted, and adopts it."""

    @traced
    def inspect(self, path: str, *, require_recent: bool = False) -> ServiceResult:
        """Report whether *path* is an adoptable new note.

        Args:
            path: File to inspect.
            require_recent: Also require the file's mtime to fall inside
                ``[watch] new_file_window_ms`` (filters out pre-existing
                files surfacing through renames or sync tools).
        """
        op = "inspect_new_file"
        warnings: list[str] = []
        try:
            rel_path = site_path(self._vault, path)
        except ValueError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": path})

        def verdict(candidate: bool, reason: str, type_id: str | None = None) -> ServiceResult:
            return ServiceResult(
                ok=True,
                op=op,
                data={
                    "path": rel_path,
                    "candidate": candidate,
                    "reason": reason,
                    "content_type": type_id,
                },
                warnings=warnings,
            )

        if not is_note_file(rel_path, self._vault.settings.site.alt_extension):
            return verdict(False, "not a note file")
        if not self._vault.is_file(rel_path):
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No file found at {rel_path}", detail={"path": rel_path}
            )

        content_type = self._resolve(rel_path, warnings).content_type
        if content_type is None:
            return verdict(False, NO_MATCH_WARNING)
        if not content_type.enabled:
            return verdict(False, "content type disabled", content_type.id)

        if require_recent:
            window = self._vault.settings.watch.new_file_window_ms / 1000
            if time.time() - self._vault.mtime(rel_path) >= window:
                return verdict(False, "file is not new", content_type.id)

        if not is_placeholder_note(self._vault.read(rel_path)):
            return verdict(False, "file already has content", content_type.id)
        return verdict(True, "new note", content_type.id)

    def suggested_title(self, path: str) -> str:
        """Title derived from the file name, for non-interactive adoption."""
        rel_path = site_path(self._vault, path)
        content_type = self._resolve(rel_path, []).content_type
        if content_type is None:
            return ""
        return derive_title(rel_path, content_type)

    @traced
    def process(self, path: str, title: str, *, type_id: str | None = None) -> ServiceResult:
        """Adopt *path* as a new entry titled *title*."""
        result = CreateService(self._vault).create(title, type_id=type_id, source=path)
        return result.model_copy(update={"op": "process_new_file"})
