"""MigrationService — legacy settings export to content type records."""

from __future__ import annotations

import json
from pathlib import Path

import structlog
from pydantic import ValidationError

from sitectl.config.migration import migrate_legacy
from sitectl.services.base import BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced

log = structlog.get_logger(__name__)


class MigrationService(BaseService):
    """One-time conversion of legacy posts/pages settings."""

    @traced
    def migrate(self, legacy_path: str, *, output: str | None = None) -> ServiceResult:
        """Convert the legacy JSON document at *legacy_path*.

        With *output*, the resulting content types are written there as a
        JSON array suitable for ``[site] content_types_file``.
        """
        op = "migrate"
        source = Path(legacy_path)
        if not source.is_file():
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No file found at {legacy_path}", detail={"path": legacy_path}
            )

        try:
            raw = json.loads(source.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            return ServiceResult.failure(
                op, "INVALID_LEGACY_SETTINGS", f"Invalid JSON in {legacy_path}: {exc}"
            )
        if not isinstance(raw, dict):
            return ServiceResult.failure(
                op, "INVALID_LEGACY_SETTINGS", "Legacy settings must be a JSON object"
            )

        try:
            outcome = migrate_legacy(raw)
        except ValidationError as exc:
            return ServiceResult.failure(
                op,
                "INVALID_LEGACY_SETTINGS",
                f"Legacy settings do not validate: {exc.error_count()} error(s)",
                detail={"errors": exc.errors(include_url=False, include_context=False)},
            )

        warnings = [
            f"a content type named {name!r} already exists — {name.lower()} migration skipped"
            for name in outcome.blocked
        ]
        records = [ct.model_dump(mode="json") for ct in outcome.content_types]

        if output is not None:
            try:
                Path(output).write_text(json.dumps(records, indent=2) + "\n", encoding="utf-8")
            except OSError as exc:
                return ServiceResult.failure(
                    op, "WRITE_FAILED", f"Failed to write {output}: {exc}", detail={"path": output}
                )
            log.info("migration_written", output=output, count=len(records))

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "migrated": outcome.migrated,
                "blocked": outcome.blocked,
                "content_types": records,
                "site": outcome.site,
                "output": output,
            },
            warnings=warnings,
        )
