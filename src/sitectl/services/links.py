"""LinkService — internal references and headings to site URLs."""

from __future__ import annotations

import structlog

from sitectl.domain.headings import (
    find_heading_at_line,
    markdown_heading_link,
    site_heading_link,
    wiki_heading_link,
)
from sitectl.domain.links import convert_links, resolve_link_target
from sitectl.domain.types import HeadingLinkFormat
from sitectl.services._helpers import site_path
from sitectl.services.base import NO_MATCH_WARNING, BaseService
from sitectl.services.result import ServiceResult
from sitectl.services.telemetry import traced

log = structlog.get_logger(__name__)


class LinkService(BaseService):
    """Rewrites note links for the site and builds heading links."""

    @property
    def _trailing_slash(self) -> bool:
        return self._vault.settings.site.trailing_slash

    def _existing_file(self, op: str, path: str) -> str | ServiceResult:
        try:
            rel_path = site_path(self._vault, path)
        except ValueError as exc:
            return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": path})
        if not self._vault.is_file(rel_path):
            return ServiceResult.failure(
                op, "NOT_FOUND", f"No file found at {rel_path}", detail={"path": rel_path}
            )
        return rel_path

    @traced
    def convert(self, path: str, *, dry_run: bool = False) -> ServiceResult:
        """Rewrite every internal link in the body of *path*.

        The frontmatter block is never touched.
        """
        op = "convert_links"
        warnings: list[str] = []
        found = self._existing_file(op, path)
        if isinstance(found, ServiceResult):
            return found
        rel_path = found

        text = self._vault.read(rel_path)
        parsed = self._decode(text, warnings)
        head = text[: parsed.block_end] if parsed.has_block else ""
        body = text[len(head) :]

        result = convert_links(
            body, rel_path, self.content_types, trailing_slash=self._trailing_slash
        )

        written = False
        if result.changed and not dry_run:
            try:
                with self._vault.transaction() as txn:
                    txn.write_file(rel_path, head + result.text)
            except OSError as exc:
                return ServiceResult.failure(
                    op, "WRITE_FAILED", f"Failed to write {rel_path}: {exc}", detail={"path": rel_path}
                )
            written = True
            log.info("links_converted", path=rel_path, converted=result.converted)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": rel_path,
                "converted": result.converted,
                "skipped": result.skipped,
                "skipped_refs": list(result.skipped_refs),
                "summary": result.summary(),
                "written": written,
                "dry_run": dry_run,
            },
            warnings=warnings,
        )

    @traced
    def rewrite(self, ref: str, *, source: str | None = None) -> ServiceResult:
        """Rewrite a single reference; unresolvable ones come back unchanged."""
        op = "rewrite_link"
        source_rel: str | None = None
        if source is not None:
            try:
                source_rel = site_path(self._vault, source)
            except ValueError as exc:
                return ServiceResult.failure(op, "NOT_FOUND", str(exc), detail={"path": source})

        target = resolve_link_target(
            ref, source_rel, self.content_types, trailing_slash=self._trailing_slash
        )
        if target is None:
            return ServiceResult(
                ok=True,
                op=op,
                data={"ref": ref, "url": ref, "skipped": True, "content_type": None},
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "ref": ref,
                "url": target.url,
                "skipped": False,
                "content_type": target.content_type_id,
                "slug": target.slug,
                "anchor": target.anchor,
                "trailing_slash": target.trailing_slash,
            },
        )

    @traced
    def heading_link(
        self,
        path: str,
        line: int,
        *,
        fmt: HeadingLinkFormat | None = None,
    ) -> ServiceResult:
        """Link to the heading at or above 1-based *line* of *path*."""
        op = "heading_link"
        found = self._existing_file(op, path)
        if isinstance(found, ServiceResult):
            return found
        rel_path = found

        heading = find_heading_at_line(self._vault.read(rel_path), max(line - 1, 0))
        if heading is None:
            return ServiceResult.failure(
                op,
                "NO_HEADING",
                f"No heading at or above line {line} in {rel_path}",
                detail={"path": rel_path, "line": line},
            )

        fmt = fmt or self._vault.settings.site.heading_link_format
        warnings: list[str] = []
        if fmt is HeadingLinkFormat.SITE:
            if self._resolve(rel_path, warnings).content_type is None:
                warnings.append(NO_MATCH_WARNING)
            link = site_heading_link(
                rel_path, heading.text, self.content_types, trailing_slash=self._trailing_slash
            )
        elif fmt is HeadingLinkFormat.MARKDOWN:
            link = markdown_heading_link(rel_path, heading.text)
        else:
            link = wiki_heading_link(rel_path, heading.text)

        return ServiceResult(
            ok=True,
            op=op,
            data={
                "path": rel_path,
                "heading": heading.text,
                "level": heading.level,
                "line": heading.line + 1,
                "format": fmt.value,
                "link": link,
            },
            warnings=warnings,
        )
