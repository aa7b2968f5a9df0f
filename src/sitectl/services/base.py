"""BaseService — foundation for all sitectl services.

Every service receives a :class:`Vault` at construction time. The Vault
provides guarded filesystem access and compensating transactions;
services own their transaction boundaries via ``self._vault.transaction()``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from sitectl.domain.frontmatter import ParsedFrontmatter, decode
from sitectl.domain.resolver import Resolution, conflict_message, resolve_content_type
from sitectl.domain.types import ContentTypeConfig

if TYPE_CHECKING:
    from sitectl.infrastructure.vault import Vault

log = structlog.get_logger(__name__)

NO_MATCH_WARNING = "no content type matched"
MALFORMED_WARNING = "frontmatter block malformed — falling back to raw pass-through"


class BaseService:
    """Base for service-layer classes.

    Subclasses implement one family of operations using the vault for all
    file access and the pure :mod:`sitectl.domain` engine for the logic.

    Usage::

        class StandardizeService(BaseService):
            def standardize(self, path: str) -> ServiceResult:
                with self._vault.transaction() as txn:
                    ...
    """

    def __init__(self, vault: Vault) -> None:
        self._vault = vault

    @property
    def content_types(self) -> list[ContentTypeConfig]:
        return self._vault.content_types

    def _resolve(self, rel_path: str, warnings: list[str]) -> Resolution:
        """Resolve *rel_path*, appending the conflict advisory when ambiguous."""
        resolution = resolve_content_type(rel_path, self.content_types)
        message = conflict_message(resolution)
        if message:
            log.warning("content_type_conflict", path=rel_path, detail=message)
            warnings.append(message)
        return resolution

    def _decode(self, text: str, warnings: list[str]) -> ParsedFrontmatter:
        """Decode frontmatter with the configured list keys, noting malformed blocks."""
        parsed = decode(text, list_keys=self._vault.settings.list_keys)
        if parsed.malformed:
            warnings.append(MALFORMED_WARNING)
        return parsed
