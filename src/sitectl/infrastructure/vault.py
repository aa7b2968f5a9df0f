"""Vault — the site directory as a repository with compensating writes.

The Vault is the single dependency injected into every service. It owns
the site root, the resolved settings and the self-write bookkeeping.
Paths crossing its API are site-relative, forward-slash strings.

:meth:`Vault.transaction` coordinates multi-step file changes (move a
folder, then rewrite a file) so that if a later step fails the earlier
ones are undone:

- **Writes**: created files are deleted, modified files are restored.
- **Moves**: moved files and folders are moved back.
- **Folders**: folders created for a write are removed when left empty.

On success every written path is recorded in :attr:`Vault.recent` so the
watcher skips the events those writes produce.
"""

from __future__ import annotations

import logging
import shutil
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from sitectl.domain.types import ContentTypeConfig
from sitectl.infrastructure.filesystem import resolve_site_path, to_relative
from sitectl.infrastructure.recent import RecentPaths

if TYPE_CHECKING:
    from collections.abc import Iterator

    from sitectl.config.settings import SiteSettings

logger = logging.getLogger(__name__)


class PathConflictError(FileExistsError):
    """A create or move would overwrite an existing path."""

    def __init__(self, rel_path: str) -> None:
        super().__init__(f"Path already exists: {rel_path}")
        self.rel_path = rel_path


# ---------------------------------------------------------------------------
# File operation tracking for compensation-based rollback
# ---------------------------------------------------------------------------


@dataclass
class _FileOp:
    """A tracked file write within a vault transaction."""

    path: Path
    backup: str | None  # original content for updates, None for creates
    created_dirs: list[Path] = field(default_factory=list)

    def rollback(self) -> None:
        """Undo this file operation (best-effort)."""
        try:
            if self.backup is not None:
                self.path.write_text(self.backup, encoding="utf-8")
            else:
                self.path.unlink(missing_ok=True)
            for directory in self.created_dirs:
                if directory.is_dir() and not any(directory.iterdir()):
                    directory.rmdir()
        except OSError:
            logger.warning("Failed to rollback file operation: %s", self.path)


@dataclass
class _MoveOp:
    """A tracked rename of a file or folder."""

    source: Path
    target: Path
    created_dirs: list[Path] = field(default_factory=list)

    def rollback(self) -> None:
        try:
            shutil.move(str(self.target), str(self.source))
            for directory in self.created_dirs:
                if directory.is_dir() and not any(directory.iterdir()):
                    directory.rmdir()
        except OSError:
            logger.warning("Failed to rollback move: %s -> %s", self.source, self.target)


# ---------------------------------------------------------------------------
# VaultTransaction: yielded to callers within transaction()
# ---------------------------------------------------------------------------


@dataclass
class VaultTransaction:
    """Active transaction with tracked file I/O.

    All writes and moves must go through this object so the Vault can
    compensate on rollback. Direct filesystem writes bypass the safety net.
    """

    _vault: Vault
    _ops: list[_FileOp | _MoveOp] = field(default_factory=list, repr=False)
    written: list[str] = field(default_factory=list)

    def write_file(self, rel_path: str, content: str) -> None:
        """Write *content* to *rel_path*, tracking for rollback.

        If the file already exists, its current content is backed up.
        Parent directories are created as needed.
        """
        path = self._vault.path(rel_path)
        backup: str | None = None
        if path.exists():
            backup = path.read_text(encoding="utf-8")

        created_dirs = [p for p in reversed(path.parents) if not p.exists()]
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        self._ops.append(_FileOp(path=path, backup=backup, created_dirs=created_dirs[::-1]))
        self.written.append(rel_path)

    def create_file(self, rel_path: str, content: str) -> None:
        """Write a new file; refuse to overwrite.

        Raises:
            PathConflictError: *rel_path* already exists.
        """
        if self._vault.exists(rel_path):
            raise PathConflictError(rel_path)
        self.write_file(rel_path, content)

    def move(self, source: str, target: str) -> None:
        """Rename a file or folder, tracking for rollback.

        Raises:
            PathConflictError: *target* already exists.
        """
        if self._vault.exists(target):
            raise PathConflictError(target)
        source_path = self._vault.path(source)
        target_path = self._vault.path(target)
        created_dirs = [p for p in reversed(target_path.parents) if not p.exists()]
        target_path.parent.mkdir(parents=True, exist_ok=True)
        shutil.move(str(source_path), str(target_path))
        self._ops.append(
            _MoveOp(source=source_path, target=target_path, created_dirs=created_dirs[::-1])
        )
        self.written.append(target)

    def read_file(self, rel_path: str) -> str:
        """Read raw file content (no tracking needed for reads)."""
        return self._vault.read(rel_path)


# ---------------------------------------------------------------------------
# Vault: the repository
# ---------------------------------------------------------------------------


class Vault:
    """Repository encapsulating filesystem access for one site.

    Constructed once at CLI startup from :class:`SiteSettings` and stored
    in the click context. Services receive the Vault via their
    :class:`BaseService` constructor.
    """

    def __init__(self, settings: SiteSettings, *, recent: RecentPaths | None = None) -> None:
        self._settings = settings
        self._recent = (
            recent if recent is not None else RecentPaths(settings.watch.self_write_ttl_seconds)
        )

    @property
    def root(self) -> Path:
        """The site root directory."""
        return self._settings.site_root

    @property
    def settings(self) -> SiteSettings:
        """The resolved settings for this site."""
        return self._settings

    @property
    def content_types(self) -> list[ContentTypeConfig]:
        return self._settings.content_types

    @property
    def recent(self) -> RecentPaths:
        """Paths written by sitectl, for self-write suppression."""
        return self._recent

    def path(self, rel_path: str) -> Path:
        """Absolute path for *rel_path* (guarded against escaping the root)."""
        return resolve_site_path(self.root, rel_path)

    def relative(self, path: Path) -> str:
        """Site-relative form of an absolute or cwd-relative *path*."""
        return to_relative(self.root, path)

    def exists(self, rel_path: str) -> bool:
        return self.path(rel_path).exists()

    def is_file(self, rel_path: str) -> bool:
        return self.path(rel_path).is_file()

    def read(self, rel_path: str) -> str:
        return self.path(rel_path).read_text(encoding="utf-8")

    def mtime(self, rel_path: str) -> float:
        return self.path(rel_path).stat().st_mtime

    @contextmanager
    def transaction(self) -> Iterator[VaultTransaction]:
        """Group file writes and moves so they land together or not at all.

        Rollback is best-effort per operation, in reverse order, so the
        original error is never masked.

        Usage::

            with vault.transaction() as txn:
                txn.move("posts/old", "posts/new")
                txn.write_file("posts/new/index.md", content)
        """
        txn = VaultTransaction(_vault=self)
        try:
            yield txn
        except BaseException:
            for op in reversed(txn._ops):
                op.rollback()
            raise
        for rel_path in txn.written:
            self._recent.add(rel_path)
        logger.debug("transaction committed: %s", txn.written)
