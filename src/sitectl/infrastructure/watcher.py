"""Filesystem watcher feeding newly created notes to the main thread.

watchdog delivers events on its observer thread; the handler only
enqueues site-relative paths. The ``watch`` command drains the queue on
the main thread, where prompting and writing happen one file at a time.
"""

from __future__ import annotations

import queue
import time
from collections.abc import Iterator
from pathlib import Path

import structlog
from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from sitectl.infrastructure.filesystem import is_note_file, to_relative

log = structlog.get_logger(__name__)


class CreatedNoteHandler(FileSystemEventHandler):
    """Queue notes that appear in the site, by creation or by rename."""

    def __init__(self, site_root: Path, alt_extension: str, events: queue.Queue[str]) -> None:
        super().__init__()
        self.site_root = site_root
        self.alt_extension = alt_extension
        self.events = events

    def _offer(self, raw_path: str | bytes) -> None:
        path = Path(raw_path.decode() if isinstance(raw_path, bytes) else raw_path)
        try:
            rel_path = to_relative(self.site_root, path)
        except ValueError:
            return
        if is_note_file(rel_path, self.alt_extension):
            self.events.put(rel_path)

    def on_created(self, event: FileSystemEvent) -> None:
        if not event.is_directory:
            self._offer(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        # Editors often save a temp file and rename it into place.
        if not event.is_directory:
            self._offer(event.dest_path)


class SiteWatcher:
    """Context manager running a recursive observer over the site root.

    Usage::

        with SiteWatcher(root, "mdx") as watcher:
            for rel_path in watcher.iter_created(poll_interval=0.2):
                ...
    """

    def __init__(self, site_root: Path, alt_extension: str) -> None:
        self.site_root = site_root
        self.events: queue.Queue[str] = queue.Queue()
        self._handler = CreatedNoteHandler(site_root, alt_extension, self.events)
        self._observer = Observer()

    def __enter__(self) -> SiteWatcher:
        self._observer.schedule(self._handler, str(self.site_root), recursive=True)
        self._observer.start()
        log.debug("watch_started", root=str(self.site_root))
        return self

    def __exit__(self, *exc_info: object) -> None:
        self._observer.stop()
        self._observer.join()
        log.debug("watch_stopped", root=str(self.site_root))

    def iter_created(
        self,
        *,
        poll_interval: float = 0.2,
        timeout: float | None = None,
    ) -> Iterator[str]:
        """Yield created note paths until *timeout* seconds elapse (or forever)."""
        deadline = None if timeout is None else time.monotonic() + timeout
        while deadline is None or time.monotonic() < deadline:
            wait = poll_interval
            if deadline is not None:
                wait = max(0.0, min(poll_interval, deadline - time.monotonic()))
            try:
                yield self.events.get(timeout=wait)
            except queue.Empty:
                continue
