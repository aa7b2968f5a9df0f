"""Host bookkeeping for file-creation events.

Two small time-keyed structures guard the watcher:

- :class:`RecentPaths` remembers paths sitectl itself just wrote, so the
  resulting filesystem event is not offered back as a "new" file.
- :class:`Debouncer` drops repeated triggers for the same path inside a
  short window (one creation often surfaces as several events).

Both take an injectable ``clock`` returning seconds.
"""

from __future__ import annotations

import time
from collections.abc import Callable

Clock = Callable[[], float]


class RecentPaths:
    """TTL-keyed set of path -> time recorded."""

    def __init__(self, ttl_seconds: float = 300.0, *, clock: Clock = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, float] = {}

    def add(self, path: str) -> None:
        self._entries[path] = self._clock()

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, str):
            return False
        recorded = self._entries.get(path)
        return recorded is not None and self._clock() - recorded < self._ttl

    def __len__(self) -> int:
        self.prune()
        return len(self._entries)

    def consume(self, path: str) -> bool:
        """Return True (and forget *path*) if it was recorded and is still fresh."""
        fresh = path in self
        self._entries.pop(path, None)
        return fresh

    def prune(self) -> int:
        """Drop expired entries; return how many were removed."""
        now = self._clock()
        expired = [p for p, recorded in self._entries.items() if now - recorded >= self._ttl]
        for path in expired:
            del self._entries[path]
        return len(expired)


class Debouncer:
    """Per-path trigger window. Entries older than the window are pruned on each trigger."""

    def __init__(self, window_ms: int = 500, *, clock: Clock = time.monotonic) -> None:
        self._window = window_ms / 1000
        self._clock = clock
        self._last: dict[str, float] = {}

    def __len__(self) -> int:
        return len(self._last)

    def should_fire(self, path: str) -> bool:
        """True for the first trigger of *path*; False for repeats inside the window."""
        now = self._clock()
        expired = [p for p, last in self._last.items() if now - last >= self._window]
        for stale in expired:
            del self._last[stale]
        if path in self._last:
            return False
        self._last[path] = now
        return True
