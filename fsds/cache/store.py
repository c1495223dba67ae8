"""Keyed entry store shared by the size- and count-constrained caches.

The store owns the bookkeeping for one cache root: a dict of key ->
CacheEntry plus the running byte total. It knows how to map keys to paths,
how to scan the root back into memory, and how to drop single entries. It
never decides *what* to evict; that is the job of the cache composing it.
"""
import logging
import os
import posixpath
from typing import Callable, Dict, Optional

from fsds.metrics.monitor import MetricsMonitor
from .entry import CacheEntry
from .errors import InvalidPath

logger = logging.getLogger(__name__)

Predicate = Callable[[str], bool]

# Event history kept by a cache's own monitor; counters are unbounded.
DEFAULT_HISTORY_SIZE = 1000


def accept_all(key: str) -> bool:
    return True


def _raise(err: OSError) -> None:
    raise err


class EntryStore:
    def __init__(self, root, monitor: Optional[MetricsMonitor] = None):
        self.root = os.path.abspath(os.fspath(root))
        self.entries: Dict[str, CacheEntry] = {}
        self.total_size = 0
        self.monitor = monitor if monitor is not None else MetricsMonitor(history_size=DEFAULT_HISTORY_SIZE)

    def __len__(self) -> int:
        return len(self.entries)

    def __contains__(self, key: str) -> bool:
        return key in self.entries

    def ensure_root(self) -> None:
        """Create the root directory, refusing to reuse a non-directory path."""
        if os.path.exists(self.root) and not os.path.isdir(self.root):
            raise InvalidPath(f"cache root {self.root!r} exists and is not a directory")
        os.makedirs(self.root, exist_ok=True)

    def filepath(self, key: str) -> str:
        return os.path.join(self.root, key)

    def check_key(self, key: str) -> None:
        """Reject keys that would place a file outside the root, or alias another key."""
        if not key or os.path.isabs(key):
            raise InvalidPath(f"cache key must be a relative path, got {key!r}")
        norm = posixpath.normpath(key.replace(os.sep, "/"))
        if norm in (".", "..") or norm.startswith("../"):
            raise InvalidPath(f"cache key {key!r} points outside the cache root")
        if norm != key:
            raise InvalidPath(f"cache key {key!r} is not in canonical form, use {norm!r}")

    def insert(self, key: str, size: int) -> str:
        """Track a fresh entry for `key` and return its destination path.

        The caller must have removed any previous entry for `key` first.
        """
        self.entries[key] = CacheEntry(size=size)
        self.total_size += size
        self.monitor.record_add(key, size)

        path = self.filepath(key)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        return path

    def hit(self, key: str) -> bool:
        entry = self.entries.get(key)
        if entry is None:
            self.monitor.record_operation("hit", key, False)
            return False

        entry.access()
        # Keep the mtime in step with last_accessed so a later rebuild
        # recovers roughly the same recency.
        try:
            os.utime(self.filepath(key), (entry.last_accessed, entry.last_accessed))
        except FileNotFoundError:
            pass
        self.monitor.record_operation("hit", key, True)
        return True

    def remove(self, key: str) -> Optional[CacheEntry]:
        """Drop `key` and its file; return the removed entry, or None if untracked."""
        entry = self.entries.get(key)
        if entry is None:
            return None
        try:
            os.remove(self.filepath(key))
        except FileNotFoundError:
            pass
        del self.entries[key]
        self.total_size -= entry.size
        return entry

    def delete(self, key: str) -> bool:
        entry = self.remove(key)
        if entry is None:
            return False
        self.monitor.record_delete(key, entry.size)
        return True

    def evict(self, key: str) -> bool:
        entry = self.remove(key)
        if entry is None:
            return False
        logger.debug("Evicted %s (%d bytes) from %s", key, entry.size, self.root)
        self.monitor.record_eviction(key, entry.size)
        return True

    def rebuild(self, predicate: Predicate = accept_all) -> None:
        """Recompute all entries from the files under the root.

        Sizes always come from disk. Keys that were already tracked keep
        their access history, new keys start from the file's mtime with a
        single access. Keys missing on disk, or rejected by `predicate`, are
        forgotten (their files, if any, are left alone).
        """
        self.ensure_root()

        old_entries = self.entries
        new_entries: Dict[str, CacheEntry] = {}
        total_size = 0
        for parent, dirs, files in os.walk(self.root, onerror=_raise):
            dirs.sort()
            for fname in sorted(files):
                path = os.path.join(parent, fname)
                key = os.path.relpath(path, self.root)
                if os.sep != "/":
                    key = key.replace(os.sep, "/")
                if not predicate(key):
                    continue

                try:
                    st = os.stat(path)
                except FileNotFoundError:
                    # Dangling symlink, or removed since the directory was listed
                    logger.debug("Skipping %s: no such file", path)
                    continue
                entry = CacheEntry(size=st.st_size, last_accessed=st.st_mtime, access_count=1)
                previous = old_entries.get(key)
                if previous is not None:
                    entry.last_accessed = previous.last_accessed
                    entry.access_count = previous.access_count
                new_entries[key] = entry
                total_size += entry.size

        self.entries = new_entries
        self.total_size = total_size
        self.monitor.record_size(self.total_size, len(self.entries))
        logger.debug("Rebuilt %s: %d entries, %d bytes", self.root, len(new_entries), total_size)
