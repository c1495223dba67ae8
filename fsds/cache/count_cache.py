"""File cache bounded by the number of files it holds.

Sizes are still tracked in `total_size` but never trigger evictions.
"""
import logging
from typing import Dict, List, Optional

from fsds.metrics.monitor import MetricsMonitor
from .entry import CacheEntry
from .errors import CapacityExceeded
from .policies import DiscardPolicy
from .store import EntryStore, Predicate, accept_all

logger = logging.getLogger(__name__)


class CountConstrainedFileCache:
    def __init__(self, root, max_entries: int, discard_policy: DiscardPolicy,
                 predicate: Predicate = accept_all, monitor: Optional[MetricsMonitor] = None):
        self.max_entries = int(max_entries)
        self.discard_policy = discard_policy
        self.store = EntryStore(root, monitor=monitor)

        self.rebuild(predicate)

        n = len(self.store)
        if n > self.max_entries:
            logger.info("Cache at %s holds %d files over a limit of %d, shrinking",
                        self.root, n, self.max_entries)
            self.shrink(n - self.max_entries)

    @property
    def root(self) -> str:
        return self.store.root

    @property
    def entries(self) -> Dict[str, CacheEntry]:
        return self.store.entries

    @property
    def total_size(self) -> int:
        return self.store.total_size

    @property
    def monitor(self) -> MetricsMonitor:
        return self.store.monitor

    def __len__(self) -> int:
        return len(self.store)

    def __contains__(self, key: str) -> bool:
        return key in self.store

    def discard_order(self) -> List[str]:
        return self.discard_policy.order(self.store)

    def filepath(self, key: str) -> str:
        return self.store.filepath(key)

    def add(self, key: str, size: int = 0) -> str:
        """Reserve a slot for `key`, evicting one entry if the cache is full."""
        self.store.check_key(key)
        if self.max_entries < 1:
            logger.warning("Rejected %s: cache at %s admits no entries", key, self.root)
            raise CapacityExceeded(f"Cache at {self.root} admits no entries (max_entries={self.max_entries})")

        self.store.remove(key)

        # Steady state this evicts exactly one entry.
        n = len(self.store)
        if n >= self.max_entries:
            self.shrink(n - self.max_entries + 1)

        path = self.store.insert(key, int(size))
        self.monitor.record_size(self.total_size, len(self.store))
        return path

    def hit(self, key: str) -> bool:
        return self.store.hit(key)

    def delete(self, key: str) -> bool:
        return self.store.delete(key)

    def rebuild(self, predicate: Predicate = accept_all) -> None:
        self.store.rebuild(predicate)

    def shrink(self, files_to_remove: int) -> int:
        """Evict the first `files_to_remove` keys in discard order.

        Returns the number of entries left.
        """
        for key in self.discard_order()[:max(0, files_to_remove)]:
            self.store.evict(key)
        return len(self.store)

    def __repr__(self) -> str:
        return (f"CountConstrainedFileCache({self.root!r}, {self.max_entries}, "
                f"{self.discard_policy!r}, entries={len(self.store)})")


NFileCache = CountConstrainedFileCache
