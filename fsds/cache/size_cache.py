"""Byte-budgeted file cache.

Example::

    # Keep 10GB free on the disk and evict least-recently-used files first
    cache = SizeConstrainedFileCache(root, KeepFree(10 * 1024**3), RecencyOrder())

    path = cache.add(key, len(data))
    with open(path, "wb") as f:
        f.write(data)

    cache.hit(key)      # True, and bumps the key's recency/frequency
    cache.delete(key)

Constructing a cache scans `root` and may delete existing files right away
to fit the budget.
"""
import logging
from typing import Dict, List, Optional, Union

from fsds.metrics.monitor import MetricsMonitor
from .entry import CacheEntry
from .errors import CapacityExceeded
from .policies import CapacityPolicy, ConstantBudget, DiscardPolicy
from .store import EntryStore, Predicate, accept_all

logger = logging.getLogger(__name__)


class SizeConstrainedFileCache:
    def __init__(self, root, capacity_policy: Union[CapacityPolicy, int], discard_policy: DiscardPolicy,
                 predicate: Predicate = accept_all, monitor: Optional[MetricsMonitor] = None):
        if isinstance(capacity_policy, int):
            capacity_policy = ConstantBudget(capacity_policy)
        self.capacity_policy = capacity_policy
        self.discard_policy = discard_policy
        self.store = EntryStore(root, monitor=monitor)

        # Disk is the source of truth; start from whatever is already there.
        self.rebuild(predicate)

        target = self.capacity()
        if self.total_size > target:
            logger.info("Cache at %s holds %d bytes over a budget of %d, shrinking",
                        self.root, self.total_size, target)
            self.shrink(self.total_size - target)

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

    def capacity(self) -> int:
        """Current byte budget according to the capacity policy."""
        return self.capacity_policy.capacity(self.store)

    def discard_order(self) -> List[str]:
        """Keys in the order they would be evicted."""
        return self.discard_policy.order(self.store)

    def filepath(self, key: str) -> str:
        return self.store.filepath(key)

    def add(self, key: str, size: int) -> str:
        """Reserve `size` bytes for `key` and return the path to write it to.

        Re-adding a key replaces it outright: the old file is removed and the
        access history starts over. Entries are evicted as needed to stay
        within budget; an object bigger than the whole budget raises
        CapacityExceeded and leaves the cache untouched.
        """
        self.store.check_key(key)
        size = int(size)
        if size < 0:
            raise ValueError(f"size must be non-negative, got {size}")

        target = self.capacity()
        if size > target:
            logger.warning("Rejected %s: %d bytes exceed the whole cache budget of %d", key, size, target)
            raise CapacityExceeded(f"Requested size {size} is larger than entire cache {target}")

        self.store.remove(key)

        target = self.capacity()
        new_total_size = self.total_size + size
        if new_total_size > target:
            if size > target:
                raise CapacityExceeded(f"Requested size {size} is larger than entire cache {target}")
            # Evicting in discard order always frees enough once size <= target.
            self.shrink(new_total_size - target)

        path = self.store.insert(key, size)
        self.monitor.record_size(self.total_size, len(self.store))
        return path

    def hit(self, key: str) -> bool:
        return self.store.hit(key)

    def delete(self, key: str) -> bool:
        return self.store.delete(key)

    def rebuild(self, predicate: Predicate = accept_all) -> None:
        self.store.rebuild(predicate)

    def shrink(self, amount: int) -> int:
        """Evict entries until `amount` bytes are freed or nothing is left.

        Returns the resulting total size.
        """
        keys_to_discard = self.discard_order()
        target_size = self.total_size - amount
        for key in keys_to_discard:
            if self.total_size <= target_size:
                break
            self.store.evict(key)
        return self.total_size

    def __repr__(self) -> str:
        return (f"SizeConstrainedFileCache({self.root!r}, {self.capacity_policy!r}, "
                f"{self.discard_policy!r}, entries={len(self.store)}, total_size={self.total_size})")
