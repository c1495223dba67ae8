"""Capacity and discard policies for the file caches.

A capacity policy answers "how many bytes may the cache hold right now",
a discard policy answers "which keys go first when it holds too much".
Both only read the entry store they are handed.
"""
from abc import ABC, abstractmethod
from typing import List

from .diskutils import free_bytes


class CapacityPolicy(ABC):
    @abstractmethod
    def capacity(self, store) -> int:
        """Return the current byte budget for `store`."""
        pass

    def __call__(self, store) -> int:
        return self.capacity(store)


class ConstantBudget(CapacityPolicy):
    """Keep the cache below a fixed number of bytes."""

    def __init__(self, nbytes: int):
        # A non-positive budget empties the cache and admits nothing with a size.
        self.nbytes = max(0, int(nbytes))

    def capacity(self, store) -> int:
        return self.nbytes

    def __repr__(self) -> str:
        return f"ConstantBudget({self.nbytes})"


class KeepFree(CapacityPolicy):
    """Grow the cache only as long as `nbytes` stay free on its filesystem.

    Free space is a live quantity, so the budget is recomputed on every call.
    """

    def __init__(self, nbytes: int):
        self.nbytes = int(nbytes)

    def capacity(self, store) -> int:
        # Bytes the cache already holds count as reclaimable space.
        current = free_bytes(store.root) + store.total_size
        return max(0, current - self.nbytes)

    def __repr__(self) -> str:
        return f"KeepFree({self.nbytes})"


class DiscardPolicy(ABC):
    @abstractmethod
    def order(self, store) -> List[str]:
        """Return all keys of `store`, the first one to evict first."""
        pass

    def __call__(self, store) -> List[str]:
        return self.order(store)


class RecencyOrder(DiscardPolicy):
    """Least-recently-used entries first."""

    def order(self, store) -> List[str]:
        entries = store.entries
        return sorted(entries, key=lambda k: entries[k].last_accessed)

    def __repr__(self) -> str:
        return "RecencyOrder()"


class FrequencyOrder(DiscardPolicy):
    """Least-frequently-used entries first.

    Entries hit equally often fall back to recency, so among the least used
    the one touched longest ago is evicted first.
    """

    def order(self, store) -> List[str]:
        entries = store.entries
        return sorted(entries, key=lambda k: (entries[k].access_count, entries[k].last_accessed))

    def __repr__(self) -> str:
        return "FrequencyOrder()"


DISCARD_POLICIES = {
    "lru": RecencyOrder,
    "lfu": FrequencyOrder,
}


def get_discard_policy(name: str) -> DiscardPolicy:
    """Look up a discard policy by its config name ("lru" or "lfu")."""
    try:
        return DISCARD_POLICIES[name.lower()]()
    except KeyError:
        raise ValueError(f"Unknown discard policy: {name}") from None
