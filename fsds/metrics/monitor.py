from collections import deque
from typing import Deque, Dict, Optional
from time import time
import psutil


class MetricsMonitor:
    def __init__(self, history_size: Optional[int] = None):
        """Initialize the metrics monitor.

        Counters are always kept. The per-event history lists keep only the
        last `history_size` records each, or everything when it is None.
        """
        self.history_size = history_size
        self.reset()

    def _history(self) -> Deque[Dict]:
        return deque(maxlen=self.history_size)

    def record_operation(self, op_type: str, key: str, hit: bool) -> None:
        """Record a cache lookup."""
        if hit:
            self.hits += 1
        else:
            self.misses += 1
        self.operations.append({
            "time": time(),
            "type": op_type,
            "key": key,
            "hit": hit,
            "total_ops": self.hits + self.misses
        })

    def record_add(self, key: str, size: int) -> None:
        """Record a reservation made by add()."""
        self.adds.append({
            "time": time(),
            "key": key,
            "size": size
        })
        self.add_count += 1

    def record_delete(self, key: str, size: int) -> None:
        """Record an explicit delete()."""
        self.deletes.append({
            "time": time(),
            "key": key,
            "size": size
        })
        self.delete_count += 1

    def record_eviction(self, key: str, size: int) -> None:
        """Record an eviction made by shrink()."""
        self.evictions.append({
            "time": time(),
            "key": key,
            "size": size
        })
        self.eviction_count += 1
        self.evicted_bytes += size

    def record_size(self, total_size: int, num_entries: int) -> None:
        """Record the cache's bookkept size."""
        self.size_samples.append({
            "time": time(),
            "total_size": total_size,
            "entries": num_entries
        })

    def record_disk_usage(self, path: str) -> int:
        """Record and return the free bytes on the filesystem holding `path`."""
        free = int(psutil.disk_usage(str(path)).free)
        self.disk_samples.append({
            "time": time(),
            "free_bytes": free
        })
        return free

    def get_hit_ratio(self) -> float:
        """Calculate the current hit ratio."""
        total = self.hits + self.misses
        return self.hits / total if total > 0 else 0.0

    def get_add_count(self) -> int:
        return self.add_count

    def get_delete_count(self) -> int:
        return self.delete_count

    def get_eviction_count(self) -> int:
        return self.eviction_count

    def last_size(self) -> Optional[Dict]:
        return self.size_samples[-1] if self.size_samples else None

    def reset(self) -> None:
        """Reset all metrics."""
        self.hits = 0
        self.misses = 0
        self.operations = self._history()
        self.adds = self._history()
        self.deletes = self._history()
        self.evictions = self._history()  # Track evictions done to fit the budget
        self.size_samples = self._history()
        self.disk_samples = self._history()  # Free space on the cache's filesystem
        self.add_count = 0
        self.delete_count = 0
        self.eviction_count = 0
        self.evicted_bytes = 0

    def summary(self) -> Dict:
        """Return a summary of collected metrics."""
        return {
            "hits": self.hits,
            "misses": self.misses,
            "hit_ratio": self.get_hit_ratio(),
            "total_operations": self.hits + self.misses,
            "adds": self.add_count,
            "deletes": self.delete_count,
            "evictions": self.eviction_count,
            "evicted_bytes": self.evicted_bytes,
            "size_samples": len(self.size_samples),
            "avg_total_size": sum(s["total_size"] for s in self.size_samples) / (len(self.size_samples) or 1),
            "min_free_bytes": min((d["free_bytes"] for d in self.disk_samples), default=None)
        }
