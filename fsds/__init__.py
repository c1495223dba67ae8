"""Filesystem-backed caches that evict files to stay within a byte or file-count budget."""
from fsds.cache import (
    CacheEntry,
    CapacityExceeded,
    CapacityPolicy,
    ConstantBudget,
    CountConstrainedFileCache,
    DiscardPolicy,
    EntryStore,
    FrequencyOrder,
    InvalidPath,
    KeepFree,
    NFileCache,
    PlatformUnsupported,
    RecencyOrder,
    SizeConstrainedFileCache,
    free_bytes,
    get_discard_policy,
)
from fsds.metrics import MetricsMonitor

__version__ = "0.1.0"
