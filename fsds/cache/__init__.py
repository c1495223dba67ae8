from .count_cache import CountConstrainedFileCache, NFileCache
from .diskutils import free_bytes
from .entry import CacheEntry
from .errors import CapacityExceeded, InvalidPath, PlatformUnsupported
from .policies import (
    CapacityPolicy,
    ConstantBudget,
    DiscardPolicy,
    FrequencyOrder,
    KeepFree,
    RecencyOrder,
    get_discard_policy,
)
from .size_cache import SizeConstrainedFileCache
from .store import EntryStore
