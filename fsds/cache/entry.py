# Cache entry class for storing per-file metadata
from dataclasses import dataclass, field
from time import time


@dataclass
class CacheEntry:
    size: int = 0
    last_accessed: float = field(default_factory=time)
    access_count: int = 1

    def access(self) -> None:
        self.access_count += 1
        self.last_accessed = time()
