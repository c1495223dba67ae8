# Exceptions raised by the file caches


class CapacityExceeded(ValueError):
    """Raised when an object can never fit, even into an empty cache.

    The caller has to shrink the object or raise the budget.
    """


class PlatformUnsupported(OSError):
    """Raised when the host exposes no free-disk-space query."""


class InvalidPath(ValueError):
    """Raised for a cache root that is not a directory, or a key outside the root."""
