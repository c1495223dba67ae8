# Free disk space query used by the KeepFree capacity policy
import psutil

from .errors import PlatformUnsupported


def free_bytes(path: str) -> int:
    """Return the bytes available on the filesystem that contains `path`.

    This is the space an unprivileged user may still write (statvfs
    f_bavail * f_frsize on POSIX), not the raw count of free blocks.
    Raises PlatformUnsupported if psutil cannot query the host.
    """
    disk_usage = getattr(psutil, "disk_usage", None)
    if disk_usage is None:
        raise PlatformUnsupported("free space query is not available on this platform")
    try:
        usage = disk_usage(str(path))
    except NotImplementedError as e:
        raise PlatformUnsupported(f"free space query failed for {path!r}: {e}") from e
    return int(usage.free)
