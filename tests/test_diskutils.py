"""Tests for the free disk space query."""
import psutil
import pytest

from fsds.cache import ConstantBudget, KeepFree, RecencyOrder, SizeConstrainedFileCache
from fsds.cache.diskutils import free_bytes
from fsds.cache.errors import PlatformUnsupported


def test_free_bytes_is_positive_int(tmp_path):
    free = free_bytes(tmp_path)
    assert isinstance(free, int)
    assert free > 0


def test_free_bytes_matches_psutil(tmp_path):
    # Other disk activity makes this noisy, so compare loosely
    assert abs(free_bytes(tmp_path) - psutil.disk_usage(str(tmp_path)).free) < 64 * 1024 * 1024


def test_free_bytes_missing_path_propagates(tmp_path):
    with pytest.raises(OSError):
        free_bytes(tmp_path / "does-not-exist")


def test_unsupported_platform(monkeypatch, tmp_path):
    def not_implemented(path):
        raise NotImplementedError("no statfs")

    monkeypatch.setattr(psutil, "disk_usage", not_implemented)
    with pytest.raises(PlatformUnsupported):
        free_bytes(tmp_path)


def test_missing_disk_usage(monkeypatch, tmp_path):
    monkeypatch.delattr(psutil, "disk_usage")
    with pytest.raises(PlatformUnsupported):
        free_bytes(tmp_path)


def test_keep_free_cache_fails_at_construction(monkeypatch, tmp_path):
    def not_implemented(path):
        raise NotImplementedError("no statfs")

    monkeypatch.setattr(psutil, "disk_usage", not_implemented)
    with pytest.raises(PlatformUnsupported):
        SizeConstrainedFileCache(tmp_path, KeepFree(1024), RecencyOrder())

    # Constant budgets never ask for free space
    cache = SizeConstrainedFileCache(tmp_path, ConstantBudget(1024), RecencyOrder())
    assert cache.total_size == 0
