import os
import uuid

import matplotlib
import pytest

import fsds.cache.policies

matplotlib.use("Agg")


def write_file(path, size):
    with open(path, "wb") as f:
        f.write(os.urandom(size))


@pytest.fixture
def add_junk_file():
    """Reserve a random key in the cache and write `size` random bytes to it."""
    def _add(cache, size, prefix=""):
        key = prefix + uuid.uuid4().hex[:12]
        path = cache.add(key, size)
        write_file(path, size)
        return path
    return _add


class FakeDisk:
    """A disk of fixed capacity whose only occupant is the cache directory."""

    def __init__(self, capacity):
        self.capacity = capacity

    def used(self, path):
        total = 0
        for parent, _, files in os.walk(path):
            for fname in files:
                total += os.path.getsize(os.path.join(parent, fname))
        return total

    def free_bytes(self, path):
        return self.capacity - self.used(path)


@pytest.fixture
def fake_disk(monkeypatch):
    disk = FakeDisk(capacity=1_000_000)
    monkeypatch.setattr(fsds.cache.policies, "free_bytes", disk.free_bytes)
    return disk
