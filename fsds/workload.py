# Synthetic request streams for exercising the file caches
from typing import List, Tuple

import numpy as np


class WorkloadGenerator:
    def __init__(self, key_space_size: int = 1000, num_requests: int = 10000,
                 min_size: int = 1024, max_size: int = 64 * 1024, seed: int = 2025):
        """Every key gets a fixed file size drawn once from [min_size, max_size]."""
        self.key_space_size = key_space_size
        self.num_requests = num_requests
        self.rng = np.random.default_rng(seed)
        self.keys = [f"{i // 100:03d}/obj-{i:06d}.bin" for i in range(key_space_size)]
        self.sizes = self.rng.integers(min_size, max_size + 1, size=key_space_size)

    def _requests(self, indices) -> List[Tuple[str, int]]:
        return [(self.keys[i], int(self.sizes[i])) for i in indices]

    def generate_uniform_workload(self) -> List[Tuple[str, int]]:
        indices = self.rng.integers(0, self.key_space_size, size=self.num_requests)
        return self._requests(indices)

    def generate_zipf_workload(self, alpha: float = 1.2) -> List[Tuple[str, int]]:
        """Popularity follows a Zipf law over a random permutation of the keys."""
        ranks = np.arange(1, self.key_space_size + 1)
        probs = 1.0 / np.power(ranks, alpha)
        probs /= probs.sum()
        popularity = self.rng.permutation(self.key_space_size)
        picks = self.rng.choice(self.key_space_size, size=self.num_requests, p=probs)
        return self._requests(popularity[picks])

    def generate_phase_workload(self, phase_length: int = 1000, num_phases: int = 10) -> List[Tuple[str, int]]:
        """Shift the hot set every `phase_length` requests."""
        hot_set = max(1, self.key_space_size // num_phases)
        requests = []
        for phase in range(num_phases):
            start = (phase * hot_set) % self.key_space_size
            offsets = self.rng.integers(0, hot_set, size=phase_length)
            requests.extend(self._requests((start + offsets) % self.key_space_size))
        return requests[:self.num_requests]
