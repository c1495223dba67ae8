import matplotlib.pyplot as plt
from .monitor import MetricsMonitor
from typing import Optional


class MetricsVisualizer:
    def __init__(self, monitor: MetricsMonitor):
        """Initialize with a MetricsMonitor instance."""
        self.monitor = monitor

    def _finish(self, output_file: Optional[str]) -> None:
        plt.grid(True)
        plt.legend()
        if output_file:
            plt.savefig(output_file)
        else:
            plt.show()
        plt.close()

    def plot_hit_miss_ratio(self, output_file: Optional[str] = None) -> None:
        """Plot the cumulative hit ratio over time."""
        ops = self.monitor.operations
        if not ops:
            return
        times = [op["time"] - ops[0]["time"] for op in ops]
        hit_ratios = []
        hits = 0
        for i, op in enumerate(ops):
            hits += op["hit"]
            hit_ratios.append(hits / (i + 1))

        plt.figure(figsize=(10, 6))
        plt.plot(times, hit_ratios, label="Hit Ratio")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Hit Ratio")
        plt.title("Hit Ratio Over Time")
        self._finish(output_file)

    def plot_cache_size(self, output_file: Optional[str] = None) -> None:
        """Plot bookkept cache size (MB) over time."""
        samples = self.monitor.size_samples
        if not samples:
            return
        times = [s["time"] - samples[0]["time"] for s in samples]
        sizes = [s["total_size"] / 1024 / 1024 for s in samples]

        plt.figure(figsize=(10, 6))
        plt.plot(times, sizes, label="Cache Size (MB)")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Cache Size (MB)")
        plt.title("Cache Size Over Time")
        self._finish(output_file)

    def plot_evictions(self, output_file: Optional[str] = None) -> None:
        """Plot cumulative evicted bytes (MB) over time."""
        evictions = self.monitor.evictions
        if not evictions:
            return
        start = evictions[0]["time"]
        times = []
        evicted = []
        total = 0
        for e in evictions:
            total += e["size"]
            times.append(e["time"] - start)
            evicted.append(total / 1024 / 1024)

        plt.figure(figsize=(10, 6))
        plt.plot(times, evicted, label="Evicted (MB)")
        plt.xlabel("Time (seconds)")
        plt.ylabel("Evicted (MB)")
        plt.title("Evictions Over Time")
        self._finish(output_file)
