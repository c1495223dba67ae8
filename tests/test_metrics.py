"""Tests for metrics collection, export and plotting."""

import pandas as pd

from fsds.cache import ConstantBudget, RecencyOrder, SizeConstrainedFileCache
from fsds.metrics.excel_logger import ExcelLogger
from fsds.metrics.monitor import MetricsMonitor
from fsds.metrics.visualizer import MetricsVisualizer


class TestMetricsMonitor:
    def test_hit_ratio(self):
        monitor = MetricsMonitor()
        assert monitor.get_hit_ratio() == 0.0
        monitor.record_operation("hit", "a", True)
        monitor.record_operation("hit", "b", False)
        monitor.record_operation("hit", "a", True)
        monitor.record_operation("hit", "c", False)
        assert monitor.get_hit_ratio() == 0.5
        assert monitor.operations[-1]["total_ops"] == 4

    def test_evictions_and_reset(self):
        monitor = MetricsMonitor()
        monitor.record_eviction("a", 100)
        monitor.record_eviction("b", 50)
        monitor.record_size(150, 2)
        assert monitor.get_eviction_count() == 2
        assert monitor.evicted_bytes == 150
        assert monitor.last_size()["total_size"] == 150

        monitor.reset()
        assert monitor.summary()["evictions"] == 0
        assert monitor.last_size() is None
        assert monitor.summary()["min_free_bytes"] is None

    def test_disk_usage(self, tmp_path):
        monitor = MetricsMonitor()
        free = monitor.record_disk_usage(tmp_path)
        assert free > 0
        assert monitor.summary()["min_free_bytes"] == free

    def test_history_size_keeps_latest_records(self):
        monitor = MetricsMonitor(history_size=3)
        for i in range(10):
            monitor.record_operation("hit", f"k{i}", i % 2 == 0)
            monitor.record_eviction(f"k{i}", 1)
        assert [op["key"] for op in monitor.operations] == ["k7", "k8", "k9"]
        assert len(monitor.evictions) == 3
        assert monitor.hits == monitor.misses == 5
        assert monitor.get_eviction_count() == monitor.evicted_bytes == 10
        assert monitor.summary()["total_operations"] == 10

        monitor.reset()
        for i in range(5):
            monitor.record_add(f"k{i}", 1)
        assert len(monitor.adds) == 3

    def test_unbounded_by_default(self):
        monitor = MetricsMonitor()
        for i in range(2000):
            monitor.record_operation("hit", "k", True)
        assert len(monitor.operations) == 2000

    def test_cache_records_evictions(self, tmp_path):
        cache = SizeConstrainedFileCache(tmp_path, ConstantBudget(100), RecencyOrder())
        for key in ["a", "b", "c"]:
            cache.add(key, 50)
        assert cache.monitor.get_eviction_count() == 1
        assert cache.monitor.evictions[0]["key"] == "a"
        assert cache.monitor.last_size()["total_size"] == 100


def log_steps(excel_logger, cache_name, steps):
    for step in steps:
        excel_logger.log(step=step, hit_rate=0.5, hits=step, misses=step, total_size=1024 * step,
                         entries=step, capacity=4096, timestamp=0.1 * step,
                         cache_name=cache_name, workload_name="Zipf", free_bytes=10 ** 9)


class TestExcelLogger:
    def test_export_one_sheet_per_cache(self, tmp_path):
        filename = str(tmp_path / "metrics.xlsx")
        excel_logger = ExcelLogger(filename=filename)
        log_steps(excel_logger, "SIZE-LRU", range(3))
        log_steps(excel_logger, "COUNT-LFU", range(2))
        excel_logger.export()

        sheets = pd.read_excel(filename, sheet_name=None)
        assert set(sheets) == {"SIZE-LRU", "COUNT-LFU"}
        assert list(sheets["SIZE-LRU"]["step"]) == [0, 1, 2]
        assert sheets["SIZE-LRU"]["total_size"].iloc[-1] == 2048

    def test_export_merges_existing_rows(self, tmp_path):
        filename = str(tmp_path / "metrics.xlsx")
        first = ExcelLogger(filename=filename)
        log_steps(first, "SIZE-LRU", range(3))
        first.export()

        second = ExcelLogger(filename=filename)
        log_steps(second, "SIZE-LRU", range(2, 5))
        second.export()

        df = pd.read_excel(filename, sheet_name="SIZE-LRU")
        assert list(df["step"]) == [0, 1, 2, 3, 4]

    def test_to_frame_empty(self):
        assert ExcelLogger().to_frame("nothing").empty


class TestVisualizer:
    def test_plots_written(self, tmp_path):
        cache = SizeConstrainedFileCache(tmp_path / "cache", ConstantBudget(100), RecencyOrder())
        for key in ["a", "b", "c", "a"]:
            if not cache.hit(key):
                cache.add(key, 50)

        visualizer = MetricsVisualizer(cache.monitor)
        visualizer.plot_hit_miss_ratio(str(tmp_path / "hits.png"))
        visualizer.plot_cache_size(str(tmp_path / "size.png"))
        visualizer.plot_evictions(str(tmp_path / "evictions.png"))
        assert (tmp_path / "hits.png").exists()
        assert (tmp_path / "size.png").exists()
        assert (tmp_path / "evictions.png").exists()

    def test_empty_monitor_draws_nothing(self, tmp_path):
        visualizer = MetricsVisualizer(MetricsMonitor())
        visualizer.plot_evictions(str(tmp_path / "evictions.png"))
        assert not (tmp_path / "evictions.png").exists()
