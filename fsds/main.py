import copy
import json
import logging
import os
import sys
import time

from fsds.cache import (
    CapacityExceeded,
    ConstantBudget,
    CountConstrainedFileCache,
    KeepFree,
    SizeConstrainedFileCache,
    get_discard_policy,
)
from fsds.config import CONFIG
from fsds.metrics.excel_logger import ExcelLogger
from fsds.metrics.monitor import MetricsMonitor
from fsds.workload import WorkloadGenerator

logger = logging.getLogger(__name__)


def merge_config(base: dict, overrides: dict) -> dict:
    """Overlay `overrides` on a copy of `base`, recursing into nested dicts."""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def load_config(config_path: str) -> dict:
    with open(config_path, 'r') as f:
        return merge_config(CONFIG, json.load(f))


def build_cache(config: dict):
    root = config["cache_root"]
    discard_policy = get_discard_policy(config["discard_policy"])
    cache_type = config["cache_type"]
    monitor = MetricsMonitor(history_size=config["metrics"]["history_size"])

    if cache_type == "size":
        if config.get("keep_free_bytes") is not None:
            capacity_policy = KeepFree(config["keep_free_bytes"])
        else:
            capacity_policy = ConstantBudget(config["max_bytes"])
        return SizeConstrainedFileCache(root, capacity_policy, discard_policy, monitor=monitor)
    elif cache_type == "count":
        return CountConstrainedFileCache(root, config["max_entries"], discard_policy, monitor=monitor)
    else:
        raise ValueError(f"Unknown cache type: {cache_type}")


def build_workload(workload_config: dict) -> list:
    gen = WorkloadGenerator(key_space_size=workload_config["key_space_size"],
                            num_requests=workload_config["num_requests"],
                            min_size=workload_config["min_size"],
                            max_size=workload_config["max_size"],
                            seed=workload_config["seed"])
    name = workload_config["name"]
    if name == "Uniform":
        return gen.generate_uniform_workload()
    elif name == "Zipf":
        return gen.generate_zipf_workload(alpha=workload_config["zipf_alpha"])
    elif name == "Phase":
        return gen.generate_phase_workload(phase_length=workload_config["phase_length"],
                                           num_phases=workload_config["num_phases"])
    else:
        raise ValueError(f"Unknown workload: {name}")


def write_file(path: str, size: int) -> None:
    """Write `size` zero bytes to `path`, in chunks so large files stay cheap."""
    with open(path, "wb") as f:
        written = 0
        while written < size:
            batch = min(2 * 1024 * 1024, size - written)
            written += f.write(bytes(batch))


def current_capacity(cache) -> int:
    if isinstance(cache, CountConstrainedFileCache):
        return cache.max_entries
    return cache.capacity()


def run_workload(cache, workload, cache_name: str, workload_name: str,
                 excel_logger: ExcelLogger, window_size: int = 50) -> dict:
    """Replay `workload` against `cache`, writing every missed object to disk."""
    cache.monitor.reset()
    start_time = time.perf_counter()
    capacity = current_capacity(cache)
    free = cache.monitor.record_disk_usage(cache.root)
    rejected = 0

    for step, (key, size) in enumerate(workload):
        if not cache.hit(key):
            try:
                path = cache.add(key, size)
            except CapacityExceeded:
                rejected += 1
            else:
                write_file(path, size)

        # Free space and KeepFree budgets need a statfs call, so only sample per window
        if (step + 1) % window_size == 0 or (step + 1) == len(workload):
            capacity = current_capacity(cache)
            free = cache.monitor.record_disk_usage(cache.root)

        excel_logger.log(
            step=step,
            hit_rate=cache.monitor.get_hit_ratio(),
            hits=cache.monitor.hits,
            misses=cache.monitor.misses,
            total_size=cache.total_size,
            entries=len(cache),
            capacity=capacity,
            timestamp=time.perf_counter() - start_time,
            cache_name=cache_name,
            workload_name=workload_name,
            free_bytes=free,
            evictions=cache.monitor.get_eviction_count(),
            evicted_bytes=cache.monitor.evicted_bytes
        )

    summary = cache.monitor.summary()
    summary["rejected"] = rejected
    logger.info("%s/%s finished: %s", cache_name, workload_name, summary)
    return summary


def save_plots(cache, plot_dir: str, cache_name: str) -> None:
    from fsds.metrics.visualizer import MetricsVisualizer

    os.makedirs(plot_dir, exist_ok=True)
    visualizer = MetricsVisualizer(cache.monitor)
    visualizer.plot_hit_miss_ratio(os.path.join(plot_dir, f"{cache_name}_hit_ratio.png"))
    visualizer.plot_cache_size(os.path.join(plot_dir, f"{cache_name}_cache_size.png"))
    visualizer.plot_evictions(os.path.join(plot_dir, f"{cache_name}_evictions.png"))


def run_single_test(config_path: str) -> dict:
    """Run a single benchmark with the given configuration file."""
    config = load_config(config_path)
    logging.basicConfig(level=config["logging"]["level"], format=config["logging"]["format"])

    cache = build_cache(config)
    cache_name = f"{config['cache_type']}-{config['discard_policy']}".upper()
    workload_name = config["workload"]["name"]
    workload = build_workload(config["workload"])

    excel_logger = ExcelLogger(filename=config["metrics"]["excel_file"])
    summary = run_workload(cache, workload, cache_name, workload_name, excel_logger,
                           window_size=config["metrics"]["window_size"])
    excel_logger.export()

    if config["metrics"]["plot_dir"]:
        save_plots(cache, config["metrics"]["plot_dir"], cache_name)

    print(f"{cache_name} on {workload_name}: hit ratio {summary['hit_ratio']:.3f}, "
          f"{summary['evictions']} evictions, {cache.total_size} bytes in {len(cache)} files")
    return summary


def main(argv=None) -> int:
    argv = sys.argv[1:] if argv is None else argv
    if len(argv) == 1:
        run_single_test(argv[0])
        return 0
    print("Usage: python -m fsds.main <config_file>")
    return 1


if __name__ == "__main__":
    sys.exit(main())
