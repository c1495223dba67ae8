CONFIG = {
    # Directory the benchmark cache lives in (created if missing)
    "cache_root": "fsds_cache",

    # "size" for a byte budget, "count" for a file-count budget
    "cache_type": "size",

    # Discard order: "lru" (least recently used) or "lfu" (least frequently used)
    "discard_policy": "lru",

    # Byte budget for size caches; ignored when keep_free_bytes is set
    "max_bytes": 64 * 1024 * 1024,

    # If set, size caches keep this many bytes free on disk instead
    "keep_free_bytes": None,

    # File-count budget for count caches
    "max_entries": 500,

    # Synthetic workload shape
    "workload": {
        "name": "Zipf",  # Uniform, Zipf or Phase
        "key_space_size": 2000,
        "num_requests": 10000,
        "min_size": 1024,
        "max_size": 64 * 1024,
        "zipf_alpha": 1.2,
        "phase_length": 1000,
        "num_phases": 10,
        "seed": 2025
    },

    # Metrics sampling
    "metrics": {
        "window_size": 50,  # Sample disk usage every 50 requests
        "history_size": None,  # Events kept for plots; None keeps the whole run
        "excel_file": "fsds_metrics.xlsx",
        "plot_dir": None  # Save plots here when set
    },

    "logging": {
        "level": "WARNING",
        "format": "%(asctime)s %(name)s %(levelname)s %(message)s"
    }
}
