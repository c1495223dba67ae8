import pandas as pd
import numpy as np
import os


class ExcelLogger:
    NUMERIC_COLUMNS = ['hit_rate', 'seconds', 'total_size', 'capacity', 'free_bytes', 'evicted_bytes']

    def __init__(self, filename="fsds_metrics.xlsx"):
        self.filename = filename
        self.records = {}

    def log(self, step, hit_rate, hits, misses, total_size, entries, capacity, timestamp,
            cache_name, workload_name, free_bytes=None, evictions=0, evicted_bytes=0):
        if cache_name not in self.records:
            self.records[cache_name] = []
        self.records[cache_name].append({
            "workload_name": workload_name,
            "step": step,
            "hit_rate": hit_rate,
            "hits": hits,
            "misses": misses,
            "total_size": total_size,
            "entries": entries,
            "capacity": capacity,
            "seconds": timestamp,
            "free_bytes": free_bytes,
            "evictions": evictions,
            "evicted_bytes": evicted_bytes
        })

    def to_frame(self, cache_name) -> pd.DataFrame:
        df = pd.DataFrame(self.records.get(cache_name, []))
        if df.empty:
            return df
        df = df.drop_duplicates(subset=['workload_name', 'step'], keep='last')
        df = df.sort_values(['workload_name', 'step'], kind='stable')
        for col in self.NUMERIC_COLUMNS:
            df[col] = df[col].astype(np.float64)
        return df.reset_index(drop=True)

    def export(self):
        """Write one sheet per cache, merging with rows already in the file."""
        if os.path.exists(self.filename):
            with pd.ExcelWriter(self.filename, engine='openpyxl', mode='a', if_sheet_exists='replace') as writer:
                for cache_name in self.records:
                    df_new = self.to_frame(cache_name)
                    try:
                        df_existing = pd.read_excel(self.filename, sheet_name=cache_name)
                        df_combined = pd.concat([df_existing, df_new], ignore_index=True)
                        df_combined = df_combined.drop_duplicates(subset=['workload_name', 'step'], keep='last')
                        df_combined = df_combined.sort_values(['workload_name', 'step'], kind='stable')
                    except ValueError:
                        df_combined = df_new
                    df_combined.to_excel(writer, sheet_name=cache_name, index=False, float_format='%.6f')
        else:
            with pd.ExcelWriter(self.filename, engine='openpyxl') as writer:
                for cache_name in self.records:
                    self.to_frame(cache_name).to_excel(writer, sheet_name=cache_name, index=False,
                                                       float_format='%.6f')
