from .monitor import MetricsMonitor
