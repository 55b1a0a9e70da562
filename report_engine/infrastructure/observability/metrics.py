"""Prometheus metrics."""

from prometheus_client import Counter, Histogram

runs_started = Counter(
    "report_runs_started_total",
    "Total number of report runs started",
    ["pump_type"],
)

runs_succeeded = Counter(
    "report_runs_succeeded_total",
    "Total number of report runs succeeded",
    ["pump_type"],
)

runs_failed = Counter(
    "report_runs_failed_total",
    "Total number of report runs failed",
    ["pump_type", "error_code"],
)

run_duration_seconds = Histogram(
    "report_run_duration_seconds",
    "Duration of report runs in seconds",
    buckets=[0.01, 0.05, 0.1, 0.5, 1, 5, 10, 30, 60, 300],
)

rows_generated = Histogram(
    "report_pump_rows_generated",
    "Number of rows returned by a pump generate call",
    buckets=[10, 100, 1000, 10000, 100000, 1000000],
)
