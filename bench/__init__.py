"""Benchmark result library -- result values, latency statistics, and storage."""

from .records import RunRecord, append_record, load_records
from .results import LatencyResult, ProgressReport, ThroughputResult
from .stats import LatencyHistogram, format_quantile_label, us_to_ms

__all__ = [
    "LatencyHistogram",
    "LatencyResult",
    "ProgressReport",
    "RunRecord",
    "ThroughputResult",
    "append_record",
    "format_quantile_label",
    "load_records",
    "us_to_ms",
]
