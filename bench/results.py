"""
Values handed from a benchmark run to the reporting layer.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .stats import LatencyHistogram


@dataclass(frozen=True)
class ProgressReport:
    """How far a named phase/step has progressed (``completeness`` in 0..1)."""

    section: str
    step: str
    completeness: float = 0.0


@dataclass
class ThroughputResult:
    """Overall transaction rate of one completed scenario."""

    scenario: str
    total_rate_per_second: float = 0.0


@dataclass
class LatencyResult:
    """Latency distribution of one completed scenario."""

    scenario: str
    total_histogram: LatencyHistogram = field(default_factory=LatencyHistogram)
