"""
Latency statistics.

A compact histogram of microsecond latency samples plus a couple of pure
helpers.  No I/O, no side effects -- everything here is deterministic and
easy to unit-test.
"""
from __future__ import annotations

import math
from typing import Dict, Iterable, List, Tuple

from .constants import US_PER_MS


# ---------------------------------------------------------------------------
# Histogram
# ---------------------------------------------------------------------------

class LatencyHistogram:
    """
    Append-only distribution of integer latency samples (microseconds).

    Only one counter per distinct value is kept, so a long run with a few
    thousand distinct latencies stays small no matter how many transactions
    were recorded.  Quantile lookup follows HdrHistogram semantics: the
    result is always a value that was actually recorded.
    """

    def __init__(self) -> None:
        self._counts: Dict[int, int] = {}
        self._total = 0

    # -- Recording ----------------------------------------------------------

    def record(self, value: int, count: int = 1) -> None:
        value = int(value)
        if value < 0:
            raise ValueError(f"Latency samples must be >= 0, got {value}")
        if count < 1:
            raise ValueError(f"Sample count must be >= 1, got {count}")
        self._counts[value] = self._counts.get(value, 0) + count
        self._total += count

    def record_all(self, values: Iterable[int]) -> None:
        for value in values:
            self.record(value)

    def merge(self, other: LatencyHistogram) -> None:
        """Add every sample of *other* into this histogram."""
        for value, count in other.items():
            self.record(value, count)

    # -- Queries ------------------------------------------------------------

    def total_count(self) -> int:
        return self._total

    def min(self) -> int:
        return min(self._counts) if self._counts else 0

    def max(self) -> int:
        return max(self._counts) if self._counts else 0

    def mean(self) -> float:
        if not self._total:
            return 0.0
        return sum(v * c for v, c in self._counts.items()) / self._total

    def stddev(self) -> float:
        """Population standard deviation."""
        if not self._total:
            return 0.0
        mean = self.mean()
        squares = sum(c * (v - mean) ** 2 for v, c in self._counts.items())
        return math.sqrt(squares / self._total)

    def value_at_quantile(self, quantile: float) -> int:
        """
        Smallest recorded value with at least *quantile* percent of samples
        at or below it.  *quantile* is on the 0..100 scale.
        """
        if not self._total:
            return 0

        quantile = min(max(quantile, 0.0), 100.0)
        target = max(int(quantile / 100.0 * self._total + 0.5), 1)

        seen = 0
        for value, count in self.items():
            seen += count
            if seen >= target:
                return value
        return self.max()

    def items(self) -> List[Tuple[int, int]]:
        """``(value, count)`` pairs in ascending value order."""
        return sorted(self._counts.items())

    # -- Serialisation ------------------------------------------------------

    def to_dict(self) -> Dict[str, int]:
        return {str(v): c for v, c in self.items()}

    @classmethod
    def from_dict(cls, data: Dict[str, int]) -> LatencyHistogram:
        histo = cls()
        for value, count in data.items():
            histo.record(int(value), int(count))
        return histo

    @classmethod
    def from_samples(cls, samples: Iterable[int]) -> LatencyHistogram:
        histo = cls()
        histo.record_all(samples)
        return histo

    def __repr__(self) -> str:
        return (
            f"LatencyHistogram(count={self._total}, min={self.min()}, "
            f"max={self.max()})"
        )


# ---------------------------------------------------------------------------
# Pure helper functions
# ---------------------------------------------------------------------------

def us_to_ms(value: float) -> float:
    """Convert a microsecond value to milliseconds."""
    return float(value) / US_PER_MS


def format_quantile_label(quantile: float) -> str:
    """``99.999`` -> ``"P99.999"``, ``50`` -> ``"P50.000"``."""
    return f"P{quantile:.3f}"
