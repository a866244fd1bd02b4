"""
Run-record persistence.

Completed scenario results are stored as JSON-lines, one object per
scenario run::

    {"timestamp": "...", "scenario": "tpcb-like",
     "transactions_per_second": 1234.5,
     "latency_us": {"812": 3, "950": 1}}

Either result key may be missing.  Each line is self-contained, so the file
can be appended to safely without parsing what is already there.
"""
from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from loguru import logger

from .constants import APP_DIR_NAME
from .results import LatencyResult, ThroughputResult
from .stats import LatencyHistogram


# ---------------------------------------------------------------------------
# Defaults
# ---------------------------------------------------------------------------

_DEFAULT_DIR = os.path.join(Path.home(), APP_DIR_NAME)
_DEFAULT_FILE = "records.jsonl"


def default_records_path() -> str:
    return os.path.join(_DEFAULT_DIR, _DEFAULT_FILE)


# ---------------------------------------------------------------------------
# Record model
# ---------------------------------------------------------------------------

def _parse_rate(value: Any) -> float:
    """Transactions per second: a finite number >= 0."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"transactions_per_second must be a number, got {value!r}")
    rate = float(value)
    if not math.isfinite(rate) or rate < 0:
        raise ValueError(f"transactions_per_second must be finite and >= 0, got {value!r}")
    return rate


@dataclass
class RunRecord:
    """One stored scenario run, holding whichever results it produced."""

    scenario: str
    timestamp: str = ""
    throughput: Optional[ThroughputResult] = None
    latency: Optional[LatencyResult] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> RunRecord:
        scenario = data.get("scenario")
        if not isinstance(scenario, str):
            raise ValueError("record has no scenario name")

        record = cls(scenario=scenario, timestamp=str(data.get("timestamp", "")))

        rate = data.get("transactions_per_second")
        if rate is not None:
            record.throughput = ThroughputResult(scenario, _parse_rate(rate))

        latency = data.get("latency_us")
        if latency is not None:
            if not isinstance(latency, dict):
                raise ValueError("latency_us must be an object of value -> count")
            record.latency = LatencyResult(scenario, LatencyHistogram.from_dict(latency))

        return record

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "timestamp": self.timestamp or datetime.now(timezone.utc).isoformat(),
            "scenario": self.scenario,
        }
        if self.throughput is not None:
            data["transactions_per_second"] = self.throughput.total_rate_per_second
        if self.latency is not None:
            data["latency_us"] = self.latency.total_histogram.to_dict()
        return data


# ---------------------------------------------------------------------------
# Write
# ---------------------------------------------------------------------------

def append_record(record: RunRecord, path: Optional[str] = None) -> str:
    """Append *record* as a single JSON line.  Returns the file path."""
    path = path or default_records_path()
    directory = os.path.dirname(path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    with open(path, "a", encoding="utf-8") as fh:
        fh.write(json.dumps(record.to_dict(), ensure_ascii=False) + "\n")

    return path


# ---------------------------------------------------------------------------
# Read
# ---------------------------------------------------------------------------

def load_records(path: Optional[str] = None, scenario: Optional[str] = None) -> List[RunRecord]:
    """
    Return the records stored in *path*, oldest first.

    Corrupt lines and lines without a usable scenario are skipped.  When
    *scenario* is given only records for that scenario are returned.  A
    missing file yields an empty list.
    """
    path = path or default_records_path()
    if not os.path.isfile(path):
        return []

    records: List[RunRecord] = []
    with open(path, "rb") as fh:
        for lineno, raw in enumerate(fh, start=1):
            if not raw.strip():
                continue
            try:
                # UnicodeDecodeError is a ValueError, so bad bytes skip the line
                data = json.loads(raw.decode("utf-8"))
                if not isinstance(data, dict):
                    raise ValueError("record is not an object")
                record = RunRecord.from_dict(data)
            except (ValueError, TypeError) as exc:
                logger.debug("Skipping {}:{}: {}", path, lineno, exc)
                continue

            if scenario is not None and record.scenario != scenario:
                continue
            records.append(record)

    logger.debug("Loaded {} record(s) from {}", len(records), path)
    return records
