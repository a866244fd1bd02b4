"""
Result reporters -- interactive text and CSV.

A run holds exactly one reporter, chosen by ``new_reporter`` from an output
format name.  Progress goes to the diagnostic stream (stderr), results go to
the primary stream (stdout).  Any failure to write either stream aborts the
process: a benchmark that silently loses its results is worse than one that
crashes.
"""
from __future__ import annotations

import abc
import sys
import time
from typing import Callable, Iterable, List, Optional, TextIO

from bench.constants import (
    FORMAT_AUTO,
    FORMAT_CSV,
    FORMAT_INTERACTIVE,
    LATENCY_QUANTILES,
    OUTPUT_FORMATS,
    PROGRESS_INTERVAL,
)
from bench.results import LatencyResult, ProgressReport, ThroughputResult
from bench.stats import format_quantile_label, us_to_ms


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class OutputFormatError(ValueError):
    """Raised by ``new_reporter`` for an unrecognised format name."""


class OutputWriteError(SystemExit):
    """
    A reporter could not write its output.

    Derives from ``SystemExit`` so ``except Exception`` blocks in a driver
    cannot swallow it; left alone it ends the process with status 1 and
    prints the message.
    """

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _write(stream: TextIO, text: str) -> None:
    """Write *text* in one call and flush, aborting on any stream failure."""
    try:
        stream.write(text)
        stream.flush()
    except (OSError, ValueError) as exc:
        name = getattr(stream, "name", type(stream).__name__)
        raise OutputWriteError(f"neobench: failed to write to {name}: {exc}") from exc


def _format_progress(report: ProgressReport) -> str:
    return f"[{report.section}][{report.step}] {report.completeness * 100:.2f}%\n"


# ---------------------------------------------------------------------------
# Reporter contract
# ---------------------------------------------------------------------------

class Reporter(abc.ABC):
    """
    Sink for progress updates, final results, and error messages.

    Progress is rate-limited: a report for the same section and step as the
    last one emitted is dropped unless ``PROGRESS_INTERVAL`` seconds have
    passed.  A new section or step is always shown straight away.

    Not thread-safe; the driver serialises calls.
    """

    def __init__(
        self,
        out_stream: Optional[TextIO] = None,
        err_stream: Optional[TextIO] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.out_stream = out_stream if out_stream is not None else sys.stdout
        self.err_stream = err_stream if err_stream is not None else sys.stderr
        self.clock = clock
        # Rate-limit state, always assigned together.
        self.last_progress_report: Optional[ProgressReport] = None
        self.last_progress_time = 0.0

    # -- Progress -----------------------------------------------------------

    def report_progress(self, report: ProgressReport) -> None:
        now = self.clock()
        last = self.last_progress_report
        if (
            last is not None
            and report.section == last.section
            and report.step == last.step
            and now - self.last_progress_time < PROGRESS_INTERVAL
        ):
            return
        self.last_progress_report, self.last_progress_time = report, now
        _write(self.err_stream, _format_progress(report))

    # -- Results ------------------------------------------------------------

    @abc.abstractmethod
    def report_throughput_result(self, result: ThroughputResult) -> None:
        """Write the final throughput summary to the primary stream."""

    @abc.abstractmethod
    def report_latency_result(self, result: LatencyResult) -> None:
        """Write the final latency summary to the primary stream."""

    # -- Diagnostics --------------------------------------------------------

    def error(self, message: str, *args: object) -> None:
        """Write ``ERROR: message % args`` to the diagnostic stream."""
        if args:
            try:
                message = message % args
            except (TypeError, ValueError):
                message = f"{message} {args!r}"
        _write(self.err_stream, f"ERROR: {message}\n")


# ---------------------------------------------------------------------------
# Interactive
# ---------------------------------------------------------------------------

_BANNER = "== Benchmark Completed! =="


class InteractiveReporter(Reporter):
    """Human-readable summaries for a terminal."""

    def report_throughput_result(self, result: ThroughputResult) -> None:
        lines = [
            _BANNER,
            f"Scenario: {result.scenario}",
            f"Rate: {result.total_rate_per_second:.3f} transactions per second",
        ]
        _write(self.out_stream, "\n".join(lines) + "\n")

    def report_latency_result(self, result: LatencyResult) -> None:
        histo = result.total_histogram

        lines = [
            _BANNER,
            f"Scenario: {result.scenario}",
            f"Total Transactions: {histo.total_count()}",
            "",
            "Latency summary:",
            f"  Min:    {us_to_ms(histo.min()):.3f}ms",
            f"  Mean:   {us_to_ms(histo.mean()):.3f}ms",
            f"  Max:    {us_to_ms(histo.max()):.3f}ms",
            f"  Stddev: {us_to_ms(histo.stddev()):.3f}ms",
            "",
            "Latency distribution:",
        ]
        for quantile in LATENCY_QUANTILES:
            value = us_to_ms(histo.value_at_quantile(quantile))
            lines.append(f"  {format_quantile_label(quantile)}: {value:.3f}ms")

        # One write, so stderr progress can't land in the middle of the block
        _write(self.out_stream, "\n".join(lines) + "\n")


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

THROUGHPUT_COLUMNS = ["scenario", "transactions_per_second"]

LATENCY_COLUMNS = [
    "scenario", "samples", "min_ms", "mean_ms", "max_ms", "stdev",
    "p50_ms", "p75_ms", "p99_ms", "p99999_ms",
]

# Quantiles written after the summary cells, in column order.  Only the
# first four fixed quantiles fit: p99_ms carries P95 and p99999_ms P99.
LATENCY_CSV_QUANTILES = LATENCY_QUANTILES[:4]


def _quote(value: str) -> str:
    """Double-quote a CSV field, doubling any embedded quotes."""
    return '"' + value.replace('"', '""') + '"'


def _csv_row(scenario: str, cells: Iterable[float]) -> str:
    return ",".join([_quote(scenario)] + [f"{cell:.3f}" for cell in cells])


class CsvReporter(Reporter):
    """
    Plain progress on stderr, then results as CSV on stdout for easy import
    into a spreadsheet or another tool.
    """

    def report_throughput_result(self, result: ThroughputResult) -> None:
        text = (
            ",".join(THROUGHPUT_COLUMNS) + "\n"
            + _csv_row(result.scenario, [result.total_rate_per_second]) + "\n"
        )
        _write(self.out_stream, text)

    def report_latency_result(self, result: LatencyResult) -> None:
        histo = result.total_histogram

        cells: List[float] = [
            float(histo.total_count()),
            us_to_ms(histo.min()),
            us_to_ms(histo.mean()),
            us_to_ms(histo.max()),
            us_to_ms(histo.stddev()),
        ]
        cells.extend(us_to_ms(histo.value_at_quantile(q)) for q in LATENCY_CSV_QUANTILES)

        text = ",".join(LATENCY_COLUMNS) + "\n" + _csv_row(result.scenario, cells) + "\n"
        _write(self.out_stream, text)


# ---------------------------------------------------------------------------
# Selection
# ---------------------------------------------------------------------------

def is_terminal(stream: TextIO) -> bool:
    """
    True when *stream* itself is attached to an interactive terminal.

    Asks the stream itself; FORCE_COLOR and similar overrides are ignored.
    """
    isatty = getattr(stream, "isatty", None)
    try:
        return bool(isatty and isatty())
    except ValueError:
        # closed stream
        return False


def new_reporter(
    name: str,
    out_stream: Optional[TextIO] = None,
    err_stream: Optional[TextIO] = None,
    clock: Callable[[], float] = time.monotonic,
) -> Reporter:
    """
    Build the reporter for output format *name*.

    ``auto`` picks CSV when stdout is redirected and the interactive
    reporter when it is a terminal.
    """
    out_stream = out_stream if out_stream is not None else sys.stdout
    err_stream = err_stream if err_stream is not None else sys.stderr

    if name == FORMAT_AUTO:
        name = FORMAT_INTERACTIVE if is_terminal(out_stream) else FORMAT_CSV

    if name == FORMAT_INTERACTIVE:
        return InteractiveReporter(out_stream, err_stream, clock)
    if name == FORMAT_CSV:
        return CsvReporter(out_stream, err_stream, clock)

    supported = ", ".join(f"'{f}'" for f in OUTPUT_FORMATS[:-1])
    raise OutputFormatError(
        f"unknown output format: {name}, supported formats are "
        f"{supported} and '{OUTPUT_FORMATS[-1]}'"
    )
