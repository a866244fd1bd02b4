#!/usr/bin/env python3
"""
neobench result viewer -- render recorded benchmark results.

Usage::

    python neobench.py records.jsonl                 # auto: summary on a tty, CSV when piped
    python neobench.py -f csv records.jsonl          # force CSV
    python neobench.py -f interactive records.jsonl  # force human-readable
    python neobench.py --scenario tpcb-like          # one scenario from the default file
    python neobench.py --set-default-format csv      # persist the default format
"""
from __future__ import annotations

import argparse
import sys
from typing import List, Optional

from loguru import logger
from rich.console import Console

from bench.config import config_path, load_config, set_default_format
from bench.records import RunRecord, default_records_path, load_records
from bench.results import ProgressReport
from ui.output import OutputFormatError, Reporter, new_reporter

console = Console(stderr=True)

_PROGRESS_SECTION = "report"
_PROGRESS_STEP = "render"
_PROGRESS_DONE_STEP = "done"


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

def _configure_logging(verbose: bool) -> None:
    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "WARNING")


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

def render_records(reporter: Reporter, records: List[RunRecord]) -> None:
    """Feed every stored result through *reporter*, with progress along the way."""
    total = len(records)
    for idx, record in enumerate(records):
        reporter.report_progress(ProgressReport(_PROGRESS_SECTION, _PROGRESS_STEP, idx / total))
        if record.throughput is not None:
            reporter.report_throughput_result(record.throughput)
        if record.latency is not None:
            reporter.report_latency_result(record.latency)
    reporter.report_progress(ProgressReport(_PROGRESS_SECTION, _PROGRESS_DONE_STEP, 1.0))


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="neobench -- render recorded benchmark results",
    )
    parser.add_argument("records", nargs="?", metavar="FILE", help="JSON-lines record file (default: from config)")
    parser.add_argument("--format", "-f", metavar="FORMAT", help="Output format: auto, interactive or csv (default: from config)")
    parser.add_argument("--scenario", type=str, metavar="NAME", help="Only render results for this scenario")
    parser.add_argument("--set-default-format", type=str, metavar="FORMAT", help="Persist the default output format and exit")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging on stderr")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    # Config mode
    if args.set_default_format is not None:
        try:
            path = set_default_format(args.set_default_format)
        except ValueError as exc:
            console.print(f"[red]Error: {exc}[/red]")
            return 1
        console.print(f"[green]Default output format saved to:[/green] {path}")
        return 0

    config = load_config()
    logger.debug("Using config {}", config_path())

    try:
        reporter = new_reporter(args.format or config["output"])
    except OutputFormatError as exc:
        console.print(f"[red]Error: {exc}[/red]")
        return 1

    path = args.records or config.get("records_file") or default_records_path()
    records = load_records(path, scenario=args.scenario)
    if not records:
        if args.scenario:
            reporter.error("no results for scenario %s in %s", args.scenario, path)
        else:
            reporter.error("no results found in %s", path)
        return 1

    try:
        render_records(reporter, records)
    except KeyboardInterrupt:
        console.print("\n[yellow]Cancelled by user[/yellow]")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
