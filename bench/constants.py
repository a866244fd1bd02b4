"""
Shared constants used across the reporting modules.

Centralises magic numbers, output format names, and tunables so they live
in exactly one place.
"""

# ---------------------------------------------------------------------------
# Output formats
# ---------------------------------------------------------------------------

FORMAT_AUTO = "auto"
FORMAT_INTERACTIVE = "interactive"
FORMAT_CSV = "csv"

OUTPUT_FORMATS = (FORMAT_AUTO, FORMAT_INTERACTIVE, FORMAT_CSV)
DEFAULT_OUTPUT_FORMAT = FORMAT_AUTO

# ---------------------------------------------------------------------------
# Progress reporting
# ---------------------------------------------------------------------------

PROGRESS_INTERVAL = 10.0        # seconds between repeats of one section/step

# ---------------------------------------------------------------------------
# Latency rendering
# ---------------------------------------------------------------------------

US_PER_MS = 1000.0               # histograms record microseconds
LATENCY_QUANTILES = (50.0, 75.0, 95.0, 99.0, 99.999)

# ---------------------------------------------------------------------------
# On-disk locations
# ---------------------------------------------------------------------------

APP_DIR_NAME = ".neobench"
