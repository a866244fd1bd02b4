"""UI layer -- result reporters for terminals and CSV consumers."""

from .output import (
    CsvReporter,
    InteractiveReporter,
    OutputFormatError,
    OutputWriteError,
    Reporter,
    is_terminal,
    new_reporter,
)

__all__ = [
    "CsvReporter",
    "InteractiveReporter",
    "OutputFormatError",
    "OutputWriteError",
    "Reporter",
    "is_terminal",
    "new_reporter",
]
