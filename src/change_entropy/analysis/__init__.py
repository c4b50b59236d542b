"""Period-based change entropy analysis."""

from .driver import AnalysisDriver
from .series import (
    REFACTORED,
    UNCHANGED,
    FileSeries,
    SeriesValue,
    ValueKind,
    block_average_changes,
    block_averages,
    build_file_series,
    percentage_change,
    percentage_changes,
)

__all__ = [
    "AnalysisDriver",
    "FileSeries",
    "REFACTORED",
    "SeriesValue",
    "UNCHANGED",
    "ValueKind",
    "block_average_changes",
    "block_averages",
    "build_file_series",
    "percentage_change",
    "percentage_changes",
]
