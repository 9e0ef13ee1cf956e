"""Terminal rendering for the exercise engine CLI."""

from ui.components import (
    GradePanel,
    ResultsPanel,
    SnapshotTable,
    format_duration,
)
from ui.styles import (
    CONSOLE,
    VIET_RED,
    VIET_GOLD,
    SUCCESS_GREEN,
    ERROR_RED,
    INFO_BLUE,
    MUTED_GRAY,
)

__all__ = [
    "GradePanel",
    "ResultsPanel",
    "SnapshotTable",
    "format_duration",
    "CONSOLE",
    "VIET_RED",
    "VIET_GOLD",
    "SUCCESS_GREEN",
    "ERROR_RED",
    "INFO_BLUE",
    "MUTED_GRAY",
]
