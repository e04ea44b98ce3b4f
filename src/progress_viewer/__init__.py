"""
Progress viewer.

Tracks units of work completed by long-running tasks and reports elapsed
time, rate, ETA and a progress bar from a background thread.
"""

__version__ = "0.1.0"

from .core.errors import ProgressError, InvalidTotalError, ConfigError
from .core.models import Report
from .core.context import CancellationContext
from .core.scheduler import ReportScheduler, SchedulerState
from .core.tracker import ProgressTracker, DEFAULT_REPORT_INTERVAL
from .ui.reporter import Reporter
from .ui.text_reporter import (
    TextReporter, LEGEND_DEFAULT, LEGEND_PROGRESS_BAR, compile_legend
)
from .ui.log_reporter import LogReporter
from .ui.formatting import render_progress_bar

__all__ = [
    "__version__",

    # Exceptions
    "ProgressError", "InvalidTotalError", "ConfigError",

    # Tracking
    "ProgressTracker", "DEFAULT_REPORT_INTERVAL", "Report",
    "CancellationContext", "ReportScheduler", "SchedulerState",

    # Reporters
    "Reporter", "TextReporter", "LogReporter",
    "LEGEND_DEFAULT", "LEGEND_PROGRESS_BAR",
    "compile_legend", "render_progress_bar",
]
