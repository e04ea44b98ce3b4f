"""Background scheduling of progress reports."""

import logging
import threading
from enum import Enum
from typing import Callable, Optional, TYPE_CHECKING

from .context import CancellationContext
from .models import Report

if TYPE_CHECKING:
    from ..ui.reporter import Reporter

logger = logging.getLogger(__name__)


class SchedulerState(Enum):
    """Lifecycle of a report scheduler."""
    IDLE = "idle"
    RUNNING = "running"
    STOPPED = "stopped"


class ReportScheduler:
    """Emits reports on a fixed interval until its context is cancelled.

    One report is emitted immediately on start. After cancellation the
    reporter is finalized exactly once and the completion event is set.
    """

    def __init__(
        self,
        snapshot: Callable[[], Report],
        reporter: "Reporter",
        interval: float,
        completed: Optional[threading.Event] = None
    ):
        """Initialize report scheduler.

        Args:
            snapshot: Callable producing the next report
            reporter: Reporter receiving every report
            interval: Seconds between reports
            completed: Event set once the reporter has been finalized
        """
        self.snapshot = snapshot
        self.reporter = reporter
        self.interval = interval
        self.completed = completed or threading.Event()
        self.state = SchedulerState.IDLE
        self._thread: Optional[threading.Thread] = None

    def start(self, ctx: CancellationContext) -> None:
        """Launch the report thread.

        Args:
            ctx: Context whose cancellation stops reporting
        """
        self.state = SchedulerState.RUNNING
        self._thread = threading.Thread(
            target=self._run,
            args=(ctx,),
            name="progress-reporter",
            daemon=True
        )
        self._thread.start()
        logger.debug(f"Report scheduler started: interval={self.interval}s")

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the scheduler to finish.

        Returns:
            True if the reporter has been finalized
        """
        return self.completed.wait(timeout)

    def _run(self, ctx: CancellationContext) -> None:
        try:
            self._emit()
            # each wait is relative to the previous wake
            while not ctx.wait(self.interval):
                self._emit()
        finally:
            self._finalize()
            self.state = SchedulerState.STOPPED
            self.completed.set()
            logger.debug("Report scheduler stopped")

    def _emit(self) -> None:
        try:
            self.reporter.report(self.snapshot())
        except Exception as e:
            logger.error(f"Failed to emit progress report: {e}")

    def _finalize(self) -> None:
        try:
            self.reporter.finalize()
        except Exception as e:
            logger.error(f"Failed to finalize reporter: {e}")
