"""Progress tracker: shared done counter plus report scheduling."""

import logging
import math
import threading
from contextlib import contextmanager
from datetime import datetime, timedelta
from typing import Callable, Iterator, Optional

from .context import CancellationContext, Signal
from .errors import InvalidTotalError
from .models import Report
from .scheduler import ReportScheduler, SchedulerState
from ..ui.reporter import Reporter
from ..ui.text_reporter import TextReporter

logger = logging.getLogger(__name__)

# Seconds between scheduled reports
DEFAULT_REPORT_INTERVAL = 1.0

# Largest whole-second magnitude a timedelta can hold
_MAX_ETA_SECONDS = timedelta.max.days * 86400


class ProgressTracker:
    """Tracks completed work units and reports progress in the background.

    Producers call add() from any number of threads. Once started, a single
    background thread takes a snapshot every report_interval seconds and
    hands it to the reporter.
    """

    def __init__(
        self,
        total: int,
        report_interval: float = DEFAULT_REPORT_INTERVAL,
        reporter: Optional[Reporter] = None,
        clock: Callable[[], datetime] = datetime.now
    ):
        """Initialize progress tracker.

        Args:
            total: Total number of items to process
            report_interval: Seconds between scheduled reports
            reporter: Reporter receiving snapshots, TextReporter by default
            clock: Source of the current time

        Raises:
            InvalidTotalError: If total is not positive
        """
        if total <= 0:
            raise InvalidTotalError(total)

        self._total = total
        self._done = 0
        self._lock = threading.Lock()
        self.report_interval = report_interval
        self.reporter = reporter if reporter is not None else TextReporter()
        self.clock = clock

        self.started_at = self.clock()
        self.last_reported_at = self.started_at
        self.last_reported_done = 0

        self._completed = threading.Event()
        self._scheduler: Optional[ReportScheduler] = None

    @classmethod
    def with_legend(cls, total: int, legend: str) -> "ProgressTracker":
        """Shortcut for a tracker with a text reporter using the given legend."""
        return cls(total, reporter=TextReporter().with_legend(legend))

    @property
    def total(self) -> int:
        return self._total

    @property
    def done_count(self) -> int:
        with self._lock:
            return self._done

    @property
    def report_interval(self) -> float:
        return self._report_interval

    @report_interval.setter
    def report_interval(self, seconds: float) -> None:
        if seconds <= 0:
            raise ValueError("report_interval must be positive")
        self._report_interval = seconds

    @property
    def state(self) -> SchedulerState:
        if self._scheduler is None:
            return SchedulerState.IDLE
        return self._scheduler.state

    def with_reporter(self, reporter: Reporter) -> "ProgressTracker":
        """Return a copy of this tracker using a different reporter."""
        return self._clone(reporter=reporter)

    def with_report_interval(self, seconds: float) -> "ProgressTracker":
        """Return a copy of this tracker with a different report interval."""
        return self._clone(report_interval=seconds)

    def add(self, n: int = 1) -> None:
        """Record n more items as done.

        Args:
            n: Number of items completed
        """
        with self._lock:
            self._done += n

    def report(self) -> Report:
        """Take a snapshot of current progress.

        The snapshot becomes the reference point for the next call's dt and
        instantaneous rate, so calling this twice in a row yields a near-zero
        dt the second time.

        Returns:
            Current progress report
        """
        if self._total == 0:
            return Report.empty()

        now = self.clock()
        done = self.done_count
        dt = now - self.last_reported_at
        elapsed = now - self.started_at
        elapsed_seconds = elapsed.total_seconds()

        ratio = done / self._total
        rps = done / elapsed_seconds if elapsed_seconds > 0 else 0.0
        rpm = done / (elapsed_seconds / 60) if elapsed_seconds > 0 else 0.0

        eta = timedelta(0)
        if rps != 0:
            eta = _eta_duration((self._total - done) / rps)

        report = Report(
            now=now,
            started_at=self.started_at,
            dt=dt,
            total=self._total,
            done=done,
            left=self._total - done,
            ratio=ratio,
            percent_int=math.floor(ratio * 100),
            percent_float=ratio * 100,
            elapsed=elapsed,
            eta=eta,
            rps_avg=rps,
            rps_inst=_instant_rate(done - self.last_reported_done, dt),
            rpm_avg=rpm
        )

        self.last_reported_done = done
        self.last_reported_at = now

        return report

    def start(self, ctx: CancellationContext) -> None:
        """Start background reporting until ctx is cancelled.

        Args:
            ctx: Cancellation context stopping the reporter
        """
        self.started_at = self.clock()
        self.last_reported_at = self.started_at

        self._scheduler = ReportScheduler(
            snapshot=self.report,
            reporter=self.reporter,
            interval=self.report_interval,
            completed=self._completed
        )
        self._scheduler.start(ctx)
        logger.info(f"Progress tracking started: total={self._total}")

    def start_signal(self, signal: Signal) -> None:
        """Start background reporting until signal fires.

        Args:
            signal: threading.Event or concurrent.futures.Future of any result type
        """
        self.start(CancellationContext.from_signal(signal))

    def done(self) -> threading.Event:
        """Event set once the final report has been flushed."""
        return self._completed

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the reporter has been finalized.

        Args:
            timeout: Maximum seconds to wait

        Returns:
            True if finalized, False on timeout
        """
        return self._completed.wait(timeout)

    @contextmanager
    def running(self) -> Iterator["ProgressTracker"]:
        """Report in the background for the duration of a with-block."""
        ctx = CancellationContext()
        self.start(ctx)
        try:
            yield self
        finally:
            ctx.cancel()
            self.wait()

    def _clone(self, **overrides) -> "ProgressTracker":
        options = {
            "total": self._total,
            "report_interval": self.report_interval,
            "reporter": self.reporter,
            "clock": self.clock
        }
        options.update(overrides)
        clone = ProgressTracker(**options)
        clone.add(self.done_count)
        return clone


def _instant_rate(delta: int, dt: timedelta) -> float:
    seconds = dt.total_seconds()
    if seconds > 0:
        return delta / seconds
    # undefined rate, displayed as is
    if delta == 0:
        return math.nan
    return math.copysign(math.inf, delta)


def _eta_duration(seconds: float) -> timedelta:
    # halves round away from zero, matching the display rounding
    rounded = math.floor(abs(seconds) + 0.5)
    rounded = min(rounded, _MAX_ETA_SECONDS)
    return timedelta(seconds=math.copysign(rounded, seconds))
