"""Tests for background report scheduling."""

import threading
from concurrent.futures import Future
from unittest.mock import Mock

import pytest

from progress_viewer.core.context import CancellationContext
from progress_viewer.core.scheduler import ReportScheduler, SchedulerState
from progress_viewer.core.tracker import ProgressTracker
from progress_viewer.ui.reporter import Reporter


@pytest.fixture
def reporter():
    """Reporter mock recording calls."""
    return Mock(spec=Reporter)


class TestReportScheduler:
    """Scheduler lifecycle."""

    def test_initial_state_idle(self, reporter):
        scheduler = ReportScheduler(snapshot=Mock(), reporter=reporter, interval=1.0)

        assert scheduler.state == SchedulerState.IDLE

    def test_immediate_cancel_reports_once_and_finalizes(self, reporter):
        snapshot = Mock(return_value="report")
        scheduler = ReportScheduler(snapshot=snapshot, reporter=reporter, interval=60)
        ctx = CancellationContext()
        ctx.cancel()

        scheduler.start(ctx)

        assert scheduler.join(timeout=5)
        reporter.report.assert_called_once_with("report")
        reporter.finalize.assert_called_once_with()
        assert scheduler.state == SchedulerState.STOPPED

    def test_periodic_reports(self, reporter):
        enough = threading.Event()
        calls = []

        def on_report(report):
            calls.append(report)
            if len(calls) >= 3:
                enough.set()

        reporter.report.side_effect = on_report
        scheduler = ReportScheduler(snapshot=Mock(), reporter=reporter, interval=0.01)
        ctx = CancellationContext()

        scheduler.start(ctx)
        assert enough.wait(timeout=5)
        ctx.cancel()

        assert scheduler.join(timeout=5)
        assert len(calls) >= 3
        reporter.finalize.assert_called_once_with()

    def test_reporter_errors_do_not_stop_scheduler(self, reporter):
        reporter.report.side_effect = RuntimeError("boom")
        scheduler = ReportScheduler(snapshot=Mock(), reporter=reporter, interval=60)
        ctx = CancellationContext()
        ctx.cancel()

        scheduler.start(ctx)

        assert scheduler.join(timeout=5)
        reporter.finalize.assert_called_once_with()

    def test_finalize_runs_before_completion(self, reporter):
        order = []
        completed = threading.Event()
        reporter.finalize.side_effect = lambda: order.append(completed.is_set())
        scheduler = ReportScheduler(
            snapshot=Mock(), reporter=reporter, interval=60, completed=completed
        )
        ctx = CancellationContext()
        ctx.cancel()

        scheduler.start(ctx)

        assert completed.wait(timeout=5)
        assert order == [False]


class TestTrackerControl:
    """Starting and stopping a tracker."""

    def test_start_cancel_wait(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)
        ctx = CancellationContext()

        tracker.start(ctx)
        ctx.cancel()

        assert tracker.wait(timeout=5)
        assert tracker.done().is_set()
        reporter.finalize.assert_called_once_with()
        assert tracker.state == SchedulerState.STOPPED

    def test_state_before_start(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)

        assert tracker.state == SchedulerState.IDLE
        assert not tracker.wait(timeout=0.01)

    def test_start_with_event(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)
        stop = threading.Event()

        tracker.start_signal(stop)
        stop.set()

        assert tracker.wait(timeout=5)
        reporter.finalize.assert_called_once_with()

    def test_start_with_future(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)
        future = Future()

        tracker.start_signal(future)
        future.set_result({"any": "payload"})

        assert tracker.wait(timeout=5)
        reporter.finalize.assert_called_once_with()

    def test_first_report_reflects_progress(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)
        tracker.add(4)
        ctx = CancellationContext()
        ctx.cancel()

        tracker.start(ctx)

        assert tracker.wait(timeout=5)
        report = reporter.report.call_args[0][0]
        assert report.done == 4
        assert report.total == 10

    def test_running_context_manager(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)

        with tracker.running():
            tracker.add(10)

        assert tracker.done().is_set()
        reporter.finalize.assert_called_once_with()

    def test_running_finalizes_on_error(self, reporter):
        tracker = ProgressTracker(10, reporter=reporter)

        with pytest.raises(KeyError):
            with tracker.running():
                raise KeyError("work failed")

        reporter.finalize.assert_called_once_with()
