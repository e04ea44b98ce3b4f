"""Tests for cancellation contexts."""

import threading
from concurrent.futures import Future

import pytest

from progress_viewer.core.context import CancellationContext


class TestCancellationContext:
    """Cancellation semantics."""

    def test_cancel(self):
        ctx = CancellationContext()
        assert not ctx.cancelled

        ctx.cancel()
        ctx.cancel()

        assert ctx.cancelled
        assert ctx.wait(timeout=0)

    def test_wait_times_out(self):
        assert not CancellationContext().wait(timeout=0.01)

    def test_context_manager_cancels_on_exit(self):
        with CancellationContext() as ctx:
            assert not ctx.cancelled

        assert ctx.cancelled

    def test_timeout_cancels(self):
        ctx = CancellationContext(timeout=0.01)

        assert ctx.wait(timeout=5)

    def test_invalid_timeout(self):
        with pytest.raises(ValueError):
            CancellationContext(timeout=0)

    def test_from_event_shares_event(self):
        event = threading.Event()
        ctx = CancellationContext.from_signal(event)

        assert ctx.event is event
        event.set()
        assert ctx.cancelled

    @pytest.mark.parametrize("resolve", [
        lambda f: f.set_result(42),
        lambda f: f.set_exception(RuntimeError("failed")),
        lambda f: f.cancel(),
    ])
    def test_from_future_fires_on_any_outcome(self, resolve):
        future = Future()
        ctx = CancellationContext.from_signal(future)
        assert not ctx.cancelled

        resolve(future)

        assert ctx.cancelled

    def test_from_completed_future(self):
        future = Future()
        future.set_result(None)

        assert CancellationContext.from_signal(future).cancelled

    def test_unsupported_signal(self):
        with pytest.raises(TypeError, match="unsupported"):
            CancellationContext.from_signal("stop")
