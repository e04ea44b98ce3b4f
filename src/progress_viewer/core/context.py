"""Structured cancellation for report scheduling."""

import logging
import threading
from concurrent.futures import Future
from typing import Optional, Union

logger = logging.getLogger(__name__)

Signal = Union[threading.Event, Future]


class CancellationContext:
    """Cancellation signal shared between a caller and a background task.

    Once cancelled a context stays cancelled. An optional timeout arms a
    timer that cancels the context automatically.
    """

    def __init__(self, timeout: Optional[float] = None):
        """Initialize cancellation context.

        Args:
            timeout: Seconds after which the context cancels itself

        Raises:
            ValueError: If timeout is not positive
        """
        if timeout is not None and timeout <= 0:
            raise ValueError("timeout must be positive")

        self._event = threading.Event()
        self._timer: Optional[threading.Timer] = None

        if timeout is not None:
            self._timer = threading.Timer(timeout, self.cancel)
            self._timer.daemon = True
            self._timer.start()

    @classmethod
    def from_signal(cls, signal: Signal) -> "CancellationContext":
        """Adapt an event or a future of any result type into a context.

        A future counts as fired once it completes, whatever its outcome.

        Args:
            signal: threading.Event or concurrent.futures.Future

        Returns:
            Context cancelled when the signal fires

        Raises:
            TypeError: If signal is neither an Event nor a Future
        """
        if isinstance(signal, threading.Event):
            ctx = cls()
            ctx._event = signal
            return ctx

        if isinstance(signal, Future):
            ctx = cls()
            signal.add_done_callback(lambda _: ctx.cancel())
            return ctx

        raise TypeError(f"unsupported cancellation signal: {type(signal).__name__}")

    @property
    def event(self) -> threading.Event:
        """Underlying event set on cancellation."""
        return self._event

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        """Cancel the context. Calling it again has no effect."""
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()
        if self._timer is not None:
            self._timer.cancel()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout elapses.

        Returns:
            True if the context is cancelled
        """
        return self._event.wait(timeout)

    def __enter__(self) -> "CancellationContext":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cancel()
