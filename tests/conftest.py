"""Shared fixtures."""

from datetime import datetime, timedelta

import pytest


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime):
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, seconds: float) -> None:
        self.current += timedelta(seconds=seconds)


@pytest.fixture
def clock():
    """Fake clock starting at a fixed time."""
    return FakeClock(datetime(2023, 12, 2, 13, 1, 21))
