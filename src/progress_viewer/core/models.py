"""
Data models for progress reports.

A Report is a point-in-time snapshot of a tracker. It is created fresh on
every scheduler tick or on-demand query and is never mutated afterward.
"""

from dataclasses import dataclass, asdict
from datetime import datetime, timedelta
from typing import Dict, Any


@dataclass(frozen=True)
class Report:
    """Snapshot of tracker progress."""
    # Current time
    now: datetime
    # Time when progress was started
    started_at: datetime
    # Time since last report
    dt: timedelta
    total: int
    done: int
    # May be negative once done exceeds total
    left: int
    ratio: float
    percent_int: int
    percent_float: float
    # Time elapsed since start
    elapsed: timedelta
    # Estimated time to finish, unclamped
    eta: timedelta
    # Average done items per second
    rps_avg: float
    # Items per second since the previous report
    rps_inst: float
    # Average done items per minute
    rpm_avg: float

    @classmethod
    def empty(cls) -> "Report":
        """Return the zero-value report."""
        return cls(
            now=datetime.min,
            started_at=datetime.min,
            dt=timedelta(0),
            total=0,
            done=0,
            left=0,
            ratio=0.0,
            percent_int=0,
            percent_float=0.0,
            elapsed=timedelta(0),
            eta=timedelta(0),
            rps_avg=0.0,
            rps_inst=0.0,
            rpm_avg=0.0
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        result = asdict(self)
        for key in ('now', 'started_at'):
            result[key] = result[key].isoformat()
        for key in ('dt', 'elapsed', 'eta'):
            result[key] = result[key].total_seconds()
        return result

    def __str__(self) -> str:
        return f"Report(done={self.done}/{self.total}, percent={self.percent_int}%, rps={self.rps_avg:.2f})"
