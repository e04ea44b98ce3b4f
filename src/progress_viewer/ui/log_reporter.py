"""Machine-readable reporter emitting JSON records through logging."""

import copy
import json
import logging
from typing import Optional

from ..core.models import Report
from .reporter import Reporter


class LogReporter(Reporter):
    """Logs every report as a single JSON object."""

    def __init__(self, logger: Optional[logging.Logger] = None, level: int = logging.INFO):
        """Initialize log reporter.

        Args:
            logger: Logger receiving the records
            level: Logging level of progress records
        """
        self.logger = logger or logging.getLogger(__name__)
        self.level = level
        self.last_report: Optional[Report] = None

    def with_logger(self, logger: logging.Logger) -> "LogReporter":
        """Return a new reporter logging to a different logger.

        Args:
            logger: Logger receiving the records

        Returns:
            Configured copy of this reporter
        """
        ret = self._clone()
        ret.logger = logger
        return ret

    def with_level(self, level: int) -> "LogReporter":
        """Return a new reporter logging at a different level.

        Args:
            level: Logging level of progress records

        Returns:
            Configured copy of this reporter
        """
        ret = self._clone()
        ret.level = level
        return ret

    def report(self, report: Report) -> None:
        """Log a report as JSON.

        The decoded payload is also attached to the record as ``progress``.

        Args:
            report: Report to log
        """
        payload = report.to_dict()
        self.logger.log(self.level, json.dumps(payload, sort_keys=True), extra={"progress": payload})
        self.last_report = report

    def finalize(self) -> None:
        """Log a closing record with the last known progress."""
        if self.last_report is None:
            self.logger.log(self.level, "progress finished")
            return
        self.logger.log(
            self.level,
            f"progress finished: {self.last_report.done}/{self.last_report.total}"
        )

    def _clone(self) -> "LogReporter":
        ret = copy.copy(self)
        ret.last_report = None
        return ret
