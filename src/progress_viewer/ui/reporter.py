"""Reporter abstraction consumed by the report scheduler."""

from abc import ABC, abstractmethod

from ..core.models import Report


class Reporter(ABC):
    """Renders progress reports somewhere."""

    @abstractmethod
    def report(self, report: Report) -> None:
        """Render a single report."""

    @abstractmethod
    def finalize(self) -> None:
        """Called once after the last report."""
