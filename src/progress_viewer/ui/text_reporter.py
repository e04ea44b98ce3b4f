"""
Text reporter driven by a legend template.

A legend is a plain string with named placeholders, for example::

    "[{now}] - working ({done}/{total}) done {percent_int}%, RPS {rps_avg}, elapsed {elapsed}, ETA {eta}"

which produces lines like::

    [2023-12-02 01:01:21] - working (39/360) done 10%, RPS 9.74, elapsed 4s, ETA 32s

Any brace group that is not a known placeholder is written literally.
"""

import copy
import io
import logging
import sys
from datetime import timedelta
from typing import Any, IO, Optional, Tuple

from ..core.models import Report
from .formatting import format_duration, format_timestamp, render_progress_bar, round_duration
from .reporter import Reporter

logger = logging.getLogger(__name__)

LEGEND_DEFAULT = (
    "[{now}] - working ({done}/{total}) done {percent_int}%, "
    "RPS {rps_avg}, elapsed {elapsed}, ETA {eta}\r"
)
LEGEND_PROGRESS_BAR = "{progress_bar} {percent_int}%, {rps_avg} RPS, {eta} ETA\r"

DEFAULT_FLOAT_PRECISION = 2
DEFAULT_PROGRESS_BAR_WIDTH = 80

# Placeholder name -> (positional index, is float)
PLACEHOLDERS = {
    "now": (0, False),
    "started_at": (1, False),
    "dt": (2, False),
    "total": (3, False),
    "done": (4, False),
    "left": (5, False),
    "ratio": (6, True),
    "percent_int": (7, False),
    "percent_float": (8, True),
    "elapsed": (9, False),
    "eta": (10, False),
    "rps_avg": (11, True),
    "rps_inst": (12, True),
    "rpm": (13, True),
    "progress_bar": (14, False),
}


def compile_legend(legend: str, float_precision: int) -> str:
    """Compile a legend into a positional str.format template.

    Args:
        legend: Legend with named placeholders
        float_precision: Digits after the decimal point for float values

    Returns:
        Template expecting the arguments built by TextReporter.render
    """
    compiled = legend.replace("{", "{{").replace("}", "}}")
    for name, (index, is_float) in PLACEHOLDERS.items():
        spec = f":.{float_precision}f" if is_float else ""
        compiled = compiled.replace("{{" + name + "}}", "{" + str(index) + spec + "}")
    return compiled


class TextReporter(Reporter):
    """Writes one line of text per report to an output stream.

    Configuration methods return new instances so a base reporter can be
    shared between trackers. The legend is compiled on the first report and
    cannot be changed on that instance afterward.
    """

    def __init__(
        self,
        legend: str = LEGEND_DEFAULT,
        float_precision: int = DEFAULT_FLOAT_PRECISION,
        output: Optional[IO[Any]] = None,
        progress_bar_width: int = DEFAULT_PROGRESS_BAR_WIDTH
    ):
        """Initialize text reporter.

        Args:
            legend: Legend template
            float_precision: Digits after the decimal point for float values
            output: Text or binary stream, stderr by default
            progress_bar_width: Progress bar width including brackets
        """
        self.legend = legend
        self.float_precision = float_precision
        self.output = output if output is not None else sys.stderr
        self.progress_bar_width = progress_bar_width

        self._reset_runtime()

    def with_legend(self, legend: str) -> "TextReporter":
        """Return a new reporter with a custom legend."""
        ret = self._clone()
        ret.legend = legend
        return ret

    def with_float_precision(self, float_precision: int) -> "TextReporter":
        """Return a new reporter with a custom float precision."""
        ret = self._clone()
        ret.float_precision = float_precision
        return ret

    def with_output(self, output: IO[Any]) -> "TextReporter":
        """Return a new reporter writing to a different stream."""
        ret = self._clone()
        ret.output = output
        return ret

    def with_progress_bar_width(self, width: int) -> "TextReporter":
        """Return a new reporter with a different progress bar width."""
        ret = self._clone()
        ret.progress_bar_width = width
        return ret

    @property
    def compiled_legend(self) -> Optional[str]:
        return self._compiled

    def render(self, report: Report) -> str:
        """Format a report using the compiled legend.

        Args:
            report: Report to render

        Returns:
            Formatted line, without line-clearing padding
        """
        if self._compiled is None:
            self._compiled = compile_legend(self.legend, self.float_precision)

        return self._compiled.format(*self._values(report))

    def report(self, report: Report) -> None:
        """Render a report and write it to the output."""
        line = self.render(report)
        line_length = len(line)

        if self._last_length > line_length:
            line = _pad(line, self._last_length - line_length)

        self._last_length = line_length
        self._write(line)

    def finalize(self) -> None:
        """Terminate the current line."""
        self._write("\n")

    def _values(self, report: Report) -> Tuple[Any, ...]:
        eta = round_duration(report.eta, timedelta(seconds=1))
        if eta <= timedelta(0):
            eta = timedelta(0)

        return (
            format_timestamp(report.now),
            format_timestamp(report.started_at),
            format_duration(round_duration(report.dt, timedelta(milliseconds=1))),
            report.total,
            report.done,
            report.left,
            report.ratio,
            report.percent_int,
            report.percent_float,
            format_duration(round_duration(report.elapsed, timedelta(seconds=1))),
            format_duration(eta),
            report.rps_avg,
            report.rps_inst,
            report.rpm_avg,
            render_progress_bar(report.ratio, self.progress_bar_width),
        )

    def _write(self, text: str) -> None:
        # output errors never interrupt the tracked work
        try:
            if self._binary is None:
                self._binary = _is_byte_sink(self.output)

            if self._binary:
                self.output.write(text.encode("utf-8"))
            else:
                try:
                    self.output.write(text)
                except TypeError:
                    # sink only takes bytes
                    self._binary = True
                    self.output.write(text.encode("utf-8"))
            self.output.flush()
        except (OSError, ValueError, TypeError) as e:
            logger.debug(f"Discarding progress output error: {e}")

    def _reset_runtime(self) -> None:
        self._compiled: Optional[str] = None
        self._last_length = 0
        self._binary: Optional[bool] = None

    def _clone(self) -> "TextReporter":
        ret = copy.copy(self)
        ret._reset_runtime()
        return ret


def _is_byte_sink(output: IO[Any]) -> bool:
    if isinstance(output, io.TextIOBase):
        return False
    if isinstance(output, (io.RawIOBase, io.BufferedIOBase)):
        return True
    mode = getattr(output, "mode", "")
    return isinstance(mode, str) and "b" in mode


def _pad(line: str, count: int) -> str:
    spaces = " " * count
    if line.endswith("\r"):
        return line[:-1] + spaces + "\r"
    return line + spaces
