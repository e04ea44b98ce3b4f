"""Formatting helpers for progress output."""

from datetime import datetime, timedelta

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

_MICROSECOND = timedelta(microseconds=1)


def round_duration(value: timedelta, unit: timedelta) -> timedelta:
    """Round a duration to a multiple of unit, halfway values away from zero.

    Args:
        value: Duration to round
        unit: Rounding unit

    Returns:
        Rounded duration
    """
    micros = value // _MICROSECOND
    unit_micros = unit // _MICROSECOND
    quotient, remainder = divmod(abs(micros), unit_micros)
    if remainder * 2 >= unit_micros:
        quotient += 1
    rounded = quotient * unit_micros
    return timedelta(microseconds=-rounded if micros < 0 else rounded)


def format_duration(value: timedelta) -> str:
    """Format a duration as e.g. 1h2m3s, 4s, 1.5s or 250ms.

    Args:
        value: Duration to format

    Returns:
        Formatted duration string
    """
    micros = value // _MICROSECOND
    if micros == 0:
        return "0s"

    sign = "-" if micros < 0 else ""
    micros = abs(micros)

    if micros < 1_000_000:
        return f"{sign}{_trim(micros / 1000)}ms"

    hours, micros = divmod(micros, 3600 * 1_000_000)
    minutes, micros = divmod(micros, 60 * 1_000_000)
    seconds = _trim(micros / 1_000_000)

    if hours:
        return f"{sign}{hours}h{minutes}m{seconds}s"
    if minutes:
        return f"{sign}{minutes}m{seconds}s"
    return f"{sign}{seconds}s"


def format_timestamp(value: datetime) -> str:
    """Format a timestamp as YYYY-MM-DD HH:MM:SS."""
    # strftime does not zero-pad years below 1000 on every platform
    return f"{value.year:04d}" + value.strftime(TIMESTAMP_FORMAT[2:])


def render_progress_bar(ratio: float, width: int) -> str:
    """Build an ASCII progress bar like [####----].

    Args:
        ratio: Completed ratio, values above 1 saturate the bar
        width: Total bar width including both brackets

    Returns:
        Progress bar string, empty if width leaves no room for the interior
    """
    inner_width = width - 2  # [ and ]
    if inner_width <= 0:
        return ""

    ratio = max(ratio, 0.0)
    fill_chars = min(int(ratio * inner_width), inner_width)
    fill_spaces = max(inner_width - fill_chars, 0)

    return "[" + "#" * fill_chars + "-" * fill_spaces + "]"


def _trim(number: float) -> str:
    text = f"{number:.6f}".rstrip("0").rstrip(".")
    return text or "0"
