"""Exceptions raised by the progress tracking core."""


class ProgressError(Exception):
    """Base exception for progress tracking."""
    pass


class InvalidTotalError(ProgressError, ValueError):
    """Raised when a tracker is built with a non-positive total."""

    def __init__(self, total: int):
        super().__init__(f"total should be greater than 0, got {total}")
        self.total = total


class ConfigError(ProgressError):
    """Raised when a configuration value cannot be used."""
    pass
