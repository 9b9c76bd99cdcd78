"""Stopwatch error hierarchy.

All stopwatch-specific errors inherit from StopwatchError for easy catching.
"""


class StopwatchError(Exception):
    """Base error for all stopwatch operations."""


class ConfigError(StopwatchError):
    """Invalid or missing configuration."""


class SessionError(StopwatchError):
    """Misuse of a recording session (out-of-order append, sealed log, rerun)."""


class ReportError(StopwatchError):
    """The report destination could not be opened or written."""
