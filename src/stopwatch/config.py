"""Stopwatch configuration.

StopwatchConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass
from pathlib import Path

# Destinations that mean "write the report to standard output".
STDOUT_DESTINATIONS = frozenset({"", "-"})


@dataclass(frozen=True, slots=True)
class StopwatchConfig:
    """Configuration for a recording session.

    Attributes:
        output: Report destination. ``""`` and ``"-"`` select stdout,
            anything else is a file path (created or truncated).
        comment: Optional free text written as ``# <comment>`` before the
            CSV header. Empty means no comment line.
        utc: Record timestamps in UTC instead of the local time zone.
        quiet: Suppress status output on stderr.

    """

    output: str = "-"
    comment: str = ""
    utc: bool = False
    quiet: bool = False

    def __post_init__(self) -> None:
        # Accept Path objects from callers and config files alike.
        if isinstance(self.output, Path):
            object.__setattr__(self, "output", str(self.output))

