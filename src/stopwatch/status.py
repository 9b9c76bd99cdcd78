"""Status channel — human-facing progress output on stderr.

Data goes to stdout (or a file); everything a person watching the session
needs to see goes here, so the report stays machine-parseable even when
both streams share a terminal.  Detects ``NO_COLOR`` / ``TERM`` for safe
fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING, TextIO

if TYPE_CHECKING:
    from stopwatch.events import EventLog


# ---------------------------------------------------------------------------
# ANSI helpers — respect NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def supports_color(stream: TextIO) -> bool:
    """Return True if *stream* is a terminal that accepts ANSI styling."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(stream, "isatty") and stream.isatty()


_DIM = "\033[2m"
_BOLD = "\033[1m"
_RESET = "\033[0m"


class StatusReporter:
    """Writes progress messages for a recording session.

    Args:
        stream: Destination for status text. Defaults to ``sys.stderr``
            resolved at write time, so tests can patch it.
        quiet: Suppress all output.

    """

    __slots__ = ("_color", "_quiet", "_stream")

    def __init__(self, stream: TextIO | None = None, *, quiet: bool = False) -> None:
        self._stream = stream
        self._quiet = quiet
        self._color: bool | None = None

    @property
    def stream(self) -> TextIO:
        return self._stream if self._stream is not None else sys.stderr

    def _style(self, text: str, code: str) -> str:
        if self._color is None:
            self._color = supports_color(self.stream)
        return f"{code}{text}{_RESET}" if self._color else text

    def _write(self, text: str) -> None:
        if self._quiet:
            return
        self.stream.write(text)
        self.stream.flush()

    def controls(self) -> None:
        """Tell the operator how to record and how to stop."""
        self._write(self._style("# Record: <enter>, Exit: <ctrl+d> or <ctrl+c>", _DIM) + "\n")

    def waiting(self, sequence: int) -> None:
        """Prompt for the event that would get *sequence*."""
        self._write(self._style(f"# Waiting for [{sequence}]> ", _BOLD))

    def finished(self, log: EventLog, reason: str | None = None) -> None:
        """Print a one-line summary once the session has ended."""
        # Next print must start on a fresh line after the last prompt.
        self._write("\n")
        ticks = log.ticks
        label = "tick" if ticks == 1 else "ticks"
        duration = log.duration
        seconds = f" in {duration.total_seconds():.3f}s" if duration is not None else ""
        why = f" ({reason})" if reason else ""
        self._write(self._style(f"# {ticks} {label} recorded{seconds}{why}", _DIM) + "\n")

    def error(self, message: str) -> None:
        """Report a fatal problem. Printed even in quiet mode."""
        self.stream.write(f"ERROR: {message}\n")
        self.stream.flush()
