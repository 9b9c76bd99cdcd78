"""CSV report — renders a finished event log and writes it out.

Output layout::

    # <comment>                      (only when a comment is set)
    sequence,timestamp,label
    0,2026-10-17T15:56:00.123456+02:00,start
    1,2026-10-17T15:56:01.734012+02:00,tick
    2,2026-10-17T15:56:03.001290+02:00,end

Columns are an explicit ordered list of (name, render) pairs rather than
anything derived from the ``Event`` field declarations.
"""

from __future__ import annotations

import contextlib
import csv
import io
import sys
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from stopwatch._errors import ReportError
from stopwatch.config import STDOUT_DESTINATIONS

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from stopwatch.events import Event


def format_timestamp(ts: datetime) -> str:
    """Sortable ISO 8601 timestamp with microseconds and UTC offset."""
    if ts.tzinfo is None:
        msg = f"Cannot render naive timestamp {ts!r}: a time zone is required"
        raise ValueError(msg)
    return ts.isoformat(timespec="microseconds")


COLUMNS: tuple[tuple[str, Callable[[Event], str]], ...] = (
    ("sequence", lambda event: str(event.sequence)),
    ("timestamp", lambda event: format_timestamp(event.timestamp)),
    ("label", lambda event: event.label),
)


def header() -> list[str]:
    """Column names in output order."""
    return [name for name, _ in COLUMNS]


def to_row(event: Event) -> list[str]:
    """Render one event as CSV fields in column order."""
    return [render(event) for _, render in COLUMNS]


def render_report(events: Iterable[Event], comment: str = "") -> str:
    """Render *events* as CSV text, with an optional leading comment line.

    Pure: the same events and comment always produce the same text.

    """
    buf = io.StringIO()
    if comment:
        # The comment is a single line whatever the caller passed in.
        line = " ".join(comment.splitlines())
        buf.write(f"# {line}\n")
    writer = csv.writer(buf, lineterminator="\n")
    writer.writerow(header())
    writer.writerows(to_row(event) for event in events)
    return buf.getvalue()


def write_report(events: Iterable[Event], comment: str = "", destination: str = "-") -> None:
    """Write the CSV report to *destination*.

    ``""`` and ``"-"`` mean stdout; anything else is a file path that is
    created or truncated.  The report is rendered in full before the
    destination is touched, and a partially written file is removed.

    Raises:
        ReportError: If the destination cannot be opened or written.

    """
    text = render_report(events, comment)

    if destination in STDOUT_DESTINATIONS:
        try:
            sys.stdout.write(text)
            sys.stdout.flush()
        except OSError as exc:
            msg = f"could not write to stdout: {exc}"
            raise ReportError(msg) from exc
        return

    path = Path(destination)
    try:
        f = path.open("w", encoding="utf-8", newline="")
    except OSError as exc:
        msg = f"could not create file {destination!r}: {exc}"
        raise ReportError(msg) from exc

    try:
        with f:
            f.write(text)
    except OSError as exc:
        with contextlib.suppress(OSError):
            path.unlink(missing_ok=True)
        msg = f"could not write file {destination!r}: {exc}"
        raise ReportError(msg) from exc
