"""Event model — the records a recording session produces.

An ``Event`` marks one occurrence: the synthetic ``"start"`` and ``"end"``
markers that bracket a session, and one ``"tick"`` per operator
notification in between.

The ``EventLog`` is the ordered, append-only sequence of events for a
single session.  It enforces contiguous zero-based sequence numbers and
becomes read-only once sealed.

Thread Safety:
    ``Event`` is frozen and safe to share.  ``EventLog`` has a single
    writer (the collector task) and is only read by others after it has
    been sealed, so it carries no lock.

"""

from collections.abc import Iterator
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Literal, TypeAlias, overload

from stopwatch._errors import SessionError

EventLabel: TypeAlias = Literal["start", "tick", "end"]

LABELS: tuple[EventLabel, ...] = ("start", "tick", "end")


@dataclass(frozen=True, slots=True)
class Event:
    """One recorded occurrence.

    Attributes:
        sequence: Zero-based position in the session, assigned at append time.
        timestamp: Timezone-aware wall-clock time the notification was accepted.
        label: Cause of the event: ``"start"``, ``"tick"`` or ``"end"``.

    """

    sequence: int
    timestamp: datetime
    label: EventLabel

    def __post_init__(self) -> None:
        if self.sequence < 0:
            msg = f"Event sequence must be non-negative, got {self.sequence}"
            raise ValueError(msg)
        if self.label not in LABELS:
            msg = f"Unknown event label {self.label!r}"
            raise ValueError(msg)


class EventLog:
    """Ordered, append-only event store for one session.

    Events must arrive with sequence numbers 0, 1, 2, ... in that order.
    After ``seal()`` the log rejects further appends.

    """

    __slots__ = ("_events", "_sealed")

    def __init__(self) -> None:
        self._events: list[Event] = []
        self._sealed = False

    def append(self, event: Event) -> None:
        """Record the next event.

        Raises:
            SessionError: If the log is sealed or the sequence is not the next one.

        """
        if self._sealed:
            msg = f"Cannot append {event.label!r} event to a sealed log"
            raise SessionError(msg)
        expected = len(self._events)
        if event.sequence != expected:
            msg = f"Out-of-sequence event: expected {expected}, got {event.sequence}"
            raise SessionError(msg)
        self._events.append(event)

    def seal(self) -> None:
        """Make the log read-only. Sealing twice is a no-op."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    @property
    def events(self) -> tuple[Event, ...]:
        """Snapshot of all events in order."""
        return tuple(self._events)

    @property
    def ticks(self) -> int:
        """Number of ``"tick"`` events."""
        return sum(1 for event in self._events if event.label == "tick")

    @property
    def duration(self) -> timedelta | None:
        """Time between the first and last event, or None with fewer than two."""
        if len(self._events) < 2:
            return None
        return self._events[-1].timestamp - self._events[0].timestamp

    def __len__(self) -> int:
        return len(self._events)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    @overload
    def __getitem__(self, index: int) -> Event: ...

    @overload
    def __getitem__(self, index: slice) -> tuple[Event, ...]: ...

    def __getitem__(self, index: int | slice) -> Event | tuple[Event, ...]:
        if isinstance(index, slice):
            return tuple(self._events[index])
        return self._events[index]

    def __repr__(self) -> str:
        state = "sealed" if self._sealed else "open"
        return f"EventLog({len(self._events)} events, {state})"
