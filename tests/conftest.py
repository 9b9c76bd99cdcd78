"""Shared test fixtures for stopwatch."""

from __future__ import annotations

import asyncio
import io
from datetime import datetime, timedelta, timezone
from typing import Any

import pytest

from stopwatch.events import Event, EventLabel, EventLog
from stopwatch.source import finish_after_drain
from stopwatch.status import StatusReporter
from stopwatch.termination import TerminationSignal

EPOCH = datetime(2026, 10, 17, 15, 56, 0, 123456, tzinfo=timezone(timedelta(hours=2)))


class StepClock:
    """Deterministic clock: EPOCH, then one second later on every call."""

    def __init__(self, start: datetime = EPOCH, step: timedelta = timedelta(seconds=1)) -> None:
        self._next = start
        self._step = step
        self.calls = 0

    def __call__(self) -> datetime:
        now = self._next
        self._next += self._step
        self.calls += 1
        return now


class ScriptedSource:
    """Notification source that replays a fixed number of ticks.

    Ticks are queued on start; if ``end_of_input`` is set the session ends
    the way ``LineSource`` ends it at EOF, after the queued ticks are recorded.
    """

    def __init__(self, ticks: int = 0, *, end_of_input: bool = True) -> None:
        self.ticks = ticks
        self.end_of_input = end_of_input
        self.started = False
        self.stop_calls = 0
        self._drain: asyncio.Task[None] | None = None

    def start(
        self,
        loop: asyncio.AbstractEventLoop,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> None:
        self.started = True
        for _ in range(self.ticks):
            ticks.put_nowait(None)
        if self.end_of_input:
            self._drain = loop.create_task(finish_after_drain(ticks, termination))

    def stop(self) -> None:
        self.stop_calls += 1
        if self._drain is not None and not self._drain.done():
            self._drain.cancel()


def make_log(ticks: int = 0, *, start: datetime = EPOCH) -> EventLog:
    """Build a sealed start/tick*/end log with one-second spacing."""
    labels: list[EventLabel] = ["start", *(["tick"] * ticks), "end"]
    log = EventLog()
    for seq, label in enumerate(labels):
        log.append(Event(sequence=seq, timestamp=start + timedelta(seconds=seq), label=label))
    log.seal()
    return log


@pytest.fixture
def clock() -> StepClock:
    return StepClock()


@pytest.fixture
def status_buf() -> io.StringIO:
    """Captures status output."""
    return io.StringIO()


@pytest.fixture
def status(status_buf: io.StringIO) -> StatusReporter:
    return StatusReporter(status_buf)
