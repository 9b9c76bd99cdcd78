"""Event collector — the session wait-loop.

Records a ``"start"`` event, then waits on whichever of {next tick,
termination} becomes ready first.  Ticks are appended as they are
accepted; termination ends the loop and an ``"end"`` event closes the
log.

Thread Safety:
    The collector runs as a single asyncio task and is the only writer of
    its ``EventLog``.  Notification producers on other threads hand ticks
    over through the loop (``call_soon_threadsafe``), never by touching
    the log directly.

"""

from __future__ import annotations

import asyncio
import contextlib
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from stopwatch._errors import SessionError
from stopwatch.events import Event, EventLabel, EventLog
from stopwatch.status import StatusReporter

if TYPE_CHECKING:
    from collections.abc import Callable

    from stopwatch.termination import TerminationSignal


def local_now() -> datetime:
    """Current time, timezone-aware in the host's local zone."""
    return datetime.now().astimezone()


def utc_now() -> datetime:
    """Current time in UTC."""
    return datetime.now(UTC)


class EventCollector:
    """Runs one recording session and owns its log and sequence counter.

    Args:
        clock: Returns the timestamp for an accepted notification.
        status: Progress output. Defaults to a reporter on stderr.

    """

    __slots__ = ("_clock", "_log", "_next_seq", "_started", "_status")

    def __init__(
        self,
        *,
        clock: Callable[[], datetime] = local_now,
        status: StatusReporter | None = None,
    ) -> None:
        self._clock = clock
        self._status = status if status is not None else StatusReporter()
        self._log = EventLog()
        self._next_seq = 0
        self._started = False

    @property
    def log(self) -> EventLog:
        """The log being built (sealed once ``run()`` returns)."""
        return self._log

    def _record(self, label: EventLabel) -> Event:
        event = Event(sequence=self._next_seq, timestamp=self._clock(), label=label)
        self._log.append(event)
        self._next_seq += 1
        return event

    async def run(
        self,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> EventLog:
        """Collect events until *termination* fires and return the sealed log.

        Each item taken from *ticks* is one operator notification; its
        value is ignored, and it is marked ``task_done()`` once recorded so
        a source can wait for its ticks before ending the session.  A tick
        already taken off the queue is recorded even when termination fires
        in the same step.  Ticks still queued when an external termination
        (a signal) is seen are dropped.

        Raises:
            SessionError: If this collector has already run.

        """
        if self._started:
            msg = "EventCollector.run() can only be called once per collector"
            raise SessionError(msg)
        self._started = True

        self._status.controls()
        self._record("start")

        stop = asyncio.ensure_future(termination.wait())
        try:
            while not termination.triggered:
                self._status.waiting(self._next_seq)
                next_tick = asyncio.ensure_future(ticks.get())
                done, _ = await asyncio.wait(
                    {next_tick, stop},
                    return_when=asyncio.FIRST_COMPLETED,
                )
                if next_tick in done:
                    self._record("tick")
                    ticks.task_done()
                else:
                    await _discard(next_tick)
        finally:
            await _discard(stop)

        self._record("end")
        self._log.seal()
        self._status.finished(self._log, termination.reason)
        return self._log


async def _discard(task: asyncio.Future[Any]) -> None:
    """Cancel *task* if still pending and wait for it to settle."""
    if task.done():
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
