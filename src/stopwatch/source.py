"""Notification sources — where operator ticks come from.

A source delivers one item into the tick queue per operator action and
triggers the session's ``TerminationSignal`` when its input ends.  The
collector never sees the source itself, only the queue and the signal.

``LineSource`` reads lines from a text stream (stdin by default) in a
background thread and bridges them into the event loop, the same way a
blocking producer is usually married to asyncio.

End-of-input never overtakes ticks: a source that runs out of input waits
until every tick it already handed over has been recorded (the collector
marks each one with ``task_done()``) before it triggers termination.
"""

from __future__ import annotations

import sys
import threading
from typing import TYPE_CHECKING, Any, Protocol, TextIO

from stopwatch.termination import call_in_loop

if TYPE_CHECKING:
    import asyncio

    from stopwatch.termination import TerminationSignal

END_OF_INPUT = "end-of-input"


async def finish_after_drain(
    ticks: asyncio.Queue[Any],
    termination: TerminationSignal,
    reason: str = END_OF_INPUT,
) -> None:
    """Trigger *termination* once every tick put on *ticks* so far is recorded."""
    await ticks.join()
    termination.trigger(reason)


class NotificationSource(Protocol):
    """Producer of operator ticks."""

    def start(
        self,
        loop: asyncio.AbstractEventLoop,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> None:
        """Begin delivering ticks into *ticks*; trigger *termination* at end of input."""
        ...

    def stop(self) -> None:
        """Stop delivering ticks. Must be safe to call repeatedly and after natural end."""
        ...


class LineSource:
    """Every line read from *stream* is a tick; end-of-input ends the session.

    The reader thread is a daemon: a blocking ``readline()`` on a terminal
    cannot be interrupted, so ``stop()`` only guarantees that nothing more
    is delivered and waits briefly for the thread to finish.

    Args:
        stream: Text stream to read. Defaults to ``sys.stdin`` at start time.
        join_timeout: Seconds ``stop()`` waits for the reader thread.

    """

    def __init__(self, stream: TextIO | None = None, *, join_timeout: float = 0.1) -> None:
        self._stream = stream
        self._join_timeout = join_timeout
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None
        self._drain: asyncio.Task[None] | None = None
        self._skipped = 0

    @property
    def is_running(self) -> bool:
        """Whether the reader thread is active."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def skipped(self) -> int:
        """Number of input lines that could not be decoded and were ignored."""
        return self._skipped

    def start(
        self,
        loop: asyncio.AbstractEventLoop,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> None:
        """Start reading lines in a background thread."""
        if self._thread is not None:
            return

        stream = self._stream if self._stream is not None else sys.stdin
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._read_loop,
            args=(stream, loop, ticks, termination),
            name="stopwatch-reader",
            daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Signal the reader to stop and wait briefly for the thread to finish.

        Must be called from the event loop thread.
        """
        self._stop_event.set()
        if self._drain is not None and not self._drain.done():
            self._drain.cancel()
        if self._thread is not None:
            self._thread.join(timeout=self._join_timeout)

    def _read_loop(
        self,
        stream: TextIO,
        loop: asyncio.AbstractEventLoop,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> None:
        """Background thread: one tick per line until EOF or stop."""
        while not self._stop_event.is_set():
            try:
                line = stream.readline()
            except UnicodeDecodeError:
                # Garbage on one line is not worth ending the session over.
                self._skipped += 1
                continue
            except ValueError:
                # Stream closed under us: treat like end-of-input.
                line = ""

            if self._stop_event.is_set():
                return
            if line == "":
                call_in_loop(loop, self._end_of_input, loop, ticks, termination)
                return
            if not call_in_loop(loop, ticks.put_nowait, None):
                return

    def _end_of_input(
        self,
        loop: asyncio.AbstractEventLoop,
        ticks: asyncio.Queue[Any],
        termination: TerminationSignal,
    ) -> None:
        """Loop thread: end the session once the ticks already sent are recorded."""
        if self._stop_event.is_set():
            return
        self._drain = loop.create_task(finish_after_drain(ticks, termination))
