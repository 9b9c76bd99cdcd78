"""Termination signal — one stop switch for every way a session can end.

Process signals (SIGINT, SIGTERM, SIGHUP) and end-of-input on the
notification source are funneled into the same ``TerminationSignal``.
The collector only ever waits on that object and never learns which
mechanism fired it.

Triggering is idempotent: the first reason is kept and later triggers,
including ones delivered after the session has finished, are no-ops.

"""

from __future__ import annotations

import asyncio
import signal
from contextlib import contextmanager
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator, Sequence

DEFAULT_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name)
    for name in ("SIGINT", "SIGTERM", "SIGHUP")
    if hasattr(signal, name)
)


def call_in_loop(
    loop: asyncio.AbstractEventLoop,
    callback: Callable[..., object],
    *args: object,
) -> bool:
    """Schedule *callback* on *loop* from another thread.

    Returns False once the loop has closed, which means the session is over.
    """
    if loop.is_closed():
        return False
    try:
        loop.call_soon_threadsafe(callback, *args)
    except RuntimeError:
        # Loop closed between the check and the call.
        return False
    return True


class TerminationSignal:
    """Idempotent, awaitable stop flag.

    Must be triggered from the event loop thread; other threads go
    through ``trigger_threadsafe()``.

    """

    __slots__ = ("_event", "_reason")

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self._reason: str | None = None

    @property
    def triggered(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str | None:
        """What ended the session, e.g. ``"SIGINT"`` or ``"end-of-input"``."""
        return self._reason

    def trigger(self, reason: str = "requested") -> None:
        """Request termination. Repeated calls keep the first reason."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()

    def trigger_threadsafe(self, loop: asyncio.AbstractEventLoop, reason: str) -> None:
        """Request termination from a thread other than the loop's."""
        call_in_loop(loop, self.trigger, reason)

    async def wait(self) -> str | None:
        """Block until triggered and return the reason."""
        await self._event.wait()
        return self._reason


@contextmanager
def handle_signals(
    loop: asyncio.AbstractEventLoop,
    termination: TerminationSignal,
    signals: Sequence[signal.Signals] = DEFAULT_SIGNALS,
) -> Iterator[TerminationSignal]:
    """Route process signals to *termination* for the duration of the block.

    Uses ``loop.add_signal_handler`` where the loop supports it and falls
    back to ``signal.signal`` otherwise.  Previous handlers are restored
    on exit.

    """
    via_loop: list[signal.Signals] = []
    via_signal: dict[signal.Signals, object] = {}

    for signum in signals:
        name = signal.Signals(signum).name
        try:
            loop.add_signal_handler(signum, termination.trigger, name)
            via_loop.append(signum)
        except NotImplementedError:
            previous = signal.signal(
                signum,
                lambda _sig, _frame, name=name: termination.trigger_threadsafe(loop, name),
            )
            via_signal[signum] = previous
        except (RuntimeError, ValueError):
            # Not the main thread: signals cannot be delivered here anyway.
            continue

    try:
        yield termination
    finally:
        for signum in via_loop:
            loop.remove_signal_handler(signum)
        for signum, previous in via_signal.items():
            if previous is not None:
                signal.signal(signum, previous)
