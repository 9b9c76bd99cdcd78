"""Session composition — wires source, signals, collector and report.

Flow::

    record(config)
      └─ asyncio.run(collect_session(...))
           ├─ handle_signals   SIGINT/SIGTERM/SIGHUP -> TerminationSignal
           ├─ source.start     lines -> tick queue, EOF -> TerminationSignal
           ├─ collector.run    start, tick*, end
           └─ source.stop      always, even if the source ended the session
      └─ write_report(log, comment, output)
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any

from stopwatch.collector import EventCollector, local_now, utc_now
from stopwatch.report import write_report
from stopwatch.source import LineSource
from stopwatch.status import StatusReporter
from stopwatch.termination import DEFAULT_SIGNALS, TerminationSignal, handle_signals

if TYPE_CHECKING:
    from stopwatch.config import StopwatchConfig
    from stopwatch.events import EventLog
    from stopwatch.source import NotificationSource


async def collect_session(
    source: NotificationSource,
    *,
    collector: EventCollector | None = None,
    termination: TerminationSignal | None = None,
    install_signal_handlers: bool = True,
) -> EventLog:
    """Run one recording session against *source* and return the sealed log."""
    loop = asyncio.get_running_loop()
    ticks: asyncio.Queue[Any] = asyncio.Queue()
    termination = termination if termination is not None else TerminationSignal()
    collector = collector if collector is not None else EventCollector()

    signals = DEFAULT_SIGNALS if install_signal_handlers else ()
    with handle_signals(loop, termination, signals):
        source.start(loop, ticks, termination)
        try:
            return await collector.run(ticks, termination)
        finally:
            # Stopping a source that already hit end-of-input is a no-op.
            source.stop()
            termination.trigger("session finished")


def record(
    config: StopwatchConfig,
    *,
    source: NotificationSource | None = None,
    status: StatusReporter | None = None,
) -> EventLog:
    """Record a session per *config* and write its report.

    Raises:
        ReportError: If the report destination cannot be written.

    """
    status = status if status is not None else StatusReporter(quiet=config.quiet)
    collector = EventCollector(
        clock=utc_now if config.utc else local_now,
        status=status,
    )
    log = asyncio.run(
        collect_session(
            source if source is not None else LineSource(),
            collector=collector,
        )
    )
    write_report(log, config.comment, config.output)
    return log
