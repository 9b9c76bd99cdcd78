"""Stopwatch — collect timestamps of manually signalled events.

Press <enter> while the program runs to record an event; finish with
<ctrl+d> or <ctrl+c>.  The recorded series is written as CSV, bracketed
by ``start`` and ``end`` markers.

Quick start::

    from stopwatch import StopwatchConfig, record

    log = record(StopwatchConfig(output="out.csv", comment="trial A"))

Building blocks::

    EventCollector     the session wait-loop (start, tick*, end)
    TerminationSignal  one stop switch for signals and end-of-input
    LineSource         stdin lines -> ticks
    render_report      EventLog -> CSV text

"""

__version__ = "0.1.0"
__all__ = [
    "Event",
    "EventCollector",
    "EventLog",
    "LineSource",
    "StopwatchConfig",
    "TerminationSignal",
    "__version__",
    "record",
    "render_report",
    "write_report",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import stopwatch`` fast while providing a clean top-level API.
    """
    if name == "StopwatchConfig":
        from stopwatch.config import StopwatchConfig

        return StopwatchConfig

    if name in ("Event", "EventLog"):
        from stopwatch import events

        return getattr(events, name)

    if name == "EventCollector":
        from stopwatch.collector import EventCollector

        return EventCollector

    if name == "TerminationSignal":
        from stopwatch.termination import TerminationSignal

        return TerminationSignal

    if name == "LineSource":
        from stopwatch.source import LineSource

        return LineSource

    if name in ("render_report", "write_report"):
        from stopwatch import report

        return getattr(report, name)

    if name == "record":
        from stopwatch.session import record

        return record

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
