"""Tests for stopwatch.session — end-to-end recording sessions."""

from __future__ import annotations

import asyncio
import io
import sys
from pathlib import Path
from unittest.mock import patch

import pytest

from stopwatch._errors import ReportError
from stopwatch.collector import EventCollector
from stopwatch.config import StopwatchConfig
from stopwatch.session import collect_session, record
from stopwatch.source import LineSource
from stopwatch.status import StatusReporter
from stopwatch.termination import TerminationSignal

from .conftest import ScriptedSource, StepClock


class TestCollectSession:
    """collect_session — source + collector + shutdown coupling."""

    @pytest.mark.asyncio
    async def test_ticks_recorded_until_end_of_input(
        self, clock: StepClock, status: StatusReporter
    ) -> None:
        source = ScriptedSource(ticks=3)
        collector = EventCollector(clock=clock, status=status)

        log = await collect_session(source, collector=collector, install_signal_handlers=False)

        assert [e.label for e in log] == ["start", "tick", "tick", "tick", "end"]
        assert [e.sequence for e in log] == [0, 1, 2, 3, 4]

    @pytest.mark.asyncio
    async def test_source_stopped_after_natural_end(
        self, clock: StepClock, status: StatusReporter
    ) -> None:
        source = ScriptedSource(ticks=1)

        await collect_session(
            source,
            collector=EventCollector(clock=clock, status=status),
            install_signal_handlers=False,
        )

        assert source.started is True
        assert source.stop_calls == 1

    @pytest.mark.asyncio
    async def test_external_termination_stops_source(
        self, clock: StepClock, status: StatusReporter
    ) -> None:
        source = ScriptedSource(ticks=0, end_of_input=False)
        termination = TerminationSignal()
        asyncio.get_running_loop().call_later(0.05, termination.trigger, "SIGINT")

        log = await collect_session(
            source,
            collector=EventCollector(clock=clock, status=status),
            termination=termination,
            install_signal_handlers=False,
        )

        assert [e.label for e in log] == ["start", "end"]
        assert termination.reason == "SIGINT"
        assert source.stop_calls == 1

    @pytest.mark.asyncio
    @pytest.mark.parametrize("lines", [0, 1, 2, 3, 5, 20])
    async def test_line_source_n_lines_n_ticks(
        self, lines: int, clock: StepClock, status: StatusReporter
    ) -> None:
        source = LineSource(io.StringIO("\n" * lines))

        log = await collect_session(
            source,
            collector=EventCollector(clock=clock, status=status),
            install_signal_handlers=False,
        )

        assert log.ticks == lines
        assert len(log) == lines + 2
        assert [e.label for e in log] == ["start", *(["tick"] * lines), "end"]
        assert [e.sequence for e in log] == list(range(lines + 2))
        assert source.is_running is False


class TestRecord:
    """record — a full run from config to CSV output."""

    def test_zero_ticks_to_stdout(self) -> None:
        out = io.StringIO()
        with patch.object(sys, "stdout", out):
            log = record(
                StopwatchConfig(output="-"),
                source=ScriptedSource(ticks=0),
                status=StatusReporter(io.StringIO()),
            )

        lines = out.getvalue().splitlines()
        assert lines[0] == "sequence,timestamp,label"
        assert len(lines) == 3
        assert lines[1].startswith("0,") and lines[1].endswith(",start")
        assert lines[2].startswith("1,") and lines[2].endswith(",end")
        assert len(log) == 2

    def test_three_ticks_to_file(self, tmp_path: Path) -> None:
        out = tmp_path / "out.csv"
        record(
            StopwatchConfig(output=str(out), comment="trial A"),
            source=ScriptedSource(ticks=3),
            status=StatusReporter(io.StringIO()),
        )

        lines = out.read_text().splitlines()
        assert lines[0] == "# trial A"
        assert lines[1] == "sequence,timestamp,label"
        rows = [line.split(",") for line in lines[2:]]
        assert [r[0] for r in rows] == ["0", "1", "2", "3", "4"]
        assert [r[2] for r in rows] == ["start", "tick", "tick", "tick", "end"]

    def test_utc_timestamps(self, tmp_path: Path) -> None:
        out = tmp_path / "out.csv"
        record(
            StopwatchConfig(output=str(out), utc=True),
            source=ScriptedSource(ticks=1),
            status=StatusReporter(io.StringIO()),
        )

        rows = out.read_text().splitlines()[1:]
        assert all(row.split(",")[1].endswith("+00:00") for row in rows)

    def test_unwritable_destination(self, tmp_path: Path) -> None:
        out = tmp_path / "no-such-dir" / "out.csv"

        with pytest.raises(ReportError):
            record(
                StopwatchConfig(output=str(out)),
                source=ScriptedSource(ticks=2),
                status=StatusReporter(io.StringIO()),
            )
        assert not out.exists()

    def test_status_goes_to_status_stream_only(self) -> None:
        out = io.StringIO()
        err = io.StringIO()
        with patch.object(sys, "stdout", out):
            record(
                StopwatchConfig(),
                source=ScriptedSource(ticks=1),
                status=StatusReporter(err),
            )

        assert "Waiting for" in err.getvalue()
        assert "Waiting for" not in out.getvalue()
        assert "sequence,timestamp,label" not in err.getvalue()
