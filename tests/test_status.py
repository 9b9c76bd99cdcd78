"""Tests for stopwatch.status — the stderr progress channel."""

from __future__ import annotations

import io
import sys
from unittest.mock import patch

import pytest

from stopwatch.status import StatusReporter, supports_color

from .conftest import make_log


class TestStatusReporter:
    """Messages written to the status stream."""

    def test_controls(self) -> None:
        buf = io.StringIO()
        StatusReporter(buf).controls()
        assert buf.getvalue() == "# Record: <enter>, Exit: <ctrl+d> or <ctrl+c>\n"

    def test_waiting_has_no_newline(self) -> None:
        buf = io.StringIO()
        StatusReporter(buf).waiting(4)
        assert buf.getvalue() == "# Waiting for [4]> "

    def test_finished_summary(self) -> None:
        buf = io.StringIO()
        StatusReporter(buf).finished(make_log(3), "SIGINT")
        assert buf.getvalue() == "\n# 3 ticks recorded in 4.000s (SIGINT)\n"

    def test_finished_singular(self) -> None:
        buf = io.StringIO()
        StatusReporter(buf).finished(make_log(1))
        assert "# 1 tick recorded in 2.000s\n" in buf.getvalue()

    def test_quiet(self) -> None:
        buf = io.StringIO()
        reporter = StatusReporter(buf, quiet=True)
        reporter.controls()
        reporter.waiting(0)
        reporter.finished(make_log(0))
        assert buf.getvalue() == ""

    def test_error_printed_when_quiet(self) -> None:
        buf = io.StringIO()
        StatusReporter(buf, quiet=True).error("boom")
        assert buf.getvalue() == "ERROR: boom\n"

    def test_defaults_to_stderr(self) -> None:
        buf = io.StringIO()
        with patch.object(sys, "stderr", buf):
            StatusReporter().waiting(0)
        assert buf.getvalue() == "# Waiting for [0]> "


class TestSupportsColor:
    """NO_COLOR / TERM=dumb / non-TTY disable styling."""

    def test_non_tty(self) -> None:
        assert supports_color(io.StringIO()) is False

    def test_no_color_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("NO_COLOR", "1")
        assert supports_color(sys.__stderr__) is False

    def test_dumb_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert supports_color(sys.__stderr__) is False
