"""Result reporter tests."""

from __future__ import annotations

import io

import pytest

from stackshell.lib.domain import CaptureBuffer, CapturedOutput
from stackshell.lib.exec.report import ResultReporter, render_status_line, status_padding
from stackshell.lib.formatting import AnsiFormatter
from stackshell.lib.sinks import LastResultStore

GREEN_SMILE = "\x1b[32m:)\x1b[0m"
RED_FROWN = "\x1b[31m:(\x1b[0m"


def _captured(stdout: bytes, stderr: bytes | None) -> CapturedOutput:
    captured = CapturedOutput(stderr=None if stderr is None else CaptureBuffer())
    captured.stdout.append(stdout)
    if captured.stderr is not None and stderr is not None:
        captured.stderr.append(stderr)
    return captured


def _reporter(width: int = 10) -> tuple[ResultReporter, LastResultStore, io.StringIO]:
    sinks = LastResultStore()
    screen = io.StringIO()
    reporter = ResultReporter(
        sinks=sinks,
        formatter=AnsiFormatter(),
        writer=screen,
        width=width,
        encoding="utf-8",
    )
    return reporter, sinks, screen


@pytest.mark.parametrize(
    "width,expected",
    [(80, 78), (3, 1), (2, 0), (1, 0), (0, 0), (-5, 0)],
)
def test_status_padding_is_never_negative(width: int, expected: int) -> None:
    assert status_padding(width) == expected


def test_render_status_line_pads_and_colors() -> None:
    formatter = AnsiFormatter()
    assert render_status_line(True, width=6, formatter=formatter) == f"    {GREEN_SMILE}"
    assert render_status_line(False, width=1, formatter=formatter) == RED_FROWN
    assert render_status_line(True, width=4, formatter=AnsiFormatter(enabled=False)) == "  :)"


def test_success_publishes_output_and_clears_error() -> None:
    reporter, sinks, screen = _reporter()
    sinks.set_last_error("stale")

    assert reporter.report(0, _captured(b"ok\n", b"")) is True

    assert sinks.last_output == "ok\n"
    assert sinks.last_error == ""
    assert screen.getvalue() == f"{' ' * 8}{GREEN_SMILE}\n"


def test_failure_prefers_separately_captured_stderr() -> None:
    reporter, sinks, screen = _reporter()

    assert reporter.report(2, _captured(b"partial\n", b"bad arg\n")) is False

    assert sinks.last_output == "partial\n"
    assert sinks.last_error == "bad arg\n"
    assert screen.getvalue().endswith(f"{RED_FROWN}\n")


def test_failure_without_stderr_falls_back_to_combined_output() -> None:
    reporter, sinks, _screen = _reporter()

    reporter.report(1, _captured(b"usage: tool\n", b""))

    assert sinks.last_error == "usage: tool\n"


def test_merged_failure_reports_combined_output_as_error() -> None:
    reporter, sinks, _screen = _reporter()

    reporter.report(1, _captured(b"out\nerr\n", None))

    assert sinks.last_output == "out\nerr\n"
    assert sinks.last_error == "out\nerr\n"


@pytest.mark.parametrize("exit_code", [0, 1, 2, 126, 127, 130, 255])
def test_success_iff_exit_code_is_zero(exit_code: int) -> None:
    reporter, _sinks, _screen = _reporter()
    assert reporter.report(exit_code, _captured(b"", b"")) is (exit_code == 0)


def test_report_failure_sets_message_and_prints_frown() -> None:
    reporter, sinks, screen = _reporter(width=2)
    sinks.set_last_output("previous")

    assert reporter.report_failure("Execution failed: nope: no such file or directory") is False

    assert sinks.last_output == ""
    assert sinks.last_error == "Execution failed: nope: no such file or directory"
    assert screen.getvalue() == f"{RED_FROWN}\n"
