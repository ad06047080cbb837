"""Terminal capability detection tests."""

from __future__ import annotations

import io
import os
import shutil

import pytest

from stackshell.lib.domain import TerminalCapability
from stackshell.lib.terminal import (
    ConsoleTerminal,
    detect_ansi_support,
    resolve_ansi_mode,
    snapshot_capability,
)


@pytest.mark.parametrize(
    "environ,platform,expected",
    [
        pytest.param({"TERM": "xterm-256color"}, "linux", True, id="posix-term"),
        pytest.param({}, "linux", False, id="posix-no-term"),
        pytest.param({"TERM": "DUMB"}, "darwin", False, id="dumb-term"),
        pytest.param({"TERM": "xterm", "NO_COLOR": "1"}, "linux", False, id="no-color"),
        pytest.param({"TERM": "xterm", "NO_COLOR": ""}, "linux", True, id="empty-no-color"),
        pytest.param({"WT_SESSION": "abc"}, "win32", True, id="windows-terminal"),
        pytest.param({"ANSICON": "1"}, "win32", True, id="ansicon"),
        pytest.param({"ConEmuANSI": "on"}, "win32", True, id="conemu"),
        pytest.param({"ConEmuANSI": "OFF"}, "win32", False, id="conemu-off"),
        pytest.param({"TERM": "xterm"}, "win32", False, id="windows-plain-console"),
    ],
)
def test_detect_ansi_support(environ: dict[str, str], platform: str, expected: bool) -> None:
    assert detect_ansi_support(environ, platform) is expected


def test_resolve_ansi_mode_overrides_detection() -> None:
    assert resolve_ansi_mode("always", environ={"TERM": "dumb"}, platform="linux") is True
    assert resolve_ansi_mode("never", environ={"TERM": "xterm"}, platform="linux") is False
    assert resolve_ansi_mode("auto", environ={"TERM": "xterm"}, platform="linux") is True
    with pytest.raises(ValueError, match="Unknown ANSI mode"):
        resolve_ansi_mode("sometimes", environ={}, platform="linux")


def test_console_terminal_falls_back_to_default_width(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "get_terminal_size", lambda fallback: os.terminal_size((0, 0)))
    terminal = ConsoleTerminal(environ={}, default_width=64)

    assert terminal.width() == 64


def test_console_terminal_reports_real_width(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(shutil, "get_terminal_size", lambda fallback: os.terminal_size((132, 40)))
    stdout = io.StringIO()
    stderr = io.StringIO()
    terminal = ConsoleTerminal(environ={"TERM": "xterm"}, platform="linux", stdout=stdout, stderr=stderr)

    assert terminal.width() == 132
    assert terminal.is_ansi_capable() is True
    assert terminal.writer() is stdout
    assert terminal.error_writer() is stderr


class _StaticProvider:
    def __init__(self, width: int, ansi: bool) -> None:
        self._width = width
        self._ansi = ansi

    def width(self) -> int:
        return self._width

    def is_ansi_capable(self) -> bool:
        return self._ansi

    def writer(self) -> io.StringIO:
        return io.StringIO()

    def error_writer(self) -> io.StringIO:
        return io.StringIO()


def test_snapshot_capability_replaces_non_positive_width() -> None:
    assert snapshot_capability(_StaticProvider(0, True)) == TerminalCapability(80, True)
    assert snapshot_capability(_StaticProvider(-3, False), default_width=40) == TerminalCapability(
        40, False
    )
    assert snapshot_capability(_StaticProvider(1, False)) == TerminalCapability(1, False)
