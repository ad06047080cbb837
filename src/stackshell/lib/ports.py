"""Collaborator protocols consumed by the execution core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, TextIO

if TYPE_CHECKING:
    from pathlib import Path

    from stackshell.lib.formatting import Foreground


class WorkingDirectoryProvider(Protocol):
    """Read-only view of the shell's current directory."""

    def current_directory(self) -> Path: ...


class TerminalCapabilityProvider(Protocol):
    """Terminal width, ANSI support, and writer access."""

    def width(self) -> int: ...

    def is_ansi_capable(self) -> bool: ...

    def writer(self) -> TextIO: ...

    def error_writer(self) -> TextIO: ...


class ResultSinks(Protocol):
    """Write-only store for the shell's "last output" / "last error" values."""

    def set_last_output(self, text: str) -> None: ...

    def set_last_error(self, text: str) -> None: ...


class ColorFormatter(Protocol):
    """Pure string styling for status glyphs."""

    def with_foreground(self, text: str, color: Foreground) -> str: ...
