"""Terminal capability detection for child-output forwarding."""

from __future__ import annotations

import shutil
import sys
from collections.abc import Mapping
from typing import TextIO

from stackshell.lib.domain import DEFAULT_TERMINAL_WIDTH, TerminalCapability
from stackshell.lib.ports import TerminalCapabilityProvider

ANSI_MODES = frozenset({"auto", "always", "never"})


def _env_flag(environ: Mapping[str, str], name: str) -> str:
    return (environ.get(name) or "").strip()


def detect_ansi_support(environ: Mapping[str, str], platform: str) -> bool:
    """Return whether escape sequences are believed safe to emit."""

    term = _env_flag(environ, "TERM")
    if term.lower() == "dumb":
        return False
    if _env_flag(environ, "NO_COLOR"):
        return False

    if not platform.startswith("win"):
        return bool(term)

    if _env_flag(environ, "WT_SESSION"):
        return True
    if _env_flag(environ, "ANSICON"):
        return True
    return _env_flag(environ, "ConEmuANSI").upper() == "ON"


def resolve_ansi_mode(mode: str, *, environ: Mapping[str, str], platform: str) -> bool:
    normalized = mode.strip().lower()
    if normalized not in ANSI_MODES:
        raise ValueError(f"Unknown ANSI mode {mode!r}; expected one of {sorted(ANSI_MODES)}.")
    if normalized == "always":
        return True
    if normalized == "never":
        return False
    return detect_ansi_support(environ, platform)


class ConsoleTerminal:
    """Capability provider backed by the process's own stdio streams."""

    def __init__(
        self,
        *,
        environ: Mapping[str, str],
        platform: str = sys.platform,
        ansi_mode: str = "auto",
        default_width: int = DEFAULT_TERMINAL_WIDTH,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._environ = environ
        self._platform = platform
        self._ansi_mode = ansi_mode
        self._default_width = default_width
        self._stdout = stdout
        self._stderr = stderr

    def width(self) -> int:
        try:
            columns = shutil.get_terminal_size((0, 0)).columns
        except (OSError, ValueError):
            columns = 0
        return columns if columns > 0 else self._default_width

    def is_ansi_capable(self) -> bool:
        return resolve_ansi_mode(self._ansi_mode, environ=self._environ, platform=self._platform)

    def writer(self) -> TextIO:
        return self._stdout or sys.stdout

    def error_writer(self) -> TextIO:
        return self._stderr or sys.stderr


def snapshot_capability(
    provider: TerminalCapabilityProvider,
    *,
    default_width: int = DEFAULT_TERMINAL_WIDTH,
) -> TerminalCapability:
    """Read width and ANSI support once; unusable widths fall back to the default."""

    try:
        width = provider.width()
    except Exception:
        width = default_width
    if width <= 0:
        width = default_width
    return TerminalCapability(width=width, ansi_safe=provider.is_ansi_capable())
