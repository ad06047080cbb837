"""Domain models for foreground process execution."""

from __future__ import annotations

import locale
from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_TERMINAL_WIDTH = 80


def default_encoding() -> str:
    """Return the platform default text encoding used to decode child output."""

    return locale.getpreferredencoding(False) or "utf-8"


@dataclass(frozen=True, slots=True)
class ExecutionRequest:
    """One foreground launch: absolute executable plus ordered arguments."""

    executable_path: Path
    arguments: tuple[str, ...] = ()
    # None means "ask the working-directory provider at launch time".
    working_directory: Path | None = None

    def command(self) -> list[str]:
        return [str(self.executable_path), *self.arguments]


class CaptureBuffer:
    """Append-only byte buffer owned by exactly one stream pump."""

    __slots__ = ("_chunks", "_size")

    def __init__(self) -> None:
        self._chunks: list[bytes] = []
        self._size = 0

    def append(self, chunk: bytes) -> None:
        if not chunk:
            return
        self._chunks.append(bytes(chunk))
        self._size += len(chunk)

    def getvalue(self) -> bytes:
        return b"".join(self._chunks)

    def __len__(self) -> int:
        return self._size


@dataclass(slots=True)
class CapturedOutput:
    """Raw bytes captured from the child's output streams.

    `stderr` is None when stderr was merged into stdout by the OS.
    """

    stdout: CaptureBuffer = field(default_factory=CaptureBuffer)
    stderr: CaptureBuffer | None = field(default_factory=CaptureBuffer)

    @property
    def merged(self) -> bool:
        return self.stderr is None

    @property
    def stdout_bytes(self) -> bytes:
        return self.stdout.getvalue()

    @property
    def stderr_bytes(self) -> bytes:
        if self.stderr is None:
            return b""
        return self.stderr.getvalue()

    def stdout_text(self, encoding: str | None = None) -> str:
        return self.stdout_bytes.decode(encoding or default_encoding(), errors="replace")

    def stderr_text(self, encoding: str | None = None) -> str:
        return self.stderr_bytes.decode(encoding or default_encoding(), errors="replace")


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of one finished foreground execution."""

    exit_code: int
    captured: CapturedOutput

    @property
    def success(self) -> bool:
        return self.exit_code == 0


@dataclass(frozen=True, slots=True)
class TerminalCapability:
    """Snapshot of terminal capabilities taken once per execution."""

    width: int = DEFAULT_TERMINAL_WIDTH
    ansi_safe: bool = False
