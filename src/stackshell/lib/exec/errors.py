"""Failure taxonomy for foreground execution."""

from __future__ import annotations

import errno
from enum import StrEnum


class FailureKind(StrEnum):
    LAUNCH_FAILURE = "launch_failure"
    IO_FAILURE = "io_failure"
    INTERRUPTED_WAIT = "interrupted_wait"
    NONZERO_EXIT = "nonzero_exit"


class ExecutionError(Exception):
    """Failure absorbed at the launcher boundary and reported as text."""

    kind: FailureKind = FailureKind.IO_FAILURE

    def user_message(self) -> str:
        return f"Execution failed: {self}"


class LaunchFailure(ExecutionError):
    """The executable could not be started."""

    kind = FailureKind.LAUNCH_FAILURE


class IOFailure(ExecutionError):
    """A stream or terminal operation failed mid-execution."""

    kind = FailureKind.IO_FAILURE


class InterruptedWait(ExecutionError):
    """The coordinating thread was interrupted before the child exited."""

    kind = FailureKind.INTERRUPTED_WAIT

    def user_message(self) -> str:
        detail = str(self)
        return f"Execution interrupted: {detail}" if detail else "Execution interrupted"


def describe_launch_error(executable: str, error: OSError | ValueError) -> str:
    """Return a one-line reason for an error raised while spawning."""

    if not isinstance(error, OSError):
        # Popen rejects arguments and environment entries with embedded NUL bytes.
        return f"{executable}: invalid argument ({error})"
    if isinstance(error, FileNotFoundError) or error.errno == errno.ENOENT:
        return f"{executable}: no such file or directory"
    if isinstance(error, PermissionError) or error.errno in {errno.EACCES, errno.EPERM}:
        return f"{executable}: permission denied"
    if error.errno == errno.ENOEXEC:
        return f"{executable}: exec format error"
    reason = error.strerror or str(error) or error.__class__.__name__
    return f"{executable}: {reason}"
