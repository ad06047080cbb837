"""Graceful-then-forced termination helpers for child processes."""

from __future__ import annotations

import subprocess

DEFAULT_KILL_GRACE_SECONDS = 2.0


def terminate_process(
    process: subprocess.Popen[bytes],
    *,
    grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
) -> None:
    """Gracefully terminate a process and force-kill if it does not exit.

    Bounded by `grace_seconds` plus the time the OS takes to reap a SIGKILL.
    """

    if process.poll() is not None:
        return

    try:
        process.terminate()
    except ProcessLookupError:
        return
    try:
        process.wait(timeout=grace_seconds)
    except subprocess.TimeoutExpired:
        if process.poll() is None:
            try:
                process.kill()
            except ProcessLookupError:
                return
            process.wait()
