"""Single-slot holder for the current foreground process."""

from __future__ import annotations

import subprocess
from threading import Lock

import structlog

from stackshell.lib.exec.termination import DEFAULT_KILL_GRACE_SECONDS, terminate_process

logger = structlog.get_logger(__name__)


class ForegroundSlot:
    """Shared handle to the one foreground child, used for cancellation.

    The launcher registers its process here and clears it on every exit
    path. Other threads call `interrupt()`. The slot never owns the
    process: it does not reap it and is not responsible for its cleanup.
    """

    def __init__(self, *, kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS) -> None:
        self._lock = Lock()
        self._process: subprocess.Popen[bytes] | None = None
        self._kill_grace_seconds = kill_grace_seconds

    def register(self, process: subprocess.Popen[bytes]) -> None:
        with self._lock:
            self._process = process

    def clear(self, process: subprocess.Popen[bytes] | None = None) -> None:
        """Empty the slot; with `process`, only if it is still the registered one."""

        with self._lock:
            if process is None or self._process is process:
                self._process = None

    def current(self) -> subprocess.Popen[bytes] | None:
        with self._lock:
            return self._process

    @property
    def occupied(self) -> bool:
        return self.current() is not None

    def interrupt(self) -> bool:
        """Terminate the registered process if it is alive.

        Returns True when a live process was found and signalled. Must not be
        called directly from a signal handler running on the launcher's
        thread; see `stackshell.lib.exec.signals`.
        """

        process = self.current()
        if process is None or process.poll() is not None:
            return False

        logger.info("Interrupting foreground process.", pid=process.pid)
        terminate_process(process, grace_seconds=self._kill_grace_seconds)
        return True
