"""SIGINT forwarding from the shell to the foreground process."""

from __future__ import annotations

import signal
import threading
from types import FrameType
from typing import Final, cast

from stackshell.lib.exec.registry import ForegroundSlot

TARGET_SIGNALS: Final[tuple[signal.Signals, ...]] = (signal.SIGINT,)


def signal_to_exit_code(signum: int) -> int:
    """Map a terminating signal number to the shell exit-code convention."""

    return 128 + signum


def normalize_exit_code(raw_return_code: int) -> int:
    """Map a `Popen.returncode` to a non-negative shell exit code."""

    if raw_return_code < 0:
        return signal_to_exit_code(-raw_return_code)
    return raw_return_code


class InterruptForwarder:
    """Scoped SIGINT handler that interrupts the slot's process instead of the shell.

    The handler runs on the main thread, which may be blocked in the
    launcher's wait and holding the process's wait lock, so the actual
    termination runs on a short-lived worker thread.
    """

    def __init__(self, slot: ForegroundSlot) -> None:
        self._slot = slot
        self._previous_handlers: dict[signal.Signals, signal.Handlers] = {}
        self._installed = False
        self._received_count = 0

    @property
    def received_count(self) -> int:
        return self._received_count

    def __enter__(self) -> InterruptForwarder:
        previous_handlers: dict[signal.Signals, signal.Handlers] = {}
        try:
            for signum in TARGET_SIGNALS:
                previous_handlers[signum] = cast("signal.Handlers", signal.getsignal(signum))
                signal.signal(signum, self._on_signal)
        except ValueError:
            # Signal handlers can only be changed from the main thread.
            return self
        self._previous_handlers = previous_handlers
        self._installed = True
        return self

    def __exit__(self, exc_type: object, exc: object, tb: object) -> None:
        _ = (exc_type, exc, tb)
        if not self._installed:
            return
        for signum, handler in self._previous_handlers.items():
            signal.signal(signum, handler)
        self._previous_handlers.clear()
        self._installed = False

    def _on_signal(self, raw_signum: int, frame: FrameType | None) -> None:
        _ = (raw_signum, frame)
        self._received_count += 1
        self.dispatch_interrupt()

    def dispatch_interrupt(self) -> threading.Thread:
        worker = threading.Thread(
            target=self._slot.interrupt,
            name="stackshell-interrupt",
            daemon=True,
        )
        worker.start()
        return worker
