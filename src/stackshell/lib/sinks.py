"""In-memory "last output" / "last error" store for shell introspection."""

from __future__ import annotations

from threading import Lock


class LastResultStore:
    """Thread-safe holder for the most recent command's output and error text."""

    def __init__(self) -> None:
        self._lock = Lock()
        self._last_output = ""
        self._last_error = ""

    @property
    def last_output(self) -> str:
        with self._lock:
            return self._last_output

    @property
    def last_error(self) -> str:
        with self._lock:
            return self._last_error

    def set_last_output(self, text: str) -> None:
        with self._lock:
            self._last_output = text

    def set_last_error(self, text: str) -> None:
        with self._lock:
            self._last_error = text
