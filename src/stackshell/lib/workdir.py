"""Working-directory provider for the interactive shell."""

from __future__ import annotations

from pathlib import Path
from threading import Lock


def home_directory() -> Path:
    return Path.home()


class CurrentDirectory:
    """Mutable shell working directory, independent of the process cwd."""

    def __init__(self, initial: Path | None = None) -> None:
        self._lock = Lock()
        self._path = (initial or Path.cwd()).expanduser().resolve()

    def current_directory(self) -> Path:
        with self._lock:
            return self._path

    def change_directory(self, target: Path | str) -> Path:
        """Resolve `target` against the current directory and switch to it."""

        with self._lock:
            candidate = (self._path / Path(target).expanduser()).resolve()
            if not candidate.is_dir():
                raise NotADirectoryError(f"Not a directory: {candidate}")
            self._path = candidate
            return candidate
