"""Executable lookup for commands typed at the shell prompt."""

from __future__ import annotations

import os
import sys
from pathlib import Path

_WINDOWS_EXECUTABLE_SUFFIXES = (".exe", ".bat", ".com", ".cmd")


def _is_windows(platform: str) -> bool:
    return platform.startswith("win")


def is_executable(entry: Path | None, *, platform: str = sys.platform) -> bool:
    """Return whether `entry` names a file the shell may launch."""

    if entry is None:
        return False
    try:
        if not entry.is_file():
            return False
        if _is_windows(platform):
            return entry.name.lower().endswith(_WINDOWS_EXECUTABLE_SUFFIXES)
        return os.access(entry, os.X_OK)
    except OSError:
        return False


def _candidate_names(name: str, platform: str) -> list[str]:
    if not _is_windows(platform) or name.lower().endswith(_WINDOWS_EXECUTABLE_SUFFIXES):
        return [name]
    return [name, *(f"{name}{suffix}" for suffix in _WINDOWS_EXECUTABLE_SUFFIXES)]


def resolve_executable(
    name: str,
    *,
    cwd: Path,
    search_path: str | None = None,
    platform: str = sys.platform,
) -> Path | None:
    """Resolve a typed command name to an absolute executable path.

    Names containing a path separator resolve relative to `cwd`; bare
    names are looked up on `search_path` (defaults to `$PATH`).
    """

    stripped = name.strip()
    if not stripped:
        return None

    separators = {os.sep, "/"} | ({os.altsep} if os.altsep else set())
    if any(sep in stripped for sep in separators):
        base = (cwd / Path(stripped).expanduser()).absolute()
        for candidate_name in _candidate_names(base.name, platform):
            candidate = base.with_name(candidate_name)
            if is_executable(candidate, platform=platform):
                return candidate
        return None

    raw_path = os.environ.get("PATH", "") if search_path is None else search_path
    for directory in raw_path.split(os.pathsep):
        if not directory:
            continue
        folder = Path(directory).expanduser()
        if not folder.is_absolute():
            folder = cwd / folder
        for candidate_name in _candidate_names(stripped, platform):
            candidate = folder / candidate_name
            if is_executable(candidate, platform=platform):
                return candidate.absolute()
    return None
