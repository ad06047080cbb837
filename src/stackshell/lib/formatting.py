"""ANSI foreground styling for short status strings.

Lives in the lib layer so both the execution core and CLI code can depend
on it without introducing lib -> cli imports.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

_RESET = "\x1b[0m"


class Foreground(StrEnum):
    BLACK = "black"
    RED = "red"
    GREEN = "green"
    YELLOW = "yellow"
    BLUE = "blue"
    MAGENTA = "magenta"
    CYAN = "cyan"
    WHITE = "white"


_FOREGROUND_CODES: dict[Foreground, int] = {
    Foreground.BLACK: 30,
    Foreground.RED: 31,
    Foreground.GREEN: 32,
    Foreground.YELLOW: 33,
    Foreground.BLUE: 34,
    Foreground.MAGENTA: 35,
    Foreground.CYAN: 36,
    Foreground.WHITE: 37,
}


def foreground_code(color: Foreground | str) -> str:
    """Return the SGR escape that selects one foreground color."""

    normalized = Foreground(str(color).strip().lower())
    return f"\x1b[{_FOREGROUND_CODES[normalized]}m"


@dataclass(frozen=True, slots=True)
class AnsiFormatter:
    """Wrap text in SGR color codes; a disabled formatter returns text unchanged."""

    enabled: bool = True

    def with_foreground(self, text: str, color: Foreground) -> str:
        if not self.enabled or not text:
            return text
        return f"{foreground_code(color)}{text}{_RESET}"
