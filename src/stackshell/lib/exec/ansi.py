"""ANSI escape stripping for terminals that cannot render escape sequences."""

from __future__ import annotations

import re

# CSI sequences introduced by ESC [ or the 8-bit C1 CSI (0x9B):
# parameter bytes, intermediate bytes, then one final byte.
ANSI_PATTERN = re.compile(r"(?:\x1b\[|\x9b)[0-9;?]*[ -/]*[@-~]")


def strip_ansi(text: str) -> str:
    """Remove CSI escape sequences from one chunk of decoded text."""

    if not text:
        return text
    return ANSI_PATTERN.sub("", text)
