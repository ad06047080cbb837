"""Concurrent relays from child output pipes to capture buffers and the terminal."""

from __future__ import annotations

import codecs
import threading
from typing import BinaryIO, TextIO

from stackshell.lib.domain import CaptureBuffer, default_encoding
from stackshell.lib.exec.ansi import strip_ansi

DEFAULT_CHUNK_SIZE = 8192


class TerminalSink:
    """Terminal-facing copy of one output stream.

    ANSI-safe terminals receive the raw bytes when the writer exposes a
    binary buffer. Otherwise chunks are decoded incrementally with the
    platform encoding and, when unsafe, stripped of escape sequences.
    """

    def __init__(
        self,
        writer: TextIO,
        *,
        ansi_safe: bool,
        encoding: str | None = None,
    ) -> None:
        self._writer = writer
        self._strip = not ansi_safe
        self._binary: BinaryIO | None = getattr(writer, "buffer", None) if ansi_safe else None
        self._decoder = codecs.getincrementaldecoder(encoding or default_encoding())(
            errors="replace"
        )

    def write(self, chunk: bytes) -> None:
        if self._binary is not None:
            # Earlier text written through the wrapper must land first.
            self._writer.flush()
            self._binary.write(chunk)
            self._binary.flush()
            return
        self._write_text(self._decoder.decode(chunk))

    def finish(self) -> None:
        if self._binary is None:
            self._write_text(self._decoder.decode(b"", final=True))

    def _write_text(self, text: str) -> None:
        if self._strip:
            text = strip_ansi(text)
        if text:
            self._writer.write(text)
        self._writer.flush()


def pump(
    source: BinaryIO,
    capture: CaptureBuffer,
    terminal: TerminalSink | None = None,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> None:
    """Copy `source` into `capture` (and the terminal) until end-of-stream.

    A read error ends the pump. A terminal write error only stops
    forwarding: the source keeps draining into the capture so the child
    never blocks on a full pipe.
    """

    forwarding = terminal
    while True:
        try:
            chunk = source.read(chunk_size)
        except (OSError, ValueError):
            break
        if not chunk:
            break

        capture.append(chunk)
        if forwarding is None:
            continue
        try:
            forwarding.write(chunk)
        except (OSError, ValueError):
            forwarding = None

    if forwarding is not None:
        try:
            forwarding.finish()
        except (OSError, ValueError):
            pass


class StreamPump:
    """One thread relaying one child output stream."""

    def __init__(
        self,
        name: str,
        source: BinaryIO,
        capture: CaptureBuffer,
        terminal: TerminalSink | None = None,
        *,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
    ) -> None:
        self.name = name
        self.capture = capture
        self._thread = threading.Thread(
            target=pump,
            args=(source, capture, terminal),
            kwargs={"chunk_size": chunk_size},
            name=f"stackshell-pump-{name}",
            daemon=True,
        )

    def start(self) -> None:
        self._thread.start()

    def join(self) -> None:
        # Unbounded: returning early would truncate the capture.
        self._thread.join()

    def is_alive(self) -> bool:
        return self._thread.is_alive()
