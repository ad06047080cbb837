"""Publishing captured output and rendering the final status line."""

from __future__ import annotations

from typing import TextIO

import structlog

from stackshell.lib.domain import CapturedOutput
from stackshell.lib.formatting import Foreground
from stackshell.lib.ports import ColorFormatter, ResultSinks

logger = structlog.get_logger(__name__)

SUCCESS_GLYPH = ":)"
FAILURE_GLYPH = ":("


def status_padding(width: int) -> int:
    """Left padding that right-aligns a two-column glyph; never negative."""

    return max(0, width - 2)


def render_status_line(success: bool, *, width: int, formatter: ColorFormatter) -> str:
    glyph = (
        formatter.with_foreground(SUCCESS_GLYPH, Foreground.GREEN)
        if success
        else formatter.with_foreground(FAILURE_GLYPH, Foreground.RED)
    )
    return f"{' ' * status_padding(width)}{glyph}"


class ResultReporter:
    """Push one execution's outcome into the result sinks and the terminal."""

    def __init__(
        self,
        *,
        sinks: ResultSinks,
        formatter: ColorFormatter,
        writer: TextIO,
        width: int,
        error_writer: TextIO | None = None,
        encoding: str | None = None,
    ) -> None:
        self._sinks = sinks
        self._error_writer = error_writer
        self._formatter = formatter
        self._writer = writer
        self._width = width
        self._encoding = encoding

    def report(self, exit_code: int, captured: CapturedOutput) -> bool:
        success = exit_code == 0
        combined = captured.stdout_text(self._encoding)
        self._sinks.set_last_output(combined)

        if success:
            self._sinks.set_last_error("")
        else:
            stderr_text = "" if captured.merged else captured.stderr_text(self._encoding)
            # Merged streams leave no stderr-only view; the combined text is the best signal.
            self._sinks.set_last_error(stderr_text or combined)

        self.print_status(success)
        return success

    def report_failure(self, message: str) -> bool:
        """Report an execution that never produced an exit code."""

        self._sinks.set_last_output("")
        self._sinks.set_last_error(message)
        if self._error_writer is not None:
            try:
                self._error_writer.write(f"{message}\n")
                self._error_writer.flush()
            except (OSError, ValueError):
                logger.debug("Failure message could not be written.", exc_info=True)
        self.print_status(False)
        return False

    def print_status(self, success: bool) -> None:
        line = render_status_line(success, width=self._width, formatter=self._formatter)
        try:
            self._writer.write(f"{line}\n")
            self._writer.flush()
        except (OSError, ValueError):
            logger.debug("Status line could not be written.", exc_info=True)
