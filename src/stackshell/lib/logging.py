"""Structlog setup for the shell's diagnostic stream."""

from __future__ import annotations

import logging as std_logging
import sys

import structlog

LOG_COMPONENT = "stackshell"

LOG_LEVELS: dict[str, int] = {
    "debug": std_logging.DEBUG,
    "info": std_logging.INFO,
    "warning": std_logging.WARNING,
    "error": std_logging.ERROR,
}


def resolve_log_level(verbosity: int = 0, level_name: str | None = None) -> int:
    """Pick the threshold: `-v` flags only ever make a configured level noisier."""

    base = LOG_LEVELS[level_name.lower()] if level_name else std_logging.WARNING
    if verbosity <= 0:
        return base
    flagged = std_logging.INFO if verbosity == 1 else std_logging.DEBUG
    return min(base, flagged)


def configure_logging(
    json_mode: bool = False,
    verbosity: int = 0,
    *,
    level_name: str | None = None,
) -> int:
    """Route structlog and stdlib records to stderr; returns the active level.

    Child output owns stdout, so nothing here may write there. Every event
    carries `component=stackshell` so diagnostics stay distinguishable
    from the child's own stderr.
    """

    level = resolve_log_level(verbosity, level_name)
    handler = std_logging.StreamHandler(sys.stderr)
    handler.setFormatter(std_logging.Formatter("%(levelname)s %(name)s: %(message)s"))
    std_logging.basicConfig(level=level, handlers=[handler], force=True)

    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(component=LOG_COMPONENT)

    processors: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_mode:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
    return level
