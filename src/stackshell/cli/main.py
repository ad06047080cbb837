"""Cyclopts CLI entry point for stackshell."""

from __future__ import annotations

import os
import sys
from contextvars import ContextVar
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

from cyclopts import App, Parameter

from stackshell import __version__
from stackshell.cli.output import OutputConfig
from stackshell.cli.output import emit as emit_output
from stackshell.lib.config.settings import ShellConfig, config_path, load_config
from stackshell.lib.domain import ExecutionRequest
from stackshell.lib.exec.launcher import ProcessLauncher
from stackshell.lib.exec.registry import ForegroundSlot
from stackshell.lib.exec.resolve import resolve_executable
from stackshell.lib.exec.signals import InterruptForwarder
from stackshell.lib.sinks import LastResultStore
from stackshell.lib.terminal import ConsoleTerminal
from stackshell.lib.workdir import CurrentDirectory, home_directory

if TYPE_CHECKING:
    from collections.abc import Sequence

_OUTPUT: ContextVar[OutputConfig | None] = ContextVar("_OUTPUT", default=None)
_CONFIG: ContextVar[ShellConfig | None] = ContextVar("_CONFIG", default=None)


def emit(payload: object) -> None:
    """Write command output using current output format settings."""

    emit_output(payload, _OUTPUT.get() or OutputConfig())


def shell_config() -> ShellConfig:
    """Return the config loaded at startup, loading it now if that failed."""

    return _CONFIG.get() or load_config(home_directory())


app = App(
    name="stackshell",
    help="Run external programs in the foreground with captured output.",
    version=__version__,
    help_formatter="plain",
)
config_app = App(name="config", help="Shell config commands", help_formatter="plain")
app.command(config_app, name="config")


@app.command(name="run")
def run(
    program: str,
    *args: str,
    cwd: Annotated[
        str | None,
        Parameter(name="--cwd", help="Directory to run in (defaults to the current one)."),
    ] = None,
) -> None:
    """Run PROGRAM in the foreground.

    Global flags (--json, -v) must come before `run`; everything after it
    belongs to the child. Put program flags after `--`.
    """

    config = shell_config()
    workdir = CurrentDirectory(Path(cwd) if cwd is not None else None)
    terminal = ConsoleTerminal(
        environ=os.environ,
        ansi_mode=config.ansi_mode,
        default_width=config.default_width,
    )
    sinks = LastResultStore()
    slot = ForegroundSlot(kill_grace_seconds=config.kill_grace_seconds)
    launcher = ProcessLauncher(
        slot=slot,
        working_directory=workdir,
        terminal=terminal,
        sinks=sinks,
        policy=config.redirect_policy,
        chunk_size=config.chunk_size,
        kill_grace_seconds=config.kill_grace_seconds,
        default_width=config.default_width,
    )

    current = workdir.current_directory()
    # Unresolvable names still go through the launcher so the failure is reported uniformly.
    executable = resolve_executable(program, cwd=current) or (current / program)
    request = ExecutionRequest(executable_path=executable, arguments=tuple(args))

    with InterruptForwarder(slot):
        ok = launcher.execute(request)

    raise SystemExit(0 if ok else 1)


@app.command(name="which")
def which(name: str) -> None:
    """Print the absolute path NAME resolves to."""

    resolved = resolve_executable(name, cwd=Path.cwd())
    if resolved is None:
        raise FileNotFoundError(f"{name}: command not found")
    emit({"name": name, "path": resolved.as_posix()})


@config_app.command(name="show")
def config_show() -> None:
    """Show the resolved config."""

    home = home_directory()
    payload = {"path": config_path(home).as_posix(), "config": shell_config()}
    emit(payload)


def _operation_error_message(exc: Exception) -> str:
    if isinstance(exc, KeyError) and exc.args:
        return str(exc.args[0])
    message = str(exc).strip()
    if message:
        return message
    return exc.__class__.__name__


_PASSTHROUGH_COMMANDS = frozenset({"run"})


def _extract_global_options(argv: Sequence[str]) -> tuple[list[str], OutputConfig, int]:
    """Pull --json / -v out of argv.

    Tokens after `--`, and everything after the `run` command, belong to the
    child and are left untouched.
    """

    json_mode = False
    verbosity = 0
    cleaned: list[str] = []
    passthrough = False
    for arg in argv:
        if passthrough:
            cleaned.append(arg)
            continue
        if arg == "--":
            passthrough = True
            cleaned.append(arg)
            continue
        if arg in _PASSTHROUGH_COMMANDS:
            passthrough = True
            cleaned.append(arg)
            continue
        if arg == "--json":
            json_mode = True
            continue
        if arg in {"--verbose", "-v"}:
            verbosity += 1
            continue
        if arg == "-vv":
            verbosity += 2
            continue
        cleaned.append(arg)
    return cleaned, OutputConfig(format="json" if json_mode else "text"), verbosity


def _preload_config() -> ShellConfig | None:
    try:
        return load_config(home_directory())
    except (ValueError, OSError):
        # Commands reload through `shell_config()` and report the error themselves.
        return None


def main(argv: Sequence[str] | None = None) -> None:
    """CLI entry point used by `stackshell` and `python -m stackshell`."""

    from stackshell.lib.logging import configure_logging

    args = list(sys.argv[1:] if argv is None else argv)
    cleaned_args, output, verbosity = _extract_global_options(args)

    # Configure logging early so config warnings go to stderr, not stdout.
    json_mode = output.format == "json"
    configure_logging(json_mode=json_mode, verbosity=verbosity)
    config = _preload_config()
    if config is not None and config.log_level is not None:
        configure_logging(json_mode=json_mode, verbosity=verbosity, level_name=config.log_level)

    token = _OUTPUT.set(output)
    config_token = _CONFIG.set(config)
    try:
        try:
            app(cleaned_args)
        except (KeyError, ValueError, FileNotFoundError, OSError) as exc:
            print(f"error: {_operation_error_message(exc)}", file=sys.stderr)
            raise SystemExit(1) from None
    finally:
        _CONFIG.reset(config_token)
        _OUTPUT.reset(token)
