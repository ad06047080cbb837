"""Foreground execution engine primitives."""

from stackshell.lib.exec.ansi import strip_ansi
from stackshell.lib.exec.errors import (
    ExecutionError,
    FailureKind,
    InterruptedWait,
    IOFailure,
    LaunchFailure,
)
from stackshell.lib.exec.launcher import ProcessLauncher
from stackshell.lib.exec.policy import RedirectPolicy, build_child_env, parse_redirect_policy
from stackshell.lib.exec.pump import DEFAULT_CHUNK_SIZE, StreamPump, TerminalSink, pump
from stackshell.lib.exec.registry import ForegroundSlot
from stackshell.lib.exec.report import ResultReporter, render_status_line, status_padding
from stackshell.lib.exec.resolve import is_executable, resolve_executable
from stackshell.lib.exec.signals import InterruptForwarder, normalize_exit_code
from stackshell.lib.exec.termination import DEFAULT_KILL_GRACE_SECONDS, terminate_process

__all__ = [
    "DEFAULT_CHUNK_SIZE",
    "DEFAULT_KILL_GRACE_SECONDS",
    "ExecutionError",
    "FailureKind",
    "ForegroundSlot",
    "IOFailure",
    "InterruptForwarder",
    "InterruptedWait",
    "LaunchFailure",
    "ProcessLauncher",
    "RedirectPolicy",
    "ResultReporter",
    "StreamPump",
    "TerminalSink",
    "build_child_env",
    "is_executable",
    "normalize_exit_code",
    "parse_redirect_policy",
    "pump",
    "render_status_line",
    "resolve_executable",
    "status_padding",
    "strip_ansi",
    "terminate_process",
]
