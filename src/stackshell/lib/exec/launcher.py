"""Foreground process launch, output multiplexing, and completion reporting."""

from __future__ import annotations

import os
import subprocess
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import BinaryIO, TextIO, cast

import structlog

from stackshell.lib.domain import (
    DEFAULT_TERMINAL_WIDTH,
    CaptureBuffer,
    CapturedOutput,
    ExecutionRequest,
    ExecutionResult,
    TerminalCapability,
)
from stackshell.lib.exec.errors import (
    ExecutionError,
    InterruptedWait,
    IOFailure,
    LaunchFailure,
    describe_launch_error,
)
from stackshell.lib.exec.policy import RedirectPolicy, build_child_env
from stackshell.lib.exec.pump import DEFAULT_CHUNK_SIZE, StreamPump, TerminalSink
from stackshell.lib.exec.registry import ForegroundSlot
from stackshell.lib.exec.report import ResultReporter
from stackshell.lib.exec.signals import normalize_exit_code
from stackshell.lib.exec.termination import DEFAULT_KILL_GRACE_SECONDS, terminate_process
from stackshell.lib.formatting import AnsiFormatter
from stackshell.lib.ports import (
    ColorFormatter,
    ResultSinks,
    TerminalCapabilityProvider,
    WorkingDirectoryProvider,
)
from stackshell.lib.terminal import snapshot_capability

logger = structlog.get_logger(__name__)


class ProcessLauncher:
    """Run one external executable in the foreground of the shell.

    The child inherits stdin. Its stdout (and stderr, unless the policy
    merges it) is relayed to the terminal by one pump thread per stream
    while a raw copy is captured for the result sinks.
    """

    def __init__(
        self,
        *,
        slot: ForegroundSlot,
        working_directory: WorkingDirectoryProvider,
        terminal: TerminalCapabilityProvider,
        sinks: ResultSinks,
        formatter: ColorFormatter | None = None,
        policy: RedirectPolicy = RedirectPolicy.SEPARATE,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        kill_grace_seconds: float = DEFAULT_KILL_GRACE_SECONDS,
        default_width: int = DEFAULT_TERMINAL_WIDTH,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be > 0.")
        self._slot = slot
        self._working_directory = working_directory
        self._terminal = terminal
        self._sinks = sinks
        self._formatter = formatter
        self._policy = policy
        self._chunk_size = chunk_size
        self._kill_grace_seconds = kill_grace_seconds
        self._default_width = default_width
        self._environ = environ

    def execute(self, request: ExecutionRequest) -> bool:
        """Run `request` to completion; every failure is reported, never raised."""

        try:
            capability = snapshot_capability(self._terminal, default_width=self._default_width)
            reporter = self._reporter(
                capability,
                writer=self._terminal.writer(),
                error_writer=self._terminal.error_writer(),
            )
        except (OSError, ValueError) as error:
            capability = TerminalCapability(width=self._default_width, ansi_safe=False)
            reporter = self._reporter(capability, writer=sys.stdout, error_writer=sys.stderr)
            failure = IOFailure(f"terminal unavailable: {str(error) or error.__class__.__name__}")
            return self._report_failure(request, reporter, failure)

        try:
            result = self.run(request, capability)
        except ExecutionError as error:
            return self._report_failure(request, reporter, error)

        return reporter.report(result.exit_code, result.captured)

    def _reporter(
        self,
        capability: TerminalCapability,
        *,
        writer: TextIO,
        error_writer: TextIO,
    ) -> ResultReporter:
        return ResultReporter(
            sinks=self._sinks,
            formatter=self._formatter or AnsiFormatter(enabled=capability.ansi_safe),
            writer=writer,
            width=capability.width,
            error_writer=error_writer,
        )

    def _report_failure(
        self,
        request: ExecutionRequest,
        reporter: ResultReporter,
        error: ExecutionError,
    ) -> bool:
        logger.info(
            "Foreground execution failed.",
            executable=str(request.executable_path),
            failure=str(error.kind),
            reason=str(error),
        )
        return reporter.report_failure(error.user_message())

    def run(self, request: ExecutionRequest, capability: TerminalCapability) -> ExecutionResult:
        """Launch, pump, and wait; raises `ExecutionError` subclasses on failure."""

        cwd = request.working_directory
        if cwd is None:
            try:
                cwd = self._working_directory.current_directory()
            except OSError as error:
                raise LaunchFailure(f"working directory unavailable: {error}") from error
        process = self._spawn(request, cwd)
        self._slot.register(process)

        captured = CapturedOutput(stderr=None if self._policy.merges_stderr else CaptureBuffer())
        pumps: list[StreamPump] = []
        try:
            pumps = self._start_pumps(process, captured, capability)
            try:
                raw_return_code = process.wait()
                for stream_pump in pumps:
                    stream_pump.join()
            except KeyboardInterrupt as error:
                terminate_process(process, grace_seconds=self._kill_grace_seconds)
                raise InterruptedWait() from error

            exit_code = normalize_exit_code(raw_return_code)
            logger.debug(
                "Foreground process exited.",
                pid=process.pid,
                raw_return_code=raw_return_code,
                exit_code=exit_code,
            )
            return ExecutionResult(exit_code=exit_code, captured=captured)
        except (OSError, ValueError) as error:
            raise IOFailure(str(error) or error.__class__.__name__) from error
        finally:
            self._slot.clear(process)
            if process.poll() is None:
                terminate_process(process, grace_seconds=self._kill_grace_seconds)
            if not any(stream_pump.is_alive() for stream_pump in pumps):
                _close_pipes(process)

    def _spawn(self, request: ExecutionRequest, cwd: Path) -> subprocess.Popen[bytes]:
        command = request.command()
        if not cwd.is_dir():
            raise LaunchFailure(f"working directory does not exist: {cwd}")

        environ = self._environ if self._environ is not None else os.environ
        env = build_child_env(self._policy, environ)
        if env is None and self._environ is not None:
            env = dict(self._environ)
        logger.debug(
            "Launching foreground process.",
            command=command,
            cwd=str(cwd),
            policy=str(self._policy),
        )
        try:
            return subprocess.Popen(
                command,
                cwd=cwd,
                stdin=None,
                stdout=subprocess.PIPE,
                stderr=self._policy.stderr_target(),
                env=env,
                bufsize=0,
            )
        except (OSError, ValueError) as error:
            raise LaunchFailure(describe_launch_error(command[0], error)) from error

    def _start_pumps(
        self,
        process: subprocess.Popen[bytes],
        captured: CapturedOutput,
        capability: TerminalCapability,
    ) -> list[StreamPump]:
        if process.stdout is None:
            raise IOFailure("child process did not expose a stdout pipe")

        pumps = [
            StreamPump(
                "stdout",
                cast("BinaryIO", process.stdout),
                captured.stdout,
                TerminalSink(self._terminal.writer(), ansi_safe=capability.ansi_safe),
                chunk_size=self._chunk_size,
            )
        ]
        if captured.stderr is not None:
            if process.stderr is None:
                raise IOFailure("child process did not expose a stderr pipe")
            pumps.append(
                StreamPump(
                    "stderr",
                    cast("BinaryIO", process.stderr),
                    captured.stderr,
                    TerminalSink(self._terminal.error_writer(), ansi_safe=capability.ansi_safe),
                    chunk_size=self._chunk_size,
                )
            )

        # Start every pump before blocking on the child so no output is dropped.
        for stream_pump in pumps:
            stream_pump.start()
        return pumps


def _close_pipes(process: subprocess.Popen[bytes]) -> None:
    for stream in (process.stdout, process.stderr):
        if stream is not None:
            stream.close()
