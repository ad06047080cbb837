"""Core stackshell library exports."""

from stackshell.lib.domain import (
    CapturedOutput,
    ExecutionRequest,
    ExecutionResult,
    TerminalCapability,
)

__all__ = ["CapturedOutput", "ExecutionRequest", "ExecutionResult", "TerminalCapability"]
