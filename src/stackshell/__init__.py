"""Foreground subprocess execution for the stackshell interactive shell."""

__version__ = "0.1.0"
