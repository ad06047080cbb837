"""Cyclopts command-line surface for stackshell."""
