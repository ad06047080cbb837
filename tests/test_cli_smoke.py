"""Smoke tests for the CLI entry point."""

from __future__ import annotations

import json
import sys
from pathlib import Path

from stackshell import __version__
from stackshell.cli.main import _extract_global_options


def test_help_lists_commands(run_stackshell) -> None:
    result = run_stackshell(["--help"])
    assert result.returncode == 0
    for expected in ["run", "which", "config"]:
        assert expected in result.stdout


def test_version_flag(run_stackshell) -> None:
    result = run_stackshell(["--version"])
    assert result.returncode == 0
    assert __version__ in result.stdout


def test_run_success_prints_child_output_and_status(run_stackshell) -> None:
    result = run_stackshell(["run", "--", sys.executable, "-c", "print('hello')"])

    assert result.returncode == 0
    lines = result.stdout.splitlines()
    assert lines[0] == "hello"
    # COLUMNS=20 and TERM=dumb: 18 spaces and an uncolored glyph.
    assert lines[-1] == f"{' ' * 18}:)"


def test_run_failure_exits_nonzero_and_forwards_stderr(run_stackshell) -> None:
    code = "import sys; sys.stderr.write('bad arg\\n'); sys.exit(2)"
    result = run_stackshell(["run", "--", sys.executable, "-c", code])

    assert result.returncode == 1
    assert "bad arg" in result.stderr
    assert result.stdout.splitlines()[-1] == f"{' ' * 18}:("


def test_run_missing_program_reports_launch_failure(run_stackshell) -> None:
    result = run_stackshell(["run", "definitely-not-a-real-program-xyz"])

    assert result.returncode == 1
    assert "Execution failed" in result.stderr
    assert result.stdout.rstrip().endswith(":(")


def test_which_resolves_absolute_path(run_stackshell) -> None:
    python = Path(sys.executable).resolve()
    result = run_stackshell(["--json", "which", str(python)])

    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert Path(payload["path"]) == python


def test_which_unknown_command_fails(run_stackshell) -> None:
    result = run_stackshell(["which", "definitely-not-a-real-program-xyz"])

    assert result.returncode == 1
    assert "command not found" in result.stderr


def test_config_show_json(run_stackshell, cli_env) -> None:
    cli_env["STACKSHELL_REDIRECT_POLICY"] = "merged"
    result = run_stackshell(["--json", "config", "show"])

    assert result.returncode == 0
    payload = json.loads(result.stdout)
    assert payload["config"]["redirect_policy"] == "merged"
    assert payload["config"]["chunk_size"] == 8192
    assert payload["path"].endswith(".stackshell/config.toml")


def test_invalid_config_is_reported_as_error(run_stackshell, cli_env) -> None:
    cli_env["STACKSHELL_CHUNK_SIZE"] = "lots"
    result = run_stackshell(["config", "show"])

    assert result.returncode == 1
    assert "STACKSHELL_CHUNK_SIZE" in result.stderr


def test_flags_after_run_belong_to_the_child() -> None:
    cleaned, output, verbosity = _extract_global_options(
        ["--json", "-v", "run", "ls", "-v", "--json", "-vv"]
    )

    assert cleaned == ["run", "ls", "-v", "--json", "-vv"]
    assert output.format == "json"
    assert verbosity == 1


def test_run_passes_verbose_flag_to_child(run_stackshell) -> None:
    code = "import sys; print(sys.argv[1:])"
    result = run_stackshell(["run", "--", sys.executable, "-c", code, "-v", "--json"])

    assert result.returncode == 0
    assert result.stdout.splitlines()[0] == "['-v', '--json']"


def test_configured_log_level_enables_launcher_diagnostics(run_stackshell, cli_env) -> None:
    cli_env["STACKSHELL_LOG_LEVEL"] = "info"
    result = run_stackshell(["run", "definitely-not-a-real-program-xyz"])

    assert result.returncode == 1
    assert "Foreground execution failed." in result.stderr
    assert "component=stackshell" in result.stderr
