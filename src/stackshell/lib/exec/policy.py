"""Output redirection policy and child environment construction."""

from __future__ import annotations

import subprocess
from collections.abc import Mapping
from enum import StrEnum


class RedirectPolicy(StrEnum):
    SEPARATE = "separate"
    MERGED = "merged"
    MERGED_COLOR_ENV = "merged-color-env"

    @property
    def merges_stderr(self) -> bool:
        return self is not RedirectPolicy.SEPARATE

    def stderr_target(self) -> int:
        """Return the `subprocess` stderr argument for this policy."""

        if self.merges_stderr:
            return subprocess.STDOUT
        return subprocess.PIPE


# Tools that disable color when stdout is not a tty honor at least one of these.
_FORCE_COLOR_ENV: tuple[tuple[str, str], ...] = (
    ("FORCE_COLOR", "1"),
    ("CLICOLOR_FORCE", "1"),
    ("COLORTERM", "truecolor"),
)


def parse_redirect_policy(raw_value: str) -> RedirectPolicy:
    normalized = raw_value.strip().lower().replace("_", "-")
    try:
        return RedirectPolicy(normalized)
    except ValueError as error:
        choices = ", ".join(policy.value for policy in RedirectPolicy)
        raise ValueError(
            f"Unknown redirect policy {raw_value!r}; expected one of: {choices}."
        ) from error


def build_child_env(
    policy: RedirectPolicy,
    base_env: Mapping[str, str],
) -> dict[str, str] | None:
    """Return the child environment, or None to inherit the parent's unchanged."""

    if policy is not RedirectPolicy.MERGED_COLOR_ENV:
        return None

    env = dict(base_env)
    env.pop("NO_COLOR", None)
    for key, value in _FORCE_COLOR_ENV:
        env.setdefault(key, value)
    return env
