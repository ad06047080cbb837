"""User-level operational config loader."""

from __future__ import annotations

import logging
import os
import tomllib
from dataclasses import dataclass, fields
from pathlib import Path
from typing import cast

from stackshell.lib.domain import DEFAULT_TERMINAL_WIDTH
from stackshell.lib.exec.policy import RedirectPolicy, parse_redirect_policy
from stackshell.lib.logging import LOG_LEVELS
from stackshell.lib.terminal import ANSI_MODES

logger = logging.getLogger(__name__)

CONFIG_DIRNAME = ".stackshell"
CONFIG_FILENAME = "config.toml"


@dataclass(frozen=True, slots=True)
class ShellConfig:
    """Resolved operational configuration for foreground execution."""

    redirect_policy: RedirectPolicy = RedirectPolicy.SEPARATE
    chunk_size: int = 8192
    kill_grace_seconds: float = 2.0
    default_width: int = DEFAULT_TERMINAL_WIDTH
    ansi_mode: str = "auto"
    log_level: str | None = None


_SECTION_KEY_MAP: dict[str, dict[str, str]] = {
    "exec": {
        "redirect_policy": "redirect_policy",
        "redirect": "redirect_policy",
        "chunk_size": "chunk_size",
        "kill_grace_seconds": "kill_grace_seconds",
    },
    "terminal": {
        "default_width": "default_width",
        "width": "default_width",
        "ansi": "ansi_mode",
        "ansi_mode": "ansi_mode",
    },
    "log": {
        "level": "log_level",
    },
}

_TOP_LEVEL_KEY_MAP: dict[str, str] = {
    "redirect_policy": "redirect_policy",
    "chunk_size": "chunk_size",
    "kill_grace_seconds": "kill_grace_seconds",
    "default_width": "default_width",
    "ansi_mode": "ansi_mode",
    "log_level": "log_level",
}

_ENV_OVERRIDE_MAP: dict[str, str] = {
    "STACKSHELL_REDIRECT_POLICY": "redirect_policy",
    "STACKSHELL_CHUNK_SIZE": "chunk_size",
    "STACKSHELL_KILL_GRACE_SECONDS": "kill_grace_seconds",
    "STACKSHELL_DEFAULT_WIDTH": "default_width",
    "STACKSHELL_ANSI": "ansi_mode",
    "STACKSHELL_LOG_LEVEL": "log_level",
}


def _expected_type_name(field_name: str) -> str:
    if field_name in {"chunk_size", "default_width"}:
        return "int"
    if field_name == "kill_grace_seconds":
        return "float"
    return "str"


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    expected = _expected_type_name(field_name)
    if expected == "int":
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise ValueError(
                f"Invalid value for '{source}': expected int, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return raw_value

    if expected == "float":
        if isinstance(raw_value, bool) or not isinstance(raw_value, int | float):
            raise ValueError(
                f"Invalid value for '{source}': expected float, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return float(raw_value)

    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(f"Invalid value for '{source}': expected non-empty string.")
    return normalized


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    expected = _expected_type_name(field_name)
    if expected == "int":
        try:
            return int(raw_value.strip())
        except ValueError as error:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected int, got {raw_value!r}."
            ) from error

    if expected == "float":
        try:
            return float(raw_value.strip())
        except ValueError as error:
            raise ValueError(
                f"Invalid environment override '{env_name}': expected float, got {raw_value!r}."
            ) from error

    normalized = raw_value.strip()
    if not normalized:
        raise ValueError(
            f"Invalid environment override '{env_name}': expected non-empty string."
        )
    return normalized


def _default_values() -> dict[str, object]:
    defaults = ShellConfig()
    return {field.name: getattr(defaults, field.name) for field in fields(ShellConfig)}


def _apply_toml_payload(
    *,
    values: dict[str, object],
    payload: dict[str, object],
    path: Path,
) -> None:
    for key, raw_value in payload.items():
        section_map = _SECTION_KEY_MAP.get(key)
        if section_map is not None:
            if not isinstance(raw_value, dict):
                raise ValueError(f"Invalid value for '{key}' in '{path}': expected table.")
            for section_key, section_value in cast("dict[str, object]", raw_value).items():
                field_name = section_map.get(section_key)
                if field_name is None:
                    logger.warning(
                        "Ignoring unknown stackshell config key '%s.%s'.",
                        key,
                        section_key,
                    )
                    continue
                values[field_name] = _coerce_file_value(
                    field_name=field_name,
                    raw_value=section_value,
                    source=f"{key}.{section_key}",
                )
            continue

        field_name = _TOP_LEVEL_KEY_MAP.get(key)
        if field_name is None:
            logger.warning("Ignoring unknown stackshell config key '%s'.", key)
            continue
        values[field_name] = _coerce_file_value(
            field_name=field_name,
            raw_value=raw_value,
            source=key,
        )


def _apply_env_overrides(values: dict[str, object]) -> None:
    for env_name, field_name in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        values[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )


def _build_config(values: dict[str, object]) -> ShellConfig:
    redirect = values["redirect_policy"]
    policy = redirect if isinstance(redirect, RedirectPolicy) else parse_redirect_policy(
        cast("str", redirect)
    )
    ansi_mode = cast("str", values["ansi_mode"]).lower()
    if ansi_mode not in ANSI_MODES:
        raise ValueError(
            f"Invalid ansi mode {ansi_mode!r}: expected one of {sorted(ANSI_MODES)}."
        )
    log_level = values["log_level"]
    if log_level is not None:
        log_level = cast("str", log_level).lower()
        if log_level not in LOG_LEVELS:
            raise ValueError(
                f"Invalid log level {log_level!r}: expected one of {sorted(LOG_LEVELS)}."
            )

    config = ShellConfig(
        redirect_policy=policy,
        chunk_size=cast("int", values["chunk_size"]),
        kill_grace_seconds=cast("float", values["kill_grace_seconds"]),
        default_width=cast("int", values["default_width"]),
        ansi_mode=ansi_mode,
        log_level=cast("str | None", log_level),
    )
    if config.chunk_size <= 0:
        raise ValueError(f"Invalid chunk_size: expected > 0, got {config.chunk_size}.")
    if config.kill_grace_seconds < 0:
        raise ValueError(
            f"Invalid kill_grace_seconds: expected >= 0, got {config.kill_grace_seconds}."
        )
    if config.default_width <= 0:
        raise ValueError(f"Invalid default_width: expected > 0, got {config.default_width}.")
    return config


def config_path(home: Path) -> Path:
    return home / CONFIG_DIRNAME / CONFIG_FILENAME


def load_config(home: Path | None = None) -> ShellConfig:
    """Load `~/.stackshell/config.toml` and apply environment overrides."""

    values = _default_values()
    path = config_path(home if home is not None else Path.home())
    if path.is_file():
        payload_obj = tomllib.loads(path.read_text(encoding="utf-8"))
        payload = cast("dict[str, object]", payload_obj)
        _apply_toml_payload(values=values, payload=payload, path=path)

    _apply_env_overrides(values)
    return _build_config(values)
