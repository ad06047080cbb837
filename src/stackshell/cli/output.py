"""CLI output formatting utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Literal, cast

OutputFormat = Literal["text", "json"]


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat = "text"


def to_jsonable(value: Any) -> Any:
    """Convert supported values to JSON-serializable payloads."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        typed_dict = cast("dict[object, object]", value)
        return {str(key): to_jsonable(item) for key, item in typed_dict.items()}
    if isinstance(value, (list, tuple, set)):
        typed_seq = cast("list[object] | tuple[object, ...] | set[object]", value)
        return [to_jsonable(item) for item in typed_seq]
    return value


def _text_lines(payload: Any) -> list[str]:
    if isinstance(payload, dict):
        typed = cast("dict[str, Any]", payload)
        return [f"{key} = {typed[key]}" for key in sorted(typed)]
    if isinstance(payload, list):
        return [str(item) for item in cast("list[Any]", payload)]
    return [str(payload)]


def emit(value: Any, config: OutputConfig) -> None:
    """Emit one payload according to the configured output mode."""

    payload = to_jsonable(value)
    if config.format == "json":
        print(json.dumps(payload, sort_keys=True))
        return
    for line in _text_lines(payload):
        print(line)
