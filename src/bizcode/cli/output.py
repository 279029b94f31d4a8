"""CLI output formatting utilities."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, is_dataclass
from pathlib import Path
from typing import Any, Literal, Protocol, TypeAlias, cast, runtime_checkable

OutputFormat = Literal["text", "json", "porcelain"]
JSONScalar: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONScalar | list["JSONValue"] | dict[str, "JSONValue"]


@dataclass(frozen=True, slots=True)
class OutputConfig:
    format: OutputFormat


@runtime_checkable
class TextFormattable(Protocol):
    """Output dataclasses that provide a human-readable text form."""

    def format_text(self) -> str: ...


def to_jsonable(value: Any) -> JSONValue:
    """Convert dataclasses, paths and containers to JSON-serializable payloads."""

    if is_dataclass(value) and not isinstance(value, type):
        return to_jsonable(asdict(value))
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        typed_dict = cast("dict[object, object]", value)
        return {str(key): to_jsonable(item) for key, item in typed_dict.items()}
    if isinstance(value, (list, tuple, set)):
        typed_seq = cast("list[object] | tuple[object, ...] | set[object]", value)
        return [to_jsonable(item) for item in typed_seq]
    return cast("JSONValue", value)


def normalize_output_format(
    *,
    requested: str | None,
    json_mode: bool,
    porcelain_mode: bool = False,
) -> OutputFormat:
    """Resolve the final output format from flags; default is text."""

    if json_mode:
        return "json"
    if porcelain_mode:
        return "porcelain"
    if requested is None or requested == "":
        return "text"

    normalized = requested.strip().lower()
    if normalized in {"text", "json", "porcelain"}:
        return cast("OutputFormat", normalized)
    raise SystemExit("--format must be one of: text, json, porcelain")


def _porcelain_value(value: JSONValue) -> str:
    if isinstance(value, (dict, list)):
        return json.dumps(value, sort_keys=True)
    return "" if value is None else str(value)


def _porcelain_line(payload: dict[str, JSONValue]) -> str:
    return "\t".join(f"{key}={_porcelain_value(payload[key])}" for key in sorted(payload))


def _emit_porcelain(value: Any) -> None:
    payload = to_jsonable(value)
    if isinstance(payload, dict) and set(payload) == {"entries"}:
        payload = payload["entries"]
    if isinstance(payload, list):
        for item in payload:
            if isinstance(item, dict):
                print(_porcelain_line(item))
            else:
                print(item)
        return
    if isinstance(payload, dict):
        print(_porcelain_line(payload))
        return
    print(payload)


def emit(value: Any, config: OutputConfig) -> None:
    """Emit one payload according to the configured output mode."""

    if config.format == "json":
        print(json.dumps(to_jsonable(value), sort_keys=True))
        return
    if config.format == "porcelain":
        _emit_porcelain(value)
        return
    if isinstance(value, TextFormattable):
        print(value.format_text())
    else:
        print(json.dumps(to_jsonable(value), sort_keys=True, indent=2))
