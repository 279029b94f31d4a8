"""Formatter configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, cast

from bizcode.lib.config._paths import discover_package_name, find_manifest, read_manifest
from bizcode.lib.state.registry_writer import DEFAULT_QUEUE_SIZE

logger = logging.getLogger(__name__)

SEPARATOR_DEFAULT = "#"
SKIP_DEFAULT = 2
DEFAULT_INSTANCE_SKIP = 3


@dataclass(frozen=True, slots=True)
class FormatterConfig:
    """Resolved configuration for one Formatter."""

    registry_path: Path | None = None
    separator: str = SEPARATOR_DEFAULT
    include_full_chain: bool = False
    skip: int = SKIP_DEFAULT
    package_name: str = ""
    queue_size: int = DEFAULT_QUEUE_SIZE

    def __post_init__(self) -> None:
        if len(self.separator) != 1:
            raise ValueError(f"Separator must be a single character, got {self.separator!r}.")
        if self.skip < 0:
            raise ValueError(f"Skip depth must be >= 0, got {self.skip}.")
        if self.queue_size < 1:
            raise ValueError(f"Queue size must be >= 1, got {self.queue_size}.")


_ENV_OVERRIDE_MAP: dict[str, str] = {
    "BIZCODE_REGISTRY_PATH": "registry_path",
    "BIZCODE_SEPARATOR": "separator",
    "BIZCODE_INCLUDE_FULL_CHAIN": "include_full_chain",
    "BIZCODE_SKIP": "skip",
    "BIZCODE_PACKAGE_NAME": "package_name",
    "BIZCODE_QUEUE_SIZE": "queue_size",
}

_INT_FIELDS = frozenset({"skip", "queue_size"})
_BOOL_FIELDS = frozenset({"include_full_chain"})
_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"0", "false", "no", "off", ""})


def _coerce_file_value(*, field_name: str, raw_value: object, source: str) -> object:
    if field_name in _INT_FIELDS:
        if isinstance(raw_value, bool) or not isinstance(raw_value, int):
            raise ValueError(
                f"Invalid value for '{source}': expected int, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return raw_value

    if field_name in _BOOL_FIELDS:
        if not isinstance(raw_value, bool):
            raise ValueError(
                f"Invalid value for '{source}': expected bool, got "
                f"{type(raw_value).__name__} ({raw_value!r})."
            )
        return raw_value

    if not isinstance(raw_value, str):
        raise ValueError(
            f"Invalid value for '{source}': expected str, got "
            f"{type(raw_value).__name__} ({raw_value!r})."
        )
    if field_name == "registry_path":
        normalized = raw_value.strip()
        return Path(normalized).expanduser() if normalized else None
    if field_name == "separator":
        return raw_value
    return raw_value.strip()


def _coerce_env_value(*, field_name: str, raw_value: str, env_name: str) -> object:
    if field_name in _INT_FIELDS:
        try:
            return int(raw_value.strip())
        except ValueError as exc:
            raise ValueError(
                f"Invalid value for '{env_name}': expected int, got {raw_value!r}."
            ) from exc

    if field_name in _BOOL_FIELDS:
        normalized = raw_value.strip().lower()
        if normalized in _TRUE_VALUES:
            return True
        if normalized in _FALSE_VALUES:
            return False
        raise ValueError(f"Invalid value for '{env_name}': expected bool, got {raw_value!r}.")

    return _coerce_file_value(field_name=field_name, raw_value=raw_value, source=env_name)


def _load_manifest_overrides(manifest: Path) -> dict[str, object]:
    payload = read_manifest(manifest)
    tool = payload.get("tool")
    if not isinstance(tool, dict):
        return {}
    section = cast("dict[str, object]", tool).get("bizcode")
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError("Invalid value for 'tool.bizcode': expected table.")

    known = {field.name for field in fields(FormatterConfig)}
    overrides: dict[str, object] = {}
    for key, value in cast("dict[str, object]", section).items():
        if key not in known:
            logger.warning("Ignoring unknown bizcode config key 'tool.bizcode.%s'.", key)
            continue
        overrides[key] = _coerce_file_value(
            field_name=key,
            raw_value=value,
            source=f"tool.bizcode.{key}",
        )

    registry_path = overrides.get("registry_path")
    if isinstance(registry_path, Path) and not registry_path.is_absolute():
        overrides["registry_path"] = manifest.parent / registry_path
    return overrides


def _load_env_overrides() -> dict[str, object]:
    overrides: dict[str, object] = {}
    for env_name, field_name in _ENV_OVERRIDE_MAP.items():
        raw_value = os.getenv(env_name)
        if raw_value is None:
            continue
        overrides[field_name] = _coerce_env_value(
            field_name=field_name,
            raw_value=raw_value,
            env_name=env_name,
        )
    return overrides


def load_config(manifest: Path | None = None, *, skip: int | None = None) -> FormatterConfig:
    """Resolve config from defaults, the project manifest, then environment.

    Precedence (highest first): `BIZCODE_*` environment variables, the
    `[tool.bizcode]` manifest table, the discovered project name, defaults.
    `skip` replaces the default skip depth but not an explicit setting.
    """

    manifest_path = manifest if manifest is not None else find_manifest()
    config = FormatterConfig(skip=skip if skip is not None else SKIP_DEFAULT)
    if manifest_path is not None:
        config = replace(config, package_name=discover_package_name(manifest_path))
        overrides = _load_manifest_overrides(manifest_path)
        if overrides:
            config = replace(config, **cast("dict[str, Any]", overrides))

    env_overrides = _load_env_overrides()
    if env_overrides:
        config = replace(config, **cast("dict[str, Any]", env_overrides))
    return config
