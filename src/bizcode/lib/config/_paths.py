"""Project manifest discovery."""

from __future__ import annotations

import logging
import re
import tomllib
from pathlib import Path
from typing import Any, cast

logger = logging.getLogger(__name__)

MANIFEST_DEFAULT = "pyproject.toml"

_NAME_SEPARATORS = re.compile(r"[-_.]+")


def find_manifest(start: Path | None = None, name: str = MANIFEST_DEFAULT) -> Path | None:
    """Return the nearest manifest at or above `start` (default: cwd).

    Like the repository-root lookup, the walk stops at a `.git` boundary.
    """

    candidate = (start or Path.cwd()).resolve()
    while True:
        manifest = candidate / name
        if manifest.is_file():
            return manifest
        if (candidate / ".git").exists():
            return None
        parent = candidate.parent
        if parent == candidate:
            return None
        candidate = parent


def read_manifest(path: Path) -> dict[str, Any]:
    """Parse a TOML manifest; missing files read as empty."""

    if not path.is_file():
        return {}
    with path.open("rb") as handle:
        return cast("dict[str, Any]", tomllib.load(handle))


def normalize_import_name(project_name: str) -> str:
    """`My-Project.Core` -> `my_project_core`."""

    return _NAME_SEPARATORS.sub("_", project_name.strip()).lower()


def discover_package_name(manifest: Path | None = None) -> str:
    """Return the import name of the project owning `manifest`.

    Returns an empty string when there is no manifest or it names no project,
    which disables the ownership filter.
    """

    path = manifest if manifest is not None else find_manifest()
    if path is None:
        return ""
    try:
        payload = read_manifest(path)
    except (OSError, tomllib.TOMLDecodeError):
        logger.warning("Could not read project manifest '%s'.", path, exc_info=True)
        return ""
    project = payload.get("project")
    if not isinstance(project, dict):
        return ""
    name = cast("dict[str, object]", project).get("name")
    if not isinstance(name, str) or not name.strip():
        return ""
    return normalize_import_name(name)
