"""File-backed business-code registry with first-write-wins dedup."""

from __future__ import annotations

import json
import os
import stat
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import structlog

from bizcode.lib.errors import RegistryError

logger = structlog.get_logger(__name__)

_FILE_MODE = 0o777


def _current_mode(path: Path) -> int:
    """Permission bits to carry over when the registry file is replaced."""

    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        return 0o644


@dataclass(frozen=True, slots=True)
class RegistryEntry:
    """Originating location of one business code."""

    business_code: str
    package: str
    function_name: str
    line: str

    def to_json(self) -> dict[str, str]:
        return {
            "businessCode": self.business_code,
            "package": self.package,
            "functionName": self.function_name,
            "line": self.line,
        }

    @classmethod
    def from_json(cls, payload: dict[str, Any]) -> RegistryEntry:
        return cls(
            business_code=str(payload.get("businessCode", "")),
            package=str(payload.get("package", "")),
            function_name=str(payload.get("functionName", "")),
            line=str(payload.get("line", "")),
        )


def ensure_registry_file(path: Path) -> None:
    """Create the registry's directory and an empty file when absent."""

    path.parent.mkdir(parents=True, exist_ok=True)
    if not path.exists():
        path.touch(mode=_FILE_MODE)
    # Fail at construction time rather than on the first record.
    with path.open("rb"):
        pass


class RegistryStore:
    """Whole-file read-merge-write JSON store keyed by business code.

    The lock only serialises writers inside this process. Two stores, or two
    processes, writing the same file can lose entries.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        try:
            raw = self._path.read_bytes()
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise RegistryError(f"Cannot read registry '{self._path}': {exc}") from exc
        if not raw.strip():
            return {}
        try:
            payload = json.loads(raw)
        except ValueError as exc:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors.
            raise RegistryError(f"Registry '{self._path}' is not valid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise RegistryError(f"Registry '{self._path}' must contain a JSON object.")
        return cast("dict[str, Any]", payload)

    def _write(self, table: dict[str, Any]) -> None:
        try:
            encoded = json.dumps(table, separators=(",", ":"), sort_keys=True)
        except (TypeError, ValueError) as exc:
            raise RegistryError(f"Cannot encode registry '{self._path}': {exc}") from exc

        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{self._path.name}.", suffix=".tmp", dir=self._path.parent
            )
            tmp_path = Path(tmp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                os.fchmod(handle.fileno(), _current_mode(self._path))
                handle.write(encoded)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_path, self._path)
        except OSError as exc:
            raise RegistryError(f"Cannot write registry '{self._path}': {exc}") from exc
        finally:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink(missing_ok=True)

    def record(self, entry: RegistryEntry) -> bool:
        """Insert `entry` unless its code is already registered.

        Returns True when the file was rewritten, False when the code was
        already present.
        """

        with self._lock:
            table = self._read()
            if entry.business_code in table:
                return False
            table[entry.business_code] = entry.to_json()
            self._write(table)
        logger.debug(
            "registry entry recorded",
            business_code=entry.business_code,
            package=entry.package,
            function=entry.function_name,
            line=entry.line,
        )
        return True

    def load(self) -> dict[str, RegistryEntry]:
        with self._lock:
            table = self._read()
        entries: dict[str, RegistryEntry] = {}
        for code, payload in table.items():
            if isinstance(payload, dict):
                entries[code] = RegistryEntry.from_json(cast("dict[str, Any]", payload))
        return entries

    def lookup(self, business_code: str) -> RegistryEntry | None:
        return self.load().get(business_code)
