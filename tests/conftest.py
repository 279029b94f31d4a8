"""Shared pytest fixtures for library and CLI checks."""

from __future__ import annotations

import os
import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

import pytest

from bizcode.lib.default import reset_default

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator

PACKAGE_ROOT = Path(__file__).resolve().parents[1]

_BIZCODE_ENV = (
    "BIZCODE_REGISTRY_PATH",
    "BIZCODE_SEPARATOR",
    "BIZCODE_INCLUDE_FULL_CHAIN",
    "BIZCODE_SKIP",
    "BIZCODE_PACKAGE_NAME",
    "BIZCODE_QUEUE_SIZE",
)


@dataclass(frozen=True, slots=True)
class CliResult:
    args: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str


@pytest.fixture(autouse=True)
def _isolate_bizcode_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _BIZCODE_ENV:
        monkeypatch.delenv(name, raising=False)
    yield
    reset_default()


@pytest.fixture
def package_root() -> Path:
    return PACKAGE_ROOT


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """An isolated project root: manifest lookups stop at its `.git` marker."""

    root = tmp_path / "project"
    (root / ".git").mkdir(parents=True)
    return root


@pytest.fixture
def cli_env(package_root: Path) -> dict[str, str]:
    env = os.environ.copy()
    for name in _BIZCODE_ENV:
        env.pop(name, None)
    existing = env.get("PYTHONPATH", "")
    root = str(package_root / "src")
    env["PYTHONPATH"] = root if not existing else f"{root}:{existing}"
    return env


@pytest.fixture
def run_bizcode(project_dir: Path, cli_env: dict[str, str]) -> Callable[..., CliResult]:
    def _run(args: list[str], timeout: float = 15.0) -> CliResult:
        completed = subprocess.run(
            [sys.executable, "-m", "bizcode", *args],
            cwd=project_dir,
            env=cli_env,
            capture_output=True,
            text=True,
            check=False,
            timeout=timeout,
        )
        return CliResult(
            args=tuple(args),
            returncode=completed.returncode,
            stdout=completed.stdout,
            stderr=completed.stderr,
        )

    return _run
