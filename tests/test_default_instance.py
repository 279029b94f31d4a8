from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest

import bizcode
from bizcode.lib.codegen import generate_code
from bizcode.lib.config.settings import DEFAULT_INSTANCE_SKIP, FormatterConfig
from bizcode.lib.default import format_error, format_message, get_default, init_default
from bizcode.lib.formatter import parse_message


def test_init_default_only_once() -> None:
    init_default(FormatterConfig(skip=DEFAULT_INSTANCE_SKIP))

    with pytest.raises(RuntimeError, match="already"):
        init_default(FormatterConfig())


def test_module_format_message_resolves_the_caller() -> None:
    init_default(FormatterConfig(skip=DEFAULT_INSTANCE_SKIP))

    text, line = format_message("failed"), sys._getframe().f_lineno

    assert parse_message(text).business_code == generate_code(
        __name__, "test_module_format_message_resolves_the_caller", line
    )


def test_module_format_error_wraps_error() -> None:
    init_default(FormatterConfig(skip=DEFAULT_INSTANCE_SKIP))

    wrapped, line = format_error(ValueError("bad")), sys._getframe().f_lineno

    assert wrapped.business_code == generate_code(
        __name__, "test_module_format_error_wraps_error", line
    )
    assert str(wrapped).endswith("#bad")


def test_get_default_builds_from_discovered_config(
    project_dir: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    (project_dir / "pyproject.toml").write_text(
        '[project]\nname = "shop"\n[tool.bizcode]\nregistry_path = "var/codes.json"\n',
        encoding="utf-8",
    )
    monkeypatch.chdir(project_dir)

    formatter = get_default()

    assert formatter is get_default()
    assert formatter.config.skip == DEFAULT_INSTANCE_SKIP
    assert formatter.config.package_name == "shop"
    assert (project_dir / "var" / "codes.json").is_file()


def test_package_exports_default_helpers(project_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(project_dir)

    assert re.match(r"^#500:\d{9}#failed$", bizcode.format_message("failed"))
