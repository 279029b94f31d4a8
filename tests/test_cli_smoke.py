"""Smoke tests for the bizcode CLI entry point."""

from __future__ import annotations

import json
from pathlib import Path

from bizcode import __version__
from bizcode.cli.main import (
    _extract_global_options,
    get_registered_cli_commands,
    get_registered_cli_descriptions,
)
from bizcode.lib.codegen import generate_code
from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore


def _seed_registry(path: Path) -> None:
    store = RegistryStore(path)
    store.record(
        RegistryEntry(
            business_code="131207005",
            package="shop.orders",
            function_name="load_order",
            line="5",
        )
    )
    store.record(
        RegistryEntry(
            business_code="002003004",
            package="shop.cart",
            function_name="add",
            line="4",
        )
    )


def test_registered_commands() -> None:
    assert get_registered_cli_commands() == {"lookup", "list", "parse", "code", "config"}


def test_extract_global_options_strips_output_flags() -> None:
    cleaned, options = _extract_global_options(["--json", "-v", "lookup", "123", "--verbose"])

    assert cleaned == ["lookup", "123"]
    assert options.output.format == "json"
    assert options.verbosity == 2


def test_help_lists_commands(run_bizcode) -> None:
    result = run_bizcode(["--help"])
    assert result.returncode == 0
    for expected in ["lookup", "list", "parse", "code", "config"]:
        assert expected in result.stdout


def test_version_flag(run_bizcode) -> None:
    result = run_bizcode(["--version"])
    assert result.returncode == 0
    assert __version__ in result.stdout


def test_code_command_prints_business_code(run_bizcode) -> None:
    result = run_bizcode(["code", "shop.orders.OrderService.create", "42"])

    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == generate_code("shop.orders.OrderService", "create", 42)


def test_code_command_json(run_bizcode) -> None:
    result = run_bizcode(["--json", "code", "shop.orders.load_order", "5"])

    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {
        "business_code": generate_code("shop.orders", "load_order", 5),
        "package": "shop.orders",
        "function_name": "load_order",
        "line": 5,
    }


def test_parse_command_splits_formatted_message(run_bizcode) -> None:
    result = run_bizcode(["--json", "parse", "#404:131207005#order 42 not found"])

    assert result.returncode == 0, result.stderr
    assert json.loads(result.stdout) == {
        "http_code": 404,
        "business_code": "131207005",
        "message": "order 42 not found",
    }


def test_parse_command_rejects_plain_text(run_bizcode) -> None:
    result = run_bizcode(["parse", "order not found"])

    assert result.returncode == 1
    assert result.stderr.startswith("error:")


def test_lookup_command_shows_entry(run_bizcode, tmp_path: Path) -> None:
    registry = tmp_path / "codes.json"
    _seed_registry(registry)

    result = run_bizcode(["lookup", "131207005", "--registry", str(registry)])

    assert result.returncode == 0, result.stderr
    assert result.stdout.strip() == "131207005  shop.orders.load_order:5"


def test_lookup_command_reports_unknown_code(run_bizcode, tmp_path: Path) -> None:
    registry = tmp_path / "codes.json"
    _seed_registry(registry)

    result = run_bizcode(["lookup", "999999999", "--registry", str(registry)])

    assert result.returncode == 1
    assert "999999999" in result.stderr


def test_lookup_command_requires_registry(run_bizcode) -> None:
    result = run_bizcode(["lookup", "131207005"])

    assert result.returncode == 1
    assert "No registry configured" in result.stderr


def test_list_command_porcelain(run_bizcode, tmp_path: Path) -> None:
    registry = tmp_path / "codes.json"
    _seed_registry(registry)

    result = run_bizcode(["--porcelain", "list", "--registry", str(registry)])

    assert result.returncode == 0, result.stderr
    assert result.stdout.splitlines() == [
        "business_code=002003004\tfunction_name=add\tline=4\tpackage=shop.cart",
        "business_code=131207005\tfunction_name=load_order\tline=5\tpackage=shop.orders",
    ]


def test_config_command_reads_project_manifest(run_bizcode, project_dir: Path) -> None:
    (project_dir / "pyproject.toml").write_text(
        '[project]\nname = "shop"\n[tool.bizcode]\nseparator = "|"\n',
        encoding="utf-8",
    )

    result = run_bizcode(["--json", "config"])

    assert result.returncode == 0, result.stderr
    payload = json.loads(result.stdout)
    assert payload["package_name"] == "shop"
    assert payload["separator"] == "|"
    assert payload["registry_path"] is None


def test_registered_descriptions_come_from_handlers() -> None:
    descriptions = get_registered_cli_descriptions()

    assert descriptions["lookup"] == "Show where a business code was produced."
    assert set(descriptions) == get_registered_cli_commands()


def test_parse_command_rejects_long_separator(run_bizcode) -> None:
    result = run_bizcode(["parse", "##500:1##x", "--separator", "##"])

    assert result.returncode == 1
    assert "single character" in result.stderr
