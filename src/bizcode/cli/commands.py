"""CLI command handlers for registry diagnosis."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any

from cyclopts import Parameter

from bizcode.lib.codegen import code_for_frame
from bizcode.lib.config.settings import SEPARATOR_DEFAULT, FormatterConfig, load_config
from bizcode.lib.formatter import parse_message
from bizcode.lib.frames import Frame
from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore
from bizcode.lib.types import QualifiedName

if TYPE_CHECKING:
    from cyclopts import App

Emitter = Callable[[Any], None]


@dataclass(frozen=True, slots=True)
class EntryOutput:
    business_code: str
    package: str
    function_name: str
    line: str

    @classmethod
    def from_entry(cls, entry: RegistryEntry) -> EntryOutput:
        return cls(
            business_code=entry.business_code,
            package=entry.package,
            function_name=entry.function_name,
            line=entry.line,
        )

    def format_text(self) -> str:
        return f"{self.business_code}  {self.package}.{self.function_name}:{self.line}"


@dataclass(frozen=True, slots=True)
class EntryListOutput:
    entries: tuple[EntryOutput, ...]

    def format_text(self) -> str:
        if not self.entries:
            return "(no entries)"
        return "\n".join(entry.format_text() for entry in self.entries)


@dataclass(frozen=True, slots=True)
class ParseOutput:
    http_code: int
    business_code: str
    message: str

    def format_text(self) -> str:
        return "\n".join(
            (
                f"http_code: {self.http_code}",
                f"business_code: {self.business_code}",
                f"message: {self.message}",
            )
        )


@dataclass(frozen=True, slots=True)
class CodeOutput:
    business_code: str
    package: str
    function_name: str
    line: int

    def format_text(self) -> str:
        return self.business_code


@dataclass(frozen=True, slots=True)
class ConfigOutput:
    registry_path: str | None
    separator: str
    include_full_chain: bool
    skip: int
    package_name: str
    queue_size: int

    @classmethod
    def from_config(cls, config: FormatterConfig) -> ConfigOutput:
        return cls(
            registry_path=(
                config.registry_path.as_posix() if config.registry_path is not None else None
            ),
            separator=config.separator,
            include_full_chain=config.include_full_chain,
            skip=config.skip,
            package_name=config.package_name,
            queue_size=config.queue_size,
        )

    def format_text(self) -> str:
        return "\n".join(
            (
                f"registry_path: {self.registry_path or '(disabled)'}",
                f"separator: {self.separator}",
                f"include_full_chain: {str(self.include_full_chain).lower()}",
                f"skip: {self.skip}",
                f"package_name: {self.package_name or '(any)'}",
                f"queue_size: {self.queue_size}",
            )
        )


def _registry_store(registry: str | None) -> RegistryStore:
    if registry is not None and registry.strip():
        return RegistryStore(Path(registry).expanduser())
    configured = load_config().registry_path
    if configured is None:
        raise ValueError(
            "No registry configured. Pass --registry or set BIZCODE_REGISTRY_PATH."
        )
    return RegistryStore(configured)


def _lookup(
    emit: Emitter,
    code: str,
    registry: Annotated[
        str | None,
        Parameter(name="--registry", help="Registry JSON file path."),
    ] = None,
) -> None:
    """Show where a business code was produced."""

    entry = _registry_store(registry).lookup(code.strip())
    if entry is None:
        raise KeyError(f"Business code '{code}' is not registered.")
    emit(EntryOutput.from_entry(entry))


def _list(
    emit: Emitter,
    registry: Annotated[
        str | None,
        Parameter(name="--registry", help="Registry JSON file path."),
    ] = None,
) -> None:
    """List all registered business codes."""

    entries = _registry_store(registry).load()
    emit(
        EntryListOutput(
            entries=tuple(EntryOutput.from_entry(entries[code]) for code in sorted(entries))
        )
    )


def _parse(
    emit: Emitter,
    text: str,
    separator: Annotated[
        str,
        Parameter(name="--separator", help="Separator character."),
    ] = SEPARATOR_DEFAULT,
) -> None:
    """Split a formatted message into its parts."""

    parsed = parse_message(text, separator)
    emit(
        ParseOutput(
            http_code=parsed.http_code,
            business_code=parsed.business_code,
            message=parsed.message,
        )
    )


def _code(emit: Emitter, qualified_name: str, line: int) -> None:
    """Compute the business code for `<module>.<function>` at a line."""

    if line < 0:
        raise ValueError("Line must be >= 0.")
    code, package, function = code_for_frame(Frame(QualifiedName(qualified_name), line))
    emit(CodeOutput(business_code=code, package=package, function_name=function, line=line))


def _config(emit: Emitter) -> None:
    """Show the resolved configuration."""

    emit(ConfigOutput.from_config(load_config()))


_COMMANDS: tuple[tuple[str, Callable[..., None]], ...] = (
    ("lookup", _lookup),
    ("list", _list),
    ("parse", _parse),
    ("code", _code),
    ("config", _config),
)


def register_commands(app: App, emit: Emitter) -> tuple[set[str], dict[str, str]]:
    registered: set[str] = set()
    descriptions: dict[str, str] = {}

    for name, handler in _COMMANDS:
        bound = partial(handler, emit)
        bound.__name__ = f"cmd_{name}"  # type: ignore[attr-defined]
        description = (handler.__doc__ or "").strip()
        app.command(bound, name=name, help=description)
        registered.add(name)
        descriptions[name] = description

    return registered, descriptions
