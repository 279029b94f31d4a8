"""Business-code error formatting.

Formatted text has the shape `<sep><httpCode>:<businessCode><sep><payload>`,
for example `#500:007042020#failed`. The business code identifies the call
site that produced the error; the registry maps it back to a location.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Self

import structlog

from bizcode.lib.codegen import code_for_frame
from bizcode.lib.config.settings import FormatterConfig
from bizcode.lib.errors import MalformedMessageError, RegistryError
from bizcode.lib.frames import Frame, capture_stack, error_stack, resolve_frame
from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore, ensure_registry_file
from bizcode.lib.state.registry_writer import RegistryWriter
from bizcode.lib.types import BusinessCode

logger = structlog.get_logger(__name__)

HTTP_CODE_DEFAULT = 500


def render(separator: str, http_code: int, business_code: str, payload: str) -> str:
    return f"{separator}{http_code}:{business_code}{separator}{payload}"


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    """Components recovered from one formatted string."""

    http_code: int
    business_code: str
    message: str


def parse_message(text: str, separator: str = "#") -> ParsedMessage:
    """Split formatted text back into its http code, business code and message."""

    if len(separator) != 1:
        raise MalformedMessageError(
            f"Separator must be a single character, got {separator!r}."
        )
    if not text.startswith(separator):
        raise MalformedMessageError(f"Text does not start with separator {separator!r}.")
    header, found, message = text[1:].partition(separator)
    if not found:
        raise MalformedMessageError(f"Text has no closing separator {separator!r}.")
    raw_http, colon, business_code = header.partition(":")
    if not colon or not business_code:
        raise MalformedMessageError("Header must be '<httpCode>:<businessCode>'.")
    try:
        http_code = int(raw_http)
    except ValueError as exc:
        raise MalformedMessageError(f"Invalid http code {raw_http!r}.") from exc
    return ParsedMessage(http_code=http_code, business_code=business_code, message=message)


class FormattedError(Exception):
    """An error wrapped with its http code and business code."""

    def __init__(
        self,
        wrapped: BaseException,
        *,
        http_code: int,
        business_code: str,
        separator: str = "#",
    ) -> None:
        super().__init__(render(separator, http_code, business_code, str(wrapped)))
        self.wrapped = wrapped
        self.http_code = http_code
        self.business_code = business_code
        self.separator = separator
        self.__cause__ = wrapped

    def unwrap(self) -> BaseException:
        return self.wrapped


class Formatter:
    """Assigns business codes to call sites and records them in a registry."""

    def __init__(self, config: FormatterConfig | None = None) -> None:
        self.config = config or FormatterConfig()
        self._store: RegistryStore | None = None
        self._writer: RegistryWriter | None = None
        if self.config.registry_path is not None:
            ensure_registry_file(self.config.registry_path)
            self._store = RegistryStore(self.config.registry_path)
            self._writer = RegistryWriter(self._store, maxsize=self.config.queue_size)

    @property
    def store(self) -> RegistryStore | None:
        return self._store

    def _resolve(self, frames: list[Frame]) -> tuple[BusinessCode, RegistryEntry]:
        frame = resolve_frame(frames, self.config.package_name)
        code, package, function = code_for_frame(frame)
        entry = RegistryEntry(
            business_code=code,
            package=package,
            function_name=function,
            line=str(frame.line),
        )
        return code, entry

    def format_message(
        self,
        message: str,
        http_code: int | None = None,
        business_code: str | int | None = None,
    ) -> str:
        """Return `message` prefixed with its http code and call-site code.

        Passing both `http_code` and `business_code` skips stack resolution.
        Already formatted messages are returned unchanged unless
        `include_full_chain` is set.
        """

        separator = self.config.separator
        if http_code is not None and business_code is not None:
            return render(separator, http_code, str(business_code), message)
        if not self.config.include_full_chain and message.startswith(separator):
            return message

        code, entry = self._resolve(capture_stack(self.config.skip))
        if self._writer is not None:
            self._writer.submit(entry)
        resolved_http = HTTP_CODE_DEFAULT if http_code is None else http_code
        return render(separator, resolved_http, code, message)

    def format_error(self, error: BaseException, http_code: int | None = None) -> FormattedError:
        """Wrap `error` with the code of the call site that raised it.

        The registry is updated before returning; a failed update is logged
        and does not prevent the wrapped error from being returned.
        """

        frames = error_stack(error)
        if not frames:
            frames = capture_stack(self.config.skip)
        code, entry = self._resolve(frames)
        if self._store is not None:
            try:
                self._store.record(entry)
            except RegistryError as exc:
                logger.warning(
                    "registry update failed",
                    business_code=code,
                    registry=str(self._store.path),
                    error=str(exc),
                )
        return FormattedError(
            error,
            http_code=HTTP_CODE_DEFAULT if http_code is None else http_code,
            business_code=code,
            separator=self.config.separator,
        )

    def parse(self, text: str) -> ParsedMessage:
        return parse_message(text, self.config.separator)

    def flush(self) -> None:
        """Wait for queued registry updates to be written."""

        if self._writer is not None:
            self._writer.flush()

    def close(self) -> None:
        if self._writer is not None:
            self._writer.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
