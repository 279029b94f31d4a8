"""Core bizcode library exports."""

from bizcode.lib.codegen import checksum, code_for_frame, generate_code, split_qualified_name
from bizcode.lib.errors import BizcodeError, MalformedMessageError, RegistryError
from bizcode.lib.formatter import FormattedError, Formatter, ParsedMessage, parse_message
from bizcode.lib.frames import Frame, StackTracer, capture_stack, resolve_frame
from bizcode.lib.types import BusinessCode

__all__ = [
    "BizcodeError",
    "BusinessCode",
    "FormattedError",
    "Formatter",
    "Frame",
    "MalformedMessageError",
    "ParsedMessage",
    "RegistryError",
    "StackTracer",
    "capture_stack",
    "checksum",
    "code_for_frame",
    "generate_code",
    "parse_message",
    "resolve_frame",
    "split_qualified_name",
]
