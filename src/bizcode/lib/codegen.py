"""Business-code derivation from a resolved frame."""

from __future__ import annotations

from functools import lru_cache

from crc import Calculator, Crc8

from bizcode.lib.frames import Frame
from bizcode.lib.types import BusinessCode


@lru_cache(maxsize=1)
def _calculator() -> Calculator:
    # CRC-8/SMBUS: poly 0x07, init 0, no reflection, no final xor.
    return Calculator(Crc8.CCITT, optimized=True)


def checksum(text: str) -> int:
    """CRC-8 of the UTF-8 bytes of `text`, in the range 0-255."""

    return int(_calculator().checksum(text.encode("utf-8")))


def split_qualified_name(name: str) -> tuple[str, str]:
    """Split `<package-path>.<function>` on the last dot."""

    package, _, function = name.rpartition(".")
    return package, function


def generate_code(package: str, function: str, line: int) -> BusinessCode:
    """Return `PPPFFFLLL` for one call site."""

    return BusinessCode(f"{checksum(package):03d}{checksum(function):03d}{line:03d}")


def code_for_frame(frame: Frame) -> tuple[BusinessCode, str, str]:
    """Return `(code, package, function)` for a resolved frame."""

    package, function = split_qualified_name(frame.function)
    return generate_code(package, function, frame.line), package, function
