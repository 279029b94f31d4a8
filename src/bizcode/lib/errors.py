"""Library error hierarchy."""

from __future__ import annotations


class BizcodeError(Exception):
    """Base class for errors raised by bizcode itself."""


class RegistryError(BizcodeError):
    """Registry file could not be read, decoded, encoded or written."""


class MalformedMessageError(BizcodeError, ValueError):
    """Text is not in `<sep><httpCode>:<businessCode><sep><payload>` form."""
