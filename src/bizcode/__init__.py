"""Call-site business codes for error messages."""

from bizcode.lib.config.settings import FormatterConfig, load_config
from bizcode.lib.default import format_error, format_message, get_default, init_default
from bizcode.lib.formatter import FormattedError, Formatter, ParsedMessage, parse_message
from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore

__version__ = "0.1.0"

__all__ = [
    "FormattedError",
    "Formatter",
    "FormatterConfig",
    "ParsedMessage",
    "RegistryEntry",
    "RegistryStore",
    "__version__",
    "format_error",
    "format_message",
    "get_default",
    "init_default",
    "load_config",
    "parse_message",
]
