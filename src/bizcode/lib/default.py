"""Process-wide default Formatter.

The instance is built once, either explicitly with `init_default()` at
process start or lazily from the discovered configuration on first use, and
is not reconfigured afterwards. Its skip depth accounts for the extra frame
added by the module-level helpers below.
"""

from __future__ import annotations

import threading

from bizcode.lib.config.settings import DEFAULT_INSTANCE_SKIP, FormatterConfig, load_config
from bizcode.lib.formatter import FormattedError, Formatter

_lock = threading.Lock()
_default: Formatter | None = None


def init_default(config: FormatterConfig | None = None) -> Formatter:
    """Create the process-wide Formatter; raises if it already exists."""

    global _default
    with _lock:
        if _default is not None:
            raise RuntimeError("Default formatter is already initialized.")
        _default = Formatter(config or load_config(skip=DEFAULT_INSTANCE_SKIP))
        return _default


def get_default() -> Formatter:
    global _default
    with _lock:
        if _default is None:
            _default = Formatter(load_config(skip=DEFAULT_INSTANCE_SKIP))
        return _default


def reset_default() -> None:
    """Close and drop the default instance."""

    global _default
    with _lock:
        current, _default = _default, None
    if current is not None:
        current.close()


def format_message(
    message: str,
    http_code: int | None = None,
    business_code: str | int | None = None,
) -> str:
    return get_default().format_message(message, http_code, business_code)


def format_error(error: BaseException, http_code: int | None = None) -> FormattedError:
    return get_default().format_error(error, http_code)
