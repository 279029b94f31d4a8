"""Configuration loading and project discovery."""

from bizcode.lib.config._paths import (
    MANIFEST_DEFAULT,
    discover_package_name,
    find_manifest,
    normalize_import_name,
)
from bizcode.lib.config.settings import (
    DEFAULT_INSTANCE_SKIP,
    SEPARATOR_DEFAULT,
    SKIP_DEFAULT,
    FormatterConfig,
    load_config,
)

__all__ = [
    "DEFAULT_INSTANCE_SKIP",
    "MANIFEST_DEFAULT",
    "SEPARATOR_DEFAULT",
    "SKIP_DEFAULT",
    "FormatterConfig",
    "discover_package_name",
    "find_manifest",
    "load_config",
    "normalize_import_name",
]
