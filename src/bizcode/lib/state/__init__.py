"""Public registry state API."""

from bizcode.lib.state.registry_store import RegistryEntry, RegistryStore, ensure_registry_file
from bizcode.lib.state.registry_writer import DEFAULT_QUEUE_SIZE, RegistryWriter

__all__ = [
    "DEFAULT_QUEUE_SIZE",
    "RegistryEntry",
    "RegistryStore",
    "RegistryWriter",
    "ensure_registry_file",
]
