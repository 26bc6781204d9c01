"""Store initialisation: URL scheme to driver dispatch."""

from .base import Connector, Store, StoreProvider
from .memory import MemoryStore, MemoryStoreProvider
from .registry import (
    DriverRegistry,
    default_registry,
    open_store_provider,
    redact_url,
    register_driver,
    split_url,
)

__all__ = [
    "Connector",
    "DriverRegistry",
    "MemoryStore",
    "MemoryStoreProvider",
    "Store",
    "StoreProvider",
    "default_registry",
    "open_store_provider",
    "redact_url",
    "register_driver",
    "split_url",
]
