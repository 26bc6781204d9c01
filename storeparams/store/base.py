"""Store protocols shared by every driver."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

__all__ = [
    "Connector",
    "Store",
    "StoreProvider",
    "namespaced",
]


class Store(Protocol):
    """Key/value store scoped to one namespace."""

    @property
    def name(self) -> str:
        ...

    def put(self, key: str, value: bytes) -> None:
        ...

    def get(self, key: str) -> bytes:
        ...

    def delete(self, key: str) -> None:
        ...

    def keys(self) -> list[str]:
        ...


class StoreProvider(Protocol):
    """Handle to a backing store connection owned by the caller."""

    @property
    def prefix(self) -> str:
        ...

    def open_store(self, name: str) -> Store:
        ...

    def close(self) -> None:
        ...

    def __enter__(self) -> "StoreProvider":
        ...

    def __exit__(self, *exc_info: object) -> None:
        ...


# (address, prefix, timeout seconds) -> provider
Connector = Callable[[str, str, int], StoreProvider]


def namespaced(prefix: str, name: str) -> str:
    """Return the physical store name for ``name`` under ``prefix``."""

    if not name:
        raise ValueError("store name must not be empty")
    return f"{prefix}_{name}"
