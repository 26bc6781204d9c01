"""In-memory store driver for tests and single-process deployments."""

from __future__ import annotations

from threading import Lock

from storeparams.errors import StoreKeyNotFoundError

from .base import namespaced

__all__ = ["MemoryStore", "MemoryStoreProvider", "connect_memory"]


class MemoryStore:
    """Thread-safe dictionary backed store."""

    def __init__(self, name: str) -> None:
        self._name = name
        self._data: dict[str, bytes] = {}
        self._lock = Lock()

    @property
    def name(self) -> str:
        return self._name

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        with self._lock:
            self._data[key] = bytes(value)

    def get(self, key: str) -> bytes:
        with self._lock:
            try:
                return self._data[key]
            except KeyError:
                raise StoreKeyNotFoundError(self._name, key) from None

    def delete(self, key: str) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[str]:
        with self._lock:
            return sorted(self._data)


class MemoryStoreProvider:
    def __init__(self, *, prefix: str, address: str = "") -> None:
        self._prefix = prefix
        self.address = address
        self._stores: dict[str, MemoryStore] = {}
        self._lock = Lock()
        self._closed = False

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def closed(self) -> bool:
        return self._closed

    def open_store(self, name: str) -> MemoryStore:
        full_name = namespaced(self._prefix, name)
        with self._lock:
            if self._closed:
                raise RuntimeError("store provider is closed")
            store = self._stores.get(full_name)
            if store is None:
                store = MemoryStore(full_name)
                self._stores[full_name] = store
            return store

    def close(self) -> None:
        with self._lock:
            self._stores.clear()
            self._closed = True

    def __enter__(self) -> "MemoryStoreProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def connect_memory(address: str, prefix: str, timeout: int) -> MemoryStoreProvider:
    # Nothing to connect to; the timeout has no effect.
    return MemoryStoreProvider(prefix=prefix, address=address)
