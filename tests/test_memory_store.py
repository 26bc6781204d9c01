from __future__ import annotations

import pytest

from storeparams.errors import StoreKeyNotFoundError
from storeparams.store import MemoryStoreProvider
from storeparams.store.base import namespaced


def test_put_get_delete_round_trip() -> None:
    store = MemoryStoreProvider(prefix="test").open_store("config")

    store.put("b", b"2")
    store.put("a", b"1")
    store.put("a", b"3")

    assert store.get("a") == b"3"
    assert store.keys() == ["a", "b"]

    store.delete("a")
    store.delete("missing")
    assert store.keys() == ["b"]


def test_get_missing_key_raises() -> None:
    store = MemoryStoreProvider(prefix="test").open_store("config")

    with pytest.raises(StoreKeyNotFoundError) as excinfo:
        store.get("nope")

    assert excinfo.value.store == "test_config"
    assert excinfo.value.key == "nope"


def test_put_rejects_empty_key() -> None:
    store = MemoryStoreProvider(prefix="test").open_store("config")

    with pytest.raises(ValueError):
        store.put("", b"x")


def test_stores_are_namespaced_by_prefix() -> None:
    provider = MemoryStoreProvider(prefix="tenant")

    first = provider.open_store("keys")
    second = provider.open_store("keys")
    other = provider.open_store("other")

    assert first is second
    assert first.name == "tenant_keys"
    first.put("k", b"v")
    assert other.keys() == []


def test_closed_provider_refuses_new_stores() -> None:
    with MemoryStoreProvider(prefix="test") as provider:
        provider.open_store("config")

    assert provider.closed
    with pytest.raises(RuntimeError):
        provider.open_store("config")


def test_namespaced_rejects_empty_name() -> None:
    with pytest.raises(ValueError):
        namespaced("prefix", "")


@pytest.mark.parametrize("prefix", ["rp-rest", "tenant.v2", "env prefix"])
def test_memory_store_accepts_any_prefix(prefix: str) -> None:
    store = MemoryStoreProvider(prefix=prefix).open_store("config")

    store.put("k", b"v")

    assert store.name == f"{prefix}_config"
    assert store.get("k") == b"v"
