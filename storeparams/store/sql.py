"""SQLAlchemy backed store drivers (sqlite, MySQL, PostgreSQL)."""

from __future__ import annotations

import re
from threading import Lock
from typing import Any

from sqlalchemy import (
    Column,
    Engine,
    LargeBinary,
    MetaData,
    String,
    Table,
    create_engine,
    delete,
    insert,
    select,
    text,
)
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import StaticPool

from storeparams.errors import DriverNotInstalledError, StoreKeyNotFoundError
from storeparams.logging import get_logger

from .base import namespaced

__all__ = [
    "SQLStore",
    "SQLStoreProvider",
    "connect_mysql",
    "connect_postgres",
    "connect_sqlite",
    "normalise_mysql_address",
]

logger = get_logger(__name__)

KEY_LENGTH = 255

# user:pass@tcp(host:port)/db as accepted by Go MySQL drivers
_GO_MYSQL_DSN = re.compile(r"^(?P<auth>[^@]*@)?tcp\((?P<host>[^)]*)\)(?P<rest>.*)$")


class SQLStore:
    """Key/value store persisted in a single two-column table."""

    def __init__(self, engine: Engine, table: Table) -> None:
        self._engine = engine
        self._table = table

    @property
    def name(self) -> str:
        return self._table.name

    def put(self, key: str, value: bytes) -> None:
        if not key:
            raise ValueError("key must not be empty")
        table = self._table
        with self._engine.begin() as conn:
            conn.execute(delete(table).where(table.c["key"] == key))
            conn.execute(insert(table).values(key=key, value=bytes(value)))

    def get(self, key: str) -> bytes:
        table = self._table
        with self._engine.connect() as conn:
            value = conn.execute(
                select(table.c["value"]).where(table.c["key"] == key)
            ).scalar_one_or_none()
        if value is None:
            raise StoreKeyNotFoundError(self.name, key)
        return bytes(value)

    def delete(self, key: str) -> None:
        table = self._table
        with self._engine.begin() as conn:
            conn.execute(delete(table).where(table.c["key"] == key))

    def keys(self) -> list[str]:
        table = self._table
        with self._engine.connect() as conn:
            return list(conn.execute(select(table.c["key"]).order_by(table.c["key"])).scalars())


class SQLStoreProvider:
    """Provider owning one SQLAlchemy engine; one table per opened store."""

    def __init__(self, engine: Engine, *, prefix: str) -> None:
        self._engine = engine
        self._prefix = prefix
        self._metadata = MetaData()
        self._stores: dict[str, SQLStore] = {}
        self._lock = Lock()

    @property
    def prefix(self) -> str:
        return self._prefix

    @property
    def engine(self) -> Engine:
        return self._engine

    def ping(self) -> None:
        with self._engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def open_store(self, name: str) -> SQLStore:
        full_name = namespaced(self._prefix, name)
        # Identifiers are quoted by SQLAlchemy; NUL cannot be quoted by any backend.
        if "\x00" in full_name:
            raise ValueError(f"store name {full_name!r} must not contain NUL characters")
        with self._lock:
            store = self._stores.get(full_name)
            if store is not None:
                return store
            table = Table(
                full_name,
                self._metadata,
                Column("key", String(KEY_LENGTH), primary_key=True),
                Column("value", LargeBinary, nullable=False),
            )
            self._metadata.create_all(bind=self._engine, tables=[table], checkfirst=True)
            store = SQLStore(self._engine, table)
            self._stores[full_name] = store
            return store

    def close(self) -> None:
        with self._lock:
            self._stores.clear()
        self._engine.dispose()

    def __enter__(self) -> "SQLStoreProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _open(
    url: URL,
    prefix: str,
    *,
    extra: str | None = None,
    **engine_kwargs: Any,
) -> SQLStoreProvider:
    try:
        engine = create_engine(url, **engine_kwargs)
    except ModuleNotFoundError as exc:
        raise DriverNotInstalledError(url.get_backend_name(), exc.name, extra=extra) from exc
    provider = SQLStoreProvider(engine, prefix=prefix)
    try:
        provider.ping()
    except Exception:
        engine.dispose()
        raise
    logger.debug("Connected to %s", url.render_as_string(hide_password=True))
    return provider


def connect_sqlite(address: str, prefix: str, timeout: int) -> SQLStoreProvider:
    database = address or ":memory:"
    connect_args: dict[str, Any] = {"check_same_thread": False}
    if timeout > 0:
        connect_args["timeout"] = timeout
    engine_kwargs: dict[str, Any] = {"connect_args": connect_args}
    if database == ":memory:":
        engine_kwargs["poolclass"] = StaticPool
    url = URL.create("sqlite+pysqlite", database=database)
    return _open(url, prefix, **engine_kwargs)


def normalise_mysql_address(address: str) -> str:
    """Rewrite a Go style ``user:pass@tcp(host:port)/db`` DSN to URL form."""

    match = _GO_MYSQL_DSN.match(address)
    if match is None:
        return address
    return f"{match.group('auth') or ''}{match.group('host')}{match.group('rest')}"


def _network_connect_args(timeout: int) -> dict[str, Any]:
    if timeout > 0:
        return {"connect_timeout": timeout}
    return {}


def connect_mysql(address: str, prefix: str, timeout: int) -> SQLStoreProvider:
    url = make_url(f"mysql+pymysql://{normalise_mysql_address(address)}")
    return _open(
        url,
        prefix,
        connect_args=_network_connect_args(timeout),
        pool_pre_ping=True,
    )


def connect_postgres(address: str, prefix: str, timeout: int) -> SQLStoreProvider:
    url = make_url(f"postgresql+psycopg://{address}")
    return _open(
        url,
        prefix,
        extra="postgres",
        connect_args=_network_connect_args(timeout),
        pool_pre_ping=True,
    )
