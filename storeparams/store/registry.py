"""Store driver dispatch keyed by URL scheme."""

from __future__ import annotations

from collections.abc import Iterator
import logging

from storeparams.errors import (
    AppError,
    InvalidURLFormatError,
    StoreConnectionError,
    UnsupportedDriverError,
)
from storeparams.logging import get_logger
from storeparams.logging_events import log_event, now_ms
from storeparams.params import DBParameters

from .base import Connector, StoreProvider
from .memory import connect_memory
from .sql import connect_mysql, connect_postgres, connect_sqlite

__all__ = [
    "DriverRegistry",
    "default_registry",
    "open_store_provider",
    "redact_url",
    "register_driver",
    "split_url",
]

logger = get_logger(__name__)

SCHEME_SEPARATOR = "://"


def split_url(url: str) -> tuple[str, str]:
    """Split ``url`` into ``(scheme, address)``.

    Raises :class:`InvalidURLFormatError` when the separator is missing or
    the scheme is empty.
    """

    scheme, sep, address = url.partition(SCHEME_SEPARATOR)
    scheme = scheme.strip()
    if not sep or not scheme:
        raise InvalidURLFormatError(redact_url(url))
    return scheme.lower(), address


def redact_url(url: str) -> str:
    """Mask the password component of ``url`` for diagnostics."""

    scheme, sep, rest = url.rpartition(SCHEME_SEPARATOR)
    userinfo, at, host = rest.rpartition("@")
    if not at or ":" not in userinfo:
        return url
    user = userinfo.split(":", 1)[0]
    return f"{scheme}{sep}{user}:***@{host}"


class DriverRegistry:
    """Mapping of URL schemes to connectors."""

    def __init__(self) -> None:
        self._connectors: dict[str, Connector] = {}

    def register(self, scheme: str, connector: Connector) -> None:
        normalized = scheme.strip().lower()
        if not normalized:
            raise ValueError("scheme must not be empty")
        self._connectors[normalized] = connector

    def unregister(self, scheme: str) -> None:
        self._connectors.pop(scheme.strip().lower(), None)

    def get(self, scheme: str) -> Connector:
        try:
            return self._connectors[scheme.lower()]
        except KeyError:
            raise UnsupportedDriverError(scheme) from None

    def __contains__(self, scheme: object) -> bool:
        return isinstance(scheme, str) and scheme.lower() in self._connectors

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._connectors))


def _build_default_registry() -> DriverRegistry:
    registry = DriverRegistry()
    registry.register("mem", connect_memory)
    registry.register("sqlite", connect_sqlite)
    registry.register("mysql", connect_mysql)
    registry.register("postgres", connect_postgres)
    registry.register("postgresql", connect_postgres)
    return registry


default_registry = _build_default_registry()


def register_driver(scheme: str, connector: Connector) -> None:
    default_registry.register(scheme, connector)


def open_store_provider(
    params: DBParameters,
    *,
    registry: DriverRegistry | None = None,
) -> StoreProvider:
    """Connect to the store named by ``params.url``.

    The connection attempt is made exactly once. Driver failures are raised
    as :class:`StoreConnectionError` chained to the original exception.
    """

    scheme, address = split_url(params.url)
    connector = (registry or default_registry).get(scheme)

    started = now_ms()
    try:
        provider = connector(address, params.prefix, params.timeout)
    except AppError:
        raise
    except Exception as exc:
        error = StoreConnectionError(scheme, exc)
        log_event(
            logger,
            "store.open_failed",
            level=logging.WARNING,
            scheme=scheme,
            prefix=params.prefix,
            duration_ms=now_ms() - started,
            meta=error.meta,
        )
        raise error from exc

    log_event(
        logger,
        "store.open",
        scheme=scheme,
        prefix=params.prefix,
        timeout=params.timeout,
        duration_ms=now_ms() - started,
    )
    return provider
