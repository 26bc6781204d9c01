"""Unified error types for parameter resolution and store initialisation."""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Error codes carried by every :class:`AppError`."""

    MISSING_FIELD = "MISSING_FIELD"
    INVALID_FIELD = "INVALID_FIELD"
    INVALID_URL = "INVALID_URL"
    UNSUPPORTED_DRIVER = "UNSUPPORTED_DRIVER"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    DRIVER_NOT_INSTALLED = "DRIVER_NOT_INSTALLED"
    NOT_FOUND = "NOT_FOUND"


class AppError(Exception):
    """Base exception for storeparams specific errors."""

    __slots__ = ("message", "code", "meta")

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        meta: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.meta = meta

    def as_dict(self) -> dict[str, Any]:
        """Serialise the exception into the canonical error envelope."""

        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.meta:
            payload["meta"] = dict(self.meta)
        return payload


class MissingRequiredFieldError(AppError):
    """Raised when a required parameter was supplied by neither flag nor environment."""

    def __init__(self, field: str) -> None:
        super().__init__(
            f"{field} is required but was not provided",
            code=ErrorCode.MISSING_FIELD,
            meta={"field": field},
        )
        self.field = field


class InvalidFieldValueError(AppError):
    """Raised when a parameter is present but cannot be parsed."""

    def __init__(self, field: str, value: str | None = None) -> None:
        message = f"{field} has an invalid value"
        if value is not None:
            message = f"{field} has an invalid value: {value!r}"
        super().__init__(
            message,
            code=ErrorCode.INVALID_FIELD,
            meta={"field": field, "value": value},
        )
        self.field = field
        self.value = value


class InvalidURLFormatError(AppError):
    """Raised when a store URL lacks a ``<scheme>://`` prefix."""

    def __init__(self, url: str) -> None:
        super().__init__(
            f"invalid store URL format: {url!r}, expected <scheme>://<address>",
            code=ErrorCode.INVALID_URL,
            meta={"url": url},
        )
        self.url = url


class UnsupportedDriverError(AppError):
    """Raised when no driver is registered for the URL scheme."""

    def __init__(self, scheme: str) -> None:
        super().__init__(
            f"unsupported store driver: {scheme}",
            code=ErrorCode.UNSUPPORTED_DRIVER,
            meta={"scheme": scheme},
        )
        self.scheme = scheme


class DriverNotInstalledError(AppError):
    """Raised when the DBAPI module a driver needs is not installed."""

    def __init__(self, driver: str, module: str | None, *, extra: str | None = None) -> None:
        message = (
            f"{driver} driver is not available: "
            f"Python module {module or 'unknown'!r} is not installed"
        )
        if extra:
            message = f"{message}; install storeparams[{extra}]"
        super().__init__(
            message,
            code=ErrorCode.DRIVER_NOT_INSTALLED,
            meta={"driver": driver, "module": module, "extra": extra},
        )
        self.driver = driver
        self.module = module
        self.extra = extra


class StoreConnectionError(AppError):
    """Raised when a driver failed to establish its connection.

    The driver exception is available as :attr:`cause` and is also chained
    through ``__cause__`` by the raising code.
    """

    def __init__(self, scheme: str, cause: BaseException) -> None:
        detail = str(cause).strip().splitlines()
        super().__init__(
            f"failed to connect to {scheme} store: {detail[0] if detail else type(cause).__name__}",
            code=ErrorCode.STORE_UNAVAILABLE,
            meta={"scheme": scheme, "cause": type(cause).__name__},
        )
        self.scheme = scheme
        self.cause = cause


class StoreKeyNotFoundError(AppError):
    """Raised when a key is missing from a store."""

    def __init__(self, store: str, key: str) -> None:
        super().__init__(
            f"key {key!r} not found in store {store!r}",
            code=ErrorCode.NOT_FOUND,
            meta={"store": store, "key": key},
        )
        self.store = store
        self.key = key


__all__ = [
    "AppError",
    "DriverNotInstalledError",
    "ErrorCode",
    "InvalidFieldValueError",
    "InvalidURLFormatError",
    "MissingRequiredFieldError",
    "StoreConnectionError",
    "StoreKeyNotFoundError",
    "UnsupportedDriverError",
]
