"""Database parameter resolution and store initialisation."""

from storeparams.config import DATABASE_TIMEOUT_DEFAULT
from storeparams.errors import (
    AppError,
    ErrorCode,
    InvalidFieldValueError,
    InvalidURLFormatError,
    MissingRequiredFieldError,
    StoreConnectionError,
    UnsupportedDriverError,
)
from storeparams.params import DBParameters, add_flags, db_params, resolve
from storeparams.store import open_store_provider

__all__ = [
    "AppError",
    "DATABASE_TIMEOUT_DEFAULT",
    "DBParameters",
    "ErrorCode",
    "InvalidFieldValueError",
    "InvalidURLFormatError",
    "MissingRequiredFieldError",
    "StoreConnectionError",
    "UnsupportedDriverError",
    "add_flags",
    "db_params",
    "open_store_provider",
    "resolve",
]
