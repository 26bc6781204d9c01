"""Database parameter resolution from flags and environment variables."""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from dataclasses import dataclass
import logging
from typing import Any

from storeparams.config import (
    DATABASE_PREFIX,
    DATABASE_TIMEOUT,
    DATABASE_TIMEOUT_DEFAULT,
    DATABASE_URL,
    LOG_LEVEL,
    PARAMETER_KEYS,
    ParameterKey,
)
from storeparams.errors import InvalidFieldValueError, MissingRequiredFieldError
from storeparams.logging import get_logger
from storeparams.logging_events import log_event
from storeparams.lookup import ValueLookup, flags_then_env

logger = get_logger(__name__)


@dataclass(slots=True, frozen=True)
class DBParameters:
    """Resolved store connection parameters."""

    url: str
    prefix: str
    timeout: int = DATABASE_TIMEOUT_DEFAULT


def add_flags(parser: argparse.ArgumentParser) -> argparse.ArgumentParser:
    """Register the database and logging flags on ``parser``.

    Flags default to ``None`` so an unset flag falls through to the matching
    environment variable.
    """

    for key in PARAMETER_KEYS:
        parser.add_argument(
            key.option,
            dest=key.dest,
            default=None,
            help=f"{key.help} Alternatively set {key.env}.",
        )
    return parser


def _present(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def _required(lookup: ValueLookup, key: ParameterKey) -> str:
    value = _present(lookup.lookup(key))
    if value is None:
        raise MissingRequiredFieldError(key.name)
    return value


def _parse_timeout(raw: str | None) -> int:
    value = _present(raw)
    if value is None:
        return DATABASE_TIMEOUT_DEFAULT
    if not (value.isascii() and value.isdigit()):
        raise InvalidFieldValueError(DATABASE_TIMEOUT.name, raw)
    return int(value, 10)


def resolve(lookup: ValueLookup) -> DBParameters:
    """Resolve the store parameters held by ``lookup``.

    Raises :class:`MissingRequiredFieldError` when the URL or prefix is unset
    or blank and :class:`InvalidFieldValueError` when the timeout is not a
    non-negative base-10 integer. An unset or empty timeout resolves to
    :data:`DATABASE_TIMEOUT_DEFAULT`.
    """

    url = _required(lookup, DATABASE_URL)
    prefix = _required(lookup, DATABASE_PREFIX)
    timeout = _parse_timeout(lookup.lookup(DATABASE_TIMEOUT))
    return DBParameters(url=url, prefix=prefix, timeout=timeout)


def resolve_log_level(lookup: ValueLookup) -> str | None:
    return _present(lookup.lookup(LOG_LEVEL))


def db_params(
    namespace: argparse.Namespace | None,
    env: Mapping[str, Any] | None = None,
) -> DBParameters:
    """Resolve parameters from parsed flags, falling back to the environment."""

    params = resolve(flags_then_env(namespace, env))
    log_event(
        logger,
        "params.resolved",
        level=logging.DEBUG,
        prefix=params.prefix,
        timeout=params.timeout,
    )
    return params


__all__ = [
    "DBParameters",
    "add_flags",
    "db_params",
    "resolve",
    "resolve_log_level",
]
