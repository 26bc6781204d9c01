"""Named value lookups over command-line flags and the environment.

Every input is addressed by a :class:`~storeparams.config.ParameterKey`.
Providers answer ``lookup(key)`` with the raw string they hold or ``None``
when they have nothing for it; :class:`LayeredLookup` asks its providers in
order and returns the first answer, so placing the flag provider before the
environment provider gives flags precedence.
"""

from __future__ import annotations

import argparse
from collections.abc import Mapping
from typing import Any, Protocol

from storeparams.config import ParameterKey, get_runtime_env


class ValueLookup(Protocol):
    def lookup(self, key: ParameterKey) -> str | None: ...


class FlagLookup:
    """Values explicitly passed on the command line."""

    def __init__(self, namespace: argparse.Namespace | None) -> None:
        self._namespace = namespace

    def lookup(self, key: ParameterKey) -> str | None:
        if self._namespace is None:
            return None
        value: Any = getattr(self._namespace, key.dest, None)
        if value is None:
            return None
        return str(value)


class EnvironmentLookup:
    """Values read from an environment mapping (``os.environ`` style)."""

    def __init__(self, env: Mapping[str, Any] | None = None) -> None:
        self._env = env

    def lookup(self, key: ParameterKey) -> str | None:
        env = self._env if self._env is not None else get_runtime_env()
        value = env.get(key.env)
        if value is None:
            return None
        return str(value)


class MappingLookup:
    """Values keyed by parameter name, mostly useful in tests and embedding code."""

    def __init__(self, values: Mapping[str, Any]) -> None:
        self._values = dict(values)

    def lookup(self, key: ParameterKey) -> str | None:
        value = self._values.get(key.name)
        if value is None:
            return None
        return str(value)


class LayeredLookup:
    """Ask each provider in turn; the first one holding a value wins."""

    def __init__(self, *providers: ValueLookup) -> None:
        self._providers = providers

    def lookup(self, key: ParameterKey) -> str | None:
        for provider in self._providers:
            value = provider.lookup(key)
            if value is not None:
                return value
        return None


def flags_then_env(
    namespace: argparse.Namespace | None,
    env: Mapping[str, Any] | None = None,
) -> LayeredLookup:
    """Return the standard lookup: explicit flag, then environment variable."""

    return LayeredLookup(FlagLookup(namespace), EnvironmentLookup(env))


__all__ = [
    "EnvironmentLookup",
    "FlagLookup",
    "LayeredLookup",
    "MappingLookup",
    "ValueLookup",
    "flags_then_env",
]
