from __future__ import annotations

import argparse
import dataclasses

import pytest

from storeparams.config import DATABASE_TIMEOUT_DEFAULT
from storeparams.errors import InvalidFieldValueError, MissingRequiredFieldError
from storeparams.lookup import MappingLookup
from storeparams.params import (
    DBParameters,
    add_flags,
    db_params,
    resolve,
    resolve_log_level,
)


def _parse(*argv: str) -> argparse.Namespace:
    parser = argparse.ArgumentParser()
    add_flags(parser)
    return parser.parse_args(list(argv))


def _set_env(monkeypatch: pytest.MonkeyPatch, url: str, prefix: str, timeout: str) -> None:
    monkeypatch.setenv("DATABASE_URL", url)
    monkeypatch.setenv("DATABASE_PREFIX", prefix)
    monkeypatch.setenv("DATABASE_TIMEOUT", timeout)


def test_db_params_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "mem://test", "prefix", "30")

    result = db_params(_parse())

    assert result == DBParameters(url="mem://test", prefix="prefix", timeout=30)


def test_db_params_uses_default_timeout_for_empty_value(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "mem://test", "prefix", "")

    result = db_params(_parse())

    assert result.timeout == DATABASE_TIMEOUT_DEFAULT == 30


def test_db_params_uses_default_timeout_when_unset() -> None:
    env = {"DATABASE_URL": "mem://test", "DATABASE_PREFIX": "prefix"}

    result = db_params(_parse(), env)

    assert result == DBParameters(url="mem://test", prefix="prefix", timeout=30)


def test_db_params_errors_when_url_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "", "prefix", "30")

    with pytest.raises(MissingRequiredFieldError) as excinfo:
        db_params(_parse())

    assert excinfo.value.field == "url"
    assert "url" in str(excinfo.value)


def test_db_params_errors_when_prefix_missing(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "mem://test", "", "30")

    with pytest.raises(MissingRequiredFieldError) as excinfo:
        db_params(_parse())

    assert excinfo.value.field == "prefix"


def test_db_params_errors_when_timeout_invalid(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "mem://test", "prefix", "invalid")

    with pytest.raises(InvalidFieldValueError) as excinfo:
        db_params(_parse())

    assert excinfo.value.field == "timeout"
    assert excinfo.value.value == "invalid"


def test_flags_take_precedence_over_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    _set_env(monkeypatch, "mem://env", "env-prefix", "10")

    namespace = _parse(
        "--database-url",
        "mem://flag",
        "--database-prefix",
        "flag",
        "--database-timeout",
        "5",
    )

    assert db_params(namespace) == DBParameters(url="mem://flag", prefix="flag", timeout=5)


def test_flags_and_environment_are_combined_per_field() -> None:
    env = {"DATABASE_URL": "mem://env", "DATABASE_PREFIX": "env", "DATABASE_TIMEOUT": "12"}

    result = db_params(_parse("--database-prefix", "flag"), env)

    assert result == DBParameters(url="mem://env", prefix="flag", timeout=12)


def test_db_params_without_namespace_reads_environment_only() -> None:
    env = {"DATABASE_URL": "mem://env", "DATABASE_PREFIX": "env"}

    assert db_params(None, env).url == "mem://env"


@pytest.mark.parametrize("raw", ["-1", "1.5", "+3", "30s", "٣"])
def test_resolve_rejects_non_decimal_timeouts(raw: str) -> None:
    lookup = MappingLookup({"url": "mem://test", "prefix": "p", "timeout": raw})

    with pytest.raises(InvalidFieldValueError):
        resolve(lookup)


def test_resolve_accepts_zero_timeout() -> None:
    lookup = MappingLookup({"url": "mem://test", "prefix": "p", "timeout": "0"})

    assert resolve(lookup).timeout == 0


def test_resolve_strips_surrounding_whitespace() -> None:
    lookup = MappingLookup({"url": " mem://test ", "prefix": " p ", "timeout": " 7 "})

    assert resolve(lookup) == DBParameters(url="mem://test", prefix="p", timeout=7)


def test_resolve_treats_blank_url_as_missing() -> None:
    lookup = MappingLookup({"url": "   ", "prefix": "p"})

    with pytest.raises(MissingRequiredFieldError):
        resolve(lookup)


def test_resolve_checks_url_before_prefix() -> None:
    with pytest.raises(MissingRequiredFieldError) as excinfo:
        resolve(MappingLookup({}))

    assert excinfo.value.field == "url"


def test_resolve_log_level() -> None:
    assert resolve_log_level(MappingLookup({"log_level": "debug"})) == "debug"
    assert resolve_log_level(MappingLookup({"log_level": ""})) is None
    assert resolve_log_level(MappingLookup({})) is None


def test_add_flags_defaults_to_none() -> None:
    namespace = _parse()

    assert namespace.database_url is None
    assert namespace.database_prefix is None
    assert namespace.database_timeout is None
    assert namespace.log_level is None


def test_db_parameters_are_immutable() -> None:
    params = DBParameters(url="mem://test", prefix="p")

    with pytest.raises(dataclasses.FrozenInstanceError):
        params.url = "mem://other"  # type: ignore[misc]
