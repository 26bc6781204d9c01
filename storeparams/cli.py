"""Command line entry point that validates store parameters and connectivity."""

from __future__ import annotations

import argparse
from collections.abc import Mapping, Sequence
import json
import logging
import os
import sys
from typing import Any

from storeparams.config import DEFAULT_LOG_LEVEL
from storeparams.errors import AppError, StoreConnectionError
from storeparams.logging import configure_logging, get_logger, set_default_log_level
from storeparams.logging_events import log_event
from storeparams.lookup import flags_then_env
from storeparams.params import add_flags, resolve, resolve_log_level
from storeparams.store import open_store_provider, split_url

logger = get_logger(__name__)

# Exit codes aligned with ``sysexits``.
EX_OK = 0
EX_CONFIG = getattr(os, "EX_CONFIG", 78)
EX_UNAVAILABLE = getattr(os, "EX_UNAVAILABLE", 69)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storeparams-check",
        description="Resolve database parameters and verify the store can be opened",
    )
    add_flags(parser)
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the result as a JSON document",
    )
    return parser


def _emit(payload: Mapping[str, Any], *, as_json: bool, stream: Any) -> None:
    if as_json:
        print(json.dumps(payload, sort_keys=True), file=stream)
        return
    if payload["status"] == "ok":
        print(
            f"ok: {payload['scheme']} store opened "
            f"(prefix={payload['prefix']}, timeout={payload['timeout']}s)",
            file=stream,
        )
    else:
        print(f"error: {payload['error']['message']}", file=stream)


def _failure(exc: AppError, *, as_json: bool) -> int:
    # JSON documents always go to stdout.
    stream = sys.stdout if as_json else sys.stderr
    _emit({"status": "fail", "error": exc.as_dict()}, as_json=as_json, stream=stream)
    if isinstance(exc, StoreConnectionError):
        return EX_UNAVAILABLE
    return EX_CONFIG


def _cli(argv: Sequence[str] | None = None, env: Mapping[str, Any] | None = None) -> int:
    args = build_parser().parse_args(argv)
    lookup = flags_then_env(args, env)

    configure_logging(DEFAULT_LOG_LEVEL, stream=sys.stderr)
    log_level = resolve_log_level(lookup)
    if log_level is not None:
        set_default_log_level(logger, log_level)

    try:
        params = resolve(lookup)
        scheme, _address = split_url(params.url)
        provider = open_store_provider(params)
    except AppError as exc:
        log_event(
            logger,
            "store.check_failed",
            level=logging.ERROR,
            code=exc.code.value,
            meta=exc.meta,
        )
        return _failure(exc, as_json=args.json)

    with provider:
        _emit(
            {
                "status": "ok",
                "scheme": scheme,
                "prefix": params.prefix,
                "timeout": params.timeout,
            },
            as_json=args.json,
            stream=sys.stdout,
        )
    return EX_OK


def main() -> None:
    raise SystemExit(_cli())


if __name__ == "__main__":  # pragma: no cover - CLI entrypoint
    main()
