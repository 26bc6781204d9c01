from __future__ import annotations

from collections.abc import Iterator
import logging
from pathlib import Path
import socket

import pytest

from storeparams.config import PARAMETER_KEYS, override_runtime_env


@pytest.fixture(autouse=True)
def _test_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> Iterator[None]:
    for key in PARAMETER_KEYS:
        monkeypatch.delenv(key.env, raising=False)
    # Keep a developer's .env out of the runtime environment.
    monkeypatch.chdir(tmp_path)
    override_runtime_env(None)

    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    try:
        yield
    finally:
        override_runtime_env(None)
        root.handlers[:] = handlers
        root.setLevel(level)


@pytest.fixture()
def closed_port() -> int:
    """Return a local TCP port with nothing listening on it."""

    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(("127.0.0.1", 0))
        return sock.getsockname()[1]
