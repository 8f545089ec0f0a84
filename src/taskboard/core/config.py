"""Runtime configuration resolved from CLI flags and the environment.

Precedence is always: explicit value > environment variable > default.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from taskboard.core.errors import ConfigError

PORT_ENV = "PORT"
HOST_ENV = "TASKBOARD_HOST"
DATA_ENV = "TASKBOARD_DATA"

DEFAULT_PORT = 3000
DEFAULT_HOST = "127.0.0.1"
DEFAULT_DATA_FILE = "data.json"


def _env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    return os.environ if env is None else env


def resolve_port(port: int | None = None, env: Mapping[str, str] | None = None) -> int:
    """Return the TCP port to listen on.

    Raises:
        ConfigError: If the port is not an integer in 1..65535.
    """
    if port is None:
        raw = _env(env).get(PORT_ENV)
        if raw is None or raw == "":
            return DEFAULT_PORT
        try:
            port = int(raw)
        except ValueError:
            raise ConfigError(f"{PORT_ENV} must be an integer, got '{raw}'") from None
    if not 1 <= port <= 65535:
        raise ConfigError(f"Port must be between 1 and 65535, got {port}")
    return port


def resolve_host(host: str | None = None, env: Mapping[str, str] | None = None) -> str:
    if host:
        return host
    return _env(env).get(HOST_ENV) or DEFAULT_HOST


def resolve_data_path(
    data: str | Path | None = None, env: Mapping[str, str] | None = None
) -> Path:
    """Return the path of the JSON data file (not required to exist yet)."""
    if data is None or data == "":
        data = _env(env).get(DATA_ENV) or DEFAULT_DATA_FILE
    return Path(data).expanduser()
