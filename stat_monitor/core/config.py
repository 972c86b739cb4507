"""Global configuration values for the stat_monitor service."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import ConfigError


@dataclass(frozen=True)
class CacheConfig:
    """Refresh policy for the shared resource snapshot."""

    staleness_seconds: int = 5  # snapshot older than this is re-sampled
    settle_seconds: float = 1.0  # wait between the two CPU counter reads


@dataclass(frozen=True)
class ServerConfig:
    """Settings read once from the environment at startup."""

    host: str = "0.0.0.0"
    port: int = 8080
    log_level: str = "INFO"


DEFAULT_PORT = 8080
CACHE = CacheConfig()


def _parse_port(raw: str) -> int:
    try:
        port = int(raw.strip())
    except ValueError as exc:
        raise ConfigError(f"PORT must be an integer, got {raw!r}") from exc
    if not 0 <= port <= 65535:
        raise ConfigError(f"PORT out of range: {port}")
    return port


def _parse_log_level(raw: str) -> str:
    level = raw.strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ConfigError(f"Unknown LOG_LEVEL {raw!r}")
    return level


def load_config(environ: Mapping[str, str] | None = None) -> ServerConfig:
    """Build a :class:`ServerConfig` from ``PORT`` and ``LOG_LEVEL``.

    Raises :class:`ConfigError` when a value is present but malformed.
    """

    env = os.environ if environ is None else environ
    port = DEFAULT_PORT
    if "PORT" in env:
        port = _parse_port(env["PORT"])
    log_level = "INFO"
    if env.get("LOG_LEVEL"):
        log_level = _parse_log_level(env["LOG_LEVEL"])
    return ServerConfig(port=port, log_level=log_level)
