"""Core utilities for stat_monitor."""

from __future__ import annotations

from .config import CACHE, CacheConfig, ServerConfig, load_config
from .errors import (
    ConfigError,
    CpuUnavailable,
    MemoryUnavailable,
    SamplingError,
    StatMonitorError,
    SwapUnavailable,
)

__all__ = [
    "CACHE",
    "CacheConfig",
    "ConfigError",
    "CpuUnavailable",
    "MemoryUnavailable",
    "SamplingError",
    "ServerConfig",
    "StatMonitorError",
    "SwapUnavailable",
    "load_config",
]
