"""Exception hierarchy shared by the sampler, the store and the server."""

from __future__ import annotations


class StatMonitorError(Exception):
    """Base class for every error raised by stat_monitor."""


class ConfigError(StatMonitorError):
    """Startup configuration could not be parsed."""


class SamplingError(StatMonitorError):
    """A resource reading could not be obtained from the operating system."""

    message = "failed to sample resources"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.message)


class MemoryUnavailable(SamplingError):
    message = "failed to get memory usage"


class SwapUnavailable(SamplingError):
    message = "failed to get swap usage"


class CpuUnavailable(SamplingError):
    message = "failed to get cpu usage"
