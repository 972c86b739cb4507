"""Data models used by stat_monitor."""

from .resource_snapshot import (
    CPUUsage,
    CpuLoadReading,
    MemoryReading,
    MemoryUsage,
    ResourceSnapshot,
)

__all__ = [
    "CPUUsage",
    "CpuLoadReading",
    "MemoryReading",
    "MemoryUsage",
    "ResourceSnapshot",
]
