"""Data providers for stat_monitor."""

from .system import (
    CpuLoadMeasurement,
    SampleResult,
    Sampler,
    SystemSampler,
    collect_memory_reading,
    collect_swap_reading,
)

__all__ = [
    "CpuLoadMeasurement",
    "SampleResult",
    "Sampler",
    "SystemSampler",
    "collect_memory_reading",
    "collect_swap_reading",
]
