"""Dataclasses representing raw readings and the cached resource snapshot."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

_PERCENT_DIGITS = 4


def _to_percent(fraction: float) -> float:
    return round(float(fraction) * 100.0, _PERCENT_DIGITS)


@dataclass(frozen=True, slots=True)
class MemoryReading:
    """Raw byte counters as reported by the OS."""

    total: int
    free: int

    @property
    def used(self) -> int:
        # Some platforms report free > total; clamp instead of going negative.
        return max(self.total - self.free, 0)


@dataclass(frozen=True, slots=True)
class CpuLoadReading:
    """Fraction (0..1) of the measured interval spent in each CPU state."""

    user: float
    nice: float
    interrupt: float
    system: float
    idle: float


@dataclass(frozen=True, slots=True)
class MemoryUsage:
    used: int = 0
    total: int = 0

    @classmethod
    def from_reading(cls, reading: MemoryReading) -> MemoryUsage:
        return cls(used=int(reading.used), total=int(reading.total))


@dataclass(frozen=True, slots=True)
class CPUUsage:
    user: float = 0.0
    nice: float = 0.0
    interrupt: float = 0.0
    system: float = 0.0
    idle: float = 0.0

    @classmethod
    def from_reading(cls, reading: CpuLoadReading) -> CPUUsage:
        """Scale every fraction of ``reading`` to a percentage."""

        return cls(
            user=_to_percent(reading.user),
            nice=_to_percent(reading.nice),
            interrupt=_to_percent(reading.interrupt),
            system=_to_percent(reading.system),
            idle=_to_percent(reading.idle),
        )


@dataclass(frozen=True, slots=True)
class ResourceSnapshot:
    """CPU, memory and swap usage captured at ``last_updated`` (epoch seconds)."""

    cpu: CPUUsage = field(default_factory=CPUUsage)
    memory: MemoryUsage = field(default_factory=MemoryUsage)
    swap: MemoryUsage = field(default_factory=MemoryUsage)
    last_updated: int = 0

    @classmethod
    def empty(cls) -> ResourceSnapshot:
        return cls()

    @classmethod
    def from_readings(
        cls,
        *,
        memory: MemoryReading,
        swap: MemoryReading,
        cpu: CpuLoadReading,
        captured_at: int,
    ) -> ResourceSnapshot:
        return cls(
            cpu=CPUUsage.from_reading(cpu),
            memory=MemoryUsage.from_reading(memory),
            swap=MemoryUsage.from_reading(swap),
            last_updated=int(captured_at),
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialisable payload served by ``GET /``."""

        return {
            "cpu": asdict(self.cpu),
            "memory": asdict(self.memory),
            "swap": asdict(self.swap),
        }
