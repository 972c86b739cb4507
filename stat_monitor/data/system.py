"""OS sampling through psutil."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Protocol, TypeVar

import psutil

from stat_monitor.core import CACHE, CpuUnavailable, MemoryUnavailable, SamplingError, SwapUnavailable
from stat_monitor.models import CpuLoadReading, MemoryReading

logger = logging.getLogger(__name__)

_T = TypeVar("_T")

# psutil field names folded into each reported CPU state
_USER_FIELDS = ("user",)
_NICE_FIELDS = ("nice",)
_INTERRUPT_FIELDS = ("irq", "softirq", "interrupt", "dpc")
_SYSTEM_FIELDS = ("system",)
_IDLE_FIELDS = ("idle",)
# Already accounted for in user/nice on Linux
_GUEST_FIELDS = ("guest", "guest_nice")

_OS_ERRORS = (OSError, RuntimeError, psutil.Error)


@dataclass(frozen=True, slots=True)
class SampleResult:
    """Outcome of one sampling pass; each slot holds a reading or the error."""

    memory: MemoryReading | SamplingError
    swap: MemoryReading | SamplingError
    cpu: CpuLoadReading | SamplingError


class Sampler(Protocol):
    def sample(self) -> SampleResult:
        ...


def collect_memory_reading() -> MemoryReading:
    mem = psutil.virtual_memory()
    return MemoryReading(total=int(mem.total), free=int(mem.available))


def collect_swap_reading() -> MemoryReading:
    swap = psutil.swap_memory()
    return MemoryReading(total=int(swap.total), free=int(swap.free))


def _sum_fields(times: Any, names: tuple[str, ...]) -> float:
    return sum(float(getattr(times, name, 0.0) or 0.0) for name in names)


def _total_time(times: Any) -> float:
    total = sum(float(value) for value in times)
    return total - _sum_fields(times, _GUEST_FIELDS)


class CpuLoadMeasurement:
    """Aggregate CPU counters captured at ``start`` and compared at ``done``."""

    def __init__(self, initial: Any) -> None:
        self._initial = initial

    @classmethod
    def start(cls) -> CpuLoadMeasurement:
        return cls(psutil.cpu_times())

    def done(self) -> CpuLoadReading:
        """Return the share of the elapsed interval spent in each CPU state.

        Raises :class:`CpuUnavailable` when the counters did not advance.
        """

        current = psutil.cpu_times()
        elapsed = _total_time(current) - _total_time(self._initial)
        if elapsed <= 0:
            raise CpuUnavailable()

        def fraction(names: tuple[str, ...]) -> float:
            delta = _sum_fields(current, names) - _sum_fields(self._initial, names)
            return max(delta, 0.0) / elapsed

        return CpuLoadReading(
            user=fraction(_USER_FIELDS),
            nice=fraction(_NICE_FIELDS),
            interrupt=fraction(_INTERRUPT_FIELDS),
            system=fraction(_SYSTEM_FIELDS),
            idle=fraction(_IDLE_FIELDS),
        )


def _capture(
    key: str,
    fn: Callable[[], _T],
    error_type: type[SamplingError],
) -> _T | SamplingError:
    try:
        return fn()
    except SamplingError as exc:
        return exc
    except _OS_ERRORS as exc:
        logger.debug("Reading '%s' failed: %s", key, exc)
        return error_type()


class SystemSampler:
    """Reads memory, swap and an interval CPU load from the local host."""

    def __init__(
        self,
        settle_seconds: float = CACHE.settle_seconds,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._settle_seconds = settle_seconds
        self._sleep = sleep

    def sample(self) -> SampleResult:
        memory = _capture("memory", collect_memory_reading, MemoryUnavailable)
        swap = _capture("swap", collect_swap_reading, SwapUnavailable)
        measurement = _capture("cpu", CpuLoadMeasurement.start, CpuUnavailable)
        # The settling wait runs once per pass, whatever failed above.
        self._sleep(self._settle_seconds)
        if isinstance(measurement, SamplingError):
            cpu: CpuLoadReading | SamplingError = measurement
        else:
            cpu = _capture("cpu", measurement.done, CpuUnavailable)
        return SampleResult(memory=memory, swap=swap, cpu=cpu)
