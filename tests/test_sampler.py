from __future__ import annotations

import dataclasses
from collections import namedtuple

import psutil
import pytest

from stat_monitor.core import CpuUnavailable, MemoryUnavailable, SwapUnavailable
from stat_monitor.data import CpuLoadMeasurement, SystemSampler, collect_memory_reading
from stat_monitor.models import CpuLoadReading, MemoryReading

LinuxTimes = namedtuple(
    "LinuxTimes",
    "user nice system idle iowait irq softirq steal guest guest_nice",
)
WindowsTimes = namedtuple("WindowsTimes", "user system idle interrupt dpc")
VirtualMemory = namedtuple("VirtualMemory", "total available free")
SwapMemory = namedtuple("SwapMemory", "total used free")


class _Clock:
    def __init__(self, *samples: object) -> None:
        self._samples = list(samples)

    def __call__(self) -> object:
        return self._samples.pop(0)


def _fail(*_args: object, **_kwargs: object) -> object:
    raise OSError("no such file")


@pytest.fixture
def sleeps() -> list[float]:
    return []


@pytest.fixture
def sampler(sleeps: list[float]) -> SystemSampler:
    return SystemSampler(settle_seconds=1.0, sleep=sleeps.append)


@pytest.fixture
def healthy_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(psutil, "virtual_memory", lambda: VirtualMemory(total=1000, available=400, free=100))
    monkeypatch.setattr(psutil, "swap_memory", lambda: SwapMemory(total=200, used=0, free=200))
    monkeypatch.setattr(
        psutil,
        "cpu_times",
        _Clock(
            LinuxTimes(100, 0, 50, 800, 10, 0, 0, 0, 5, 0),
            LinuxTimes(110, 0, 55, 885, 10, 0, 0, 0, 10, 0),
        ),
    )


def test_linux_cpu_deltas_become_fractions(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        psutil,
        "cpu_times",
        _Clock(
            LinuxTimes(100, 0, 50, 800, 0, 0, 0, 0, 0, 0),
            LinuxTimes(110, 0, 53, 885, 0, 1, 1, 0, 0, 0),
        ),
    )
    reading = CpuLoadMeasurement.start().done()
    assert dataclasses.astuple(reading) == pytest.approx((0.1, 0.0, 0.02, 0.03, 0.85))


def test_guest_time_not_double_counted(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        psutil,
        "cpu_times",
        _Clock(
            LinuxTimes(0, 0, 0, 0, 0, 0, 0, 0, 0, 0),
            LinuxTimes(50, 0, 0, 50, 0, 0, 0, 0, 50, 0),
        ),
    )
    reading = CpuLoadMeasurement.start().done()
    assert reading.user == pytest.approx(0.5)
    assert reading.idle == pytest.approx(0.5)


def test_windows_interrupt_and_dpc_are_folded(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        psutil,
        "cpu_times",
        _Clock(WindowsTimes(0, 0, 0, 0, 0), WindowsTimes(20, 10, 60, 6, 4)),
    )
    reading = CpuLoadMeasurement.start().done()
    assert reading.nice == 0.0
    assert reading.interrupt == pytest.approx(0.1)
    assert reading.idle == pytest.approx(0.6)


def test_counters_that_do_not_advance_are_a_cpu_failure(monkeypatch: pytest.MonkeyPatch) -> None:
    same = LinuxTimes(1, 0, 1, 1, 0, 0, 0, 0, 0, 0)
    monkeypatch.setattr(psutil, "cpu_times", _Clock(same, same))
    with pytest.raises(CpuUnavailable):
        CpuLoadMeasurement.start().done()


@pytest.mark.usefixtures("healthy_host")
def test_sample_reads_all_three_metrics(sampler: SystemSampler, sleeps: list[float]) -> None:
    result = sampler.sample()

    assert result.memory == MemoryReading(total=1000, free=400)
    assert result.swap == MemoryReading(total=200, free=200)
    assert isinstance(result.cpu, CpuLoadReading)
    assert result.cpu.user == pytest.approx(0.1)
    assert result.cpu.idle == pytest.approx(0.85)
    assert sleeps == [1.0]


@pytest.mark.usefixtures("healthy_host")
def test_each_metric_fails_independently(
    monkeypatch: pytest.MonkeyPatch, sampler: SystemSampler, sleeps: list[float]
) -> None:
    monkeypatch.setattr(psutil, "virtual_memory", _fail)

    result = sampler.sample()

    assert isinstance(result.memory, MemoryUnavailable)
    assert result.swap == MemoryReading(total=200, free=200)
    assert isinstance(result.cpu, CpuLoadReading)
    assert sleeps == [1.0]


@pytest.mark.usefixtures("healthy_host")
def test_swap_and_cpu_failures_are_captured(
    monkeypatch: pytest.MonkeyPatch, sampler: SystemSampler, sleeps: list[float]
) -> None:
    monkeypatch.setattr(psutil, "swap_memory", _fail)
    monkeypatch.setattr(psutil, "cpu_times", _fail)

    result = sampler.sample()

    assert isinstance(result.memory, MemoryReading)
    assert isinstance(result.swap, SwapUnavailable)
    assert isinstance(result.cpu, CpuUnavailable)
    # Settling delay still happens exactly once
    assert sleeps == [1.0]


def test_psutil_errors_map_to_sampling_errors(
    monkeypatch: pytest.MonkeyPatch, sampler: SystemSampler
) -> None:
    def access_denied() -> object:
        raise psutil.AccessDenied()

    monkeypatch.setattr(psutil, "virtual_memory", access_denied)
    monkeypatch.setattr(psutil, "swap_memory", access_denied)
    monkeypatch.setattr(psutil, "cpu_times", access_denied)

    result = sampler.sample()

    assert isinstance(result.memory, MemoryUnavailable)
    assert isinstance(result.swap, SwapUnavailable)
    assert isinstance(result.cpu, CpuUnavailable)


def test_memory_reading_counts_cache_as_free(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        psutil,
        "virtual_memory",
        lambda: VirtualMemory(total=1000, available=700, free=100),
    )

    reading = collect_memory_reading()

    assert reading == MemoryReading(total=1000, free=700)
    assert reading.used == 300
