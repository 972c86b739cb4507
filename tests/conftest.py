from __future__ import annotations

import pytest

from stat_monitor.core import CpuUnavailable, MemoryUnavailable, SamplingError, SwapUnavailable

from .fakes import FakeSampler


@pytest.fixture
def fake_sampler() -> FakeSampler:
    return FakeSampler()


@pytest.fixture(params=[MemoryUnavailable, SwapUnavailable, CpuUnavailable])
def failure_type(request: pytest.FixtureRequest) -> type[SamplingError]:
    return request.param
