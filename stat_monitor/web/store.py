"""Cached resource snapshot shared by every request handler."""

from __future__ import annotations

import logging
import threading
import time

from stat_monitor.core import CACHE, SamplingError
from stat_monitor.data import SampleResult, Sampler, SystemSampler
from stat_monitor.models import ResourceSnapshot

logger = logging.getLogger(__name__)


class SnapshotStore:
    """Serves the last snapshot, re-sampling the host once it is stale.

    Every call holds the lock for its whole duration, including the
    sampler's settling delay, so callers observe either the old or the
    new snapshot and never race a second refresh.
    """

    def __init__(
        self,
        sampler: Sampler | None = None,
        staleness_seconds: int = CACHE.staleness_seconds,
    ) -> None:
        self._sampler = sampler if sampler is not None else SystemSampler()
        self._staleness_seconds = staleness_seconds
        self._lock = threading.Lock()
        self._snapshot = ResourceSnapshot.empty()
        self._refresh_count = 0
        self._last_failure: SamplingError | None = None

    @property
    def current(self) -> ResourceSnapshot:
        with self._lock:
            return self._snapshot

    def _is_stale(self, now: int) -> bool:
        # Caller must hold self._lock.
        return now -self._snapshot.last_updated > self._staleness_seconds

    def get_snapshot(self, now: int | None = None) -> ResourceSnapshot:
        """Return a snapshot no older than the staleness window.

        Raises the :class:`SamplingError` of the first failed metric
        (memory, then swap, then CPU) and keeps the stored snapshot as is.
        """

        seen_refreshes = self._refresh_count
        with self._lock:
            if now is None:
                now = int(time.time())
            if not self._is_stale(now):
                logger.debug("Serving cached snapshot from %s", self._snapshot.last_updated)
                return self._snapshot
            if self._refresh_count != seen_refreshes and self._last_failure is not None:
                # A refresh failed while this caller was queued; share its outcome.
                raise type(self._last_failure)()
            return self._refresh(now)

    def _refresh(self, now: int) -> ResourceSnapshot:
        started = time.perf_counter()
        result = self._sampler.sample()
        self._refresh_count += 1
        try:
            snapshot = self._build(result, now)
        except SamplingError as exc:
            self._last_failure = exc
            logger.debug("Refresh failed after %.3fs: %s", time.perf_counter() - started, exc)
            raise
        self._last_failure = None
        self._snapshot = snapshot
        logger.debug("Refreshed snapshot at %s in %.3fs", now, time.perf_counter() - started)
        return snapshot

    @staticmethod
    def _build(result: SampleResult, now: int) -> ResourceSnapshot:
        for reading in (result.memory, result.swap, result.cpu):
            if isinstance(reading, SamplingError):
                raise reading
        return ResourceSnapshot.from_readings(
            memory=result.memory,
            swap=result.swap,
            cpu=result.cpu,
            captured_at=now,
        )
