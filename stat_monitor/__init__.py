"""stat_monitor package: host resource usage over HTTP."""

from __future__ import annotations

__all__ = [
    "create_app",
    "core",
    "data",
    "models",
    "SnapshotStore",
]

from .web import SnapshotStore, create_app  # noqa: E402
