"""Web application package for stat_monitor."""

from __future__ import annotations

__all__ = [
    "SnapshotStore",
    "create_app",
]

from .store import SnapshotStore  # noqa: E402
from .server import create_app  # noqa: E402
