"""HTTP server exposing the cached resource snapshot as JSON."""

from __future__ import annotations

import json
import logging
import sys
from functools import partial
from http import HTTPStatus
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any, ClassVar
from urllib.parse import urlsplit

from stat_monitor.core import ConfigError, SamplingError, load_config
from stat_monitor.core.logging_config import setup_logging

from .store import SnapshotStore

logger = logging.getLogger(__name__)


class StatMonitorRequestHandler(BaseHTTPRequestHandler):
    """Answers ``GET /`` with the current snapshot; everything else is 404."""

    server_version: ClassVar[str] = "StatMonitor/1.0"

    def __init__(self, *args: Any, store: SnapshotStore, **kwargs: Any) -> None:
        self._store = store
        super().__init__(*args, **kwargs)

    def do_GET(self) -> None:  # noqa: N802
        if urlsplit(self.path).path != "/":
            self._send_not_found()
            return
        try:
            snapshot = self._store.get_snapshot()
        except SamplingError as exc:
            # Logical failures keep the 200 status clients already expect.
            logger.debug("Sampling failed: %s", exc)
            self._send_json({"error": str(exc)})
            return
        self._send_json(snapshot.to_dict())

    def do_POST(self) -> None:  # noqa: N802
        self._send_not_found()

    do_PUT = do_POST
    do_DELETE = do_POST
    do_PATCH = do_POST
    do_HEAD = do_POST
    do_OPTIONS = do_POST

    def log_message(self, format: str, *args: Any) -> None:  # noqa: A003 - parity with BaseHTTPRequestHandler
        logger.debug("%s - %s", self.address_string(), format % args)

    def _send_not_found(self) -> None:
        self._send_json({"error": "not found"}, status=HTTPStatus.NOT_FOUND)

    def _send_json(self, payload: dict[str, Any], status: HTTPStatus = HTTPStatus.OK) -> None:
        body = json.dumps(payload).encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "application/json; charset=utf-8")
        self.send_header("Content-Length", str(len(body)))
        self.end_headers()
        if self.command != "HEAD":
            self.wfile.write(body)


class StatMonitorServer:
    """Wraps the HTTP server around a shared :class:`SnapshotStore`."""

    def __init__(
        self,
        host: str = "0.0.0.0",
        port: int = 8080,
        store: SnapshotStore | None = None,
    ) -> None:
        self.store = store if store is not None else SnapshotStore()
        handler = partial(StatMonitorRequestHandler, store=self.store)
        self._httpd = ThreadingHTTPServer((host, port), handler)
        self._httpd.daemon_threads = True
        self.host, self.port = self._httpd.server_address[:2]

    def serve_forever(self) -> None:
        try:
            self._httpd.serve_forever()
        finally:
            self._httpd.server_close()

    def stop(self) -> None:
        self._httpd.shutdown()
        self._httpd.server_close()

    def server_address(self) -> str:
        return f"http://{self.host}:{self.port}"


def create_app(
    host: str = "0.0.0.0",
    port: int = 8080,
    store: SnapshotStore | None = None,
) -> StatMonitorServer:
    """Factory helper used by the CLI, scripts and tests."""

    return StatMonitorServer(host=host, port=port, store=store)


def main() -> int:
    try:
        config = load_config()
    except ConfigError as exc:
        setup_logging()
        logger.error("Invalid configuration: %s", exc)
        return 2

    setup_logging(config.log_level)
    server = create_app(host=config.host, port=config.port)
    logger.info("Listening on %s:%s", server.host, server.port)
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    return 0


if __name__ == "__main__":
    sys.exit(main())
