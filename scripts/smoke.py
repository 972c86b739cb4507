"""Smoke test for the stat_monitor HTTP server against the real host."""

from __future__ import annotations

import json
import sys
import threading
import urllib.request
from pathlib import Path


ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from stat_monitor.web.server import create_app


def fetch_json(url: str) -> dict[str, object]:
    with urllib.request.urlopen(url) as response:  # nosec - local smoke test
        payload = response.read().decode("utf-8")
    return json.loads(payload)


def run_smoke() -> None:
    server = create_app(host="127.0.0.1", port=0)
    address = server.server_address()
    print(f"Starting server on {address}")

    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        current = fetch_json(f"{address}/")
        assert "error" not in current, f"Sampling failed: {current.get('error')}"
        assert "cpu" in current, "Snapshot without CPU data"
        assert "memory" in current, "Snapshot without memory data"
        assert "swap" in current, "Snapshot without swap data"
        print("SMOKE_OK", {
            "cpu_idle": current["cpu"].get("idle"),  # type: ignore[union-attr]
            "memory_used": current["memory"].get("used"),  # type: ignore[union-attr]
        })
    finally:
        server.stop()
        thread.join()

if __name__ == "__main__":
    run_smoke()
