from __future__ import annotations

import socket
import threading
from pathlib import Path

import pytest

from pathmap.adapters.json_descriptor import JsonDescriptorSource
from pathmap.app.handlers import build_handler
from pathmap.app.server import serve_connection
from pathmap.scripts import probe


def _probe_once(site: Path, monkeypatch: pytest.MonkeyPatch, path: str) -> None:
    processor = build_handler(JsonDescriptorSource(str(site)))
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.bind(("127.0.0.1", 0))
        listener.listen(1)
        port = listener.getsockname()[1]

        def accept_once() -> None:
            conn, addr = listener.accept()
            serve_connection(conn, addr, processor)

        worker = threading.Thread(target=accept_once, daemon=True)
        worker.start()
        monkeypatch.setenv("PATHMAP_HOST", "127.0.0.1")
        monkeypatch.setenv("PATHMAP_PORT", str(port))
        monkeypatch.setenv("no_proxy", "*")
        monkeypatch.setenv("NO_PROXY", "*")
        try:
            probe.main([path])
        finally:
            worker.join(timeout=5)


def test_probe_succeeds_on_served_route(
    site: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    _probe_once(site, monkeypatch, "/")

    assert "/ -> 200 (text/html)" in capsys.readouterr().out


def test_probe_fails_on_missing_route(
    site: Path, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        _probe_once(site, monkeypatch, "/missing.html")

    assert excinfo.value.code == 1
    assert "/missing.html -> 404 (text/plain)" in capsys.readouterr().out
