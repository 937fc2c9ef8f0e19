from __future__ import annotations

import json
from pathlib import Path

import pytest


@pytest.fixture
def site(tmp_path: Path) -> Path:
    """Descriptor for a two page site; returns the descriptor path."""

    root = tmp_path / "site"
    root.mkdir()
    (root / "a.html").write_bytes(b"hi")
    (root / "x.css").write_bytes(b"body { color: red; }\n")
    descriptor = root / "website.json"
    descriptor.write_text(
        json.dumps({"/": ["text/html", "a.html"], "x.css": ["text/css", "x.css"]}),
        encoding="utf-8",
    )
    return descriptor
