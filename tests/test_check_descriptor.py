from __future__ import annotations

import io
import json
from pathlib import Path

from pathmap.scripts.check_descriptor import check


def test_valid_descriptor_lists_routes(site: Path) -> None:
    out = io.StringIO()

    assert check(str(site), out) == 0
    report = out.getvalue()
    assert f"ok      / -> {site.parent / 'a.html'} [text/html]" in report
    assert f"ok      /x.css -> {site.parent / 'x.css'} [text/css]" in report
    assert "warning" not in report


def test_missing_file_is_flagged(site: Path) -> None:
    (site.parent / "x.css").unlink()
    out = io.StringIO()

    assert check(str(site), out) == 1
    assert "MISSING /x.css" in out.getvalue()


def test_structural_error_is_reported(tmp_path: Path) -> None:
    descriptor = tmp_path / "routes.json"
    descriptor.write_text(json.dumps({"/": ["text/html", 7]}), encoding="utf-8")
    out = io.StringIO()

    assert check(str(descriptor), out) == 1
    assert "must be an array of two strings" in out.getvalue()


def test_unreachable_keys_are_warned(tmp_path: Path) -> None:
    (tmp_path / "a.html").write_bytes(b"hi")
    descriptor = tmp_path / "routes.json"
    descriptor.write_text(
        json.dumps({"About.html": ["text/html", "a.html"], "../a.html": ["text/html", "a.html"]}),
        encoding="utf-8",
    )
    out = io.StringIO()

    assert check(str(descriptor), out) == 0
    report = out.getvalue()
    assert "warning: key 'About.html' can never match a request path" in report
    assert "warning: key '../a.html' can never match a request path" in report


def test_unreadable_descriptor(tmp_path: Path) -> None:
    out = io.StringIO()

    assert check(str(tmp_path / "absent.json"), out) == 1
    assert "cannot read" in out.getvalue()
