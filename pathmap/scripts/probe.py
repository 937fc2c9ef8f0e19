from __future__ import annotations

import os
import sys
import urllib.error
import urllib.request

from pathmap.config import ConfigError, coerce_port


def main(argv: list[str] | None = None) -> None:
    argv = sys.argv[1:] if argv is None else argv
    path = argv[0] if argv else "/"
    host = os.environ.get("PATHMAP_HOST", "127.0.0.1")
    timeout = float(os.environ.get("PATHMAP_PROBE_TIMEOUT", "2"))
    try:
        port = coerce_port(os.environ.get("PATHMAP_PORT", "8080"))
    except ConfigError as exc:
        raise SystemExit(str(exc)) from exc

    url = f"http://{host}:{port}{path}"
    req = urllib.request.Request(url, method="HEAD")
    try:
        with urllib.request.urlopen(req, timeout=timeout) as resp:
            status = resp.getcode()
            content_type = resp.headers.get("Content-Type")
    except urllib.error.HTTPError as err:
        status = err.code
        content_type = err.headers.get("Content-Type")
    except OSError as exc:
        raise SystemExit(f"{url} unreachable: {exc}") from exc

    print(f"{url} -> {status} ({content_type})")
    if status != 200:
        raise SystemExit(1)


if __name__ == "__main__":
    main()
