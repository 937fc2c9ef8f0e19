"""Offline check of a routing descriptor.

Parses the descriptor with the same rules the server applies, then lists
every route with its content type, resolved file and whether that file is
currently servable.
"""

from __future__ import annotations

import argparse
import os
import sys
from typing import TextIO

from pathmap.adapters.json_descriptor import parse_descriptor
from pathmap.domain.errors import DescriptorError
from pathmap.domain.paths import is_valid_route_key


def check(path: str, out: TextIO) -> int:
    path = os.path.abspath(path)
    try:
        with open(path, "rb") as fh:
            text = fh.read().decode("utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        print(f"error: cannot read {path}: {exc}", file=out)
        return 1
    try:
        routes = parse_descriptor(text, os.path.dirname(path))
    except DescriptorError as exc:
        print(f"error: {path}: {exc}", file=out)
        return 1

    problems = 0
    for key in sorted(routes):
        entry = routes[key]
        state = "ok" if os.path.isfile(entry.file_path) else "MISSING"
        if state != "ok":
            problems += 1
        print(f"{state:7} /{key.lstrip('/')} -> {entry.file_path} [{entry.content_type}]", file=out)
        if not is_valid_route_key(key) or key != key.lower():
            print(f"warning: key {key!r} can never match a request path", file=out)
    return 1 if problems else 0


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("descriptor", help="Path to the JSON routing descriptor.")
    args = parser.parse_args(argv)
    sys.exit(check(args.descriptor, sys.stdout))


if __name__ == "__main__":
    main()
