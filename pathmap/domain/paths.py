"""Route key grammar shared by request paths and descriptor keys.

A route key is either the literal ``/`` (the server root) or a sequence of
one or more components separated by single slashes, with an optional
trailing slash. Components use ASCII letters, digits, underscores, hyphens
and periods; a period may not start or end a component and may not follow
another period. Matching is case-insensitive, so keys are lower-cased.
"""

from __future__ import annotations

import re
from typing import Optional

ROOT_KEY = "/"

_ALLOWED = re.compile(r"[A-Za-z0-9_.\-/]+")

# Component boundaries are exactly the slashes, so checking the whole string
# for slash/dot adjacency covers leading and trailing dots of every component.
_FORBIDDEN = (
    re.compile(r"\A/"),
    re.compile(r"//"),
    re.compile(r"\A\."),
    re.compile(r"/\."),
    re.compile(r"\.\Z"),
    re.compile(r"\./"),
    re.compile(r"\.\."),
)


def _is_component_path(key: str) -> bool:
    if any(pattern.search(key) for pattern in _FORBIDDEN):
        return False
    return _ALLOWED.fullmatch(key) is not None


def is_valid_route_key(key: str) -> bool:
    """Check a key as it is written in a descriptor (no leading slash)."""

    return key == ROOT_KEY or _is_component_path(key)


def validate_route_key(uri: str) -> Optional[str]:
    """Return the normalized route key for ``uri`` or ``None`` if it is illegal."""

    if not uri.startswith("/"):
        return None
    if uri == ROOT_KEY:
        return ROOT_KEY
    key = uri[1:]
    if not _is_component_path(key):
        return None
    # only ASCII survives the alphabet check, so lower() cannot fold anything else
    return key.lower()


__all__ = ["ROOT_KEY", "is_valid_route_key", "validate_route_key"]
