from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional


@dataclass(frozen=True, slots=True)
class RouteEntry:
    content_type: str
    file_path: str  # absolute, resolved against the descriptor's directory


RouteDescriptor = Dict[str, RouteEntry]


@dataclass(frozen=True, slots=True)
class ResolvedResource:
    """Outcome of a lookup. ``found=False`` leaves both other fields unset."""

    found: bool
    content_type: Optional[str] = None
    file_path: Optional[str] = None

    @classmethod
    def not_found(cls) -> "ResolvedResource":
        return cls(False)

    @classmethod
    def of(cls, entry: RouteEntry) -> "ResolvedResource":
        return cls(True, entry.content_type, entry.file_path)


__all__ = ["RouteEntry", "RouteDescriptor", "ResolvedResource"]
