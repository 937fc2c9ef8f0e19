from __future__ import annotations

from ..ports.descriptors import DescriptorSource
from .models import ResolvedResource, RouteEntry
from .paths import validate_route_key


class ResourceResolver:
    """Maps a raw request URI to the file it should be served from.

    The routing table is loaded from ``source`` on every call, so edits to
    the descriptor are visible on the very next request.
    """

    def __init__(self, source: DescriptorSource) -> None:
        self._source = source

    def resolve(self, uri: str) -> ResolvedResource:
        key = validate_route_key(uri)
        if key is None:
            return ResolvedResource.not_found()

        routes = self._source.load()
        if routes is None:
            return ResolvedResource.not_found()

        entry = routes.get(key)
        if not _well_formed(entry):
            return ResolvedResource.not_found()
        return ResolvedResource.of(entry)


def _well_formed(entry: object) -> bool:
    return (
        isinstance(entry, RouteEntry)
        and isinstance(entry.content_type, str)
        and isinstance(entry.file_path, str)
    )


__all__ = ["ResourceResolver"]
