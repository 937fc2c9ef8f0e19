from __future__ import annotations

from typing import Optional

from pathmap.domain.models import ResolvedResource, RouteDescriptor, RouteEntry
from pathmap.domain.services import ResourceResolver
from pathmap.ports.descriptors import DescriptorSource


class StubSource(DescriptorSource):
    """Descriptor source returning a fixed table and counting loads."""

    def __init__(self, routes: Optional[RouteDescriptor]) -> None:
        self.routes = routes
        self.loads = 0

    def load(self) -> Optional[RouteDescriptor]:
        self.loads += 1
        return self.routes


ROUTES: RouteDescriptor = {
    "/": RouteEntry("text/html", "/srv/site/index.html"),
    "about.html": RouteEntry("text/html", "/srv/site/about.html"),
    "docs/": RouteEntry("text/html", "/srv/site/docs/index.html"),
}


def test_found_route_carries_entry_fields() -> None:
    resolver = ResourceResolver(StubSource(ROUTES))

    assert resolver.resolve("/") == ResolvedResource(True, "text/html", "/srv/site/index.html")
    assert resolver.resolve("/docs/") == ResolvedResource(True, "text/html", "/srv/site/docs/index.html")


def test_lookup_is_case_insensitive() -> None:
    resolver = ResourceResolver(StubSource(ROUTES))

    assert resolver.resolve("/About.HTML") == resolver.resolve("/about.html")
    assert resolver.resolve("/ABOUT.html").found


def test_invalid_path_never_touches_the_descriptor() -> None:
    source = StubSource(ROUTES)
    resolver = ResourceResolver(source)

    result = resolver.resolve("/../about.html")

    assert result == ResolvedResource.not_found()
    assert result.content_type is None and result.file_path is None
    assert source.loads == 0


def test_load_failure_is_not_found() -> None:
    assert not ResourceResolver(StubSource(None)).resolve("/").found


def test_absent_key_is_not_found() -> None:
    source = StubSource(ROUTES)

    assert not ResourceResolver(source).resolve("/missing.html").found
    assert source.loads == 1


def test_trailing_slash_is_part_of_the_key() -> None:
    resolver = ResourceResolver(StubSource(ROUTES))

    assert not resolver.resolve("/docs").found
    assert not resolver.resolve("/about.html/").found


def test_malformed_entry_is_not_found() -> None:
    routes = dict(ROUTES)
    routes["odd"] = ("text/html", "/srv/site/odd.html")  # type: ignore[assignment]

    assert not ResourceResolver(StubSource(routes)).resolve("/odd").found


def test_descriptor_is_loaded_for_every_lookup() -> None:
    source = StubSource(ROUTES)
    resolver = ResourceResolver(source)

    resolver.resolve("/")
    resolver.resolve("/")
    source.routes = {}

    assert not resolver.resolve("/").found
    assert source.loads == 3
