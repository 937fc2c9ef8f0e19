"""Minimal local HTTP server driven by a live-reloaded JSON routing descriptor."""

from .adapters.json_descriptor import JsonDescriptorSource, parse_descriptor
from .app.handlers import build_handler
from .app.server import run_server
from .config import ServerConfig, load_config
from .domain.models import ResolvedResource, RouteEntry
from .domain.paths import validate_route_key
from .domain.services import ResourceResolver

__all__ = [
    "JsonDescriptorSource",
    "ResolvedResource",
    "ResourceResolver",
    "RouteEntry",
    "ServerConfig",
    "build_handler",
    "load_config",
    "parse_descriptor",
    "run_server",
    "validate_route_key",
]
