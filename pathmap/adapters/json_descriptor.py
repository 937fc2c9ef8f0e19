from __future__ import annotations

import json
import logging
import os
from typing import Any, Optional

from ..domain.errors import DescriptorError
from ..domain.models import RouteDescriptor, RouteEntry
from ..ports.descriptors import DescriptorSource

logger = logging.getLogger("pathmap.descriptor")


def parse_descriptor(text: str, base_dir: str) -> RouteDescriptor:
    """Parse descriptor JSON into a typed routing table.

    The whole document is rejected if any value is not a two element array
    of strings. Relative file paths are resolved against ``base_dir``.
    """

    try:
        document: Any = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise DescriptorError(f"invalid JSON: {exc}") from exc

    if not isinstance(document, dict):
        raise DescriptorError("top level must be an object")

    routes: RouteDescriptor = {}
    for key, value in document.items():
        if not isinstance(value, list) or len(value) != 2:
            raise DescriptorError(f"value for {key!r} must be an array of two strings")
        content_type, file_path = value
        if not isinstance(content_type, str) or not isinstance(file_path, str):
            raise DescriptorError(f"value for {key!r} must be an array of two strings")
        routes[key] = RouteEntry(content_type, _resolve_path(file_path, base_dir))
    return routes


def _resolve_path(file_path: str, base_dir: str) -> str:
    if not os.path.isabs(file_path):
        file_path = os.path.join(base_dir, file_path)
    return os.path.abspath(file_path)


class JsonDescriptorSource(DescriptorSource):
    """Routing table stored as a JSON file, re-read on every ``load``."""

    def __init__(self, path: str) -> None:
        self.path = os.path.abspath(path)
        self.base_dir = os.path.dirname(self.path)

    def load(self) -> Optional[RouteDescriptor]:
        if not os.path.isfile(self.path):
            logger.debug("descriptor %s is missing or not a regular file", self.path)
            return None
        try:
            with open(self.path, "rb") as fh:
                raw = fh.read()
        except OSError as exc:
            logger.debug("descriptor %s could not be read: %s", self.path, exc)
            return None
        try:
            return parse_descriptor(raw.decode("utf-8"), self.base_dir)
        except UnicodeDecodeError:
            logger.debug("descriptor %s is not valid UTF-8", self.path)
        except DescriptorError as exc:
            logger.debug("descriptor %s rejected: %s", self.path, exc)
        return None

    def __repr__(self) -> str:
        return f"JsonDescriptorSource({self.path!r})"


__all__ = ["JsonDescriptorSource", "parse_descriptor"]
