from __future__ import annotations


class DescriptorError(ValueError):
    """Raised when a routing descriptor does not have the required shape."""


__all__ = ["DescriptorError"]
