from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ..domain.models import RouteDescriptor


class DescriptorSource(ABC):
    @abstractmethod
    def load(self) -> Optional[RouteDescriptor]:
        """Read the current routing table, or ``None`` if it cannot be loaded."""
        ...
