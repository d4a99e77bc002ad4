"""Process-wide registry of synthesized GraphQL type descriptors.

Every input, output, enum and payload type berrycrud builds is created through
``TypeRegistry.get_or_create`` so that operations generated for the same entity
share one canonical descriptor per type name.
"""
from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Dict, List, Optional

_logger = logging.getLogger("berrycrud")


class TypeRegistry:
    """Idempotent name -> type descriptor map.

    ``get_or_create`` holds a re-entrant lock while building, so builders may request
    other names (nested input types, enums) and concurrent first use of the same name
    still yields a single descriptor. A failing builder leaves no entry behind.
    """

    def __init__(self):
        self._types: Dict[str, Any] = {}
        self._lock = threading.RLock()

    def get_or_create(self, name: str, builder: Callable[[], Any]) -> Any:
        existing = self._types.get(name)
        if existing is not None:
            return existing
        with self._lock:
            existing = self._types.get(name)
            if existing is not None:
                return existing
            descriptor = builder()
            if descriptor is None:
                raise ValueError(f"Type builder for {name!r} returned None")
            self._types[name] = descriptor
            _logger.debug("berrycrud.registry: created %s", name)
            return descriptor

    def has(self, name: str) -> bool:
        return name in self._types

    def get(self, name: str) -> Optional[Any]:
        return self._types.get(name)

    def names(self) -> List[str]:
        with self._lock:
            return sorted(self._types.keys())

    def clear(self) -> None:
        with self._lock:
            self._types.clear()

    def __contains__(self, name: str) -> bool:
        return self.has(name)

    def __len__(self) -> int:
        return len(self._types)


# Default registry shared by every entity that does not bring its own
type_registry = TypeRegistry()
