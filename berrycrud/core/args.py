from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

_NO_DEFAULT = object()


@dataclass(frozen=True)
class ArgSpec:
    """One GraphQL argument of a generated operation.

    ``annotation`` is the python/Strawberry type; an argument without ``default``
    is required by the GraphQL layer.
    """
    annotation: Any
    default: Any = _NO_DEFAULT
    description: Optional[str] = None

    @property
    def is_required(self) -> bool:
        return self.default is _NO_DEFAULT


ArgMap = Dict[str, ArgSpec]

NO_DEFAULT = _NO_DEFAULT
