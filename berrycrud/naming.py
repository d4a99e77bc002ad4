"""Common naming utilities for berrycrud.

Provides camelCase to snake_case conversion used when mapping GraphQL selections
back to model attributes, and the composition rules for synthesized type names.
"""
from __future__ import annotations

import re
from typing import Any, Dict, Optional

__all__ = [
    "camel_to_snake",
    "compose_type_name",
    "sort_enum_key",
    "map_graphql_to_python",
]

def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase identifier to snake_case.

    Idempotent for already snake_case input. Handles sequences of capitals.
    """
    if not isinstance(name, str) or not name:
        return name  # type: ignore
    s1 = re.sub(r"(.)([A-Z][a-z]+)", r"\1_\2", name)
    s2 = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", s1)
    return s2.lower()


def compose_type_name(prefix: Optional[str], type_name: str, suffix: Optional[str]) -> str:
    """Build a synthesized type name, e.g. ('CreateOne', 'User', 'Input') -> 'CreateOneUserInput'."""
    return f"{prefix or ''}{type_name}{suffix or ''}"


def sort_enum_key(field_name: str, direction: str) -> str:
    """Enum member name for a sort order: ('created_at', 'desc') -> 'CREATED_AT_DESC'."""
    return f"{camel_to_snake(field_name).upper()}_{direction.upper()}"


def map_graphql_to_python(name: str, fields_map: Dict[str, Any]) -> str:
    """Map a GraphQL field name back to the python attribute key when known."""
    if not name or name in fields_map:
        return name
    snake = camel_to_snake(name)
    if snake in fields_map:
        return snake
    return name
