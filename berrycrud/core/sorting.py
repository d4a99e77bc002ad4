from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Tuple

import strawberry

from ..naming import sort_enum_key
from ..options import SortOptions
from .args import ArgMap, ArgSpec
from .errors import ArgumentError

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity
    from ..operation import ResolveParams

_SEP = ':'


def _build_sort_enum(entity: "Entity", type_name: str, opts: SortOptions) -> type:
    removed = set(opts.remove_fields or ())
    members: Dict[str, str] = {}
    for spec in entity.schema.fields:
        if spec.name in removed or not spec.sortable:
            continue
        for direction in ('asc', 'desc'):
            members[sort_enum_key(spec.name, direction)] = f"{spec.name}{_SEP}{direction}"
    if not members:
        raise ValueError(f"{entity.type_name} has no sortable fields for {type_name}")
    py_enum = Enum(type_name, members)
    return strawberry.enum(py_enum, name=type_name, description=f"Sort orders for {entity.type_name}")


def sort_helper_args(entity: "Entity", opts: Optional[SortOptions] = None) -> ArgMap:
    """Return the ``sort`` argument: a list of enum values, one per tie-breaker."""
    opts = opts or SortOptions()
    type_name = opts.sort_type_name or f"Sort{entity.type_name}Input"
    sort_enum = entity.registry.get_or_create(type_name, lambda: _build_sort_enum(entity, type_name, opts))
    default = None
    if opts.default:
        try:
            default = [sort_enum[opts.default]]
        except KeyError:
            raise ValueError(f"{type_name} has no member {opts.default!r}") from None
    return {'sort': ArgSpec(Optional[List[sort_enum]], default, "Sort order; later entries break ties")}


def parse_sort(sort_value: Any) -> List[Tuple[str, str]]:
    """Normalize a sort argument into ``[(external_field, direction), ...]``.

    Accepts enum members, ``'field:dir'`` strings, ``{'field': 1|-1}`` dicts or a list of those.
    """
    if sort_value is None:
        return []
    items = sort_value if isinstance(sort_value, (list, tuple)) else [sort_value]
    out: List[Tuple[str, str]] = []
    for item in items:
        if isinstance(item, Enum):
            item = item.value
        if isinstance(item, dict):
            for name, direction in item.items():
                out.append((name, 'desc' if direction in (-1, 'desc', 'DESC') else 'asc'))
            continue
        if not isinstance(item, str) or not item.strip():
            raise ArgumentError(f"Unsupported sort value: {item!r}")
        name, _, direction = item.strip().partition(_SEP)
        direction = (direction or 'asc').lower()
        if direction not in ('asc', 'desc'):
            raise ArgumentError(f"Unsupported sort direction: {direction!r}")
        out.append((name, direction))
    return out


def sort_helper(params: "ResolveParams", entity: "Entity") -> None:
    """Attach ``args.sort`` (translated to storage names) to the query handle."""
    spec = parse_sort((params.args or {}).get('sort'))
    if not spec:
        return
    table = entity.model.__table__
    clauses = []
    for storage_name, direction in entity.aliases.translate_sort(spec):
        col = table.c.get(storage_name)
        if col is None:
            raise ArgumentError(f"Unknown sort field: {entity.aliases.to_external(storage_name)}")
        clauses.append(col.desc() if direction == 'desc' else col.asc())
    params.query.order_by(*clauses)
