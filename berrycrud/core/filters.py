"""Filter argument builder and filter application.

The generated filter input mirrors the entity's scalar fields (all optional), adds
recursive ``AND``/``OR`` lists of itself and an ``_operators`` input holding
per-field comparison inputs.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

import strawberry
from sqlalchemy import and_, or_, func

from ..input_types import COMPARISON_INPUTS
from ..naming import compose_type_name
from ..options import FilterOptions
from ..types import TypeField, build_input_type, build_plain_class, enum_graphql_name, scalar_annotation
from .args import ArgMap, ArgSpec
from .errors import ArgumentError
from .introspection import FieldSpec
from .utils import input_to_dict

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity
    from ..operation import ResolveParams

_logger = logging.getLogger("berrycrud")

# Global operator registry (extensible)
OPERATOR_REGISTRY: Dict[str, Callable[[Any, Any], Any]] = {
    'eq': lambda col, v: col == v,
    'ne': lambda col, v: col != v,
    'lt': lambda col, v: col < v,
    'lte': lambda col, v: col <= v,
    'gt': lambda col, v: col > v,
    'gte': lambda col, v: col >= v,
    'like': lambda col, v: col.like(v),
    'ilike': lambda col, v: getattr(col, 'ilike', lambda x: func.lower(col).like(func.lower(x)))(v),
    'in': lambda col, v: col.in_(v if isinstance(v, (list, tuple, set)) else [v]),
    'nin': lambda col, v: ~col.in_(v if isinstance(v, (list, tuple, set)) else [v]),
    'exists': lambda col, v: col.isnot(None) if v else col.is_(None),
}

_LOGICAL_KEYS = {'and_': 'AND', 'or_': 'OR', 'operators': '_operators'}


def register_operator(name: str, fn: Callable[[Any, Any], Any]) -> None:
    OPERATOR_REGISTRY[name] = fn


def _input_base_name(type_name: str) -> str:
    return type_name[:-len('Input')] if type_name.endswith('Input') else type_name


def comparison_input_for(spec: FieldSpec, entity: "Entity") -> Optional[type]:
    if spec.enum_class is not None:
        enum_ann = scalar_annotation(spec, entity.registry)
        enum_name = enum_graphql_name(spec.enum_class)
        name = f"{enum_name}ComparisonInput"
        return entity.registry.get_or_create(name, lambda: build_input_type(name, {
            'eq': TypeField(Optional[enum_ann], None),
            'ne': TypeField(Optional[enum_ann], None),
            'in_': TypeField(Optional[List[enum_ann]], None, graphql_name='in'),
            'nin': TypeField(Optional[List[enum_ann]], None),
            'exists': TypeField(Optional[bool], None),
        }, description=f"Input type for {enum_name} comparison operations."))
    return COMPARISON_INPUTS.get(spec.python_type)


def _filterable(entity: "Entity", opts: FilterOptions) -> List[FieldSpec]:
    removed = set(opts.remove_fields or ())
    return [s for s in entity.schema.fields if s.name not in removed and s.sortable]


def _build_operators_type(entity: "Entity", type_name: str, opts: FilterOptions) -> Optional[type]:
    name = f"{_input_base_name(type_name)}OperatorsInput"

    def _build() -> type:
        fields: Dict[str, TypeField] = {}
        for spec in _filterable(entity, opts):
            comp = comparison_input_for(spec, entity)
            if comp is not None:
                fields[spec.name] = TypeField(Optional[comp], strawberry.UNSET)
        return build_input_type(name, fields, description=f"Comparison operators for {entity.type_name} fields")
    return entity.registry.get_or_create(name, _build)


def _build_filter_type(entity: "Entity", type_name: str, opts: FilterOptions) -> type:
    fields: Dict[str, TypeField] = {}
    for spec in _filterable(entity, opts):
        fields[spec.name] = TypeField(Optional[scalar_annotation(spec, entity.registry)], strawberry.UNSET, spec.description)
    if opts.operators:
        ops_type = _build_operators_type(entity, type_name, opts)
        fields['operators'] = TypeField(Optional[ops_type], strawberry.UNSET, "Comparison operators per field", graphql_name='_operators')
    cls = build_plain_class(type_name, fields, opts.description)
    # Self references for nested logical combinators
    cls.__annotations__['and_'] = Optional[List[cls]]
    cls.and_ = strawberry.field(default=strawberry.UNSET, name='AND', description="All of the nested filters must match")
    cls.__annotations__['or_'] = Optional[List[cls]]
    cls.or_ = strawberry.field(default=strawberry.UNSET, name='OR', description="Any of the nested filters must match")
    _logger.debug("berrycrud.filters: built %s fields=%s", type_name, list(cls.__annotations__))
    return strawberry.input(cls, name=type_name, description=opts.description or f"Filter for {entity.type_name}")


def filter_type_name(entity: "Entity", opts: Optional[FilterOptions] = None) -> str:
    opts = opts or FilterOptions()
    return opts.filter_type_name or compose_type_name(opts.prefix, entity.type_name, opts.suffix)


def filter_helper_args(entity: "Entity", opts: Optional[FilterOptions] = None) -> ArgMap:
    """Return the ``filter`` argument for an operation."""
    opts = opts or FilterOptions()
    type_name = filter_type_name(entity, opts)
    filter_type = entity.registry.get_or_create(type_name, lambda: _build_filter_type(entity, type_name, opts))
    desc = "Filter by fields"
    if opts.is_required:
        return {'filter': ArgSpec(filter_type, description=desc)}
    return {'filter': ArgSpec(Optional[filter_type], None, desc)}


# --- Runtime ----------------------------------------------------------------

def normalize_filter(filter_data: Any) -> Dict[str, Any]:
    """Plain dict with GraphQL-side keys (AND/OR/_operators/in) regardless of input form."""
    data = input_to_dict(filter_data)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ArgumentError(f"filter must be an object, got {type(data).__name__}")
    out: Dict[str, Any] = {}
    for key, value in data.items():
        key = _LOGICAL_KEYS.get(key, key)
        if key in ('AND', 'OR'):
            out[key] = [normalize_filter(v) for v in (value or [])]
        elif key == '_operators':
            out[key] = {
                fname: {('in' if op == 'in_' else op): v for op, v in (ops or {}).items()}
                for fname, ops in (value or {}).items()
            }
        else:
            out[key] = value
    return out


def _column(entity: "Entity", storage_name: str):
    col = entity.model.__table__.c.get(storage_name)
    if col is None:
        raise ArgumentError(f"Unknown filter field: {entity.aliases.to_external(storage_name)}")
    return col


def _expression(entity: "Entity", data: Dict[str, Any]):
    exprs: List[Any] = []
    for key, value in data.items():
        if key in ('AND', 'OR'):
            parts = [e for e in (_expression(entity, v) for v in value) if e is not None]
            if parts:
                exprs.append(and_(*parts) if key == 'AND' else or_(*parts))
        elif key == '_operators':
            for storage_name, op_map in value.items():
                col = _column(entity, storage_name)
                for op_name, op_value in (op_map or {}).items():
                    if op_value is None:
                        continue
                    op_fn = OPERATOR_REGISTRY.get(op_name)
                    if op_fn is None:
                        raise ArgumentError(f"Unknown filter operator: {op_name}")
                    exprs.append(op_fn(col, op_value))
        else:
            col = _column(entity, key)
            exprs.append(col.is_(None) if value is None else col == value)
    if not exprs:
        return None
    return and_(*exprs)


def build_filter_expression(entity: "Entity", filter_data: Any):
    """Translate external field names to storage names and compile a SQL condition (or None)."""
    normalized = normalize_filter(filter_data)
    translated = entity.aliases.translate_filter(normalized)
    return _expression(entity, translated)


def filter_helper(params: "ResolveParams", entity: "Entity") -> None:
    """Attach ``args.filter`` to the invocation's query handle."""
    filter_data = (params.args or {}).get('filter')
    if not filter_data:
        return
    expr = build_filter_expression(entity, filter_data)
    if expr is not None:
        params.query.where(expr)
