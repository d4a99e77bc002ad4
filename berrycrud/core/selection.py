"""Requested-field ("projection") extraction and field-selection push-down.

A projection is a nested dict keyed by python field names, e.g.
``{'record': {'id': {}, 'name': {}}, 'error': {'message': {}}}``.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Iterable, List

from graphql import GraphQLResolveInfo
from graphql.language import FieldNode, FragmentDefinitionNode, FragmentSpreadNode, InlineFragmentNode
from strawberry.types.nodes import FragmentSpread, InlineFragment

from ..naming import camel_to_snake, map_graphql_to_python

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity
    from ..operation import ResolveParams

Projection = Dict[str, Any]


def _merge(dst: Projection, src: Projection) -> Projection:
    for k, v in src.items():
        if k in dst and isinstance(dst[k], dict) and isinstance(v, dict):
            _merge(dst[k], v)
        else:
            dst[k] = v
    return dst


def projection_from_selections(selections: Iterable[Any]) -> Projection:
    out: Projection = {}
    for sel in selections or []:
        # Fragments contribute their fields to the enclosing selection
        if isinstance(sel, (FragmentSpread, InlineFragment)):
            _merge(out, projection_from_selections(sel.selections))
            continue
        name = getattr(sel, 'name', None)
        if not name or name.startswith('__'):
            continue
        sub = projection_from_selections(getattr(sel, 'selections', None) or [])
        key = camel_to_snake(name)
        if key in out and isinstance(out[key], dict):
            _merge(out[key], sub)
        else:
            out[key] = sub
    return out


def projection_from_field_nodes(nodes: Iterable[Any], fragments: Dict[str, FragmentDefinitionNode]) -> Projection:
    """Same as ``projection_from_selections`` for raw graphql-core AST nodes."""
    out: Projection = {}
    for node in nodes or []:
        if isinstance(node, FragmentSpreadNode):
            frag = fragments.get(node.name.value)
            if frag is not None:
                _merge(out, projection_from_field_nodes(frag.selection_set.selections, fragments))
            continue
        if isinstance(node, InlineFragmentNode):
            _merge(out, projection_from_field_nodes(node.selection_set.selections, fragments))
            continue
        if not isinstance(node, FieldNode) or node.name.value.startswith('__'):
            continue
        children = node.selection_set.selections if node.selection_set else []
        _merge(out, {camel_to_snake(node.name.value): projection_from_field_nodes(children, fragments)})
    return out


def projection_from_info(info: Any) -> Projection:
    """Projection of the field currently being resolved.

    Accepts a Strawberry ``Info`` or a plain ``GraphQLResolveInfo``.
    """
    if isinstance(info, GraphQLResolveInfo):
        children: List[Any] = []
        for node in info.field_nodes:
            if node.selection_set:
                children.extend(node.selection_set.selections)
        return projection_from_field_nodes(children, info.fragments)
    fields = getattr(info, 'selected_fields', None) or []
    if not fields:
        return {}
    return projection_from_selections(getattr(fields[0], 'selections', None) or [])


def requested_entity_fields(projection: Projection, entity: "Entity") -> List[str]:
    """External field names of ``entity`` present in the projection (others are ignored)."""
    fields_map = entity.schema.fields_map
    out: List[str] = []
    for name in projection or {}:
        py_name = map_graphql_to_python(name, fields_map)
        if py_name in fields_map and py_name not in out:
            out.append(py_name)
    return out


def projection_helper(params: "ResolveParams", entity: "Entity") -> None:
    """Push the requested fields down to the query; an empty projection loads every field."""
    names = requested_entity_fields(params.projection, entity)
    if not names:
        return
    params.query.select_fields(entity.aliases.translate_projection(names))
