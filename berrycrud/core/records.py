from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional

import strawberry

from ..naming import compose_type_name
from ..options import RecordOptions
from ..types import TypeField, build_input_type, scalar_annotation
from .args import ArgMap, ArgSpec

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity

_logger = logging.getLogger("berrycrud")


def record_type_name(entity: "Entity", opts: RecordOptions) -> str:
    return opts.record_type_name or compose_type_name(opts.prefix, entity.type_name, opts.suffix)


def _build_record_type(entity: "Entity", type_name: str, opts: RecordOptions) -> type:
    removed = set(opts.remove_fields or ())
    removed.add(entity.schema.primary_key)
    if opts.all_fields_nullable:
        required = set()
    elif opts.required_fields is not None:
        required = set(opts.required_fields)
    else:
        required = set(entity.schema.required_fields)
    fields: Dict[str, TypeField] = {}
    for spec in entity.schema.fields:
        if spec.name in removed:
            continue
        ann = scalar_annotation(spec, entity.registry)
        if spec.name in required:
            fields[spec.name] = TypeField(ann, description=spec.description)
        else:
            fields[spec.name] = TypeField(Optional[ann], strawberry.UNSET, spec.description)
    _logger.debug("berrycrud.records: built %s required=%s", type_name, sorted(required & set(fields)))
    return build_input_type(type_name, fields)


def record_input_type(entity: "Entity", opts: Optional[RecordOptions] = None) -> type:
    opts = opts or RecordOptions()
    type_name = record_type_name(entity, opts)
    return entity.registry.get_or_create(type_name, lambda: _build_record_type(entity, type_name, opts))


def record_helper_args(entity: "Entity", opts: Optional[RecordOptions] = None) -> ArgMap:
    """Return the ``record`` argument carrying a create/update input type."""
    opts = opts or RecordOptions()
    input_type = record_input_type(entity, opts)
    if opts.is_required:
        return {'record': ArgSpec(input_type)}
    return {'record': ArgSpec(Optional[input_type], None)}
