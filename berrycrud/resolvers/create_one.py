from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.error_catcher import add_error_catcher_field
from ..core.errors import ArgumentError, ValidationError
from ..core.records import record_helper_args
from ..core.utils import is_non_empty_record
from ..core.validation import validate_document
from ..entity import Entity
from ..operation import MUTATION, Operation, ResolveParams
from ..options import RecordOptions, ResolverOptions, merged
from ..types import create_one_payload_type
from .helpers import apply_before_record_mutate, ensure_entity, ensure_opts, persist, require_session

_logger = logging.getLogger("berrycrud")


def create_one(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """Create one document: apply defaults, run the pre-mutation hook, validate, save."""
    ensure_entity(entity, 'createOne')
    opts = ensure_opts(opts)
    record_opts = merged(RecordOptions(record_type_name=f"CreateOne{entity.type_name}Input"), opts.record)
    payload_type = create_one_payload_type(entity)
    args = {**record_helper_args(entity, record_opts)}

    async def resolve(params: ResolveParams) -> Any:
        record = (params.args or {}).get('record')
        if not is_non_empty_record(record):
            raise ArgumentError(f"{entity.type_name}.createOne resolver requires at least one value in args.record")
        session = require_session(params)
        doc = entity.new_document(record)
        doc = await apply_before_record_mutate(doc, params)
        if doc is None:
            return None
        result = await validate_document(doc, entity)
        if result is not None:
            raise ValidationError(result)
        await persist(session, [doc], entity)
        return payload_type(record_id=entity.record_id(doc), record=doc)

    return Operation(
        name='createOne',
        kind=MUTATION,
        entity=entity,
        args=args,
        output_type=Optional[payload_type],
        resolve_fn=add_error_catcher_field(resolve, payload_type),
        description="Create one document with defaults, hooks and validation",
    )
