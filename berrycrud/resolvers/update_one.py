from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from ..core.error_catcher import add_error_catcher_field
from ..core.errors import ArgumentError, ValidationError
from ..core.filters import filter_helper_args
from ..core.pagination import skip_helper_args
from ..core.records import record_helper_args
from ..core.sorting import sort_helper_args
from ..core.validation import validate_document
from ..entity import Entity
from ..operation import MUTATION, Operation, ResolveParams
from ..options import FilterOptions, RecordOptions, ResolverOptions, SortOptions, merged
from ..types import update_one_payload_type
from .find_one import find_one
from .helpers import apply_before_record_mutate, ensure_entity, ensure_opts, persist, require_session

_logger = logging.getLogger("berrycrud")


def update_one(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """Update one document.

    1) Retrieve one document via findOne with every column loaded.
    2) Run the pre-mutation hook.
    3) Merge the supplied record fields (if any) and validate the whole document.
    4) Save it.
    """
    ensure_entity(entity, 'updateOne')
    opts = ensure_opts(opts)
    find_one_op = find_one(entity, opts)
    record_opts = merged(RecordOptions(prefix='UpdateOne', all_fields_nullable=True), opts.record)
    filter_opts = merged(FilterOptions(prefix='FilterUpdateOne'), opts.filter)
    sort_opts = merged(SortOptions(sort_type_name=f"SortUpdateOne{entity.type_name}Input"), opts.sort)
    payload_type = update_one_payload_type(entity)
    args = {
        **record_helper_args(entity, record_opts),
        **filter_helper_args(entity, filter_opts),
        **sort_helper_args(entity, sort_opts),
        **skip_helper_args(),
    }

    async def resolve(params: ResolveParams) -> Any:
        args_in = params.args or {}
        record = args_in.get('record')
        filter_data = args_in.get('filter')
        if not isinstance(filter_data, dict) or not filter_data:
            raise ArgumentError(f"{entity.type_name}.updateOne resolver requires at least one value in args.filter")
        if record is not None and not isinstance(record, dict):
            raise ArgumentError(f"{entity.type_name}.updateOne resolver requires args.record to be an object")
        session = require_session(params)
        doc = await find_one_op.resolve(replace(params, projection={}, query=None))
        if doc is None:
            return None
        doc = await apply_before_record_mutate(doc, params)
        if doc is None:
            return None
        if record:
            entity.apply_record(doc, record)
        # Hook changes are validated and saved even when the record is empty
        result = await validate_document(doc, entity)
        if result is not None:
            # Drop the rejected changes so a later autoflush cannot write them
            session.expire(doc)
            raise ValidationError(result)
        await persist(session, [doc], entity)
        return payload_type(record_id=entity.record_id(doc), record=doc)

    return Operation(
        name='updateOne',
        kind=MUTATION,
        entity=entity,
        args=args,
        output_type=Optional[payload_type],
        resolve_fn=add_error_catcher_field(resolve, payload_type),
        description=(
            "Update one document: 1) Retrieve one document via findOne. "
            "2) Apply updates to the document. 3) Run hooks and validation. 4) And save it."
        ),
    )
