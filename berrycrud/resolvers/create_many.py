from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..core.args import ArgSpec
from ..core.error_catcher import add_error_catcher_field
from ..core.errors import ArgumentError, ManyValidationError
from ..core.records import record_input_type
from ..core.utils import is_non_empty_record
from ..core.validation import has_errors, validate_many
from ..entity import Entity
from ..operation import MUTATION, Operation, ResolveParams
from ..options import RecordOptions, ResolverOptions, merged
from ..types import create_many_payload_type
from .helpers import apply_before_record_mutate, ensure_entity, ensure_opts, persist, require_session

_logger = logging.getLogger("berrycrud")


def create_many(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """Create a batch of documents; nothing is saved unless every record is valid."""
    ensure_entity(entity, 'createMany')
    opts = ensure_opts(opts)
    record_opts = merged(
        RecordOptions(prefix='CreateMany', required_fields=list(entity.schema.required_fields)),
        opts.records,
    )
    payload_type = create_many_payload_type(entity)
    input_type = record_input_type(entity, record_opts)
    args = {'records': ArgSpec(List[input_type], description="Documents to create")}

    async def resolve(params: ResolveParams) -> Any:
        records = (params.args or {}).get('records')
        if not isinstance(records, list) or not records:
            raise ArgumentError(
                f"{entity.type_name}.createMany resolver requires args.records to be a list "
                "and must contain at least one record"
            )
        for record in records:
            if not is_non_empty_record(record):
                raise ArgumentError(
                    f"{entity.type_name}.createMany resolver requires args.records to contain "
                    "non-empty records, with at least one value"
                )
        session = require_session(params)
        docs: List[Any] = []
        for record in records:
            doc = await apply_before_record_mutate(entity.new_document(record), params)
            if doc is None:
                _logger.debug("berrycrud: %s.createMany aborted by before_record_mutate", entity.type_name)
                return None
            docs.append(doc)
        results = await validate_many(docs, entity)
        if has_errors(results):
            raise ManyValidationError(results)
        await persist(session, docs, entity)
        return payload_type(
            record_ids=[entity.record_id(d) for d in docs],
            records=docs,
            create_count=len(docs),
        )

    def _error_extra(params: ResolveParams) -> dict:
        return {'create_count': len((params.args or {}).get('records') or [])}

    return Operation(
        name='createMany',
        kind=MUTATION,
        entity=entity,
        args=args,
        output_type=Optional[payload_type],
        resolve_fn=add_error_catcher_field(resolve, payload_type, extra=_error_extra),
        description="Create many documents with defaults, hooks and validation",
    )
