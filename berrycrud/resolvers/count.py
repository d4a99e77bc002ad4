from __future__ import annotations

import logging
from typing import Optional

from ..core.filters import filter_helper, filter_helper_args
from ..core.query import QueryHandle, before_query_helper
from ..entity import Entity
from ..operation import QUERY, Operation, ResolveParams
from ..options import FilterOptions, ResolverOptions, merged
from .helpers import ensure_entity, ensure_opts

_logger = logging.getLogger("berrycrud")


def count(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """Count documents matching an optional filter."""
    ensure_entity(entity, 'count')
    opts = ensure_opts(opts)
    filter_opts = merged(FilterOptions(filter_type_name=f"Filter{entity.type_name}Input"), opts.filter)
    args = {**filter_helper_args(entity, filter_opts)}

    async def resolve(params: ResolveParams) -> int:
        params.query = QueryHandle(entity).count()
        filter_helper(params, entity)
        return await before_query_helper(params)

    _logger.debug("berrycrud: assembled %s.count", entity.type_name)
    return Operation(
        name='count',
        kind=QUERY,
        entity=entity,
        args=args,
        output_type=int,
        resolve_fn=resolve,
        description=f"Count {entity.type_name} documents matching the filter",
    )
