from __future__ import annotations

from typing import Any, List, Optional

from ..core.filters import filter_helper, filter_helper_args
from ..core.pagination import limit_helper, limit_helper_args, skip_helper, skip_helper_args
from ..core.query import QueryHandle, before_query_helper
from ..core.selection import projection_helper
from ..core.sorting import sort_helper, sort_helper_args
from ..entity import Entity
from ..operation import QUERY, Operation, ResolveParams
from ..options import FilterOptions, LimitOptions, ResolverOptions, SortOptions, merged
from .helpers import ensure_entity, ensure_opts


def find_many(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    ensure_entity(entity, 'findMany')
    opts = ensure_opts(opts)
    filter_opts = merged(FilterOptions(prefix='FilterFindMany'), opts.filter)
    sort_opts = merged(SortOptions(sort_type_name=f"SortFindMany{entity.type_name}Input"), opts.sort)
    limit_opts = merged(LimitOptions(), opts.limit)
    args = {
        **filter_helper_args(entity, filter_opts),
        **skip_helper_args(),
        **limit_helper_args(limit_opts),
        **sort_helper_args(entity, sort_opts),
    }

    async def resolve(params: ResolveParams) -> List[Any]:
        params.query = QueryHandle(entity)
        filter_helper(params, entity)
        skip_helper(params)
        limit_helper(params, limit_opts)
        sort_helper(params, entity)
        projection_helper(params, entity)
        return await before_query_helper(params)

    return Operation(
        name='findMany',
        kind=QUERY,
        entity=entity,
        args=args,
        output_type=List[entity.output_type],
        resolve_fn=resolve,
        description=f"List {entity.type_name} documents matching the filter",
    )
