from __future__ import annotations

from typing import Any, Optional

from ..core.filters import filter_helper, filter_helper_args
from ..core.pagination import skip_helper, skip_helper_args
from ..core.query import QueryHandle, before_query_helper
from ..core.selection import projection_helper
from ..core.sorting import sort_helper, sort_helper_args
from ..entity import Entity
from ..operation import QUERY, Operation, ResolveParams
from ..options import FilterOptions, ResolverOptions, SortOptions, merged
from .helpers import ensure_entity, ensure_opts


def find_one(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """First document matching filter/sort/skip, or None.

    Also used by ``updateOne`` to locate the document to change; in that case the
    projection is empty so every column is loaded.
    """
    ensure_entity(entity, 'findOne')
    opts = ensure_opts(opts)
    filter_opts = merged(FilterOptions(prefix='FilterFindOne'), opts.filter)
    sort_opts = merged(SortOptions(sort_type_name=f"SortFindOne{entity.type_name}Input"), opts.sort)
    args = {
        **filter_helper_args(entity, filter_opts),
        **skip_helper_args(),
        **sort_helper_args(entity, sort_opts),
    }

    async def resolve(params: ResolveParams) -> Any:
        params.query = QueryHandle(entity).one()
        filter_helper(params, entity)
        skip_helper(params)
        sort_helper(params, entity)
        projection_helper(params, entity)
        return await before_query_helper(params)

    return Operation(
        name='findOne',
        kind=QUERY,
        entity=entity,
        args=args,
        output_type=Optional[entity.output_type],
        resolve_fn=resolve,
        description=f"Fetch the first {entity.type_name} document matching the filter",
    )
