from __future__ import annotations

import logging
from typing import Any, List, Optional

from ..core.args import ArgSpec
from ..core.errors import ArgumentError
from ..core.pagination import limit_helper, limit_helper_args
from ..core.query import QueryHandle, before_query_helper
from ..core.selection import projection_helper
from ..core.sorting import sort_helper, sort_helper_args
from ..entity import Entity
from ..operation import QUERY, Operation, ResolveParams
from ..options import LimitOptions, ResolverOptions, SortOptions, merged
from .helpers import ensure_entity, ensure_opts

_logger = logging.getLogger("berrycrud")


def find_by_ids(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    """Fetch documents by a list of primary keys; ids without a match are skipped."""
    ensure_entity(entity, 'findByIds')
    opts = ensure_opts(opts)
    limit_opts = merged(LimitOptions(), opts.limit)
    sort_opts = merged(SortOptions(sort_type_name=f"SortFindByIds{entity.type_name}Input"), opts.sort)
    args = {
        'ids': ArgSpec(List[entity.pk_annotation], description="Primary keys of the documents to fetch"),
        **limit_helper_args(limit_opts),
        **sort_helper_args(entity, sort_opts),
    }
    pk_col = entity.model.__table__.c[entity.pk_field.storage_name]

    async def resolve(params: ResolveParams) -> List[Any]:
        ids = (params.args or {}).get('ids')
        if ids is not None and not isinstance(ids, (list, tuple)):
            raise ArgumentError(f"{entity.type_name}.findByIds resolver requires args.ids to be a list")
        ids = [i for i in (ids or []) if i is not None]
        if not ids:
            return []
        params.query = QueryHandle(entity).where(pk_col.in_(ids))
        projection_helper(params, entity)
        limit_helper(params, limit_opts)
        sort_helper(params, entity)
        return await before_query_helper(params)

    return Operation(
        name='findByIds',
        kind=QUERY,
        entity=entity,
        args=args,
        output_type=List[entity.output_type],
        resolve_fn=resolve,
        description=f"Fetch {entity.type_name} documents by primary keys",
    )
