from __future__ import annotations

from typing import Any, Optional

from ..core.args import ArgSpec
from ..core.query import QueryHandle, before_query_helper
from ..core.selection import projection_helper
from ..entity import Entity
from ..operation import QUERY, Operation, ResolveParams
from ..options import ResolverOptions
from .helpers import ensure_entity, ensure_opts


def find_by_id(entity: Entity, opts: Optional[ResolverOptions] = None) -> Operation:
    ensure_entity(entity, 'findById')
    ensure_opts(opts)
    pk_col = entity.model.__table__.c[entity.pk_field.storage_name]

    async def resolve(params: ResolveParams) -> Any:
        pk = (params.args or {}).get('id')
        if pk is None:
            return None
        params.query = QueryHandle(entity).where(pk_col == pk).one()
        projection_helper(params, entity)
        return await before_query_helper(params)

    return Operation(
        name='findById',
        kind=QUERY,
        entity=entity,
        args={'id': ArgSpec(entity.pk_annotation, description="Primary key of the document")},
        output_type=Optional[entity.output_type],
        resolve_fn=resolve,
        description=f"Fetch one {entity.type_name} document by primary key",
    )
