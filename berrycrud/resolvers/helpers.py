from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError

from ..core.utils import maybe_await
from ..entity import Entity
from ..operation import ResolveParams
from ..options import ResolverOptions

_logger = logging.getLogger("berrycrud")


def ensure_entity(entity: Any, resolver_name: str) -> Entity:
    if not isinstance(entity, Entity):
        raise TypeError(f"First arg for resolver {resolver_name}() should be an instance of Entity, got {type(entity).__name__}")
    return entity


def ensure_opts(opts: Optional[ResolverOptions]) -> ResolverOptions:
    if opts is None:
        return ResolverOptions()
    if not isinstance(opts, ResolverOptions):
        raise TypeError(f"Resolver options should be a ResolverOptions instance, got {type(opts).__name__}")
    return opts


def require_session(params: ResolveParams) -> Any:
    if params.session is None:
        raise ValueError("No db_session in context")
    return params.session


async def apply_before_record_mutate(doc: Any, params: ResolveParams) -> Any:
    """Run the pre-mutation hook; its return value replaces the document."""
    hook = params.before_record_mutate
    if hook is None:
        return doc
    return await maybe_await(hook(doc, params))


async def persist(session: Any, docs: Iterable[Any], entity: Entity) -> None:
    """Write ``docs`` in one transaction; roll back and re-raise on storage failure."""
    docs = list(docs)
    try:
        session.add_all(docs)
        await session.flush()
        await session.commit()
    except SQLAlchemyError:
        _logger.exception("berrycrud: failed to persist %s x%d", entity.type_name, len(docs))
        await session.rollback()
        raise
    # Committed instances are expired; reload them while the async context is available
    if getattr(getattr(session, 'sync_session', session), 'expire_on_commit', False):
        for doc in docs:
            await session.refresh(doc)
    _logger.info("berrycrud: persisted %d %s record(s)", len(docs), entity.type_name)
