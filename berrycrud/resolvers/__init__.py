"""Resolver factories: one function per operation, each ``(entity, opts) -> Operation``."""
from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from ..entity import Entity
from ..operation import Operation
from ..options import ResolverOptions
from .count import count
from .create_many import create_many
from .create_one import create_one
from .find_by_id import find_by_id
from .find_by_ids import find_by_ids
from .find_many import find_many
from .find_one import find_one
from .update_one import update_one

ResolverFactory = Callable[[Entity, Optional[ResolverOptions]], Operation]

ALL_RESOLVERS: Dict[str, ResolverFactory] = {
    'count': count,
    'findById': find_by_id,
    'findByIds': find_by_ids,
    'findOne': find_one,
    'findMany': find_many,
    'createOne': create_one,
    'createMany': create_many,
    'updateOne': update_one,
}


def get_resolver_names() -> list:
    return list(ALL_RESOLVERS)


def generate_operations(
    entity: Entity,
    opts: Optional[ResolverOptions] = None,
    only: Optional[Iterable[str]] = None,
) -> Dict[str, Operation]:
    """Assemble the named operations (all by default) for one entity, keyed by operation name."""
    names = list(only) if only is not None else list(ALL_RESOLVERS)
    unknown = [n for n in names if n not in ALL_RESOLVERS]
    if unknown:
        raise ValueError(f"Unknown resolver(s): {', '.join(unknown)}")
    return {name: ALL_RESOLVERS[name](entity, opts) for name in names}


__all__ = [
    'ALL_RESOLVERS',
    'generate_operations',
    'get_resolver_names',
    'count',
    'create_many',
    'create_one',
    'find_by_id',
    'find_by_ids',
    'find_many',
    'find_one',
    'update_one',
]
