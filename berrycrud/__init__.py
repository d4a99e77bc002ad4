"""berrycrud public API and lightweight lazy exports.

Generates typed CRUD operations (count, findById, findByIds, findOne, findMany,
createOne, createMany, updateOne) for SQLAlchemy models and publishes them as a
Strawberry schema.

Submodules are resolved on first attribute access so that importing
``berrycrud.core.errors`` from application models stays cheap.
"""
from __future__ import annotations

from typing import Any

_LAZY = {
    'CrudSchema': 'schema',
    'Entity': 'entity',
    'Operation': 'operation',
    'ResolveParams': 'operation',
    'TypeRegistry': 'registry',
    'type_registry': 'registry',
    'ResolverOptions': 'options',
    'FilterOptions': 'options',
    'SortOptions': 'options',
    'LimitOptions': 'options',
    'RecordOptions': 'options',
    'generate_operations': 'resolvers',
    'ALL_RESOLVERS': 'resolvers',
    'BerryCrudError': 'core.errors',
    'ArgumentError': 'core.errors',
    'ValidationError': 'core.errors',
    'ManyValidationError': 'core.errors',
    'validate_document': 'core.validation',
    'validate_many': 'core.validation',
}


def __getattr__(name: str) -> Any:  # PEP 562 lazy exports
    import importlib as _importlib
    if name in {'resolvers', 'core', 'types'}:
        return _importlib.import_module(__name__ + '.' + name)
    mod = _LAZY.get(name)
    if mod is None:
        raise AttributeError(name)
    return getattr(_importlib.import_module(__name__ + '.' + mod), name)


__all__ = list(_LAZY)
