"""Publish generated operations as a Strawberry schema.

``CrudSchema`` keeps one ``Entity`` and its operation set per registered model and
assembles root ``Query``/``Mutation`` types from them. Root field names are
``<type>_<operation>`` in snake_case (``user_count``, ``user_create_one``).
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Iterable, List, Optional

import strawberry
from strawberry.schema.config import StrawberryConfig

from .entity import Entity
from .naming import camel_to_snake
from .operation import Operation
from .options import ResolverOptions
from .registry import TypeRegistry, type_registry
from .resolvers import generate_operations

_logger = logging.getLogger("berrycrud")


def default_field_name(entity: Entity, operation: Operation) -> str:
    return f"{camel_to_snake(entity.type_name)}_{camel_to_snake(operation.name)}"


class CrudSchema:
    """Collects entities and builds a ``strawberry.Schema`` exposing their operations."""

    def __init__(
        self,
        registry: Optional[TypeRegistry] = None,
        field_name: Callable[[Entity, Operation], str] = default_field_name,
    ):
        self.registry = registry if registry is not None else type_registry
        self.field_name = field_name
        self.entities: Dict[str, Entity] = {}
        self._operations: Dict[str, Dict[str, Operation]] = {}

    def register(
        self,
        model: Any,
        *,
        name: Optional[str] = None,
        opts: Optional[ResolverOptions] = None,
        only: Optional[Iterable[str]] = None,
        description: Optional[str] = None,
    ) -> Entity:
        """Bind ``model`` to a GraphQL type name and generate its operations."""
        entity = Entity(model, name=name, registry=self.registry, description=description)
        if entity.type_name in self.entities:
            raise ValueError(f"Entity {entity.type_name!r} is already registered")
        self.entities[entity.type_name] = entity
        self._operations[entity.type_name] = generate_operations(entity, opts, only)
        _logger.debug("berrycrud: registered %s operations=%s", entity.type_name, list(self._operations[entity.type_name]))
        return entity

    def operations(self, type_name: str) -> Dict[str, Operation]:
        try:
            return dict(self._operations[type_name])
        except KeyError:
            raise KeyError(f"Entity {type_name!r} is not registered") from None

    def operation(self, type_name: str, op_name: str) -> Operation:
        ops = self.operations(type_name)
        if op_name not in ops:
            raise KeyError(f"{type_name} has no operation {op_name!r}")
        return ops[op_name]

    def set_operation(self, type_name: str, operation: Operation) -> None:
        """Replace (or add) one operation, e.g. after ``wrap_resolve``/``with_hooks``."""
        if type_name not in self._operations:
            raise KeyError(f"Entity {type_name!r} is not registered")
        self._operations[type_name][operation.name] = operation

    def root_fields(self) -> Dict[str, List[Any]]:
        """``{'query': [(field_name, op), ...], 'mutation': [...]}`` in registration order."""
        out: Dict[str, List[Any]] = {'query': [], 'mutation': []}
        for type_name, ops in self._operations.items():
            entity = self.entities[type_name]
            for op in ops.values():
                out['mutation' if op.is_mutation else 'query'].append((self.field_name(entity, op), op))
        return out

    def to_strawberry(self, *, strawberry_config: Optional[StrawberryConfig] = None) -> strawberry.Schema:
        roots = self.root_fields()
        if not roots['query']:
            raise ValueError("At least one query operation is required to build a schema")
        QueryPlain = type('Query', (), {'__doc__': 'Auto-generated CRUD root query.', '__module__': __name__, '__annotations__': {}})
        for fname, op in roots['query']:
            setattr(QueryPlain, fname, op.to_strawberry_field())
        Query = strawberry.type(QueryPlain)
        Mutation = None
        if roots['mutation']:
            MPlain = type('Mutation', (), {'__doc__': 'Auto-generated CRUD root mutation.', '__module__': __name__, '__annotations__': {}})
            for fname, op in roots['mutation']:
                setattr(MPlain, fname, op.to_strawberry_field())
            Mutation = strawberry.type(MPlain)
        # Field names stay snake_case unless the caller asks otherwise
        if strawberry_config is None:
            strawberry_config = StrawberryConfig(auto_camel_case=False)
        return strawberry.Schema(query=Query, mutation=Mutation, config=strawberry_config)
