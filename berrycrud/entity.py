from __future__ import annotations

from typing import Any, Optional

from .core.aliases import AliasTable
from .core.errors import ArgumentError
from .core.introspection import EntitySchema, FieldSpec
from .registry import TypeRegistry, type_registry
from .types import ensure_output_type, scalar_annotation


class Entity:
    """A model bound to its frozen schema, GraphQL type name and type registry.

    This is the unit every resolver factory receives; it plays the role of an
    object type composer for one model.
    """

    def __init__(
        self,
        model: Any,
        *,
        name: Optional[str] = None,
        registry: Optional[TypeRegistry] = None,
        description: Optional[str] = None,
    ):
        self.model = model
        self.schema = EntitySchema.from_model(model)
        self.type_name = name or model.__name__
        self.registry = registry if registry is not None else type_registry
        table = getattr(model, '__table__', None)
        self.description = description or getattr(table, 'comment', None)

    def __repr__(self) -> str:
        return f"Entity({self.type_name!r}, model={getattr(self.model, '__name__', self.model)!r})"

    @property
    def aliases(self) -> AliasTable:
        return self.schema.aliases

    @property
    def pk_field(self) -> FieldSpec:
        spec = self.schema.field(self.schema.primary_key)
        if spec is None:
            raise ValueError(f"Primary key field not found for entity: {self.type_name}")
        return spec

    @property
    def pk_annotation(self) -> Any:
        return scalar_annotation(self.pk_field, self.registry)

    @property
    def output_type(self) -> type:
        return ensure_output_type(self)

    def record_id(self, doc: Any) -> Any:
        return self.schema.record_id(doc)

    def new_document(self, record: dict) -> Any:
        """Build an in-memory (not yet persisted) instance from external field names.

        Scalar column defaults are applied up front so hooks and validators see them.
        """
        fields_map = self.schema.fields_map
        unknown = [k for k in (record or {}) if k not in fields_map]
        if unknown:
            raise ArgumentError(f"{self.type_name} has no field(s): {', '.join(sorted(unknown))}")
        doc = self.model()
        for spec in self.schema.fields:
            if spec.name in record:
                setattr(doc, spec.name, record[spec.name])
            elif spec.default is not None:
                setattr(doc, spec.name, spec.default)
        return doc

    def apply_record(self, doc: Any, record: dict) -> Any:
        """Merge partial record data onto an existing instance; omitted fields stay untouched."""
        fields_map = self.schema.fields_map
        for key, value in (record or {}).items():
            if key not in fields_map:
                raise ArgumentError(f"{self.type_name} has no field {key!r}")
            setattr(doc, key, value)
        return doc
