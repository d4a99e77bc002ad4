"""Entity schema introspection.

Reads a SQLAlchemy declarative model once and freezes what the operation builders
need: an ordered list of field descriptors, the static required-field list and the
alias table (attribute key <-> column name).

Column options understood through ``Column.info``:

- ``required``: ``True``/``False`` or a predicate ``(doc) -> bool``. A predicate is
  evaluated at validation time only and never contributes to the static list.
- ``validate``: a callable or a list of callables ``(value, doc)``.
- ``min`` / ``max``: inclusive numeric bounds.
"""
from __future__ import annotations

import logging
import uuid as _py_uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from sqlalchemy import Column, inspect as sa_inspect
from sqlalchemy import Enum as SAEnumType
from sqlalchemy import Uuid as SA_Uuid
from sqlalchemy.sql.sqltypes import JSON as SA_JSON
from sqlalchemy.sql.sqltypes import Boolean, Date, DateTime, Float, Integer, Numeric, String
from sqlalchemy.types import TypeDecorator
from strawberry.scalars import JSON as ST_JSON

from .aliases import AliasTable

_logger = logging.getLogger("berrycrud")


@dataclass(frozen=True)
class StaticRequired:
    value: bool

    def is_required(self, doc: Any) -> bool:
        return self.value


@dataclass(frozen=True)
class ComputedRequired:
    """Requiredness decided per document by ``predicate(doc)``."""
    predicate: Callable[[Any], Any]

    def is_required(self, doc: Any) -> Any:
        return self.predicate(doc)


Required = Union[StaticRequired, ComputedRequired]


@dataclass(frozen=True)
class FieldSpec:
    name: str
    storage_name: str
    python_type: Any
    required: Required
    nullable: bool = True
    has_default: bool = False
    default: Any = None
    primary_key: bool = False
    max_length: Optional[int] = None
    enum_class: Optional[type] = None
    description: Optional[str] = None
    validators: Tuple[Callable[..., Any], ...] = ()
    min_value: Any = None
    max_value: Any = None

    @property
    def is_statically_required(self) -> bool:
        return isinstance(self.required, StaticRequired) and self.required.value

    @property
    def sortable(self) -> bool:
        return self.python_type is not ST_JSON


def sa_python_type(sqlatype: Any) -> Any:
    """Map a SQLAlchemy column type to a Python (annotation) type.

    Defaults to str for unknown types (safe GraphQL scalar mapping).
    """
    if isinstance(sqlatype, TypeDecorator):
        return sa_python_type(sqlatype.impl)
    # Enum is a String subclass, check it first
    if isinstance(sqlatype, SAEnumType):
        return sqlatype.enum_class or str
    if isinstance(sqlatype, Boolean):
        return bool
    if isinstance(sqlatype, Integer):
        return int
    if isinstance(sqlatype, (Float, Numeric)):
        return float
    if isinstance(sqlatype, DateTime):
        return datetime
    if isinstance(sqlatype, Date):
        return date
    if isinstance(sqlatype, SA_Uuid):
        return _py_uuid.UUID
    if isinstance(sqlatype, SA_JSON):
        return ST_JSON
    if isinstance(sqlatype, String):
        return str
    return str


def _required_from(col: Column) -> Required:
    explicit = (col.info or {}).get('required')
    if callable(explicit):
        return ComputedRequired(explicit)
    if explicit is not None:
        return StaticRequired(bool(explicit))
    has_default = col.default is not None or col.server_default is not None
    return StaticRequired(not col.nullable and not has_default and not col.primary_key)


def _validators_from(col: Column) -> Tuple[Callable[..., Any], ...]:
    raw = (col.info or {}).get('validate')
    if raw is None:
        return ()
    if isinstance(raw, (list, tuple)):
        return tuple(v for v in raw if callable(v))
    if callable(raw):
        return (raw,)
    raise TypeError(f"Column {col.name!r}: info['validate'] must be callable or a list of callables")


def field_spec_for(key: str, col: Column) -> FieldSpec:
    sqlatype = col.type
    enum_class = getattr(sqlatype, 'enum_class', None) if isinstance(sqlatype, SAEnumType) else None
    max_length = getattr(sqlatype, 'length', None) if isinstance(sqlatype, String) and enum_class is None else None
    info = col.info or {}
    # Only scalar defaults are known before flush; callables and server defaults are not
    default = col.default.arg if col.default is not None and getattr(col.default, 'is_scalar', False) else None
    return FieldSpec(
        name=key,
        storage_name=col.name,
        python_type=sa_python_type(sqlatype),
        required=_required_from(col),
        nullable=bool(col.nullable),
        has_default=col.default is not None or col.server_default is not None,
        default=default,
        primary_key=bool(col.primary_key),
        max_length=max_length,
        enum_class=enum_class,
        description=col.comment,
        validators=_validators_from(col),
        min_value=info.get('min'),
        max_value=info.get('max'),
    )


@dataclass(frozen=True)
class EntitySchema:
    """Frozen field tree of one model."""
    model: Any
    fields: Tuple[FieldSpec, ...]
    primary_key: str
    aliases: AliasTable

    @classmethod
    def from_model(cls, model: Any) -> "EntitySchema":
        mapper = sa_inspect(model, raiseerr=False)
        if mapper is None or not hasattr(mapper, 'column_attrs'):
            raise TypeError(f"{model!r} is not a mapped SQLAlchemy model")
        table = mapper.local_table
        specs: List[FieldSpec] = []
        pk_name: Optional[str] = None
        for prop in mapper.column_attrs:
            col = prop.columns[0]
            # column_property expressions are read-only, skip them
            if not isinstance(col, Column) or col.table is not table:
                continue
            spec = field_spec_for(prop.key, col)
            specs.append(spec)
            if spec.primary_key and pk_name is None:
                pk_name = spec.name
        if pk_name is None:
            raise ValueError(f"Primary key column not found for model: {getattr(model, '__name__', model)}")
        aliases = AliasTable.from_pairs((s.name, s.storage_name) for s in specs)
        _logger.debug("berrycrud: introspected %s fields=%s aliases=%s", getattr(model, '__name__', model), [s.name for s in specs], aliases.as_dict())
        return cls(model=model, fields=tuple(specs), primary_key=pk_name, aliases=aliases)

    def field(self, name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.name == name:
                return spec
        return None

    def field_by_storage(self, storage_name: str) -> Optional[FieldSpec]:
        for spec in self.fields:
            if spec.storage_name == storage_name:
                return spec
        return None

    @property
    def field_names(self) -> List[str]:
        return [s.name for s in self.fields]

    @property
    def fields_map(self) -> Dict[str, FieldSpec]:
        return {s.name: s for s in self.fields}

    @property
    def required_fields(self) -> List[str]:
        """Names of fields whose required flag is a static truthy value, in declaration order."""
        return [s.name for s in self.fields if s.is_statically_required]

    def record_id(self, doc: Any) -> Any:
        if doc is None:
            return None
        return getattr(doc, self.primary_key, None)
