"""Strawberry type synthesis.

Builds the per-entity output type, mutation payload types and the shared error
types. Dynamic classes are assembled as plain classes with ``__annotations__`` and
then decorated with ``strawberry.type`` / ``strawberry.input``; all of them are
created through a ``TypeRegistry`` so repeated requests return the same class.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import strawberry
from strawberry.scalars import JSON

from .core.errors import ValidationResult, ManyValidationResult
from .core.introspection import FieldSpec
from .registry import TypeRegistry

if TYPE_CHECKING:  # pragma: no cover
    from .entity import Entity

_logger = logging.getLogger("berrycrud")

_MISSING = object()


@dataclass(frozen=True)
class TypeField:
    """One field of a synthesized type: annotation plus optional default and GraphQL naming."""
    annotation: Any
    default: Any = _MISSING
    description: Optional[str] = None
    graphql_name: Optional[str] = None


def build_plain_class(name: str, fields: Dict[str, TypeField], doc: Optional[str]) -> type:
    anns: Dict[str, Any] = {}
    ns: Dict[str, Any] = {'__doc__': doc, '__module__': __name__}
    for fname, tf in fields.items():
        anns[fname] = tf.annotation
        if tf.description is not None or tf.graphql_name is not None:
            if tf.default is _MISSING:
                ns[fname] = strawberry.field(description=tf.description, name=tf.graphql_name)
            else:
                ns[fname] = strawberry.field(default=tf.default, description=tf.description, name=tf.graphql_name)
        elif tf.default is not _MISSING:
            ns[fname] = tf.default
    ns['__annotations__'] = anns
    return type(name, (), ns)


def build_object_type(name: str, fields: Dict[str, TypeField], *, description: Optional[str] = None) -> type:
    return strawberry.type(build_plain_class(name, fields, description), name=name, description=description)


def build_input_type(name: str, fields: Dict[str, TypeField], *, description: Optional[str] = None) -> type:
    return strawberry.input(build_plain_class(name, fields, description), name=name, description=description)


# --- Shared error types ----------------------------------------------------

@strawberry.interface(name="ErrorInterface", description="Common fields of errors returned in mutation payloads")
class ErrorInterface:
    message: str = strawberry.field(description="Generic error message")


@strawberry.type(name="ValidatorError", description="Validation failure of one field")
class ValidatorErrorType:
    message: str = strawberry.field(description="Validation error message")
    path: str = strawberry.field(description="Source of the validation error from the model path")
    value: Optional[JSON] = strawberry.field(default=None, description="Field value which occurs the validation error")


@strawberry.type(name="ValidationError", description="Document validation failure")
class ValidationErrorType(ErrorInterface):
    errors: List[ValidatorErrorType] = strawberry.field(default_factory=list, description="List of validator errors")

    @classmethod
    def from_result(cls, result: ValidationResult) -> "ValidationErrorType":
        return cls(
            message=result.message,
            errors=[ValidatorErrorType(message=e.message, path=e.path, value=e.value) for e in result.errors],
        )


@strawberry.type(name="ManyValidationError", description="Validation failures of a batch, one slot per input record")
class ManyValidationErrorType(ErrorInterface):
    errors: List[Optional[ValidationErrorType]] = strawberry.field(
        default_factory=list,
        description="Per-record validation errors, null for valid records, in input order",
    )

    @classmethod
    def from_results(cls, message: str, results: ManyValidationResult) -> "ManyValidationErrorType":
        return cls(
            message=message,
            errors=[ValidationErrorType.from_result(r) if r is not None else None for r in results],
        )


# --- Entity types ----------------------------------------------------------

def _enum_definition(enum_cls: type) -> Any:
    return getattr(enum_cls, '__strawberry_definition__', None) or getattr(enum_cls, '_enum_definition', None)


def enum_graphql_name(enum_cls: type) -> str:
    definition = _enum_definition(enum_cls)
    return getattr(definition, 'name', None) or enum_cls.__name__


def scalar_annotation(spec: FieldSpec, registry: TypeRegistry) -> Any:
    """Return the Strawberry-compatible annotation for a field (enums are registered once)."""
    enum_cls = spec.enum_class
    if enum_cls is not None:
        name = enum_graphql_name(enum_cls)
        registered = registry.get_or_create(
            name, lambda: enum_cls if _enum_definition(enum_cls) is not None else strawberry.enum(enum_cls)
        )
        if registered is not enum_cls:
            raise ValueError(
                f"Enum name {name!r} is already registered for {registered!r}; "
                f"field {spec.name!r} uses a different class {enum_cls!r}"
            )
        return registered
    return spec.python_type


def ensure_output_type(entity: "Entity") -> type:
    """Create (or fetch) the GraphQL object type exposing an entity's columns."""
    def _build() -> type:
        fields: Dict[str, TypeField] = {}
        for spec in entity.schema.fields:
            ann = scalar_annotation(spec, entity.registry)
            if spec.nullable and not spec.primary_key:
                ann = Optional[ann]
            fields[spec.name] = TypeField(ann, description=spec.description)
        _logger.debug("berrycrud.types: output type %s fields=%s", entity.type_name, list(fields))
        return build_object_type(entity.type_name, fields, description=entity.description)
    return entity.registry.get_or_create(entity.type_name, _build)


_ERROR_FIELD_DESC = (
    "Error that may occur during operation. If you request this field in GraphQL query, "
    "you will receive typed error in payload; otherwise error will be provided in root "
    "`errors` field of GraphQL response."
)


def ensure_payload_type(entity: "Entity", name: str, fields: Dict[str, TypeField], description: Optional[str] = None) -> type:
    return entity.registry.get_or_create(name, lambda: build_object_type(name, fields, description=description))


def create_one_payload_type(entity: "Entity") -> type:
    pk_ann = entity.pk_annotation
    return ensure_payload_type(entity, f"CreateOne{entity.type_name}Payload", {
        'record_id': TypeField(Optional[pk_ann], None, "Created document ID"),
        'record': TypeField(Optional[entity.output_type], None, "Created document"),
        'error': TypeField(Optional[ValidationErrorType], None, _ERROR_FIELD_DESC),
    })


def create_many_payload_type(entity: "Entity") -> type:
    pk_ann = entity.pk_annotation
    return ensure_payload_type(entity, f"CreateMany{entity.type_name}Payload", {
        'record_ids': TypeField(Optional[List[pk_ann]], None, "Created document IDs"),
        'records': TypeField(Optional[List[entity.output_type]], None, "Created documents"),
        'create_count': TypeField(int, 0, "Count of all documents created"),
        'error': TypeField(Optional[ManyValidationErrorType], None, _ERROR_FIELD_DESC),
    })


def update_one_payload_type(entity: "Entity") -> type:
    pk_ann = entity.pk_annotation
    return ensure_payload_type(entity, f"UpdateOne{entity.type_name}Payload", {
        'record_id': TypeField(Optional[pk_ann], None, "Updated document ID"),
        'record': TypeField(Optional[entity.output_type], None, "Updated document"),
        'error': TypeField(Optional[ValidationErrorType], None, _ERROR_FIELD_DESC),
    })


__all__ = [
    'TypeField',
    'build_object_type',
    'build_input_type',
    'ErrorInterface',
    'ValidatorErrorType',
    'ValidationErrorType',
    'ManyValidationErrorType',
    'enum_graphql_name',
    'scalar_annotation',
    'ensure_output_type',
    'create_one_payload_type',
    'create_many_payload_type',
    'update_one_payload_type',
]
