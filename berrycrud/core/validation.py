"""Document validation run before any write.

Every field of a document is checked (the first failing rule per field is
reported) and every document of a batch is validated, so callers always get the
complete list of problems. Messages use the familiar document-validator wording,
e.g. ``Path `name` is required.``.
"""
from __future__ import annotations

import asyncio
import logging
import uuid as _py_uuid
from datetime import date, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any, List, Optional, Sequence

from strawberry.scalars import JSON as ST_JSON

from .errors import ManyValidationResult, ValidationResult, ValidatorErrorData
from .introspection import FieldSpec
from .utils import maybe_await

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity

_logger = logging.getLogger("berrycrud")

_TYPE_LABELS = {
    int: 'Number',
    float: 'Number',
    str: 'String',
    bool: 'Boolean',
    datetime: 'Date',
    date: 'Date',
    _py_uuid.UUID: 'UUID',
}


def _plain(value: Any) -> Any:
    """JSON-friendly rendition of a value for error payloads."""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, _py_uuid.UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _type_ok(spec: FieldSpec, value: Any) -> bool:
    ptype = spec.python_type
    if spec.enum_class is not None or ptype is ST_JSON:
        return True
    if ptype is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if ptype is float:
        return isinstance(value, (int, float)) and not isinstance(value, bool)
    if isinstance(ptype, type):
        return isinstance(value, ptype)
    return True


def _enum_ok(spec: FieldSpec, value: Any) -> bool:
    enum_cls = spec.enum_class
    if enum_cls is None:
        return True
    if isinstance(value, enum_cls):
        return True
    # SQLAlchemy Enum columns also accept member names
    return isinstance(value, str) and value in enum_cls.__members__


async def _run_validator(validator: Any, value: Any, doc: Any) -> bool:
    try:
        ok = await maybe_await(validator(value, doc))
    except ValueError as e:
        _logger.debug("berrycrud.validation: validator %r rejected %r: %s", validator, value, e)
        return False
    return bool(ok)


async def validate_field(spec: FieldSpec, doc: Any) -> Optional[ValidatorErrorData]:
    """Check one field of ``doc``; return the first failure or None."""
    path = spec.name
    value = getattr(doc, spec.name, None)
    # An empty string counts as missing for required fields
    if value is None or value == '':
        if await maybe_await(spec.required.is_required(doc)):
            return ValidatorErrorData(path, f"Path `{path}` is required.", value)
        if value is None:
            return None
    if not _enum_ok(spec, value):
        return ValidatorErrorData(path, f"`{_plain(value)}` is not a valid enum value for path `{path}`.", _plain(value))
    if not _type_ok(spec, value):
        label = _TYPE_LABELS.get(spec.python_type, getattr(spec.python_type, '__name__', 'value'))
        return ValidatorErrorData(
            path,
            f"Cast to {label} failed for value \"{_plain(value)}\" (type {type(value).__name__}) at path \"{path}\"",
            _plain(value),
        )
    if spec.max_length is not None and isinstance(value, str) and len(value) > spec.max_length:
        return ValidatorErrorData(
            path,
            f"Path `{path}` (`{value}`) is longer than the maximum allowed length ({spec.max_length}).",
            value,
        )
    if spec.min_value is not None and value < spec.min_value:
        return ValidatorErrorData(
            path, f"Path `{path}` ({_plain(value)}) is less than minimum allowed value ({spec.min_value}).", _plain(value),
        )
    if spec.max_value is not None and value > spec.max_value:
        return ValidatorErrorData(
            path, f"Path `{path}` ({_plain(value)}) is more than maximum allowed value ({spec.max_value}).", _plain(value),
        )
    for validator in spec.validators:
        if not await _run_validator(validator, value, doc):
            return ValidatorErrorData(
                path, f"Validator failed for path `{path}` with value `{_plain(value)}`", _plain(value),
            )
    return None


async def validate_document(doc: Any, entity: "Entity") -> Optional[ValidationResult]:
    """Validate one in-memory document; ``None`` means valid."""
    errors: List[ValidatorErrorData] = []
    for spec in entity.schema.fields:
        err = await validate_field(spec, doc)
        if err is not None:
            errors.append(err)
    if not errors:
        return None
    message = f"{entity.type_name} validation failed: " + ', '.join(f"{e.path}: {e.message}" for e in errors)
    _logger.debug("berrycrud.validation: %s", message)
    return ValidationResult(message=message, errors=errors)


async def validate_many(docs: Sequence[Any], entity: "Entity") -> ManyValidationResult:
    """Validate a batch concurrently; the result list mirrors the input order."""
    results = await asyncio.gather(*(validate_document(doc, entity) for doc in docs))
    return list(results)


def has_errors(results: ManyValidationResult) -> bool:
    return any(r is not None for r in results)
