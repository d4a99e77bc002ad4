"""Error taxonomy for generated operations.

- ArgumentError: malformed call shape. Always raised, never returned as payload data.
- ValidationError / ManyValidationError: document constraint violations found before
  persistence. Raised or embedded in the payload depending on the requested fields.

Storage failures are the storage library's own exceptions and are not wrapped here.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class ValidatorErrorData:
    """One failed constraint on one field."""
    path: str
    message: str
    value: Any = None

    def to_dict(self) -> Dict[str, Any]:
        return {'path': self.path, 'message': self.message, 'value': self.value}


@dataclass
class ValidationResult:
    """Collected constraint failures for a single document."""
    message: str
    errors: List[ValidatorErrorData] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {'message': self.message, 'errors': [e.to_dict() for e in self.errors]}


ManyValidationResult = List[Optional[ValidationResult]]


class BerryCrudError(Exception):
    """Base class for errors raised by generated operations."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def extensions(self) -> Optional[Dict[str, Any]]:
        return None


class ArgumentError(BerryCrudError, ValueError):
    """Raised when an operation is called with a malformed argument shape."""
    pass


class ValidationError(BerryCrudError):
    """A single document failed validation."""

    def __init__(self, result: ValidationResult):
        super().__init__(result.message)
        self.result = result

    @property
    def errors(self) -> List[ValidatorErrorData]:
        return self.result.errors

    @property
    def extensions(self) -> Dict[str, Any]:
        return {'validationErrors': [e.to_dict() for e in self.result.errors]}


class ManyValidationError(BerryCrudError):
    """One or more documents of a batch failed validation.

    ``results`` is positionally aligned with the input batch; ``None`` marks a valid record.
    """

    def __init__(self, results: ManyValidationResult, message: Optional[str] = None):
        super().__init__(message or 'Nothing has been saved. Some documents contain validation errors')
        self.results = list(results)

    @property
    def errors(self) -> ManyValidationResult:
        return self.results

    @property
    def extensions(self) -> Dict[str, Any]:
        return {
            'validationErrors': [r.to_dict() if r is not None else None for r in self.results],
        }
