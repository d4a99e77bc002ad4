"""Decide whether a validation failure is raised or returned in the payload."""
from __future__ import annotations

import functools
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable, Dict, Optional

from ..types import ManyValidationErrorType, ValidationErrorType
from .errors import ManyValidationError, ValidationError

if TYPE_CHECKING:  # pragma: no cover
    from ..operation import ResolveParams

_logger = logging.getLogger("berrycrud")

ERROR_FIELD = 'error'

ResolveFn = Callable[["ResolveParams"], Awaitable[Any]]


def requests_error(params: "ResolveParams") -> bool:
    """True when the caller selected the payload's ``error`` field."""
    return ERROR_FIELD in (params.projection or {})


def error_to_payload_value(exc: Exception) -> Any:
    if isinstance(exc, ManyValidationError):
        return ManyValidationErrorType.from_results(exc.message, exc.results)
    if isinstance(exc, ValidationError):
        return ValidationErrorType.from_result(exc.result)
    raise TypeError(f"Cannot embed {type(exc).__name__} in a payload")


def add_error_catcher_field(
    resolve_fn: ResolveFn,
    payload_type: type,
    extra: Optional[Callable[["ResolveParams"], Dict[str, Any]]] = None,
) -> ResolveFn:
    """Wrap a mutation resolver so validation errors become payload data on request.

    When ``error`` is not in the requested fields the exception propagates and the
    outer engine reports it in the root ``errors`` list. ``extra`` contributes other
    payload fields for the error case (e.g. ``create_count``).
    """
    @functools.wraps(resolve_fn)
    async def _resolve(params: "ResolveParams") -> Any:
        try:
            return await resolve_fn(params)
        except (ValidationError, ManyValidationError) as exc:
            if not requests_error(params):
                raise
            _logger.debug("berrycrud: returning %s in %s payload", type(exc).__name__, payload_type.__name__)
            values = dict(extra(params)) if extra is not None else {}
            values[ERROR_FIELD] = error_to_payload_value(exc)
            return payload_type(**values)
    return _resolve
