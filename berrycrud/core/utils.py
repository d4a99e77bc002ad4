from __future__ import annotations

import inspect
from dataclasses import fields as _dc_fields, is_dataclass
from enum import Enum
from typing import Any, Dict

from strawberry import UNSET


def get_db_session(info_or_ctx: Any) -> Any | None:
    """Best-effort extraction of an AsyncSession-like object from context.

    Accepts either a Strawberry ``Info`` or a plain context object/dict. Tries
    common keys/attributes in order: ``db_session``, ``db``, ``session``,
    ``async_session``.

    Returns:
        The session object if found; otherwise ``None``.
    """
    if info_or_ctx is None:
        return None
    ctx = getattr(info_or_ctx, 'context', info_or_ctx)
    if ctx is None:
        return None
    candidates = ('db_session', 'db', 'session', 'async_session')
    if isinstance(ctx, dict):
        for k in candidates:
            v = ctx.get(k)
            if v is not None:
                return v
        return None
    for k in candidates:
        v = getattr(ctx, k, None)
        if v is not None:
            return v
    return None


def context_get(info_or_ctx: Any, key: str) -> Any | None:
    """Read ``key`` from a dict-like or attribute-style GraphQL context."""
    ctx = getattr(info_or_ctx, 'context', info_or_ctx)
    if ctx is None:
        return None
    if isinstance(ctx, dict):
        return ctx.get(key)
    return getattr(ctx, key, None)


def input_to_dict(obj: Any) -> Any:
    """Convert a Strawberry input instance (or nested list/dict) to plain Python dicts/lists.

    UNSET (omitted) fields are dropped; an explicit ``None`` is kept. Enum members
    are kept as-is since SQLAlchemy ``Enum`` columns bind members directly.
    """
    if obj is None or obj is UNSET:
        return None
    if isinstance(obj, (Enum, str, int, float, bool)):
        return obj
    if isinstance(obj, (list, tuple)):
        return [input_to_dict(x) for x in obj]
    if isinstance(obj, dict):
        return {k: input_to_dict(v) for k, v in obj.items() if v is not UNSET}
    if is_dataclass(obj) and not isinstance(obj, type):
        out: Dict[str, Any] = {}
        for f in _dc_fields(obj):
            v = getattr(obj, f.name, UNSET)
            if v is UNSET:
                continue
            out[f.name] = input_to_dict(v)
        return out
    return obj


async def maybe_await(value: Any) -> Any:
    if inspect.isawaitable(value):
        return await value
    return value


def is_non_empty_record(record: Any) -> bool:
    """True for a mapping with at least one key; values are not inspected."""
    return isinstance(record, dict) and len(record) > 0
