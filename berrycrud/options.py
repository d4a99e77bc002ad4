"""Option overrides accepted by the argument builders and resolver factories.

Each builder reads only its own options object; leaving one out never changes
what the other builders produce.
"""
from __future__ import annotations

import functools
from dataclasses import dataclass, fields, replace
from typing import Any, List, Optional, Sequence


def _tracks_explicit(cls: type) -> type:
    """Record which fields were passed to the constructor or assigned afterwards.

    ``merged`` applies exactly those fields, so an override may also set a value
    equal to the dataclass default.
    """
    init = cls.__init__
    names = [f.name for f in fields(cls)]

    @functools.wraps(init)
    def __init__(self, *args, **kwargs):
        init(self, *args, **kwargs)
        object.__setattr__(self, "_explicit", set(names[:len(args)]) | set(kwargs))

    def __setattr__(self, name, value):
        object.__setattr__(self, name, value)
        explicit = self.__dict__.get("_explicit")
        if explicit is not None:
            explicit.add(name)

    cls.__init__ = __init__
    cls.__setattr__ = __setattr__
    return cls


@_tracks_explicit
@dataclass
class FilterOptions:
    filter_type_name: Optional[str] = None
    prefix: str = 'Filter'
    suffix: str = 'Input'
    is_required: bool = False
    remove_fields: Sequence[str] = ()
    # Adds the `_operators` input with per-field comparison inputs
    operators: bool = True
    description: Optional[str] = None


@_tracks_explicit
@dataclass
class SortOptions:
    sort_type_name: Optional[str] = None
    remove_fields: Sequence[str] = ()
    # Enum member name (e.g. 'ID_ASC') used when the caller passes no sort
    default: Optional[str] = None


@_tracks_explicit
@dataclass
class LimitOptions:
    default: Optional[int] = 100
    # Upper bound; larger requested limits are clamped to it
    max: Optional[int] = None


@_tracks_explicit
@dataclass
class RecordOptions:
    record_type_name: Optional[str] = None
    prefix: str = ''
    suffix: str = 'Input'
    remove_fields: Sequence[str] = ('id', '_id')
    is_required: bool = True
    # Fields kept non-null in the input type; None means the entity's static required list
    required_fields: Optional[List[str]] = None
    all_fields_nullable: bool = False


@dataclass
class ResolverOptions:
    """Per-entity overrides, passed to every resolver factory.

    ``record`` applies to createOne/updateOne, ``records`` to createMany.
    """
    filter: Optional[FilterOptions] = None
    sort: Optional[SortOptions] = None
    limit: Optional[LimitOptions] = None
    record: Optional[RecordOptions] = None
    records: Optional[RecordOptions] = None


def merged(base: Any, override: Any) -> Any:
    """Return ``base`` with every attribute set explicitly on ``override`` applied."""
    if override is None:
        return base
    if base is None:
        return override
    explicit = getattr(override, '_explicit', None)
    names = [f.name for f in fields(override) if explicit is None or f.name in explicit]
    return replace(base, **{name: getattr(override, name) for name in names})
