"""
Comparison input types used by the ``_operators`` part of generated filters.

One input type per scalar kind; enum columns get a per-enum comparison input
synthesized in ``berrycrud.core.filters``.
"""

from typing import List, Optional
import strawberry
from datetime import date, datetime
from uuid import UUID


@strawberry.input
class StringComparisonInput:
    """Input type for string field comparison operations."""
    eq: Optional[str] = None
    ne: Optional[str] = None
    gt: Optional[str] = None
    gte: Optional[str] = None
    lt: Optional[str] = None
    lte: Optional[str] = None
    like: Optional[str] = None
    ilike: Optional[str] = None
    in_: Optional[List[str]] = strawberry.field(name="in", default=None)
    nin: Optional[List[str]] = None
    exists: Optional[bool] = None


@strawberry.input
class IntComparisonInput:
    """Input type for integer field comparison operations."""
    eq: Optional[int] = None
    ne: Optional[int] = None
    gt: Optional[int] = None
    gte: Optional[int] = None
    lt: Optional[int] = None
    lte: Optional[int] = None
    in_: Optional[List[int]] = strawberry.field(name="in", default=None)
    nin: Optional[List[int]] = None
    exists: Optional[bool] = None


@strawberry.input
class FloatComparisonInput:
    """Input type for float field comparison operations."""
    eq: Optional[float] = None
    ne: Optional[float] = None
    gt: Optional[float] = None
    gte: Optional[float] = None
    lt: Optional[float] = None
    lte: Optional[float] = None
    in_: Optional[List[float]] = strawberry.field(name="in", default=None)
    nin: Optional[List[float]] = None
    exists: Optional[bool] = None


@strawberry.input
class DateTimeComparisonInput:
    """Input type for datetime field comparison operations."""
    eq: Optional[datetime] = None
    ne: Optional[datetime] = None
    gt: Optional[datetime] = None
    gte: Optional[datetime] = None
    lt: Optional[datetime] = None
    lte: Optional[datetime] = None
    in_: Optional[List[datetime]] = strawberry.field(name="in", default=None)
    nin: Optional[List[datetime]] = None
    exists: Optional[bool] = None


@strawberry.input
class DateComparisonInput:
    """Input type for date field comparison operations."""
    eq: Optional[date] = None
    ne: Optional[date] = None
    gt: Optional[date] = None
    gte: Optional[date] = None
    lt: Optional[date] = None
    lte: Optional[date] = None
    in_: Optional[List[date]] = strawberry.field(name="in", default=None)
    nin: Optional[List[date]] = None
    exists: Optional[bool] = None


@strawberry.input
class UUIDComparisonInput:
    """Input type for UUID field comparison operations."""
    eq: Optional[UUID] = None
    ne: Optional[UUID] = None
    in_: Optional[List[UUID]] = strawberry.field(name="in", default=None)
    nin: Optional[List[UUID]] = None
    exists: Optional[bool] = None


@strawberry.input
class BoolComparisonInput:
    """Input type for boolean field comparison operations."""
    eq: Optional[bool] = None
    ne: Optional[bool] = None
    exists: Optional[bool] = None


COMPARISON_INPUTS = {
    str: StringComparisonInput,
    int: IntComparisonInput,
    float: FloatComparisonInput,
    datetime: DateTimeComparisonInput,
    date: DateComparisonInput,
    UUID: UUIDComparisonInput,
    bool: BoolComparisonInput,
}


__all__ = [
    'StringComparisonInput',
    'IntComparisonInput',
    'FloatComparisonInput',
    'DateTimeComparisonInput',
    'DateComparisonInput',
    'UUIDComparisonInput',
    'BoolComparisonInput',
    'COMPARISON_INPUTS',
]
