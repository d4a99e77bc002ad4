"""Storage-facing query handle and the pre-execution hook runner."""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable, List, Optional

from sqlalchemy import func, inspect as sa_inspect, select
from sqlalchemy.orm import load_only
from sqlalchemy.sql import Select

from .errors import ArgumentError
from .utils import maybe_await

if TYPE_CHECKING:  # pragma: no cover
    from ..entity import Entity
    from ..operation import ResolveParams

_logger = logging.getLogger("berrycrud")

MODE_MANY = 'many'
MODE_ONE = 'one'
MODE_COUNT = 'count'


class QueryHandle:
    """Mutable wrapper around a SQLAlchemy ``Select`` on one entity.

    Helpers attach filter/sort/limit/skip/field selection in storage (column) names;
    ``execute`` runs it once and returns raw ORM instances or a count.
    """

    def __init__(self, entity: "Entity", statement: Optional[Select] = None, mode: str = MODE_MANY):
        self.entity = entity
        self.statement: Select = statement if statement is not None else select(entity.model)
        self.mode = mode
        self.selected_fields: Optional[List[str]] = None

    def __repr__(self) -> str:
        return f"QueryHandle({self.entity.type_name!r}, mode={self.mode!r})"

    def where(self, *criteria: Any) -> "QueryHandle":
        self.statement = self.statement.where(*criteria)
        return self

    def order_by(self, *clauses: Any) -> "QueryHandle":
        self.statement = self.statement.order_by(*clauses)
        return self

    def limit(self, n: int) -> "QueryHandle":
        self.statement = self.statement.limit(n)
        return self

    def offset(self, n: int) -> "QueryHandle":
        self.statement = self.statement.offset(n)
        return self

    def select_fields(self, storage_names: Iterable[str]) -> "QueryHandle":
        """Load only the given columns (the primary key is always loaded)."""
        model = self.entity.model
        table = model.__table__
        mapper = sa_inspect(model)
        attrs = []
        names = list(storage_names)
        for name in names:
            col = table.c.get(name)
            if col is None:
                raise ArgumentError(f"Unknown field in projection: {self.entity.aliases.to_external(name)}")
            attrs.append(getattr(model, mapper.get_property_by_column(col).key))
        if attrs:
            self.statement = self.statement.options(load_only(*attrs))
            self.selected_fields = names
        return self

    def count(self) -> "QueryHandle":
        self.mode = MODE_COUNT
        return self

    def one(self) -> "QueryHandle":
        self.mode = MODE_ONE
        return self

    async def execute(self, session: Any) -> Any:
        if self.mode == MODE_COUNT:
            stmt = select(func.count()).select_from(self.statement.order_by(None).subquery())
            result = await session.execute(stmt)
            return result.scalar_one()
        stmt = self.statement.limit(1) if self.mode == MODE_ONE else self.statement
        result = await session.execute(stmt)
        rows = result.scalars()
        if self.mode == MODE_ONE:
            return rows.first()
        return list(rows.all())


async def before_query_helper(params: "ResolveParams") -> Any:
    """Run the optional ``before_query`` hook, then execute the query handle.

    The hook may return a replacement ``QueryHandle`` or ``Select``, ``None`` to keep
    the current query, or any other value which is then used as the result.
    """
    if params.query is None:
        return None
    if params.session is None:
        raise ValueError("No db_session in context")
    hook = params.before_query
    if hook is not None:
        res = await maybe_await(hook(params.query, params))
        if isinstance(res, QueryHandle):
            params.query = res
        elif isinstance(res, Select):
            params.query.statement = res
        elif res is not None:
            return res
    return await params.query.execute(params.session)
