"""Operation descriptor and per-invocation context.

An ``Operation`` is what every resolver factory returns: a name, a kind (query or
mutation), the argument map, the output type and an async ``resolve`` callable that
takes a ``ResolveParams``. Descriptors are immutable; the ``with_*``/``wrap_resolve``
helpers return modified copies.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Annotated, Any, Awaitable, Callable, Dict, Optional

import strawberry
from strawberry.types import Info as StrawberryInfo

from .core.args import ArgMap, ArgSpec
from .core.query import QueryHandle
from .core.selection import projection_from_info
from .core.utils import context_get, get_db_session, input_to_dict

if TYPE_CHECKING:  # pragma: no cover
    from .entity import Entity

_logger = logging.getLogger("berrycrud")

QUERY = 'query'
MUTATION = 'mutation'

BeforeRecordMutate = Callable[[Any, "ResolveParams"], Any]
BeforeQuery = Callable[[QueryHandle, "ResolveParams"], Any]


@dataclass
class ResolveParams:
    """Everything one invocation needs; created per call and discarded afterwards.

    ``args`` holds plain python values keyed by argument name. ``projection`` is the
    nested dict of requested output fields. ``query`` is filled by the resolver.
    """
    args: Dict[str, Any] = field(default_factory=dict)
    projection: Dict[str, Any] = field(default_factory=dict)
    session: Any = None
    query: Optional[QueryHandle] = None
    info: Any = None
    context: Any = None
    before_record_mutate: Optional[BeforeRecordMutate] = None
    before_query: Optional[BeforeQuery] = None


@dataclass(frozen=True, eq=False)
class Operation:
    name: str
    kind: str
    entity: "Entity"
    args: ArgMap
    output_type: Any
    resolve_fn: Callable[[ResolveParams], Awaitable[Any]]
    description: Optional[str] = None
    before_record_mutate: Optional[BeforeRecordMutate] = None
    before_query: Optional[BeforeQuery] = None

    def __repr__(self) -> str:
        return f"Operation({self.entity.type_name}.{self.name}, kind={self.kind!r}, args={list(self.args)})"

    @property
    def is_mutation(self) -> bool:
        return self.kind == MUTATION

    async def resolve(self, params: ResolveParams) -> Any:
        # Hooks on the invocation context win over the ones bound to the operation
        if params.before_record_mutate is None:
            params.before_record_mutate = self.before_record_mutate
        if params.before_query is None:
            params.before_query = self.before_query
        return await self.resolve_fn(params)

    def with_hooks(
        self,
        *,
        before_record_mutate: Optional[BeforeRecordMutate] = None,
        before_query: Optional[BeforeQuery] = None,
    ) -> "Operation":
        return replace(
            self,
            before_record_mutate=before_record_mutate or self.before_record_mutate,
            before_query=before_query or self.before_query,
        )

    def wrap_resolve(self, wrapper: Callable[[Callable[[ResolveParams], Awaitable[Any]]], Callable[[ResolveParams], Awaitable[Any]]]) -> "Operation":
        """Return a copy whose resolve function is ``wrapper(previous_resolve_fn)``."""
        return replace(self, resolve_fn=wrapper(self.resolve_fn))

    def with_args(self, extra: ArgMap) -> "Operation":
        args = dict(self.args)
        args.update(extra)
        return replace(self, args=args)

    def without_args(self, *names: str) -> "Operation":
        return replace(self, args={k: v for k, v in self.args.items() if k not in names})

    def with_name(self, name: str, description: Optional[str] = None) -> "Operation":
        return replace(self, name=name, description=description or self.description)

    # --- Strawberry binding ----------------------------------------------------

    def params_from_info(self, info: Any, raw_args: Dict[str, Any]) -> ResolveParams:
        return ResolveParams(
            args={k: input_to_dict(v) for k, v in raw_args.items()},
            projection=projection_from_info(info),
            session=get_db_session(info),
            info=info,
            context=getattr(info, 'context', None),
            before_record_mutate=context_get(info, 'before_record_mutate'),
            before_query=context_get(info, 'before_query'),
        )

    def to_resolver(self) -> Callable[..., Any]:
        """Build an async function whose signature exposes this operation's arguments."""
        op = self

        async def _invoke(info: Any, raw_args: Dict[str, Any]) -> Any:
            return await op.resolve(op.params_from_info(info, raw_args))

        # Required arguments first so the generated signature stays valid
        ordered = sorted(self.args.items(), key=lambda kv: not kv[1].is_required)
        params = ['self', 'info']
        for arg_name, spec in ordered:
            params.append(arg_name if spec.is_required else f"{arg_name}=_defaults[{arg_name!r}]")
        fn_name = f"_op_{self.entity.type_name}_{self.name}"
        collected = ', '.join(f"{a!r}: {a}" for a, _ in ordered)
        src = f"async def {fn_name}({', '.join(params)}):\n" \
              f"    return await _invoke(info, {{{collected}}})\n"
        ns: Dict[str, Any] = {
            '_invoke': _invoke,
            '_defaults': {a: s.default for a, s in ordered if not s.is_required},
        }
        exec(src, ns)
        fn = ns[fn_name]
        fn.__module__ = __name__
        anns: Dict[str, Any] = {'info': StrawberryInfo}
        for arg_name, spec in ordered:
            anns[arg_name] = _arg_annotation(spec)
        anns['return'] = self.output_type
        fn.__annotations__ = anns
        return fn

    def to_strawberry_field(self, description: Optional[str] = None) -> Any:
        desc = description or self.description
        if self.is_mutation:
            return strawberry.mutation(resolver=self.to_resolver(), description=desc)
        return strawberry.field(resolver=self.to_resolver(), description=desc)


def _arg_annotation(spec: ArgSpec) -> Any:
    if spec.description:
        return Annotated[spec.annotation, strawberry.argument(description=spec.description)]
    return spec.annotation
