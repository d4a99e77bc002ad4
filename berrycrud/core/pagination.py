from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from ..options import LimitOptions
from .args import ArgMap, ArgSpec
from .errors import ArgumentError

if TYPE_CHECKING:  # pragma: no cover
    from ..operation import ResolveParams

_logger = logging.getLogger("berrycrud")


def limit_helper_args(opts: Optional[LimitOptions] = None) -> ArgMap:
    opts = opts or LimitOptions()
    return {'limit': ArgSpec(Optional[int], opts.default, "Maximum number of records to return")}


def skip_helper_args() -> ArgMap:
    return {'skip': ArgSpec(Optional[int], None, "Number of matching records to skip")}


def limit_helper(params: "ResolveParams", opts: Optional[LimitOptions] = None) -> None:
    limit = (params.args or {}).get('limit')
    if limit is None:
        return
    if not isinstance(limit, int) or limit < 0:
        raise ArgumentError(f"limit must be a non-negative integer, got {limit!r}")
    max_limit = opts.max if opts is not None else None
    if max_limit is not None and limit > max_limit:
        _logger.warning("berrycrud: limit %s clamped to %s", limit, max_limit)
        limit = max_limit
    params.query.limit(limit)


def skip_helper(params: "ResolveParams") -> None:
    skip = (params.args or {}).get('skip')
    if not skip:
        return
    if not isinstance(skip, int) or skip < 0:
        raise ArgumentError(f"skip must be a non-negative integer, got {skip!r}")
    params.query.offset(skip)
