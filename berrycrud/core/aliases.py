"""Alias translation between external (attribute) names and storage (column) names."""
from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Tuple


class AliasTable:
    """Bidirectional external <-> storage name map.

    Only aliased fields are stored; both lookups fall back to identity.
    """

    def __init__(self, external_to_storage: Mapping[str, str] | None = None):
        self._to_storage: Dict[str, str] = {}
        self._to_external: Dict[str, str] = {}
        for ext, sto in (external_to_storage or {}).items():
            if ext == sto:
                continue
            if sto in self._to_external and self._to_external[sto] != ext:
                raise ValueError(f"Storage name {sto!r} is aliased twice ({self._to_external[sto]!r}, {ext!r})")
            self._to_storage[ext] = sto
            self._to_external[sto] = ext

    @classmethod
    def from_pairs(cls, pairs: Iterable[Tuple[str, str]]) -> "AliasTable":
        return cls(dict(pairs))

    def to_storage(self, external: str) -> str:
        return self._to_storage.get(external, external)

    def to_external(self, storage: str) -> str:
        return self._to_external.get(storage, storage)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._to_storage)

    def __bool__(self) -> bool:
        return bool(self._to_storage)

    def __len__(self) -> int:
        return len(self._to_storage)

    def __repr__(self) -> str:
        return f"AliasTable({self._to_storage!r})"

    # --- structural translation of argument values --------------------------

    def translate_filter(self, filter_data: Dict[str, Any]) -> Dict[str, Any]:
        """Rename field keys of a filter dict to storage names, recursing into AND/OR and _operators."""
        out: Dict[str, Any] = {}
        for key, value in (filter_data or {}).items():
            if key in ('AND', 'OR') and isinstance(value, list):
                out[key] = [self.translate_filter(v) for v in value if isinstance(v, dict)]
            elif key == '_operators' and isinstance(value, dict):
                out[key] = {self.to_storage(k): v for k, v in value.items()}
            else:
                out[self.to_storage(key)] = value
        return out

    def translate_sort(self, sort_spec: Iterable[Tuple[str, str]]) -> List[Tuple[str, str]]:
        return [(self.to_storage(name), direction) for name, direction in sort_spec]

    def translate_projection(self, names: Iterable[str]) -> List[str]:
        return [self.to_storage(n) for n in names]
