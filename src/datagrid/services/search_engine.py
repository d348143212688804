"""Filter / search engine.

Two independent predicates narrow a row sequence, in this order:

1. structured filters coming from a filter bar (``key -> value`` pairs where
   ``""`` / ``"all"`` mean inactive), or any injected ``RowFilter``
2. free-text search: the lower-cased query must be a substring of the row's
   haystack (string forms of every searchable column value joined by spaces)

A caller-supplied ``RowMatcher`` fully replaces step 2. Input order is
always preserved.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Generic, List, Mapping, Optional, Sequence, TypeVar

from datagrid import settings
from datagrid.models import RowFilter, RowMatcher
from datagrid.services.column_registry import ColumnRegistry, read_field

__all__ = ["SearchEngine", "FieldFilter", "is_active_filter_value"]

T = TypeVar("T")

_log = logging.getLogger(__name__)


def is_active_filter_value(value: Optional[str]) -> bool:
    return value is not None and str(value) not in settings.INACTIVE_FILTER_VALUES


class FieldFilter(Generic[T]):
    """Equality predicate built from filter-bar values."""

    def __init__(self, registry: ColumnRegistry[T], values: Mapping[str, str] | None = None):
        self._registry = registry
        self._values: Dict[str, str] = {}
        for key, value in (values or {}).items():
            self.set(key, value)

    def set(self, key: str, value: Optional[str]) -> None:
        if is_active_filter_value(value):
            self._values[key] = str(value)
        else:
            self._values.pop(key, None)

    def clear(self) -> None:
        self._values.clear()

    def values(self) -> Dict[str, str]:
        return dict(self._values)

    @property
    def active_count(self) -> int:
        return len(self._values)

    def _field(self, row: T, key: str) -> Any:
        if key in self._registry:
            return self._registry.value_of(row, key)
        return read_field(row, key)

    def __call__(self, row: T) -> bool:
        for key, wanted in self._values.items():
            value = self._field(row, key)
            if value is None or str(value).lower() != wanted.lower():
                return False
        return True


class SearchEngine(Generic[T]):
    def __init__(self, registry: ColumnRegistry[T], matcher: RowMatcher[T] | None = None):
        self._registry = registry
        self._matcher = matcher

    @property
    def matcher(self) -> RowMatcher[T] | None:
        return self._matcher

    def haystack(self, row: T) -> str:
        parts: List[str] = []
        for cid in self._registry.searchable_ids():
            value = self._registry.value_of(row, cid)
            if value is not None:
                parts.append(str(value))
        return " ".join(parts).lower()

    def matches(self, row: T, query: str) -> bool:
        if self._matcher is not None:
            return bool(self._matcher(row, query))
        return query.lower() in self.haystack(row)

    def apply(
        self, rows: Sequence[T], query: str, row_filter: RowFilter[T] | None = None
    ) -> List[T]:
        out = list(rows)
        if row_filter is not None:
            out = [r for r in out if row_filter(r)]
        if not query or not query.strip():
            return out
        result = [r for r in out if self.matches(r, query)]
        _log.debug("Search %r kept %d of %d rows", query, len(result), len(out))
        return result
