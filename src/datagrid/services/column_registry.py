"""Column registry.

Holds the static column list for one grid and answers the two questions
every later stage asks about a row:

 - ``value_of(row, column_id)``: the comparable/searchable value
 - ``present(row, column_id)``: what a cell shows

Accessor resolution prefers the explicit ``accessor``; a column that only
defines a ``cell`` formatter contributes the string form of its
presentation. Columns with neither are display-only and never appear in the
sortable or searchable candidate sets, even when flagged ``sortable``.
"""

from __future__ import annotations

from collections.abc import Mapping
import logging
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, TypeVar

from datagrid.models import ColumnDef

__all__ = ["ColumnRegistry", "read_field"]

T = TypeVar("T")

_log = logging.getLogger(__name__)

_MISSING = object()


def read_field(row: Any, key: str) -> Any:
    """Read ``key`` from a mapping row, else as an attribute; ``None`` if absent."""
    if isinstance(row, Mapping):
        value = row.get(key, _MISSING)
        if value is not _MISSING:
            return value
    return getattr(row, key, None)


class ColumnRegistry(Generic[T]):
    def __init__(self, columns: Iterable[ColumnDef[T]]):
        self._columns: Dict[str, ColumnDef[T]] = {}
        for col in columns:
            if col.id in self._columns:
                _log.warning("Duplicate column id %r; last definition wins", col.id)
                # dict keeps the original position
            self._columns[col.id] = col

    # Lookup -----------------------------------------------------------
    def __contains__(self, column_id: object) -> bool:
        return column_id in self._columns

    def __len__(self) -> int:
        return len(self._columns)

    def get(self, column_id: str) -> Optional[ColumnDef[T]]:
        return self._columns.get(column_id)

    def columns(self) -> List[ColumnDef[T]]:
        return list(self._columns.values())

    def ids(self) -> List[str]:
        return list(self._columns.keys())

    def sortable_ids(self) -> List[str]:
        return [c.id for c in self._columns.values() if c.sortable and c.resolvable]

    def searchable_ids(self) -> List[str]:
        return [c.id for c in self._columns.values() if c.resolvable]

    def is_sortable(self, column_id: str) -> bool:
        col = self._columns.get(column_id)
        return bool(col and col.sortable and col.resolvable)

    # Values -----------------------------------------------------------
    def value_of(self, row: T, column_id: str) -> Any:
        col = self._columns.get(column_id)
        if col is None:
            return None
        return self._resolve(col, row)

    def present(self, row: T, column_id: str) -> Any:
        col = self._columns.get(column_id)
        if col is None:
            return ""
        if col.cell is not None:
            value = self._read_accessor(col, row) if col.accessor is not None else None
            return col.cell(row, value)
        value = self._read_accessor(col, row) if col.accessor is not None else None
        return "" if value is None else str(value)

    def present_all(self, row: T, column_ids: Sequence[str]) -> Dict[str, Any]:
        return {cid: self.present(row, cid) for cid in column_ids}

    # Internal ---------------------------------------------------------
    @staticmethod
    def _read_accessor(col: ColumnDef[T], row: T) -> Any:
        accessor = col.accessor
        if callable(accessor):
            return accessor(row)
        return read_field(row, accessor)  # type: ignore[arg-type]

    def _resolve(self, col: ColumnDef[T], row: T) -> Any:
        if col.accessor is not None:
            return self._read_accessor(col, row)
        if col.cell is not None:
            shown = col.cell(row, None)
            return None if shown is None else str(shown)
        return None
