"""Single-column sort engine.

Holds the current ``SortState`` and produces a stably ordered row list.
Toggling a header cycles asc -> desc -> cleared (insertion order).

Comparison policy:
 - numbers numerically, strings case-insensitively, dates chronologically
 - blanks (``None``, float or Decimal NaN) always last, in both directions
 - values of mixed kinds fall back to their lower-cased string form
 - ties keep input order (Python's sort is stable, also with ``reverse``)
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal
import logging
import math
import numbers
from typing import Any, Callable, Generic, List, Sequence, Tuple, TypeVar

from datagrid.models import SortDirection, SortState
from datagrid.services.column_registry import ColumnRegistry

__all__ = ["SortEngine", "is_blank", "sort_key_for"]

T = TypeVar("T")
KeyFunc = Callable[[Any], object]

_log = logging.getLogger(__name__)


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, Decimal):
        return value.is_nan()
    return isinstance(value, float) and math.isnan(value)


def _kind(value: Any) -> str:
    if isinstance(value, (numbers.Real, Decimal)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, (date, datetime)):
        return "date"
    return "other"


def _date_key(value: date) -> datetime:
    if isinstance(value, datetime):
        return value
    return datetime.combine(value, time.min)


def _string_key(value: Any) -> str:
    return str(value).lower()


def sort_key_for(values: Sequence[Any]) -> KeyFunc:
    """Pick the comparison key for a column from its (non-blank) values."""
    kinds = {_kind(v) for v in values}
    if kinds == {"number"}:
        return lambda v: v
    if kinds == {"date"}:
        return _date_key
    if kinds and kinds != {"string"}:
        _log.debug("Mixed value kinds %s; comparing as strings", sorted(kinds))
    return _string_key


class SortEngine(Generic[T]):
    def __init__(self, registry: ColumnRegistry[T], state: SortState | None = None):
        self._registry = registry
        self._state = state or SortState()

    @property
    def state(self) -> SortState:
        return self._state

    # Transitions ------------------------------------------------------
    def toggle_sort(self, column_id: str) -> SortState:
        if not self._registry.is_sortable(column_id):
            _log.debug("Ignoring sort toggle for non-sortable column %r", column_id)
            return self._state
        current = self._state
        if current.column_id != column_id:
            self._state = SortState(column_id, SortDirection.ASC)
        elif current.direction is SortDirection.ASC:
            self._state = SortState(column_id, SortDirection.DESC)
        else:
            self._state = SortState()
        return self._state

    def set_sort(self, state: SortState) -> SortState:
        if state.column_id is not None and not self._registry.is_sortable(state.column_id):
            _log.warning("Ignoring sort on unknown or non-sortable column %r", state.column_id)
            return self._state
        self._state = state
        return self._state

    def clear(self) -> SortState:
        self._state = SortState()
        return self._state

    # Ordering ---------------------------------------------------------
    def apply(self, rows: Sequence[T]) -> List[T]:
        column_id = self._state.column_id
        if column_id is None or not self._registry.is_sortable(column_id):
            return list(rows)
        defined: List[Tuple[T, Any]] = []
        blanks: List[T] = []
        for row in rows:
            value = self._registry.value_of(row, column_id)
            if is_blank(value):
                blanks.append(row)
            else:
                defined.append((row, value))
        reverse = self._state.direction is SortDirection.DESC
        key = sort_key_for([v for _, v in defined])
        try:
            ordered = sorted(defined, key=lambda pair: key(pair[1]), reverse=reverse)
        except (TypeError, ArithmeticError):
            _log.debug("Values of column %r not comparable; comparing as strings", column_id)
            ordered = sorted(defined, key=lambda pair: _string_key(pair[1]), reverse=reverse)
        return [row for row, _ in ordered] + blanks
