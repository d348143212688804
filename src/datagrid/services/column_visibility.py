"""Column visibility state.

Stores a mapping of column key -> visible bool for the lifetime of one grid.
Unknown columns default to visible. The selection checkbox and action
columns are pseudo-columns: they are never stored here and are shown
whenever their feature is enabled.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, TypeVar

from datagrid.models import ColumnDef
from datagrid.services.column_registry import ColumnRegistry

__all__ = ["ColumnVisibilityState"]

T = TypeVar("T")


@dataclass
class ColumnVisibilityState:
    visible: Dict[str, bool] = field(default_factory=dict)

    @classmethod
    def with_hidden(cls, hidden: Iterable[str]) -> "ColumnVisibilityState":
        return cls(visible={key: False for key in hidden})

    def is_visible(self, key: str) -> bool:
        return self.visible.get(key, True)

    def set_visible(self, key: str, flag: bool):
        self.visible[key] = flag

    def toggle(self, key: str) -> bool:
        """Flip visibility of ``key``; returns the new flag."""
        flag = not self.is_visible(key)
        self.visible[key] = flag
        return flag

    def visible_columns(self, registry: ColumnRegistry[T]) -> List[ColumnDef[T]]:
        return [c for c in registry.columns() if self.is_visible(c.id)]

    def visible_ids(self, registry: ColumnRegistry[T]) -> List[str]:
        return [c.id for c in self.visible_columns(registry)]
