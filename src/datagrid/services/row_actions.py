"""Per-row, quick and bulk action dispatch.

Action lists are static and ordered. Per-row menus are filtered for each
row at read time (``hidden(row)``) without mutating the list; dividers are
kept as separators and never dispatch. Handler return values (possibly
awaitables) are handed back untouched: the dispatcher never awaits them and
never catches their exceptions.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Any, Generic, List, Optional, Sequence, Tuple, TypeVar

from datagrid.models import QuickAction, RowAction

__all__ = ["ActionDispatch", "ActionDispatcher"]

T = TypeVar("T")

_log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ActionDispatch:
    action_id: str
    dispatched: bool
    result: Any = None


class ActionDispatcher(Generic[T]):
    def __init__(
        self,
        row_actions: Sequence[RowAction[T]] = (),
        quick_actions: Sequence[QuickAction[T]] = (),
        bulk_actions: Sequence[RowAction[List[T]]] = (),
    ):
        self.row_actions: Tuple[RowAction[T], ...] = tuple(row_actions)
        self.quick_actions: Tuple[QuickAction[T], ...] = tuple(quick_actions)
        self.bulk_actions: Tuple[RowAction[List[T]], ...] = tuple(bulk_actions)

    @property
    def has_row_actions(self) -> bool:
        return bool(self.row_actions) or bool(self.quick_actions)

    @property
    def has_bulk_actions(self) -> bool:
        return bool(self.bulk_actions)

    # Menus ------------------------------------------------------------
    def actions_for(self, row: T) -> Tuple[RowAction[T], ...]:
        return tuple(a for a in self.row_actions if a.divider or not self._hidden(a, row))

    @staticmethod
    def _hidden(action: RowAction[T], row: T) -> bool:
        return action.hidden is not None and bool(action.hidden(row))

    @staticmethod
    def _find(actions: Sequence[Any], action_id: str) -> Optional[Any]:
        for action in actions:
            if action.id == action_id:
                return action
        return None

    # Dispatch ---------------------------------------------------------
    def dispatch_row(self, action_id: str, row: T) -> ActionDispatch:
        action = self._find(self.row_actions, action_id)
        if action is None or action.divider or action.on_click is None:
            _log.debug("Row action %r is not dispatchable", action_id)
            return ActionDispatch(action_id, False)
        if self._hidden(action, row):
            _log.debug("Row action %r is hidden for this row", action_id)
            return ActionDispatch(action_id, False)
        return ActionDispatch(action_id, True, action.on_click(row))

    def dispatch_quick(self, action_id: str, row: T) -> ActionDispatch:
        action = self._find(self.quick_actions, action_id)
        if action is None:
            _log.debug("Unknown quick action %r", action_id)
            return ActionDispatch(action_id, False)
        return ActionDispatch(action_id, True, action.on_click(row))

    def dispatch_bulk(self, action_id: str, rows: List[T]) -> ActionDispatch:
        if not rows:
            _log.debug("Bulk action %r skipped: nothing selected", action_id)
            return ActionDispatch(action_id, False)
        action = self._find(self.bulk_actions, action_id)
        if action is None or action.divider or action.on_click is None:
            _log.debug("Bulk action %r is not dispatchable", action_id)
            return ActionDispatch(action_id, False)
        return ActionDispatch(action_id, True, action.on_click(rows))
