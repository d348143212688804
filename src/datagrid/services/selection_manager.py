"""Row selection manager.

Keeps selected row identities in insertion order. ``all_selected`` and
``some_selected`` are derived on every call against the rows currently
visible, never stored:

 - all:  visible non-empty and the selection equals exactly the visible ids
 - some: selection non-empty and not all (indeterminate header checkbox)

Selecting "all" means all *visible* rows, so a later filter change cannot
silently pull hidden rows into the selection. Stale ids left behind by a
data replacement are removed by ``prune``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, List, Set

__all__ = ["SelectionManager"]

_log = logging.getLogger(__name__)


class SelectionManager:
    def __init__(self, initial: Iterable[str] = ()):
        self._ids: Dict[str, None] = dict.fromkeys(initial)

    # Queries ----------------------------------------------------------
    def __contains__(self, row_id: object) -> bool:
        return row_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    @property
    def count(self) -> int:
        return len(self._ids)

    def ids(self) -> List[str]:
        return list(self._ids)

    def is_selected(self, row_id: str) -> bool:
        return row_id in self._ids

    def all_selected(self, visible_ids: Iterable[str]) -> bool:
        visible: Set[str] = set(visible_ids)
        return bool(visible) and visible == set(self._ids)

    def some_selected(self, visible_ids: Iterable[str]) -> bool:
        return bool(self._ids) and not self.all_selected(visible_ids)

    # Transitions ------------------------------------------------------
    def toggle_row(self, row_id: str) -> bool:
        """Flip one id; returns the new selected flag."""
        if row_id in self._ids:
            del self._ids[row_id]
            return False
        self._ids[row_id] = None
        return True

    def toggle_all(self, visible_ids: Iterable[str]) -> None:
        visible = list(visible_ids)
        if self.all_selected(visible):
            self._ids.clear()
        else:
            self._ids = dict.fromkeys(visible)

    def set_selected(self, ids: Iterable[str]) -> None:
        self._ids = dict.fromkeys(ids)

    def clear(self) -> None:
        self._ids.clear()

    def prune(self, current_ids: Iterable[str]) -> List[str]:
        """Drop ids not in ``current_ids``; returns the removed ids."""
        present = set(current_ids)
        stale = [i for i in self._ids if i not in present]
        for row_id in stale:
            del self._ids[row_id]
        if stale:
            _log.debug("Pruned %d stale selected ids", len(stale))
        return stale
