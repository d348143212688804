"""Qt table model adapter.

Provides a QAbstractTableModel over a ``DataTableViewModel`` snapshot so a
plain ``QTableView`` can display the grid. The adapter only translates:
cell text comes from the column formatters, checkbox state from the
selection manager, and header clicks route back into the view model.

Columns: an optional leading selection checkbox column (when the grid is
selectable) followed by the currently visible data columns. The action
pseudo-column is left to the hosting widget.
"""

from __future__ import annotations

from typing import Any, List, Optional

from PyQt6.QtCore import Qt, QModelIndex, QAbstractTableModel

from datagrid.models import GridSnapshot, RenderState, SortDirection, SortState
from datagrid.services.event_bus import Event, EventBus, GridEvent, Subscription
from datagrid.viewmodels.table_viewmodel import DataTableViewModel

__all__ = ["GridTableModel", "ROW_VIEW_ROLE", "HIGHLIGHT_ROLE", "SORT_INDICATOR_ROLE"]

ROW_VIEW_ROLE = int(Qt.ItemDataRole.UserRole.value)
HIGHLIGHT_ROLE = ROW_VIEW_ROLE + 1
SORT_INDICATOR_ROLE = ROW_VIEW_ROLE + 2


class GridTableModel(QAbstractTableModel):
    def __init__(self, viewmodel: DataTableViewModel, bus: Optional[EventBus] = None):
        super().__init__()
        self._vm = viewmodel
        self._snapshot: GridSnapshot = viewmodel.snapshot()
        self._subs: List[Subscription] = []
        # set while sort/setData drive the view model and emit their own signals
        self._local_change = False
        if bus is not None:
            self._subs = bus.subscribe_all(self._on_event)

    # Lifecycle --------------------------------------------------------
    def detach(self) -> None:
        for sub in self._subs:
            sub.cancel()
        self._subs = []

    def refresh(self) -> None:
        self.beginResetModel()
        self._snapshot = self._vm.snapshot()
        self.endResetModel()

    def _on_event(self, event: Event) -> None:
        if self._local_change or event.name == GridEvent.ACTION_DISPATCHED.value:
            return
        self.refresh()

    def snapshot(self) -> GridSnapshot:
        return self._snapshot

    # Layout helpers ---------------------------------------------------
    @property
    def _offset(self) -> int:
        return 1 if self._snapshot.show_selection_column else 0

    def _is_checkbox_column(self, column: int) -> bool:
        return self._offset == 1 and column == 0

    def column_id(self, column: int) -> Optional[str]:
        idx = column - self._offset
        if 0 <= idx < len(self._snapshot.columns):
            return self._snapshot.columns[idx].id
        return None

    # Required overrides
    def rowCount(self, parent: QModelIndex = QModelIndex()):  # type: ignore[override]
        if parent.isValid() or self._snapshot.render_state is not RenderState.POPULATED:
            return 0
        return len(self._snapshot.rows)

    def columnCount(self, parent: QModelIndex = QModelIndex()):  # type: ignore[override]
        if parent.isValid():
            return 0
        return self._offset + len(self._snapshot.columns)

    def data(self, index: QModelIndex, role: int = Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if not index.isValid() or index.row() >= len(self._snapshot.rows):
            return None
        view = self._snapshot.rows[index.row()]
        if role == ROW_VIEW_ROLE:
            return view
        if role == HIGHLIGHT_ROLE:
            return view.highlight.value
        if self._is_checkbox_column(index.column()):
            if role == Qt.ItemDataRole.CheckStateRole:
                return Qt.CheckState.Checked if view.selected else Qt.CheckState.Unchecked
            return None
        column_id = self.column_id(index.column())
        if column_id is None:
            return None
        if role == Qt.ItemDataRole.DisplayRole:
            value: Any = view.cells.get(column_id, "")
            return value if isinstance(value, str) else str(value)
        return None

    def setData(self, index: QModelIndex, value: Any, role: int = Qt.ItemDataRole.EditRole):  # type: ignore[override]
        if not index.isValid() or role != Qt.ItemDataRole.CheckStateRole:
            return False
        if not self._is_checkbox_column(index.column()):
            return False
        view = self._snapshot.rows[index.row()]
        if isinstance(value, Qt.CheckState):
            wanted = value == Qt.CheckState.Checked
        else:
            wanted = int(value) == Qt.CheckState.Checked.value
        self._local_change = True
        try:
            if wanted != view.selected:
                self._vm.toggle_row(view.key)
        finally:
            self._local_change = False
        self._snapshot = self._vm.snapshot()
        self.dataChanged.emit(index, index, [Qt.ItemDataRole.CheckStateRole])
        self.headerDataChanged.emit(Qt.Orientation.Horizontal, 0, 0)
        return True

    def headerData(self, section: int, orientation: Qt.Orientation, role: int = Qt.ItemDataRole.DisplayRole):  # type: ignore[override]
        if orientation != Qt.Orientation.Horizontal:
            return None
        if self._is_checkbox_column(section):
            if role == Qt.ItemDataRole.CheckStateRole:
                if self._snapshot.all_selected:
                    return Qt.CheckState.Checked
                if self._snapshot.some_selected:
                    return Qt.CheckState.PartiallyChecked
                return Qt.CheckState.Unchecked
            return None
        idx = section - self._offset
        if not 0 <= idx < len(self._snapshot.columns):
            return None
        column = self._snapshot.columns[idx]
        if role == Qt.ItemDataRole.DisplayRole:
            return column.header
        if role == SORT_INDICATOR_ROLE:
            return self._snapshot.sort.indicator_for(column.id)
        return None

    def flags(self, index: QModelIndex):  # type: ignore[override]
        if not index.isValid():
            return Qt.ItemFlag.NoItemFlags
        flags = Qt.ItemFlag.ItemIsEnabled | Qt.ItemFlag.ItemIsSelectable
        if self._is_checkbox_column(index.column()):
            flags |= Qt.ItemFlag.ItemIsUserCheckable
        return flags

    def sort(self, column: int, order: Qt.SortOrder = Qt.SortOrder.AscendingOrder):  # type: ignore[override]
        column_id = self.column_id(column)
        if column_id is None:
            return
        direction = (
            SortDirection.ASC if order == Qt.SortOrder.AscendingOrder else SortDirection.DESC
        )
        self._local_change = True
        try:
            self.layoutAboutToBeChanged.emit()
            self._vm.set_sort(SortState(column_id, direction))
            self._snapshot = self._vm.snapshot()
            self.layoutChanged.emit()
        finally:
            self._local_change = False
