from __future__ import annotations

from PyQt6.QtCore import Qt, QModelIndex

from datagrid.app.config_store import GridConfig
from datagrid.components.grid_table_model import (
    GridTableModel,
    HIGHLIGHT_ROLE,
    ROW_VIEW_ROLE,
    SORT_INDICATOR_ROLE,
)
from datagrid.services.event_bus import EventBus
from factories import make_vm


def _texts(model, column):
    return [model.data(model.index(r, column)) for r in range(model.rowCount())]


def _record(model):
    seen = []
    for name in (
        "layoutAboutToBeChanged",
        "layoutChanged",
        "modelAboutToBeReset",
        "modelReset",
        "dataChanged",
        "headerDataChanged",
    ):
        getattr(model, name).connect(lambda *args, name=name: seen.append(name))
    return seen


def test_model_exposes_visible_columns(qtbot):
    bus = EventBus()
    vm = make_vm(bus=bus)
    model = GridTableModel(vm, bus)
    assert model.columnCount() == 2
    assert model.rowCount() == 3
    assert model.headerData(0, Qt.Orientation.Horizontal) == "Name"
    assert _texts(model, 0) == ["Bob", "ana", "Ann"]
    assert _texts(model, 1) == ["40", "", "25"]
    vm.toggle_column("name")
    assert model.columnCount() == 1
    assert model.headerData(0, Qt.Orientation.Horizontal) == "Age"


def test_model_refreshes_on_query(qtbot):
    bus = EventBus()
    vm = make_vm(bus=bus)
    model = GridTableModel(vm, bus)
    vm.set_query("an")
    assert _texts(model, 0) == ["ana", "Ann"]
    vm.set_query("zzz")
    assert model.rowCount() == 0
    model.detach()
    vm.set_query("")
    assert model.rowCount() == 0
    model.refresh()
    assert model.rowCount() == 3


def test_sort_routes_to_viewmodel(qtbot):
    vm = make_vm()
    model = GridTableModel(vm)
    model.sort(1, Qt.SortOrder.DescendingOrder)
    assert vm.sort_state.column_id == "age"
    assert _texts(model, 0) == ["Bob", "Ann", "ana"]


def test_checkbox_column_toggles_selection(qtbot):
    vm = make_vm(config=GridConfig(selectable=True))
    model = GridTableModel(vm)
    assert model.columnCount() == 3
    idx = model.index(1, 0)
    assert model.data(idx, Qt.ItemDataRole.CheckStateRole) == Qt.CheckState.Unchecked
    assert model.setData(idx, Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
    assert vm.selected_ids() == ["2"]
    assert model.data(idx, Qt.ItemDataRole.CheckStateRole) == Qt.CheckState.Checked
    assert (
        model.headerData(0, Qt.Orientation.Horizontal, Qt.ItemDataRole.CheckStateRole)
        == Qt.CheckState.PartiallyChecked
    )
    assert model.flags(idx) & Qt.ItemFlag.ItemIsUserCheckable


def test_custom_roles(qtbot):
    vm = make_vm()
    model = GridTableModel(vm)
    view = model.data(model.index(0, 0), ROW_VIEW_ROLE)
    assert view.key == "1"
    assert model.data(model.index(0, 0), HIGHLIGHT_ROLE) == "none"
    assert model.data(QModelIndex()) is None


def test_sort_with_bus_emits_only_layout_signals(qtbot):
    bus = EventBus()
    vm = make_vm(bus=bus)
    model = GridTableModel(vm, bus)
    seen = _record(model)
    model.sort(1, Qt.SortOrder.DescendingOrder)
    assert seen == ["layoutAboutToBeChanged", "layoutChanged"]
    assert _texts(model, 0) == ["Bob", "Ann", "ana"]
    vm.set_query("an")
    assert seen[-2:] == ["modelAboutToBeReset", "modelReset"]


def test_check_with_bus_does_not_reset_model(qtbot):
    bus = EventBus()
    vm = make_vm(config=GridConfig(selectable=True), bus=bus)
    model = GridTableModel(vm, bus)
    seen = _record(model)
    assert model.setData(model.index(0, 0), Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
    assert seen == ["dataChanged", "headerDataChanged"]
    assert vm.selected_ids() == ["1"]
    assert model.data(model.index(0, 0), Qt.ItemDataRole.CheckStateRole) == Qt.CheckState.Checked


def test_check_updates_select_all_header(qtbot):
    vm = make_vm(config=GridConfig(selectable=True))
    model = GridTableModel(vm)
    headers = []
    model.headerDataChanged.connect(
        lambda orientation, first, last: headers.append((first, last))
    )
    for row in range(model.rowCount()):
        model.setData(model.index(row, 0), Qt.CheckState.Checked, Qt.ItemDataRole.CheckStateRole)
    assert headers == [(0, 0)] * 3
    assert (
        model.headerData(0, Qt.Orientation.Horizontal, Qt.ItemDataRole.CheckStateRole)
        == Qt.CheckState.Checked
    )


def test_sort_indicator_role(qtbot):
    vm = make_vm()
    model = GridTableModel(vm)
    assert model.headerData(0, Qt.Orientation.Horizontal, SORT_INDICATOR_ROLE) == "unsorted"
    model.sort(0, Qt.SortOrder.AscendingOrder)
    assert model.headerData(0, Qt.Orientation.Horizontal, SORT_INDICATOR_ROLE) == "asc"
    assert model.headerData(1, Qt.Orientation.Horizontal, SORT_INDICATOR_ROLE) == "unsorted"
