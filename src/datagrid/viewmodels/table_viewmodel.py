"""ViewModel for a generic data table.

Composes the grid services into one owner per rendered view and exposes a
headless API so tests (and any toolkit) can drive it without a QApplication.

Pipeline per recomputation:
    rows -> sort -> structured filters -> text search
         -> annotate (selection, highlight, actions) -> trim visible columns

Design:
 - Rows, identity function, columns and strategies are constructor
   arguments; nothing lives at module level.
 - Row data is replaced wholesale by ``set_rows`` and never diffed, except
   for the optional "new row" tagging.
 - Selection pruning is lazy: a data replacement marks the selection stale
   and the next selection read drops ids that disappeared.
 - State changes are announced on an optional ``EventBus``.
"""

from __future__ import annotations

import logging
import time
from typing import Any, Callable, Dict, Generic, Iterable, List, Mapping, Optional, Sequence, TypeVar

from datagrid.app.config_store import GridConfig
from datagrid.models import (
    Classifier,
    ColumnDef,
    Density,
    EmptyStateTemplate,
    GridSnapshot,
    Highlight,
    Identify,
    QuickAction,
    RenderState,
    RowAction,
    RowFilter,
    RowMatcher,
    RowView,
    SortState,
    ViewMode,
)
from datagrid.services.column_registry import ColumnRegistry
from datagrid.services.column_visibility import ColumnVisibilityState
from datagrid.services.event_bus import EventBus, GridEvent
from datagrid.services.highlight import NewRowTracker, RowHighlighter
from datagrid.services.row_actions import ActionDispatch, ActionDispatcher
from datagrid.services.search_engine import FieldFilter, SearchEngine
from datagrid.services.selection_manager import SelectionManager
from datagrid.services.sort_engine import SortEngine
from datagrid.services.view_state import ViewStateController

__all__ = ["DataTableViewModel"]

T = TypeVar("T")

_log = logging.getLogger(__name__)


class DataTableViewModel(Generic[T]):
    def __init__(
        self,
        rows: Iterable[T] = (),
        *,
        identify: Identify[T],
        columns: Sequence[ColumnDef[T]],
        classifier: Optional[Classifier[T]] = None,
        matcher: Optional[RowMatcher[T]] = None,
        row_filter: Optional[RowFilter[T]] = None,
        row_actions: Sequence[RowAction[T]] = (),
        quick_actions: Sequence[QuickAction[T]] = (),
        bulk_actions: Sequence[RowAction[List[T]]] = (),
        on_row_click: Optional[Callable[[T], Any]] = None,
        config: Optional[GridConfig] = None,
        bus: Optional[EventBus] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.config = config or GridConfig()
        self._identify = identify
        self._bus = bus
        self._on_row_click = on_row_click

        self.registry: ColumnRegistry[T] = ColumnRegistry(columns)
        self.sorter: SortEngine[T] = SortEngine(self.registry)
        self.search: SearchEngine[T] = SearchEngine(self.registry, matcher)
        self.field_filter: FieldFilter[T] = FieldFilter(self.registry)
        self.selection = SelectionManager()
        self.view = ViewStateController(mode=self.config.view_mode, density=self.config.density)
        self.visibility = ColumnVisibilityState.with_hidden(self.config.hidden_columns)
        tracker = NewRowTracker(ttl=self.config.new_row_ttl, clock=clock)
        self.highlighter: RowHighlighter[T] = RowHighlighter(
            classifier, enabled=self.config.highlight_enabled, tracker=tracker
        )
        self.actions: ActionDispatcher[T] = ActionDispatcher(
            row_actions, quick_actions, bulk_actions
        )

        self._row_filter = row_filter
        self._query = ""
        self._loading = False
        self._rows: List[T] = []
        self._row_ids: List[str] = []
        self._by_id: Dict[str, T] = {}
        self._selection_stale = False
        self._load(rows)

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------
    def _load(self, rows: Iterable[T]) -> List[str]:
        self._rows = list(rows)
        self._row_ids = [self._identify(r) for r in self._rows]
        self._by_id = {}
        duplicates: List[str] = []
        for row_id, row in zip(self._row_ids, self._rows):
            if row_id in self._by_id:
                duplicates.append(row_id)
            self._by_id[row_id] = row  # last one wins
        if duplicates:
            _log.warning(
                "Duplicate row identities %s; last row wins for each",
                sorted(set(duplicates)),
            )
        self._selection_stale = True
        return duplicates

    def set_rows(self, rows: Iterable[T]) -> None:
        previous = list(self._row_ids)
        self._load(rows)
        tracker = self.highlighter.tracker
        if tracker is not None:
            tracker.retain(self._by_id.keys())
        if self.config.track_new_rows and tracker is not None:
            fresh = tracker.observe(previous, self._row_ids)
            if fresh:
                _log.debug("Tagged %d new rows", len(fresh))
        self._publish(GridEvent.ROWS_REPLACED, {"count": len(self._rows)})

    def rows(self) -> List[T]:
        return list(self._rows)

    def row_by_id(self, row_id: str) -> Optional[T]:
        return self._by_id.get(row_id)

    def mark_new(self, row_ids: Iterable[str]) -> None:
        if self.highlighter.tracker is not None:
            self.highlighter.tracker.mark(row_ids)

    @property
    def loading(self) -> bool:
        return self._loading

    def set_loading(self, flag: bool) -> None:
        flag = bool(flag)
        if flag == self._loading:
            return
        self._loading = flag
        self._publish(GridEvent.LOADING_CHANGED, {"loading": flag})

    # ------------------------------------------------------------------
    # Sort
    # ------------------------------------------------------------------
    @property
    def sort_state(self) -> SortState:
        return self.sorter.state

    def toggle_sort(self, column_id: str) -> SortState:
        before = self.sorter.state
        state = self.sorter.toggle_sort(column_id)
        if state != before:
            self._publish(GridEvent.SORT_CHANGED, state)
        return state

    def set_sort(self, state: SortState) -> SortState:
        before = self.sorter.state
        result = self.sorter.set_sort(state)
        if result != before:
            self._publish(GridEvent.SORT_CHANGED, result)
        return result

    # ------------------------------------------------------------------
    # Search & filters
    # ------------------------------------------------------------------
    @property
    def query(self) -> str:
        return self._query

    def set_query(self, query: str) -> None:
        query = query or ""
        if query == self._query:
            return
        self._query = query
        self._publish(GridEvent.QUERY_CHANGED, {"query": query})

    def set_filter(self, key: str, value: Optional[str]) -> None:
        self.field_filter.set(key, value)
        self._publish(GridEvent.FILTERS_CHANGED, self.field_filter.values())

    def set_filters(self, values: Mapping[str, Optional[str]]) -> None:
        self.field_filter.clear()
        for key, value in values.items():
            self.field_filter.set(key, value)
        self._publish(GridEvent.FILTERS_CHANGED, self.field_filter.values())

    def clear_filters(self) -> None:
        """Reset structured filters and the query (filter bar "Clear")."""
        self.field_filter.clear()
        had_query = bool(self._query)
        self._query = ""
        self._publish(GridEvent.FILTERS_CHANGED, {})
        if had_query:
            self._publish(GridEvent.QUERY_CHANGED, {"query": ""})

    def set_row_filter(self, row_filter: Optional[RowFilter[T]]) -> None:
        self._row_filter = row_filter
        self._publish(GridEvent.FILTERS_CHANGED, self.field_filter.values())

    @property
    def active_filter_count(self) -> int:
        return self.field_filter.active_count

    def _combined_filter(self) -> Optional[RowFilter[T]]:
        custom = self._row_filter
        fields = self.field_filter if self.field_filter.active_count else None
        if custom is None:
            return fields
        if fields is None:
            return custom
        return lambda row: fields(row) and bool(custom(row))

    # ------------------------------------------------------------------
    # Derived rows
    # ------------------------------------------------------------------
    def visible_rows(self) -> List[T]:
        ordered = self.sorter.apply(self._rows)
        return self.search.apply(ordered, self._query, self._combined_filter())

    def visible_ids(self) -> List[str]:
        return [self._identify(r) for r in self.visible_rows()]

    @property
    def render_state(self) -> RenderState:
        if self._loading:
            return RenderState.LOADING
        if not self.visible_rows():
            return RenderState.EMPTY
        return RenderState.POPULATED

    # ------------------------------------------------------------------
    # Selection
    # ------------------------------------------------------------------
    def _ensure_pruned(self) -> None:
        if self._selection_stale:
            self.selection.prune(self._by_id.keys())
            self._selection_stale = False

    def selected_ids(self) -> List[str]:
        self._ensure_pruned()
        return self.selection.ids()

    def selected_rows(self) -> List[T]:
        """Full rows for the selection, re-derived from the current data."""
        self._ensure_pruned()
        return [
            row
            for row_id, row in zip(self._row_ids, self._rows)
            if row_id in self.selection and self._by_id.get(row_id) is row
        ]

    def is_selected(self, row_id: str) -> bool:
        self._ensure_pruned()
        return self.selection.is_selected(row_id)

    @property
    def all_selected(self) -> bool:
        self._ensure_pruned()
        return self.selection.all_selected(self.visible_ids())

    @property
    def some_selected(self) -> bool:
        self._ensure_pruned()
        return self.selection.some_selected(self.visible_ids())

    def toggle_row(self, row_id: str) -> bool:
        self._ensure_pruned()
        if row_id not in self._by_id:
            _log.debug("Ignoring selection toggle for unknown row %r", row_id)
            return False
        flag = self.selection.toggle_row(row_id)
        self._publish(GridEvent.SELECTION_CHANGED, self.selection.ids())
        return flag

    def toggle_all(self) -> None:
        self._ensure_pruned()
        self.selection.toggle_all(self.visible_ids())
        self._publish(GridEvent.SELECTION_CHANGED, self.selection.ids())

    def set_selection(self, row_ids: Iterable[str]) -> None:
        self._ensure_pruned()
        self.selection.set_selected(i for i in row_ids if i in self._by_id)
        self._publish(GridEvent.SELECTION_CHANGED, self.selection.ids())

    def clear_selection(self) -> None:
        self.selection.clear()
        self._selection_stale = False
        self._publish(GridEvent.SELECTION_CHANGED, [])

    # ------------------------------------------------------------------
    # View / density / columns
    # ------------------------------------------------------------------
    @property
    def view_mode(self) -> ViewMode:
        return self.view.mode

    @property
    def density(self) -> Density:
        return self.view.effective_density

    def set_view_mode(self, mode: ViewMode | str) -> None:
        if self.view.set_mode(mode):
            self._publish(GridEvent.VIEW_CHANGED, {"mode": self.view.mode.value})

    def set_density(self, density: Density | str) -> None:
        if self.view.set_density(density):
            self._publish(GridEvent.VIEW_CHANGED, {"density": self.view.density.value})

    def visible_columns(self) -> List[ColumnDef[T]]:
        return self.visibility.visible_columns(self.registry)

    def toggle_column(self, column_id: str) -> bool:
        if column_id not in self.registry:
            _log.warning("Ignoring visibility toggle for unknown column %r", column_id)
            return False
        flag = self.visibility.toggle(column_id)
        self._publish(GridEvent.COLUMNS_CHANGED, {"column": column_id, "visible": flag})
        return flag

    def set_column_visible(self, column_id: str, flag: bool) -> None:
        if column_id not in self.registry:
            _log.warning("Ignoring visibility change for unknown column %r", column_id)
            return
        if self.visibility.is_visible(column_id) == bool(flag):
            return
        self.visibility.set_visible(column_id, bool(flag))
        self._publish(GridEvent.COLUMNS_CHANGED, {"column": column_id, "visible": bool(flag)})

    # ------------------------------------------------------------------
    # Highlight
    # ------------------------------------------------------------------
    @property
    def highlight_enabled(self) -> bool:
        return self.highlighter.enabled

    def set_highlighting(self, flag: bool) -> None:
        if self.highlighter.enabled == bool(flag):
            return
        self.highlighter.enabled = bool(flag)
        self._publish(GridEvent.HIGHLIGHT_TOGGLED, {"enabled": self.highlighter.enabled})

    def toggle_highlighting(self) -> bool:
        flag = self.highlighter.toggle()
        self._publish(GridEvent.HIGHLIGHT_TOGGLED, {"enabled": flag})
        return flag

    def highlight_for(self, row: T) -> Highlight:
        return self.highlighter.classify(row, self._identify(row))

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------
    def actions_for(self, row: T) -> List[RowAction[T]]:
        return list(self.actions.actions_for(row))

    @property
    def bulk_actions_enabled(self) -> bool:
        return self.actions.has_bulk_actions and bool(self.selected_ids())

    def dispatch_row_action(self, action_id: str, row_id: str) -> ActionDispatch:
        row = self._by_id.get(row_id)
        if row is None:
            _log.debug("Row action %r for unknown row %r", action_id, row_id)
            return ActionDispatch(action_id, False)
        outcome = self.actions.dispatch_row(action_id, row)
        self._announce(outcome, "row", [row_id])
        return outcome

    def dispatch_quick_action(self, action_id: str, row_id: str) -> ActionDispatch:
        row = self._by_id.get(row_id)
        if row is None:
            _log.debug("Quick action %r for unknown row %r", action_id, row_id)
            return ActionDispatch(action_id, False)
        outcome = self.actions.dispatch_quick(action_id, row)
        self._announce(outcome, "quick", [row_id])
        return outcome

    def dispatch_bulk_action(self, action_id: str) -> ActionDispatch:
        rows = self.selected_rows()
        outcome = self.actions.dispatch_bulk(action_id, rows)
        self._announce(outcome, "bulk", [self._identify(r) for r in rows])
        return outcome

    def click_row(self, row_id: str) -> ActionDispatch:
        row = self._by_id.get(row_id)
        if row is None or self._on_row_click is None:
            return ActionDispatch("row_click", False)
        return ActionDispatch("row_click", True, self._on_row_click(row))

    def _announce(self, outcome: ActionDispatch, kind: str, row_ids: List[str]) -> None:
        if outcome.dispatched:
            self._publish(
                GridEvent.ACTION_DISPATCHED,
                {"action": outcome.action_id, "kind": kind, "rows": row_ids},
            )

    # ------------------------------------------------------------------
    # Toolbar affordances
    # ------------------------------------------------------------------
    @property
    def density_control_available(self) -> bool:
        return self.view.density_control_available

    @property
    def column_menu_available(self) -> bool:
        return self.view.column_menu_available

    @property
    def highlight_toggle_available(self) -> bool:
        return self.highlighter.toggle_available

    def empty_state(self) -> EmptyStateTemplate:
        cfg = self.config
        return EmptyStateTemplate(cfg.empty_title, cfg.empty_description, cfg.empty_icon)

    # ------------------------------------------------------------------
    # Snapshot
    # ------------------------------------------------------------------
    def snapshot(self) -> GridSnapshot[T]:
        columns = tuple(self.visible_columns())
        base: Dict[str, Any] = dict(
            columns=columns,
            sort=self.sorter.state,
            view_mode=self.view.mode,
            density=self.view.effective_density,
            query=self._query,
            active_filter_count=self.active_filter_count,
            show_selection_column=self.config.selectable,
            show_action_column=self.actions.has_row_actions,
            highlight_enabled=self.highlighter.enabled,
        )
        if self._loading:
            return GridSnapshot(
                render_state=RenderState.LOADING,
                selected_ids=tuple(self.selected_ids()),
                skeleton=(self.config.skeleton_rows, len(self.registry)),
                **base,
            )
        visible = self.visible_rows()
        selected_ids = self.selected_ids()
        visible_ids = [self._identify(r) for r in visible]
        column_ids = [c.id for c in columns]
        views = tuple(
            RowView(
                key=row_id,
                row=row,
                cells=self.registry.present_all(row, column_ids),
                selected=self.selection.is_selected(row_id),
                highlight=self.highlighter.classify(row, row_id),
                actions=self.actions.actions_for(row),
                quick_actions=self.actions.quick_actions,
            )
            for row_id, row in zip(visible_ids, visible)
        )
        state = RenderState.POPULATED if views else RenderState.EMPTY
        return GridSnapshot(
            render_state=state,
            rows=views,
            selected_ids=tuple(selected_ids),
            all_selected=self.selection.all_selected(visible_ids),
            some_selected=self.selection.some_selected(visible_ids),
            bulk_actions_enabled=self.actions.has_bulk_actions and bool(selected_ids),
            empty_state=self.empty_state() if state is RenderState.EMPTY else None,
            **base,
        )

    # ------------------------------------------------------------------
    def _publish(self, name: GridEvent, payload: Any = None) -> None:
        if self._bus is not None:
            self._bus.publish(name, payload)
