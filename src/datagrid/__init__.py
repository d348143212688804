"""datagrid public API.

Curated, intentionally small surface for callers composing a grid view
without depending on deep internal module paths.

Design Principles:
- Avoid side-effect heavy imports (no Qt import; the Qt adapter lives in
  ``datagrid.components`` and is imported explicitly).
- Re-export the models, configuration and the table view model.
"""

from __future__ import annotations

from .app.config_store import GridConfig  # noqa: F401
from .models import (  # noqa: F401
    ColumnDef,
    Density,
    EmptyStateTemplate,
    GridSnapshot,
    Highlight,
    QuickAction,
    RenderState,
    RowAction,
    RowView,
    SortDirection,
    SortState,
    StickyEdge,
    ViewMode,
)
from .services.event_bus import Event, EventBus, GridEvent  # noqa: F401
from .viewmodels.table_viewmodel import DataTableViewModel  # noqa: F401

__all__ = [
    "GridConfig",
    "ColumnDef",
    "Density",
    "EmptyStateTemplate",
    "GridSnapshot",
    "Highlight",
    "QuickAction",
    "RenderState",
    "RowAction",
    "RowView",
    "SortDirection",
    "SortState",
    "StickyEdge",
    "ViewMode",
    "Event",
    "EventBus",
    "GridEvent",
    "DataTableViewModel",
]
