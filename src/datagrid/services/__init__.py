"""Service layer exports.

Responsibilities:
 - One small stateful service per grid concern (columns, sort, search,
   selection, view, visibility, highlight, actions)
 - EventBus publish/subscribe core for change notification

Each service is a pure function of its input rows and its own state; the
view model wires them together.
"""

from .column_registry import ColumnRegistry  # noqa: F401
from .column_visibility import ColumnVisibilityState  # noqa: F401
from .event_bus import EventBus, GridEvent  # noqa: F401
from .highlight import NewRowTracker, RowHighlighter  # noqa: F401
from .row_actions import ActionDispatch, ActionDispatcher  # noqa: F401
from .search_engine import FieldFilter, SearchEngine  # noqa: F401
from .selection_manager import SelectionManager  # noqa: F401
from .sort_engine import SortEngine  # noqa: F401
from .view_state import ViewStateController  # noqa: F401

__all__ = [
    "ColumnRegistry",
    "ColumnVisibilityState",
    "EventBus",
    "GridEvent",
    "NewRowTracker",
    "RowHighlighter",
    "ActionDispatch",
    "ActionDispatcher",
    "FieldFilter",
    "SearchEngine",
    "SelectionManager",
    "SortEngine",
    "ViewStateController",
]
