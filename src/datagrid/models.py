"""Grid-facing lightweight models and strategy protocols.

Everything here is plain data (dataclasses / enums) plus the ``Protocol``
capabilities a caller injects into the view model. No Qt imports so the
engine stays testable without a QApplication.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Generic, List, Optional, Protocol, Tuple, TypeVar, Union

T = TypeVar("T")

__all__ = [
    "SortDirection",
    "SortState",
    "ViewMode",
    "Density",
    "Highlight",
    "StickyEdge",
    "RenderState",
    "ColumnDef",
    "RowAction",
    "QuickAction",
    "EmptyStateTemplate",
    "RowView",
    "GridSnapshot",
    "Identify",
    "Classifier",
    "RowMatcher",
    "RowFilter",
]


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ViewMode(str, Enum):
    TABLE = "table"
    CARD = "card"
    COMPACT = "compact"


class Density(str, Enum):
    COMFORTABLE = "comfortable"
    DENSE = "dense"


class Highlight(str, Enum):
    WARNING = "warning"
    DANGER = "danger"
    SUCCESS = "success"
    INFO = "info"
    NEW = "new"
    NONE = "none"


class StickyEdge(str, Enum):
    LEFT = "left"
    RIGHT = "right"


class RenderState(str, Enum):
    LOADING = "loading"
    EMPTY = "empty"
    POPULATED = "populated"


@dataclass(frozen=True)
class SortState:
    """Active sort column plus direction.

    ``column_id`` of ``None`` means insertion order; the stored direction is
    then irrelevant and reported as ``"none"`` by ``effective_direction``.
    """

    column_id: Optional[str] = None
    direction: SortDirection = SortDirection.ASC

    @property
    def active(self) -> bool:
        return self.column_id is not None

    @property
    def effective_direction(self) -> str:
        return self.direction.value if self.column_id is not None else "none"

    def indicator_for(self, column_id: str) -> str:
        # Header glyph hint: 'asc' | 'desc' | 'unsorted'
        if self.column_id != column_id:
            return "unsorted"
        return self.direction.value


Accessor = Union[str, Callable[[Any], Any]]
CellFormatter = Callable[[Any, Any], Any]


@dataclass(frozen=True)
class ColumnDef(Generic[T]):
    """Static description of one column.

    ``accessor`` is either a callable ``row -> value`` or a key/attribute name.
    ``cell`` formats ``(row, value)`` into a presentation object. A column
    with neither is display-only and never sorted or searched.
    """

    id: str
    header: str
    accessor: Optional[Accessor] = None
    cell: Optional[CellFormatter] = None
    sortable: bool = False
    width: Union[int, str, None] = None
    sticky: Optional[StickyEdge] = None

    @property
    def resolvable(self) -> bool:
        return self.accessor is not None or self.cell is not None


@dataclass(frozen=True)
class RowAction(Generic[T]):
    id: str
    label: str = ""
    icon: Optional[str] = None
    on_click: Optional[Callable[[T], Any]] = None
    variant: str = "default"
    hidden: Optional[Callable[[T], bool]] = None
    divider: bool = False

    @classmethod
    def separator(cls, action_id: str = "divider") -> "RowAction[T]":
        return cls(id=action_id, divider=True)


@dataclass(frozen=True)
class QuickAction(Generic[T]):
    id: str
    label: str
    on_click: Callable[[T], Any]
    icon: Optional[str] = None
    variant: str = "default"


@dataclass(frozen=True)
class EmptyStateTemplate:
    title: str
    description: str
    icon: Optional[str] = None


@dataclass(frozen=True)
class RowView(Generic[T]):
    """One surviving row annotated for rendering."""

    key: str
    row: T
    cells: Dict[str, Any]
    selected: bool
    highlight: Highlight = Highlight.NONE
    actions: Tuple[RowAction, ...] = ()
    quick_actions: Tuple[QuickAction, ...] = ()


@dataclass(frozen=True)
class GridSnapshot(Generic[T]):
    render_state: RenderState
    rows: Tuple[RowView, ...] = ()
    columns: Tuple[ColumnDef, ...] = ()
    sort: SortState = field(default_factory=SortState)
    view_mode: ViewMode = ViewMode.TABLE
    density: Density = Density.COMFORTABLE
    query: str = ""
    active_filter_count: int = 0
    selected_ids: Tuple[str, ...] = ()
    all_selected: bool = False
    some_selected: bool = False
    show_selection_column: bool = False
    show_action_column: bool = False
    bulk_actions_enabled: bool = False
    highlight_enabled: bool = False
    empty_state: Optional[EmptyStateTemplate] = None
    skeleton: Tuple[int, int] = (0, 0)  # (rows, columns) while loading

    @property
    def row_count(self) -> int:
        return len(self.rows)

    @property
    def selected_count(self) -> int:
        return len(self.selected_ids)

    def keys(self) -> List[str]:
        return [r.key for r in self.rows]


class Identify(Protocol[T]):  # noqa: D401 - structural
    def __call__(self, row: T) -> str: ...  # pragma: no cover - structural


class Classifier(Protocol[T]):
    def __call__(self, row: T) -> Optional[Union[Highlight, str]]: ...  # pragma: no cover


class RowMatcher(Protocol[T]):
    def __call__(self, row: T, query: str) -> bool: ...  # pragma: no cover


class RowFilter(Protocol[T]):
    def __call__(self, row: T) -> bool: ...  # pragma: no cover
