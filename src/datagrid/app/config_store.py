"""Grid configuration (initial view state and presentation defaults).

Design principles:
- Pure logic (no Qt import) so it can be unit-tested headless.
- Explicit construction argument for a view model instead of module state.
- Graceful fallback: malformed values produce defaults instead of raising.
- No file persistence; view preferences live for one session only.
"""

from __future__ import annotations

from dataclasses import dataclass, asdict, field
import logging
from typing import Any, Dict, FrozenSet, Optional

from datagrid import settings
from datagrid.models import Density, ViewMode

__all__ = ["GridConfig"]

_log = logging.getLogger(__name__)


def _enum_or_default(enum_cls, raw: Any, default):
    try:
        return enum_cls(raw)
    except ValueError:
        _log.warning("Ignoring unknown %s value %r", enum_cls.__name__, raw)
        return default


@dataclass(slots=True)
class GridConfig:
    """Initial state handed to a ``DataTableViewModel``.

    Attributes
    ----------
    view_mode, density: Starting presentation state.
    hidden_columns: Column ids hidden at mount.
    highlight_enabled: Whether row highlighting starts switched on.
    selectable: Enables the selection checkbox column.
    searchable: Enables the search box affordance.
    track_new_rows: Tag rows that appear in a data refresh as ``new``.
    new_row_ttl: Lifetime of a ``new`` tag in seconds.
    skeleton_rows: Placeholder rows reported while loading.
    """

    view_mode: ViewMode = ViewMode(settings.DEFAULT_VIEW_MODE)
    density: Density = Density(settings.DEFAULT_DENSITY)
    hidden_columns: FrozenSet[str] = field(default_factory=frozenset)
    highlight_enabled: bool = False
    selectable: bool = False
    searchable: bool = True
    track_new_rows: bool = False
    new_row_ttl: float = settings.NEW_ROW_TTL
    skeleton_rows: int = settings.SKELETON_ROWS
    search_placeholder: str = settings.DEFAULT_SEARCH_PLACEHOLDER
    empty_title: str = settings.DEFAULT_EMPTY_TITLE
    empty_description: str = settings.DEFAULT_EMPTY_DESCRIPTION
    empty_icon: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["view_mode"] = self.view_mode.value
        data["density"] = self.density.value
        data["hidden_columns"] = sorted(self.hidden_columns)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridConfig":
        # Basic defensive parsing
        defaults = cls()
        try:
            ttl = float(data.get("new_row_ttl", defaults.new_row_ttl))
        except (TypeError, ValueError):
            ttl = defaults.new_row_ttl
        try:
            skeleton = max(0, int(data.get("skeleton_rows", defaults.skeleton_rows)))
        except (TypeError, ValueError):
            skeleton = defaults.skeleton_rows
        hidden = data.get("hidden_columns") or ()
        if isinstance(hidden, str):
            hidden = (hidden,)
        return cls(
            view_mode=_enum_or_default(ViewMode, data.get("view_mode", "table"), defaults.view_mode),
            density=_enum_or_default(Density, data.get("density", "comfortable"), defaults.density),
            hidden_columns=frozenset(str(c) for c in hidden),
            highlight_enabled=bool(data.get("highlight_enabled", False)),
            selectable=bool(data.get("selectable", False)),
            searchable=bool(data.get("searchable", True)),
            track_new_rows=bool(data.get("track_new_rows", False)),
            new_row_ttl=ttl,
            skeleton_rows=skeleton,
            search_placeholder=str(data.get("search_placeholder", defaults.search_placeholder)),
            empty_title=str(data.get("empty_title", defaults.empty_title)),
            empty_description=str(data.get("empty_description", defaults.empty_description)),
            empty_icon=data.get("empty_icon"),
        )
