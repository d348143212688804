"""Global defaults for the data-grid engine."""

from __future__ import annotations

import os
from typing import Final

DEFAULT_VIEW_MODE: Final = "table"
DEFAULT_DENSITY: Final = "comfortable"
DEFAULT_SEARCH_PLACEHOLDER: Final = "Search..."
DEFAULT_EMPTY_TITLE: Final = "No data found"
DEFAULT_EMPTY_DESCRIPTION: Final = "There are no items to display."

# Filter-bar sentinel values meaning "no constraint"
INACTIVE_FILTER_VALUES: Final = frozenset({"", "all"})

# Expiry window for the "new" row tag (seconds)
NEW_ROW_TTL: Final = float(os.environ.get("DATAGRID_NEW_ROW_TTL", "3.0"))
# Placeholder rows rendered while the data source reports loading
SKELETON_ROWS: Final = int(os.environ.get("DATAGRID_SKELETON_ROWS", "5"))
