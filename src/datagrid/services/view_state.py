"""View / density controller.

Responsibilities:
 - Hold the current view mode ("table" | "card" | "compact")
 - Hold the stored density ("comfortable" | "dense")
 - Report the effective density: compact mode forces "dense" while the
   stored value is remembered for when the user switches back
 - Report which toolbar affordances apply (density and column menus exist
   only in table mode)

Mode and density never touch sort, filter or selection state.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging

from datagrid.models import Density, ViewMode

__all__ = ["ViewStateController"]

_log = logging.getLogger(__name__)


@dataclass
class ViewStateController:
    mode: ViewMode = ViewMode.TABLE
    density: Density = Density.COMFORTABLE

    @property
    def effective_density(self) -> Density:
        if self.mode is ViewMode.COMPACT:
            return Density.DENSE
        return self.density

    @property
    def density_control_available(self) -> bool:
        return self.mode is ViewMode.TABLE

    @property
    def column_menu_available(self) -> bool:
        return self.mode is ViewMode.TABLE

    def set_mode(self, mode: ViewMode | str) -> bool:
        """Switch view mode; returns True when the mode changed."""
        try:
            new_mode = ViewMode(mode)
        except ValueError:
            _log.warning("Unsupported view mode: %r", mode)
            return False
        if new_mode is self.mode:
            return False
        self.mode = new_mode
        return True

    def set_density(self, density: Density | str) -> bool:
        """Store a density; returns True when the stored value changed."""
        try:
            new_density = Density(density)
        except ValueError:
            _log.warning("Unsupported density mode: %r", density)
            return False
        if new_density is self.density:
            return False
        self.density = new_density
        return True
