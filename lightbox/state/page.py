"""Page state - grid scroll and thumbnail strip."""

from __future__ import annotations
from dataclasses import dataclass


@dataclass
class GridState:
    """State for the hosting page grid."""
    scroll_y: float = 0.0
    hover_index: int = -1
    loading: bool = True

    def scroll_by(self, dy: float, max_scroll: float) -> None:
        """Scroll the grid, keeping it inside its content."""
        self.scroll_y = max(0.0, min(self.scroll_y + dy, max(0.0, max_scroll)))


@dataclass
class StripState:
    """State for the viewer thumbnail strip."""
    scroll_x: float = 0.0
    hover_index: int = -1
