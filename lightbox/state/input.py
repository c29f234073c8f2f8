"""Input state - swipe tracking."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass
class TouchState:
    """State for an in-progress horizontal swipe."""
    start: Optional[Tuple[float, float]] = None

    @property
    def active(self) -> bool:
        """Check if a swipe gesture is being tracked."""
        return self.start is not None

    def begin(self, x: float, y: float = 0.0) -> None:
        """Record where the gesture started."""
        self.start = (x, y)

    def clear(self) -> None:
        """Forget the gesture."""
        self.start = None

    def horizontal_delta(self, x: float) -> float:
        """Distance travelled leftwards since the start (positive = swipe left)."""
        if self.start is None:
            return 0.0
        return self.start[0] - x
