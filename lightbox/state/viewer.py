"""Viewer state - index, loading and fullscreen flags."""

from __future__ import annotations
from dataclasses import dataclass, field

from .input import TouchState


@dataclass
class ViewerState:
    """Ephemeral state owned by one viewer instance."""
    current_index: int = 0
    is_loading: bool = True
    is_fullscreen: bool = False
    load_failed: bool = False
    touch: TouchState = field(default_factory=TouchState)

    @property
    def touch_start(self):
        """Start position of the active swipe, or None."""
        return self.touch.start

    def mark_loading(self) -> None:
        """Flag the current image as not yet displayed."""
        self.is_loading = True
        self.load_failed = False

    def reset(self) -> None:
        """Return to the state a freshly opened viewer starts from."""
        self.current_index = 0
        self.is_loading = True
        self.is_fullscreen = False
        self.load_failed = False
        self.touch.clear()
