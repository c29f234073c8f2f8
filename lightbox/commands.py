"""Command Pattern for input handling.

Commands encapsulate actions that can be triggered by various inputs.
Each command has an execute() method and optional can_execute() for guards.
Viewer commands act on a GalleryViewer; page commands act on a GalleryPage.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, List, Optional

if TYPE_CHECKING:
    from .page import GalleryPage
    from .viewer import GalleryViewer

from .layout import Surface
from .logging import debug


class Command(ABC):
    """Base class for all commands."""

    @abstractmethod
    def execute(self, target: Any) -> bool:
        """Execute the command. Returns True if action was taken."""

    def can_execute(self, target: Any) -> bool:
        """Check if command can be executed. Override for guards."""
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Navigation Commands
# ═══════════════════════════════════════════════════════════════════════════

class NavigateNext(Command):
    """Show the next image, wrapping to the first."""

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.is_open and viewer.has_multiple

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        debug(f"[CMD] NavigateNext from {viewer.current_index}")
        return viewer.next()


class NavigatePrev(Command):
    """Show the previous image, wrapping to the last."""

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.is_open and viewer.has_multiple

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        debug(f"[CMD] NavigatePrev from {viewer.current_index}")
        return viewer.prev()


@dataclass
class NavigateToIndex(Command):
    """Navigate to specific index (thumbnail click)."""
    target_index: int

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return (viewer.is_open and
                0 <= self.target_index < viewer.count and
                self.target_index != viewer.current_index)

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        debug(f"[CMD] NavigateToIndex: {viewer.current_index} -> {self.target_index}")
        return viewer.go_to(self.target_index)


# ═══════════════════════════════════════════════════════════════════════════
# Swipe Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class StartSwipe(Command):
    """Finger touched down on the image area."""
    x: float
    y: float = 0.0

    def execute(self, viewer: "GalleryViewer") -> bool:
        viewer.touch_start(self.x, self.y)
        return True


@dataclass
class UpdateSwipe(Command):
    """Finger moved; may trigger one navigation."""
    x: float

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.state.touch.active

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        return viewer.touch_move(self.x)


class EndSwipe(Command):
    """Finger lifted."""

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.state.touch.active

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        viewer.touch_end()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Viewer Control Commands
# ═══════════════════════════════════════════════════════════════════════════

class ToggleFullscreen(Command):
    """Enter or leave fullscreen."""

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.is_open

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        viewer.toggle_fullscreen()
        debug(f"[CMD] ToggleFullscreen: now={viewer.is_fullscreen}")
        return True


class CloseViewer(Command):
    """Dismiss the viewer (close button or backdrop)."""

    def can_execute(self, viewer: "GalleryViewer") -> bool:
        return viewer.is_open

    def execute(self, viewer: "GalleryViewer") -> bool:
        if not self.can_execute(viewer):
            return False
        viewer.dismiss()
        return True


# ═══════════════════════════════════════════════════════════════════════════
# Page Commands
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class OpenAt(Command):
    """Grid tile clicked: open the viewer on that image."""
    index: int

    def can_execute(self, page: "GalleryPage") -> bool:
        return 0 <= self.index < page.count and not page.viewer.is_open

    def execute(self, page: "GalleryPage") -> bool:
        if not self.can_execute(page):
            return False
        page.open_at(self.index)
        return True


@dataclass
class ScrollGrid(Command):
    """Mouse wheel over the grid."""
    delta: float

    def execute(self, page: "GalleryPage") -> bool:
        page.scroll(self.delta)
        return True


class QuitApp(Command):
    """Close the application window."""

    def execute(self, target: Any) -> bool:
        debug("[CMD] QuitApp")
        return True


def command_for_click(surface: Surface, index: Optional[int] = None) -> Optional[Command]:
    """Command for a left click on a viewer surface, if the surface has one."""
    if surface in (Surface.CLOSE, Surface.BACKDROP):
        return CloseViewer()
    if surface == Surface.FULLSCREEN:
        return ToggleFullscreen()
    if surface == Surface.PREV:
        return NavigatePrev()
    if surface == Surface.NEXT:
        return NavigateNext()
    if surface == Surface.THUMBNAIL and index is not None:
        return NavigateToIndex(index)
    return None


def run_commands(commands: List[Command], target: Any) -> int:
    """Execute commands in order. Returns how many took effect."""
    done = 0
    for cmd in commands:
        if cmd.execute(target):
            done += 1
    return done
