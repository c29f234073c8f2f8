"""Input Handler - maps raylib input to commands and key events.

Keys are published on the event bus as ``KeyPressed`` so that only code
currently listening (the open viewer) reacts to them. Mouse and touch input
are hit-tested against the current layout and turned into commands.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Tuple

if TYPE_CHECKING:
    from .page import GalleryPage

from .commands import (
    Command, StartSwipe, UpdateSwipe, EndSwipe,
    OpenAt, ScrollGrid, QuitApp, command_for_click,
)
from .config import (
    KEY_CLOSE, KEY_NEXT_IMAGE, KEY_PREV_IMAGE, KEY_TOGGLE_FULLSCREEN,
    KEY_COPY, KEY_LEFT_CONTROL, KEY_RIGHT_CONTROL,
    GRID_SCROLL_STEP, DRAG_START_PX,
)
from .events import EventBus, KeyPressed
from .layout import Surface, PROTECTED_SURFACES, ViewerLayout, hit_test
from .rl_compat import rl, mouse_position, touch_count, touch_position
from .viewer import Interaction

VIEWER_KEYS = (KEY_CLOSE, KEY_NEXT_IMAGE, KEY_PREV_IMAGE, KEY_TOGGLE_FULLSCREEN)


@dataclass
class MouseState:
    """Current mouse state snapshot."""
    x: float = 0.0
    y: float = 0.0
    left_pressed: bool = False
    left_released: bool = False
    left_down: bool = False
    right_pressed: bool = False
    wheel: float = 0.0


@dataclass
class InputFrame:
    """Everything input produced this frame, split by target."""
    viewer_commands: List[Command] = field(default_factory=list)
    page_commands: List[Command] = field(default_factory=list)


@dataclass
class InputHandler:
    """Polls raylib once per frame."""
    bus: EventBus

    _press_pos: Optional[Tuple[float, float]] = None
    _press_surface: Optional[Surface] = None
    _drag_reported: bool = False
    _touching: bool = False

    def poll_mouse(self) -> MouseState:
        x, y = mouse_position()
        return MouseState(
            x=x,
            y=y,
            left_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_LEFT),
            left_released=rl.IsMouseButtonReleased(rl.MOUSE_BUTTON_LEFT),
            left_down=rl.IsMouseButtonDown(rl.MOUSE_BUTTON_LEFT),
            right_pressed=rl.IsMouseButtonPressed(rl.MOUSE_BUTTON_RIGHT),
            wheel=rl.GetMouseWheelMove(),
        )

    def poll(self, page: "GalleryPage", layout: Optional[ViewerLayout]) -> InputFrame:
        """Collect this frame's commands. ``layout`` is None while the viewer is closed."""
        frame = InputFrame()
        viewer = page.viewer
        was_open = viewer.is_open

        for key in VIEWER_KEYS:
            if rl.IsKeyPressed(key):
                if key == KEY_CLOSE and not was_open:
                    frame.page_commands.append(QuitApp())
                else:
                    self.bus.publish(KeyPressed(key))

        mouse = self.poll_mouse()
        if was_open and layout is not None:
            self._poll_viewer(page, layout, mouse, frame)
        else:
            self._poll_page(page, mouse, frame)
        return frame

    # ═══════════════════════════════════════════════════════════════════════
    # Viewer
    # ═══════════════════════════════════════════════════════════════════════

    def _poll_viewer(self, page: "GalleryPage", layout: ViewerLayout,
                     mouse: MouseState, frame: InputFrame) -> None:
        viewer = page.viewer
        surface, index = hit_test(layout, mouse.x, mouse.y)

        ctrl = rl.IsKeyDown(KEY_LEFT_CONTROL) or rl.IsKeyDown(KEY_RIGHT_CONTROL)
        if ctrl and rl.IsKeyPressed(KEY_COPY):
            viewer.guard_allows(Interaction.SELECT)

        if mouse.right_pressed and surface in PROTECTED_SURFACES:
            viewer.guard_allows(Interaction.CONTEXT_MENU)

        if mouse.left_pressed:
            self._press_pos = (mouse.x, mouse.y)
            self._press_surface = surface
            self._drag_reported = False
            cmd = command_for_click(surface, index)
            if cmd is not None:
                frame.viewer_commands.append(cmd)
        elif mouse.left_down and self._press_pos is not None and not self._drag_reported:
            dx = mouse.x - self._press_pos[0]
            dy = mouse.y - self._press_pos[1]
            moved = dx * dx + dy * dy > DRAG_START_PX * DRAG_START_PX
            if moved and self._press_surface in (Surface.IMAGE, Surface.THUMBNAIL):
                viewer.guard_allows(Interaction.DRAG)
                self._drag_reported = True
        if mouse.left_released:
            self._press_pos = None
            self._press_surface = None

        self._poll_touch(layout, frame)

    def _poll_touch(self, layout: ViewerLayout, frame: InputFrame) -> None:
        count = touch_count()
        if count > 0:
            x, y = touch_position(0)
            if not self._touching:
                self._touching = True
                surface, _ = hit_test(layout, x, y)
                if surface == Surface.IMAGE:
                    frame.viewer_commands.append(StartSwipe(x, y))
            else:
                frame.viewer_commands.append(UpdateSwipe(x))
        elif self._touching:
            self._touching = False
            frame.viewer_commands.append(EndSwipe())

    # ═══════════════════════════════════════════════════════════════════════
    # Page grid
    # ═══════════════════════════════════════════════════════════════════════

    def _poll_page(self, page: "GalleryPage", mouse: MouseState, frame: InputFrame) -> None:
        self._touching = False
        self._press_pos = None
        page.grid.hover_index = page.tile_at(mouse.x, mouse.y)
        if mouse.wheel:
            frame.page_commands.append(ScrollGrid(-mouse.wheel * GRID_SCROLL_STEP))
        if mouse.left_pressed and page.grid.hover_index >= 0:
            frame.page_commands.append(OpenAt(page.grid.hover_index))
