"""Renderer - handles all drawing operations.

The Renderer only reads the page, the viewer and the texture caches; it never
changes state. Geometry comes from ``layout.py``.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from .loader import ImageStore
    from .page import GalleryPage
    from .viewer import GalleryViewer

from .rl_compat import (
    rl,
    make_rect as RL_Rect, make_vec2 as RL_V2, make_color as RL_Color,
    draw_text as RL_DrawText, draw_text_centered, is_texture_valid,
)
from .config import (
    FONT_SIZE, COUNTER_FONT_SIZE, BACKDROP_ALPHA, GRID_MARGIN, GRID_TITLE_H,
)
from .layout import ViewerLayout, grid_tiles, image_rect
from .logging import now
from .types import Rect, Circle, TextureInfo

PAGE_BG = (17, 24, 39)
PANEL_BG = (0, 0, 0)
TILE_BG = (55, 65, 81)
TEXT_MUTED = (156, 163, 175)


@dataclass
class Renderer:
    """
    Draws the page grid and, on top of it, the open viewer.

    Usage:
        renderer = Renderer(images=image_store, thumbs=thumb_store)
        renderer.draw_frame(page, layout, screen_w, screen_h)
    """
    images: Optional["ImageStore"] = None
    thumbs: Optional["ImageStore"] = None

    def begin_frame(self) -> None:
        rl.BeginDrawing()

    def end_frame(self) -> None:
        rl.EndDrawing()

    # ═══════════════════════════════════════════════════════════════════════
    # Helpers
    # ═══════════════════════════════════════════════════════════════════════

    def _fill(self, r: Rect, rgb, alpha: float = 1.0) -> None:
        rl.DrawRectangle(int(r.x), int(r.y), int(r.w), int(r.h), RL_Color(*rgb, alpha))

    def _texture(self, store: Optional["ImageStore"], source: str) -> Optional[TextureInfo]:
        if store is None:
            return None
        ti = store.get(source)
        if ti is None or not is_texture_valid(ti.tex):
            return None
        return ti

    def draw_texture_in(self, ti: TextureInfo, dst: Rect, alpha: float = 1.0) -> None:
        rl.DrawTexturePro(
            ti.tex,
            RL_Rect(0, 0, ti.w, ti.h),
            RL_Rect(dst.x, dst.y, dst.w, dst.h),
            RL_V2(0, 0), 0.0, RL_Color(255, 255, 255, alpha),
        )

    def _draw_button(self, c: Circle, hovered: bool = False) -> None:
        bg = 0.35 if hovered else 0.2
        rl.DrawCircle(int(c.cx), int(c.cy), c.r, RL_Color(255, 255, 255, bg))

    def _draw_chevron(self, cx: float, cy: float, size: float, direction: int, color) -> None:
        """direction -1 points left, +1 points right."""
        tip = cx + direction * size * 0.4
        tail = cx - direction * size * 0.4
        rl.DrawLineEx(RL_V2(tail, cy - size * 0.6), RL_V2(tip, cy), 2.5, color)
        rl.DrawLineEx(RL_V2(tip, cy), RL_V2(tail, cy + size * 0.6), 2.5, color)

    def draw_spinner(self, cx: float, cy: float, radius: float = 24, thickness: float = 4) -> None:
        angle = (now() * 2.5 * 360.0) % 360.0
        rl.DrawRing(RL_V2(cx, cy), radius - thickness, radius,
                    angle, angle + 90, 32, RL_Color(255, 255, 255, 0.85))

    # ═══════════════════════════════════════════════════════════════════════
    # Page grid
    # ═══════════════════════════════════════════════════════════════════════

    def draw_page(self, page: "GalleryPage", screen_w: int, screen_h: int) -> None:
        rl.ClearBackground(RL_Color(*PAGE_BG))
        if page.grid.loading:
            self.draw_spinner(screen_w / 2.0, screen_h / 2.0, 32, 5)
            return

        if page.is_empty:
            draw_text_centered(page.empty_text, screen_w / 2.0, screen_h / 2.0,
                               FONT_SIZE, RL_Color(*TEXT_MUTED))
        else:
            for i, r in enumerate(grid_tiles(page.count, screen_w, page.grid.scroll_y)):
                if r.y + r.h < 0 or r.y > screen_h:
                    continue
                self._draw_tile(page, i, r)

        # Title bar drawn last so tiles scroll under it
        self._fill(Rect(0, 0, screen_w, GRID_TITLE_H), PAGE_BG)
        RL_DrawText(page.title, GRID_MARGIN, (GRID_TITLE_H - 32) // 2, 32, RL_Color(255, 255, 255))

    def _draw_tile(self, page: "GalleryPage", i: int, r: Rect) -> None:
        img = page.images[i]
        ti = self._texture(self.thumbs, img.source)
        if ti is not None:
            self.draw_texture_in(ti, r)
        else:
            self._fill(r, TILE_BG)
            if self.thumbs is not None and img.source in self.thumbs.failed:
                draw_text_centered(img.alt_text, r.x + r.w / 2, r.y + r.h / 2,
                                   COUNTER_FONT_SIZE, RL_Color(*TEXT_MUTED))
        if i == page.grid.hover_index:
            # hover darkening over the tile
            self._fill(r, (0, 0, 0), 0.2)

    # ═══════════════════════════════════════════════════════════════════════
    # Viewer
    # ═══════════════════════════════════════════════════════════════════════

    def draw_viewer(self, viewer: "GalleryViewer", layout: ViewerLayout,
                    screen_w: int, screen_h: int) -> None:
        self._fill(Rect(0, 0, screen_w, screen_h), (0, 0, 0), BACKDROP_ALPHA)
        self._fill(layout.panel, PANEL_BG)
        self.draw_image(viewer, layout)
        self.draw_nav_buttons(layout)
        self.draw_header(viewer, layout)
        self.draw_caption(viewer, layout)
        self.draw_thumbnail_strip(viewer, layout)

    def draw_header(self, viewer: "GalleryViewer", layout: ViewerLayout) -> None:
        white = RL_Color(255, 255, 255)
        c = layout.close_btn
        self._draw_button(c)
        cross = c.r * 0.4
        rl.DrawLineEx(RL_V2(c.cx - cross, c.cy - cross), RL_V2(c.cx + cross, c.cy + cross), 2.0, white)
        rl.DrawLineEx(RL_V2(c.cx + cross, c.cy - cross), RL_V2(c.cx - cross, c.cy + cross), 2.0, white)

        if viewer.counter_text:
            cx, cy = layout.counter_pos
            draw_text_centered(viewer.counter_text, cx, cy, COUNTER_FONT_SIZE, RL_Color(255, 255, 255, 0.8))

        f = layout.fullscreen_btn
        self._draw_button(f)
        s = f.r * 0.45
        box = RL_Rect(f.cx - s, f.cy - s, 2 * s, 2 * s)
        rl.DrawRectangleLinesEx(box, 2.0, white)
        if viewer.is_fullscreen:
            # inner square marks "exit fullscreen"
            rl.DrawRectangle(int(f.cx - s / 2), int(f.cy - s / 2), int(s), int(s), white)

    def draw_image(self, viewer: "GalleryViewer", layout: ViewerLayout) -> None:
        img = viewer.current_image
        if img is None:
            return
        area = layout.image_area
        cx, cy = area.center

        if viewer.state.load_failed:
            self.draw_placeholder(area, img.alt_text)
            return

        ti = self._texture(self.images, img.source)
        if viewer.is_loading or ti is None:
            self.draw_spinner(cx, cy)
            return
        self.draw_texture_in(ti, image_rect(area, ti.w, ti.h))

    def draw_placeholder(self, area: Rect, alt_text: str) -> None:
        """Shown when the current image failed to load."""
        w = min(area.w, 320)
        h = min(area.h, 200)
        box = Rect(area.x + (area.w - w) / 2, area.y + (area.h - h) / 2, w, h)
        self._fill(box, TILE_BG)
        cx, cy = box.center
        draw_text_centered("Image unavailable", cx, cy - 14, FONT_SIZE, RL_Color(255, 255, 255))
        draw_text_centered(alt_text, cx, cy + 16, COUNTER_FONT_SIZE, RL_Color(*TEXT_MUTED))

    def draw_nav_buttons(self, layout: ViewerLayout) -> None:
        white = RL_Color(255, 255, 255)
        if layout.prev_btn is not None:
            self._draw_button(layout.prev_btn)
            self._draw_chevron(layout.prev_btn.cx, layout.prev_btn.cy, 18, -1, white)
        if layout.next_btn is not None:
            self._draw_button(layout.next_btn)
            self._draw_chevron(layout.next_btn.cx, layout.next_btn.cy, 18, 1, white)

    def draw_caption(self, viewer: "GalleryViewer", layout: ViewerLayout) -> None:
        if layout.caption is None:
            return
        img = viewer.current_image
        if img is None or img.caption is None:
            return
        cx, cy = layout.caption.center
        draw_text_centered(img.caption, cx, cy, FONT_SIZE, RL_Color(255, 255, 255))

    def draw_thumbnail_strip(self, viewer: "GalleryViewer", layout: ViewerLayout) -> None:
        strip = layout.strip
        if strip is None:
            return
        self._fill(strip, (0, 0, 0), 0.5)
        rl.BeginScissorMode(int(strip.x), int(strip.y), int(strip.w), int(strip.h))
        try:
            for i, r in enumerate(layout.thumbs):
                if r.x + r.w < strip.x or r.x > strip.x + strip.w:
                    continue
                current = i == viewer.current_index
                alpha = 1.0 if current else 0.6
                ti = self._texture(self.thumbs, viewer.images[i].source)
                if ti is not None:
                    self.draw_texture_in(ti, r, alpha)
                else:
                    self._fill(r, TILE_BG, alpha)
                if current:
                    rl.DrawRectangleLinesEx(RL_Rect(r.x - 2, r.y - 2, r.w + 4, r.h + 4),
                                            2.0, RL_Color(255, 255, 255))
        finally:
            rl.EndScissorMode()

    # ═══════════════════════════════════════════════════════════════════════
    # Frame
    # ═══════════════════════════════════════════════════════════════════════

    def draw_frame(self, page: "GalleryPage", layout: Optional[ViewerLayout],
                   screen_w: int, screen_h: int) -> None:
        """Complete frame: begin, page, viewer if open, end."""
        self.begin_frame()
        self.draw_page(page, screen_w, screen_h)
        if page.viewer.is_open and layout is not None:
            self.draw_viewer(page.viewer, layout, screen_w, screen_h)
        self.end_frame()
