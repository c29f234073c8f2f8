"""Pure geometry for the viewer and the page grid - no drawing, no state mutation."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, Tuple

from .config import (
    HEADER_H, HEADER_BTN_RADIUS, HEADER_PADDING,
    NAV_BTN_RADIUS, NAV_BTN_MARGIN,
    CAPTION_H, THUMB_SIZE, THUMB_SPACING, THUMB_STRIP_PADDING,
    IMAGE_PADDING, VIEWER_MAX_W, VIEWER_HEIGHT_FRAC,
    GRID_TILE_MIN, GRID_SPACING, GRID_MARGIN, GRID_TITLE_H,
)
from .math_utils import clamp, fit_size
from .types import Rect, Circle


class Surface(Enum):
    """What a point in the window lands on."""
    BACKDROP = auto()
    PANEL = auto()
    CLOSE = auto()
    FULLSCREEN = auto()
    PREV = auto()
    NEXT = auto()
    IMAGE = auto()
    CAPTION = auto()
    THUMBNAIL = auto()


# Surfaces where context menu, drag and selection are refused.
PROTECTED_SURFACES = frozenset({
    Surface.PANEL, Surface.IMAGE, Surface.CAPTION, Surface.THUMBNAIL,
    Surface.PREV, Surface.NEXT, Surface.CLOSE, Surface.FULLSCREEN,
})


@dataclass
class ViewerLayout:
    """Positions of every viewer element for one frame."""
    panel: Rect
    header: Rect
    close_btn: Circle
    fullscreen_btn: Circle
    counter_pos: Tuple[float, float]
    image_area: Rect
    prev_btn: Optional[Circle] = None
    next_btn: Optional[Circle] = None
    caption: Optional[Rect] = None
    strip: Optional[Rect] = None
    thumbs: List[Rect] = field(default_factory=list)


def strip_content_width(count: int) -> float:
    if count <= 0:
        return 0.0
    return 2 * THUMB_STRIP_PADDING + count * THUMB_SIZE + (count - 1) * THUMB_SPACING


def strip_scroll_for(index: int, count: int, strip_w: float) -> float:
    """Scroll offset that centres thumbnail index inside the strip."""
    content = strip_content_width(count)
    if content <= strip_w:
        return 0.0
    tile_center = THUMB_STRIP_PADDING + index * (THUMB_SIZE + THUMB_SPACING) + THUMB_SIZE / 2.0
    return clamp(tile_center - strip_w / 2.0, 0.0, content - strip_w)


def viewer_panel(screen_w: int, screen_h: int, fullscreen: bool) -> Rect:
    if fullscreen:
        return Rect(0, 0, screen_w, screen_h)
    w = min(VIEWER_MAX_W, screen_w - 2 * GRID_MARGIN)
    h = screen_h * VIEWER_HEIGHT_FRAC
    return Rect((screen_w - w) / 2.0, (screen_h - h) / 2.0, w, h)


def compute_viewer_layout(
    screen_w: int,
    screen_h: int,
    *,
    fullscreen: bool = False,
    count: int = 1,
    show_navigation: bool = False,
    show_thumbnails: bool = False,
    show_caption: bool = False,
    strip_scroll: float = 0.0,
) -> ViewerLayout:
    """Lay out the viewer: header, image, arrows, caption and strip."""
    panel = viewer_panel(screen_w, screen_h, fullscreen)
    header = Rect(panel.x, panel.y, panel.w, HEADER_H)
    cy = header.y + HEADER_H / 2.0
    close_btn = Circle(panel.x + HEADER_PADDING + HEADER_BTN_RADIUS, cy, HEADER_BTN_RADIUS)
    fullscreen_btn = Circle(panel.x + panel.w - HEADER_PADDING - HEADER_BTN_RADIUS, cy, HEADER_BTN_RADIUS)

    bottom = panel.y + panel.h
    strip = None
    thumbs: List[Rect] = []
    if show_thumbnails and count > 1:
        strip_h = THUMB_SIZE + 2 * THUMB_STRIP_PADDING
        strip = Rect(panel.x, bottom - strip_h, panel.w, strip_h)
        bottom = strip.y
        x0 = strip.x + THUMB_STRIP_PADDING - strip_scroll
        ty = strip.y + THUMB_STRIP_PADDING
        thumbs = [Rect(x0 + i * (THUMB_SIZE + THUMB_SPACING), ty, THUMB_SIZE, THUMB_SIZE)
                  for i in range(count)]

    caption = None
    if show_caption:
        caption = Rect(panel.x, bottom - CAPTION_H, panel.w, CAPTION_H)
        bottom = caption.y

    top = header.y + header.h
    image_area = Rect(panel.x + IMAGE_PADDING, top + IMAGE_PADDING,
                      max(0.0, panel.w - 2 * IMAGE_PADDING),
                      max(0.0, bottom - top - 2 * IMAGE_PADDING))

    prev_btn = next_btn = None
    if show_navigation and count > 1:
        my = image_area.y + image_area.h / 2.0
        prev_btn = Circle(panel.x + NAV_BTN_MARGIN + NAV_BTN_RADIUS, my, NAV_BTN_RADIUS)
        next_btn = Circle(panel.x + panel.w - NAV_BTN_MARGIN - NAV_BTN_RADIUS, my, NAV_BTN_RADIUS)

    return ViewerLayout(
        panel=panel, header=header,
        close_btn=close_btn, fullscreen_btn=fullscreen_btn,
        counter_pos=(panel.x + panel.w / 2.0, cy),
        image_area=image_area,
        prev_btn=prev_btn, next_btn=next_btn,
        caption=caption, strip=strip, thumbs=thumbs,
    )


def layout_for(viewer, screen_w: int, screen_h: int, strip_scroll: float = 0.0) -> ViewerLayout:
    """compute_viewer_layout driven by a GalleryViewer's current values."""
    return compute_viewer_layout(
        screen_w, screen_h,
        fullscreen=viewer.is_fullscreen,
        count=viewer.count,
        show_navigation=viewer.navigation_visible,
        show_thumbnails=viewer.thumbnails_visible,
        show_caption=viewer.caption_visible,
        strip_scroll=strip_scroll,
    )


def image_rect(area: Rect, img_w: int, img_h: int) -> Rect:
    """Image scaled down to fit the area (never up), centred."""
    w, h = fit_size(img_w, img_h, area.w, area.h)
    return Rect(area.x + (area.w - w) / 2.0, area.y + (area.h - h) / 2.0, w, h)


def hit_test(layout: ViewerLayout, x: float, y: float) -> Tuple[Surface, Optional[int]]:
    """Find the viewer surface under a point; the int is a thumbnail index."""
    if layout.close_btn.contains(x, y):
        return (Surface.CLOSE, None)
    if layout.fullscreen_btn.contains(x, y):
        return (Surface.FULLSCREEN, None)
    if layout.prev_btn is not None and layout.prev_btn.contains(x, y):
        return (Surface.PREV, None)
    if layout.next_btn is not None and layout.next_btn.contains(x, y):
        return (Surface.NEXT, None)
    if layout.strip is not None and layout.strip.contains(x, y):
        for i, r in enumerate(layout.thumbs):
            if r.contains(x, y):
                return (Surface.THUMBNAIL, i)
        return (Surface.PANEL, None)
    if layout.image_area.contains(x, y):
        return (Surface.IMAGE, None)
    if layout.caption is not None and layout.caption.contains(x, y):
        return (Surface.CAPTION, None)
    if layout.panel.contains(x, y):
        return (Surface.PANEL, None)
    return (Surface.BACKDROP, None)


# ═══════════════════════════════════════════════════════════════════════════
# Page grid
# ═══════════════════════════════════════════════════════════════════════════

def grid_columns(screen_w: int) -> int:
    """1 column on narrow windows, 2 on medium, 3 on wide."""
    if screen_w < 640:
        return 1
    if screen_w < 1024:
        return 2
    return 3


def grid_tile_size(screen_w: int) -> float:
    cols = grid_columns(screen_w)
    usable = screen_w - 2 * GRID_MARGIN - (cols - 1) * GRID_SPACING
    return max(float(GRID_TILE_MIN) / 2.0, usable / cols)


def grid_tiles(count: int, screen_w: int, scroll_y: float = 0.0) -> List[Rect]:
    """Square tile rectangles for count images, in reading order."""
    cols = grid_columns(screen_w)
    size = grid_tile_size(screen_w)
    tiles = []
    for i in range(count):
        row, col = divmod(i, cols)
        x = GRID_MARGIN + col * (size + GRID_SPACING)
        y = GRID_TITLE_H + row * (size + GRID_SPACING) - scroll_y
        tiles.append(Rect(x, y, size, size))
    return tiles


def grid_content_height(count: int, screen_w: int) -> float:
    if count <= 0:
        return float(GRID_TITLE_H)
    rows = (count + grid_columns(screen_w) - 1) // grid_columns(screen_w)
    size = grid_tile_size(screen_w)
    return GRID_TITLE_H + rows * size + (rows - 1) * GRID_SPACING + GRID_MARGIN


def grid_hit(count: int, screen_w: int, scroll_y: float, x: float, y: float) -> int:
    """Index of the tile under a point, or -1."""
    if y < GRID_TITLE_H:
        return -1
    for i, r in enumerate(grid_tiles(count, screen_w, scroll_y)):
        if r.contains(x, y):
            return i
    return -1
