"""Tests for viewer and grid geometry."""

from __future__ import annotations

import pytest

from lightbox.config import THUMB_SIZE, GRID_MARGIN, GRID_TITLE_H, VIEWER_MAX_W
from lightbox.layout import (
    Surface, compute_viewer_layout, hit_test, image_rect, strip_scroll_for,
    strip_content_width, grid_columns, grid_tiles, grid_hit, grid_content_height,
    layout_for,
)
from lightbox.types import Rect


class TestViewerLayout:
    def test_windowed_panel_is_capped_and_centred(self) -> None:
        lay = compute_viewer_layout(1600, 1000)
        assert lay.panel.w == VIEWER_MAX_W
        assert lay.panel.x == (1600 - VIEWER_MAX_W) / 2
        assert lay.panel.h == pytest.approx(900)

    def test_fullscreen_panel_fills_window(self) -> None:
        lay = compute_viewer_layout(1600, 1000, fullscreen=True)
        assert (lay.panel.x, lay.panel.y, lay.panel.w, lay.panel.h) == (0, 0, 1600, 1000)

    def test_optional_parts_absent_by_default(self) -> None:
        lay = compute_viewer_layout(1280, 800)
        assert lay.prev_btn is None and lay.next_btn is None
        assert lay.caption is None and lay.strip is None
        assert lay.thumbs == []

    def test_strip_and_arrows_need_multiple_images(self) -> None:
        lay = compute_viewer_layout(1280, 800, count=1, show_navigation=True, show_thumbnails=True)
        assert lay.prev_btn is None and lay.strip is None

    def test_full_layout_stacks_vertically(self) -> None:
        lay = compute_viewer_layout(1280, 800, count=5, show_navigation=True,
                                    show_thumbnails=True, show_caption=True)
        assert len(lay.thumbs) == 5
        assert lay.header.y + lay.header.h <= lay.image_area.y
        assert lay.image_area.y + lay.image_area.h <= lay.caption.y
        assert lay.caption.y + lay.caption.h <= lay.strip.y
        assert all(t.w == THUMB_SIZE for t in lay.thumbs)

    def test_layout_for_viewer(self, host) -> None:
        host.open(0)
        lay = layout_for(host.viewer, 1280, 800)
        assert len(lay.thumbs) == 3
        assert lay.next_btn is not None


class TestHitTest:
    @pytest.fixture()
    def lay(self):
        return compute_viewer_layout(1280, 800, count=3, show_navigation=True,
                                     show_thumbnails=True, show_caption=True)

    def test_buttons(self, lay) -> None:
        assert hit_test(lay, lay.close_btn.cx, lay.close_btn.cy) == (Surface.CLOSE, None)
        assert hit_test(lay, lay.fullscreen_btn.cx, lay.fullscreen_btn.cy) == (Surface.FULLSCREEN, None)
        assert hit_test(lay, lay.prev_btn.cx, lay.prev_btn.cy) == (Surface.PREV, None)
        assert hit_test(lay, lay.next_btn.cx, lay.next_btn.cy) == (Surface.NEXT, None)

    def test_thumbnail_index(self, lay) -> None:
        cx, cy = lay.thumbs[2].center
        assert hit_test(lay, cx, cy) == (Surface.THUMBNAIL, 2)

    def test_image_caption_backdrop(self, lay) -> None:
        assert hit_test(lay, *lay.image_area.center)[0] == Surface.IMAGE
        assert hit_test(lay, *lay.caption.center)[0] == Surface.CAPTION
        assert hit_test(lay, 5, 5)[0] == Surface.BACKDROP


class TestStripScroll:
    def test_no_scroll_when_everything_fits(self) -> None:
        assert strip_scroll_for(3, 5, 1000) == 0.0

    def test_scroll_is_clamped(self) -> None:
        count, width = 40, 400
        assert strip_scroll_for(0, count, width) == 0.0
        assert strip_scroll_for(count - 1, count, width) == strip_content_width(count) - width

    def test_current_tile_visible(self) -> None:
        count, width = 40, 400
        for index in (5, 20, 33):
            scroll = strip_scroll_for(index, count, width)
            lay = compute_viewer_layout(width + 2 * GRID_MARGIN, 800, count=count,
                                        show_thumbnails=True, strip_scroll=scroll)
            tile = lay.thumbs[index]
            assert lay.strip.x <= tile.x and tile.x + tile.w <= lay.strip.x + lay.strip.w


class TestImageRect:
    def test_never_upscales(self) -> None:
        r = image_rect(Rect(0, 0, 800, 600), 100, 50)
        assert (r.w, r.h) == (100, 50)
        assert (r.x, r.y) == (350, 275)

    def test_scales_down_keeping_aspect(self) -> None:
        r = image_rect(Rect(0, 0, 400, 400), 1600, 800)
        assert (r.w, r.h) == (400, 200)
        assert r.y == 100


class TestGrid:
    @pytest.mark.parametrize("width, cols", [(500, 1), (800, 2), (1280, 3)])
    def test_columns(self, width, cols) -> None:
        assert grid_columns(width) == cols

    def test_tiles_are_square_and_in_rows(self) -> None:
        tiles = grid_tiles(4, 1280)
        assert all(t.w == t.h for t in tiles)
        assert tiles[0].y == tiles[2].y == GRID_TITLE_H
        assert tiles[3].y > tiles[0].y
        assert tiles[3].x == tiles[0].x

    def test_scroll_moves_tiles_up(self) -> None:
        assert grid_tiles(1, 1280, 50)[0].y == GRID_TITLE_H - 50

    def test_hit(self) -> None:
        tiles = grid_tiles(5, 1280)
        assert grid_hit(5, 1280, 0, *tiles[4].center) == 4
        assert grid_hit(5, 1280, 0, 1, 1) == -1

    def test_hidden_under_title_bar(self) -> None:
        # tile 0 scrolled under the title bar is not clickable there
        assert grid_hit(3, 1280, 60, GRID_MARGIN + 10, GRID_TITLE_H - 10) == -1

    def test_content_height_grows_with_rows(self) -> None:
        assert grid_content_height(6, 1280) > grid_content_height(3, 1280)
        assert grid_content_height(0, 1280) == GRID_TITLE_H
