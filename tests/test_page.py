"""Tests for the hosting gallery page."""

from __future__ import annotations

import pytest

from lightbox.catalog import Catalog
from lightbox.config import KEY_CLOSE, KEY_NEXT_IMAGE
from lightbox.events import KeyPressed
from lightbox.layout import grid_tiles
from lightbox.page import GalleryPage
from lightbox.types import ImageDescriptor


@pytest.fixture()
def make_page(bus, scheduler, fullscreen, source, thumbs):
    def _make(images=("a.jpg", "b.jpg", "c.jpg")) -> GalleryPage:
        catalog = Catalog(images=tuple(ImageDescriptor(s) for s in images), title="Memory Lane")
        page = GalleryPage(catalog, bus=bus, scheduler=scheduler, fullscreen=fullscreen,
                           image_source=source, thumbs=thumbs)
        page.resize(1280, 800)
        return page

    return _make


class TestSelection:
    def test_starts_closed(self, make_page) -> None:
        page = make_page()
        assert page.selected_index == -1
        assert not page.viewer.is_open
        assert page.title == "Memory Lane"

    def test_open_at_selects(self, make_page) -> None:
        page = make_page()
        assert page.open_at(2)
        assert page.selected_index == 2
        assert page.viewer.current_index == 2

    def test_navigation_updates_selection(self, make_page, bus) -> None:
        page = make_page()
        page.open_at(0)
        bus.publish(KeyPressed(KEY_NEXT_IMAGE))
        assert page.selected_index == 1
        assert page.viewer.current_index == 1

    def test_escape_clears_selection(self, make_page, bus) -> None:
        page = make_page()
        page.open_at(1)
        bus.publish(KeyPressed(KEY_CLOSE))
        assert page.selected_index == -1
        assert not page.viewer.is_open
        assert bus.listener_count() == 0

    def test_reopen_other_tile_after_reset(self, make_page, clock) -> None:
        page = make_page()
        page.open_at(2)
        page.viewer.dismiss()
        clock.advance_ms(400)
        page.viewer.update()
        page.open_at(1)
        assert page.viewer.current_index == 1

    def test_display_flags_follow_count(self, make_page) -> None:
        single = make_page(["only.jpg"])
        assert not single.viewer.show_thumbnails
        assert not single.viewer.show_navigation
        many = make_page()
        assert many.viewer.show_thumbnails and many.viewer.show_navigation

    def test_set_images_closes_when_selection_vanishes(self, make_page) -> None:
        page = make_page()
        page.open_at(2)
        page.set_images(["x.jpg"])
        assert page.selected_index == -1
        assert not page.viewer.is_open
        assert not page.viewer.show_navigation


class TestGrid:
    def test_empty_gallery(self, make_page) -> None:
        page = make_page([])
        assert page.is_empty
        assert page.empty_text == "No memories have been shared yet."
        assert not page.open_at(0)

    def test_scroll_is_clamped(self, make_page) -> None:
        page = make_page([f"{i}.jpg" for i in range(30)])
        page.scroll(-100)
        assert page.grid.scroll_y == 0
        page.scroll(1e9)
        assert page.grid.scroll_y == page.max_scroll > 0

    def test_short_gallery_does_not_scroll(self, make_page) -> None:
        page = make_page()
        page.scroll(500)
        assert page.grid.scroll_y == 0

    def test_visible_thumbnails_requested(self, make_page, thumbs) -> None:
        page = make_page([f"{i}.jpg" for i in range(30)])
        requested = page.request_thumbnails()
        assert 0 < requested < 30
        assert thumbs.preloads[0] == "0.jpg"

    def test_tile_at(self, make_page) -> None:
        page = make_page()
        x, y = grid_tiles(3, 1280)[1].center
        assert page.tile_at(x, y) == 1
