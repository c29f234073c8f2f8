"""GalleryPage - the hosting page: a grid of tiles that opens the viewer."""

from __future__ import annotations
from typing import List, Optional

from .catalog import Catalog
from .config import WINDOW_W, WINDOW_H, EMPTY_GALLERY_TEXT
from .descriptors import ImagesInput, normalize_images
from .events import EventBus
from .layout import grid_tiles, grid_content_height, grid_hit
from .logging import log, debug
from .platform import FullscreenController, ImageSource
from .scheduler import Scheduler
from .state import GridState
from .viewer import GalleryViewer


class GalleryPage:
    """Owns the selection and drives the viewer's props from it.

    ``selected_index`` is -1 while the viewer is closed. The viewer is open
    exactly when it is >= 0, and starts on that index.
    """

    def __init__(
        self,
        catalog: Optional[Catalog] = None,
        *,
        images: ImagesInput = None,
        bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
        fullscreen: Optional[FullscreenController] = None,
        image_source: Optional[ImageSource] = None,
        thumbs: Optional[ImageSource] = None,
    ):
        self.catalog = catalog if catalog is not None else Catalog(images=normalize_images(images))
        self.title = self.catalog.title
        self.thumbs = thumbs
        self.selected_index = -1
        self.grid = GridState(loading=False)
        self.view_w = WINDOW_W
        self.view_h = WINDOW_H

        multiple = len(self.catalog.images) > 1
        self.viewer = GalleryViewer(
            self.catalog.images,
            initial_index=0,
            show_thumbnails=multiple,
            show_navigation=multiple,
            show_caption=True,
            on_close=self._on_viewer_close,
            on_index_change=self._on_viewer_index_change,
            bus=bus,
            scheduler=scheduler,
            fullscreen=fullscreen,
            image_source=image_source,
        )

    @property
    def images(self):
        return self.viewer.images

    @property
    def count(self) -> int:
        return len(self.viewer.images)

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    @property
    def empty_text(self) -> str:
        return EMPTY_GALLERY_TEXT

    # ═══════════════════════════════════════════════════════════════════════
    # Selection
    # ═══════════════════════════════════════════════════════════════════════

    def _sync_viewer(self) -> None:
        if self.selected_index >= 0:
            self.viewer.set_open(True, initial_index=self.selected_index)
        else:
            self.viewer.set_open(False)

    def open_at(self, index: int) -> bool:
        """Tile clicked: select it and open the viewer there."""
        if not 0 <= index < self.count:
            return False
        log(f"[PAGE] Open at {index}")
        self.selected_index = index
        self._sync_viewer()
        return True

    def close(self) -> None:
        self.selected_index = -1
        self._sync_viewer()

    def _on_viewer_close(self) -> None:
        debug("[PAGE] Viewer asked to close")
        self.close()

    def _on_viewer_index_change(self, index: int) -> None:
        self.selected_index = index
        self._sync_viewer()

    def set_images(self, images: ImagesInput) -> None:
        """Replace the gallery contents (a reload of the content store)."""
        self.viewer.set_images(images)
        multiple = self.count > 1
        self.viewer.set_display(thumbnails=multiple, navigation=multiple)
        if self.selected_index >= self.count:
            self.close()
        self.grid.loading = False
        self.grid.scroll_y = min(self.grid.scroll_y, self.max_scroll)

    # ═══════════════════════════════════════════════════════════════════════
    # Grid
    # ═══════════════════════════════════════════════════════════════════════

    def resize(self, w: int, h: int) -> None:
        self.view_w = w
        self.view_h = h
        self.grid.scroll_y = min(self.grid.scroll_y, self.max_scroll)

    @property
    def max_scroll(self) -> float:
        return max(0.0, grid_content_height(self.count, self.view_w) - self.view_h)

    def scroll(self, delta: float) -> None:
        self.grid.scroll_by(delta, self.max_scroll)

    def tile_at(self, x: float, y: float) -> int:
        return grid_hit(self.count, self.view_w, self.grid.scroll_y, x, y)

    def visible_tiles(self) -> List[int]:
        """Indices of tiles at least partly inside the window."""
        result = []
        for i, r in enumerate(grid_tiles(self.count, self.view_w, self.grid.scroll_y)):
            if r.y + r.h >= 0 and r.y <= self.view_h:
                result.append(i)
        return result

    def request_thumbnails(self) -> int:
        """Preload grid thumbnails for visible tiles. Returns how many were asked for."""
        if self.thumbs is None:
            return 0
        indices = self.visible_tiles()
        for i in indices:
            self.thumbs.preload(self.images[i].source)
        return len(indices)
