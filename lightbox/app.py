"""Application - main loop orchestrator.

Each frame:
- hand finished loads to the UI thread (texture upload, viewer callbacks)
- turn window fullscreen changes into events
- input → commands (and key events on the bus)
- deferred work (the viewer's close reset)
- rendering
"""

from __future__ import annotations
import os
import sys
import traceback
from typing import List, Optional

from .catalog import Catalog, catalog_from_path
from .commands import QuitApp
from .config import UI_EVENTS_PER_FRAME, START_FULLSCREEN, WINDOW_TITLE, THUMB_CACHE_DIR
from .events import EventBus
from .input_handler import InputHandler
from .layout import ViewerLayout, layout_for, strip_scroll_for
from .loader import AsyncImageLoader, ImageStore
from .logging import log, increment_frame
from .math_utils import lerp
from .page import GalleryPage
from .platform import FullscreenWatcher
from .renderer import Renderer
from .rl_compat import rl, set_window_title
from .scheduler import Scheduler
from .state import StripState
from .textures import decode_image, decode_thumbnail, upload_texture, unload_texture
from .types import LightboxError, LoadPriority
from .window import RaylibFullscreen, open_window, screen_size, close_window

STRIP_SCROLL_EASE = 0.25


class Application:
    """
    Owns the window-side objects and runs the frame loop.

    Usage:
        app = Application(catalog)
        app.run()
    """

    def __init__(self, catalog: Catalog):
        self.catalog = catalog
        self.running = False
        self.bus = EventBus()
        self.scheduler = Scheduler()
        self.fullscreen = RaylibFullscreen()
        self.strip = StripState()
        self._title = ""

        self.loader = AsyncImageLoader(decode_image)
        self.images = ImageStore(
            self.loader, decode=decode_image, upload=upload_texture, release=unload_texture,
            name="IMG",
        )
        self.thumbs = ImageStore(
            self.loader, decode=decode_thumbnail, upload=upload_texture, release=unload_texture,
            priority=LoadPriority.THUMBNAIL, preload_priority=LoadPriority.THUMBNAIL,
            name="THUMB",
        )

        self.page = GalleryPage(
            catalog,
            bus=self.bus,
            scheduler=self.scheduler,
            fullscreen=self.fullscreen,
            image_source=self.images,
            thumbs=self.thumbs,
        )
        self.watcher = FullscreenWatcher(self.fullscreen, self.bus)
        self.input_handler = InputHandler(self.bus)
        self.renderer = Renderer(images=self.images, thumbs=self.thumbs)
        self.screen_w, self.screen_h = screen_size()
        self.page.resize(self.screen_w, self.screen_h)

    @property
    def viewer(self):
        return self.page.viewer

    def run(self) -> None:
        self.running = True
        log("[APP] Starting main loop")
        if self.catalog.start_index >= 0:
            self.page.open_at(self.catalog.start_index)
        try:
            while self.running:
                self._frame()
        except Exception as e:
            log(f"[APP][CRITICAL] Unhandled exception: {e!r}")
            log(f"[APP][CRITICAL] Traceback:\n{traceback.format_exc()}")
        finally:
            self._cleanup()

    def _layout(self) -> Optional[ViewerLayout]:
        if not self.viewer.is_open:
            return None
        return layout_for(self.viewer, self.screen_w, self.screen_h, self.strip.scroll_x)

    def _frame(self) -> None:
        if rl.WindowShouldClose():
            self.stop()
            return

        # 1. Finished loads
        self.loader.poll_ui_events(UI_EVENTS_PER_FRAME)

        # 2. Platform state
        self.watcher.poll()
        w, h = screen_size()
        if (w, h) != (self.screen_w, self.screen_h):
            self.screen_w, self.screen_h = w, h
            self.page.resize(w, h)

        # 3. Input
        frame = self.input_handler.poll(self.page, self._layout())
        for cmd in frame.viewer_commands:
            cmd.execute(self.viewer)
        for cmd in frame.page_commands:
            if isinstance(cmd, QuitApp):
                log("[APP] Quit requested")
                self.stop()
                return
            cmd.execute(self.page)

        # 4. Deferred work and background loads
        self.viewer.update()
        self._update_strip()
        self._request_thumbnails()
        self._update_title()

        # 5. Render
        self.renderer.draw_frame(self.page, self._layout(), self.screen_w, self.screen_h)
        increment_frame()

    def _update_strip(self) -> None:
        layout = self._layout()
        if layout is None or layout.strip is None:
            self.strip.scroll_x = 0.0
            return
        target = strip_scroll_for(self.viewer.current_index, self.viewer.count, layout.strip.w)
        self.strip.scroll_x = lerp(self.strip.scroll_x, target, STRIP_SCROLL_EASE)

    def _request_thumbnails(self) -> None:
        if not self.viewer.is_open:
            self.page.request_thumbnails()
        elif self.viewer.thumbnails_visible:
            for img in self.viewer.images:
                self.thumbs.preload(img.source)

    def _update_title(self) -> None:
        img = self.viewer.current_image if self.viewer.is_open else None
        title = f"{img.alt_text} - {self.page.title}" if img else self.page.title
        if title != self._title:
            self._title = title
            set_window_title(title)

    def _cleanup(self) -> None:
        log("[APP] Starting cleanup")
        if self.viewer.is_open:
            self.page.close()
        log("[APP] Shutting down async loader")
        self.loader.shutdown()
        self.images.clear()
        self.thumbs.clear()
        log("[APP] Closing window")
        close_window()
        log("[APP] Cleanup complete")

    def stop(self) -> None:
        self.running = False


USAGE = "usage: lightbox [--fullscreen] [PATH]   (PATH: image, folder or .json manifest)"


def main(argv: Optional[List[str]] = None) -> int:
    log("[MAIN] Starting application")
    args = sys.argv[1:] if argv is None else argv

    start_path = None
    fullscreen = START_FULLSCREEN
    for a in args:
        if a in ("-h", "--help"):
            print(USAGE)
            return 0
        if a == "--fullscreen":
            fullscreen = True
            continue
        p = os.path.abspath(a)
        log(f"[ARGS] Checking argument: {a} -> {p}")
        if os.path.exists(p):
            start_path = p
            break

    if not start_path:
        log("[ARGS] No valid path provided, using current directory")

    try:
        catalog = catalog_from_path(start_path)
    except LightboxError as e:
        log(f"[MAIN][ERR] {e}")
        return 2

    try:
        open_window(WINDOW_TITLE)
    except Exception as e:
        log(f"[INIT][CRITICAL] Failed to initialize window: {e!r}")
        log(f"[INIT][CRITICAL] Traceback:\n{traceback.format_exc()}")
        return 1

    app = Application(catalog)
    log(f"[MAIN] {len(catalog.images)} images, cache={os.path.abspath(THUMB_CACHE_DIR)}")
    if fullscreen:
        try:
            app.fullscreen.request_fullscreen()
        except RuntimeError as e:
            log(f"[INIT][FULLSCREEN][ERR] {e}")
    app.run()
    return 0
