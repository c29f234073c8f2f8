"""GalleryViewer - the modal image browser.

The viewer is driven by two kinds of input:

- Props from the hosting page (open flag, images, initial index, display
  toggles and the ``on_close`` / ``on_index_change`` callbacks), applied
  through the ``set_*`` methods.
- User interaction: navigation, thumbnail jumps, swipes, keys, fullscreen
  toggling and dismissal.

It never touches raylib; fullscreen goes through a FullscreenController and
pixels through an ImageSource, both from ``platform.py``.
"""

from __future__ import annotations
from collections import Counter
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .config import (
    SWIPE_THRESHOLD_PX, CLOSE_RESET_DELAY_MS,
    KEY_CLOSE, KEY_NEXT_IMAGE, KEY_PREV_IMAGE, KEY_TOGGLE_FULLSCREEN,
)
from .descriptors import ImagesInput, normalize_images
from .events import EventBus, KeyPressed, FullscreenChanged, ListenerScope
from .logging import log, debug
from .math_utils import wrap_index, in_bounds
from .platform import (
    FullscreenController, HeadlessFullscreen, ImageSource, NullImageSource,
)
from .scheduler import Scheduler, DeferredCall
from .state import ViewerState
from .types import ImageDescriptor


class Interaction(Enum):
    """Interactions the viewer refuses on its surfaces."""
    CONTEXT_MENU = "context_menu"
    DRAG = "drag"
    SELECT = "select"


class GalleryViewer:
    """Modal image browser with navigation, swipe, preload and fullscreen."""

    def __init__(
        self,
        images: ImagesInput = None,
        *,
        open_flag: bool = False,
        initial_index: int = 0,
        show_thumbnails: bool = True,
        show_navigation: bool = True,
        show_caption: bool = True,
        on_close: Optional[Callable[[], None]] = None,
        on_index_change: Optional[Callable[[int], None]] = None,
        bus: Optional[EventBus] = None,
        scheduler: Optional[Scheduler] = None,
        fullscreen: Optional[FullscreenController] = None,
        image_source: Optional[ImageSource] = None,
    ):
        self.images: Tuple[ImageDescriptor, ...] = normalize_images(images)
        self.initial_index = initial_index
        self.show_thumbnails = show_thumbnails
        self.show_navigation = show_navigation
        self.show_caption = show_caption
        self.on_close = on_close
        self.on_index_change = on_index_change

        self.bus = bus if bus is not None else EventBus()
        self.scheduler = scheduler if scheduler is not None else Scheduler()
        self.fullscreen = fullscreen if fullscreen is not None else HeadlessFullscreen()
        # ImageStore defines __len__, so an empty one is falsy
        self.image_source = image_source if image_source is not None else NullImageSource()

        self.state = ViewerState()
        self.suppressed: Counter = Counter()
        self._open = False
        self._listeners = ListenerScope(self.bus)
        self._reset_call: Optional[DeferredCall] = None
        self._entered_fullscreen = False

        if open_flag:
            self.set_open(True)

    # ═══════════════════════════════════════════════════════════════════════
    # Derived values
    # ═══════════════════════════════════════════════════════════════════════

    @property
    def is_open(self) -> bool:
        return self._open

    @property
    def count(self) -> int:
        return len(self.images)

    @property
    def current_index(self) -> int:
        return self.state.current_index

    @property
    def is_loading(self) -> bool:
        return self.state.is_loading

    @property
    def is_fullscreen(self) -> bool:
        return self.state.is_fullscreen

    @property
    def has_multiple(self) -> bool:
        return len(self.images) > 1

    @property
    def current_image(self) -> Optional[ImageDescriptor]:
        if in_bounds(self.state.current_index, len(self.images)):
            return self.images[self.state.current_index]
        return None

    @property
    def counter_text(self) -> str:
        """"i / N" position label; empty for a single image."""
        if not self.has_multiple:
            return ""
        return f"{self.state.current_index + 1} / {len(self.images)}"

    @property
    def navigation_visible(self) -> bool:
        return self.show_navigation and self.has_multiple

    @property
    def thumbnails_visible(self) -> bool:
        return self.show_thumbnails and self.has_multiple

    @property
    def caption_visible(self) -> bool:
        img = self.current_image
        return self.show_caption and img is not None and img.caption is not None

    @property
    def reset_pending(self) -> bool:
        return self._reset_call is not None and self._reset_call.pending

    @property
    def listeners_held(self) -> int:
        return self._listeners.held

    def neighbor_indices(self, index: Optional[int] = None) -> List[int]:
        """Previous and next positions around index, wrapping, without repeats."""
        n = len(self.images)
        if n < 2:
            return []
        i = self.state.current_index if index is None else index
        result = []
        for j in (wrap_index(i - 1, n), wrap_index(i + 1, n)):
            if j != i and j not in result:
                result.append(j)
        return result

    # ═══════════════════════════════════════════════════════════════════════
    # Props
    # ═══════════════════════════════════════════════════════════════════════

    def set_open(self, flag: bool, initial_index: Optional[int] = None) -> None:
        """Apply the host's open flag (and optionally a new initial index)."""
        if initial_index is not None:
            self.initial_index = initial_index
        if flag and not self._open:
            self._mount()
        elif not flag and self._open:
            self._unmount()
        elif flag and initial_index is not None:
            if self._apply_initial_index():
                self._show_current()

    def set_initial_index(self, index: int) -> None:
        """Host supplied a new starting position; applied at once while open."""
        changed = index != self.initial_index
        self.initial_index = index
        if self._open and changed and self._apply_initial_index():
            self._show_current()

    def set_images(self, images: ImagesInput) -> None:
        """Replace the sequence. The user's position is kept while it is still in range."""
        previous = self.current_image
        self.images = normalize_images(images)
        if not in_bounds(self.state.current_index, len(self.images)):
            self.state.current_index = 0
        log(f"[VIEWER] Images set: count={len(self.images)}")
        if self._open and self.current_image != previous:
            self.state.mark_loading()
            self._show_current()

    def set_display(self, *, thumbnails: Optional[bool] = None,
                    navigation: Optional[bool] = None,
                    caption: Optional[bool] = None) -> None:
        if thumbnails is not None:
            self.show_thumbnails = thumbnails
        if navigation is not None:
            self.show_navigation = navigation
        if caption is not None:
            self.show_caption = caption

    # ═══════════════════════════════════════════════════════════════════════
    # Open / close lifecycle
    # ═══════════════════════════════════════════════════════════════════════

    def _mount(self) -> None:
        if self._reset_call is not None:
            if self._reset_call.cancel():
                log("[VIEWER] Cancelled pending close reset")
            self._reset_call = None
        self._open = True
        try:
            self._listeners.listen(KeyPressed, self._on_key_event)
            self._listeners.listen(FullscreenChanged, self._on_fullscreen_event)
            self.state.is_fullscreen = self.fullscreen.is_fullscreen()
            self._entered_fullscreen = False
            self.state.mark_loading()
            self._apply_initial_index()
            log(f"[VIEWER] Opened: index={self.state.current_index} count={len(self.images)}")
            self._show_current()
        except Exception:
            self._listeners.release()
            self._open = False
            raise

    def _unmount(self) -> None:
        self._open = False
        self._listeners.release()
        self.state.touch.clear()
        if self._entered_fullscreen and self.fullscreen.is_fullscreen():
            try:
                self.fullscreen.exit_fullscreen()
            except Exception as e:
                log(f"[VIEWER][FULLSCREEN][ERR] exit on close failed: {e!r}")
        self._entered_fullscreen = False
        log("[VIEWER] Closed")
        if not self.reset_pending:
            self._schedule_reset()

    def _apply_initial_index(self) -> bool:
        """Move to the host's initial index. Returns True if the index changed."""
        idx = self.initial_index
        if not in_bounds(idx, len(self.images)):
            debug(f"[VIEWER] Ignoring initial index {idx!r} (count={len(self.images)})")
            return False
        if idx == self.state.current_index:
            return False
        self.state.current_index = idx
        self.state.mark_loading()
        return True

    def dismiss(self) -> None:
        """User asked to close: close button, Escape or backdrop."""
        log("[VIEWER] Dismissed")
        self._schedule_reset()
        if self.on_close:
            self.on_close()

    def _schedule_reset(self) -> None:
        if self._reset_call is not None:
            self._reset_call.cancel()
        self._reset_call = self.scheduler.call_later(
            CLOSE_RESET_DELAY_MS, self._reset_after_close, label="viewer close reset")

    def _reset_after_close(self) -> None:
        self._reset_call = None
        if self._open:
            debug("[VIEWER] Close reset skipped, host kept the viewer open")
            return
        self.state.reset()
        debug("[VIEWER] State reset after close")

    def update(self) -> None:
        """Per-frame tick: run deferred work that has come due."""
        self.scheduler.run_due()

    # ═══════════════════════════════════════════════════════════════════════
    # Navigation
    # ═══════════════════════════════════════════════════════════════════════

    def _select(self, index: int) -> None:
        self.state.current_index = index
        self.state.mark_loading()
        self._show_current()
        if self.on_index_change:
            self.on_index_change(index)

    def next(self) -> bool:
        if not self._open or not self.has_multiple:
            return False
        old = self.state.current_index
        self._select(wrap_index(old + 1, len(self.images)))
        debug(f"[VIEWER] Next: {old} -> {self.state.current_index}")
        return True

    def prev(self) -> bool:
        if not self._open or not self.has_multiple:
            return False
        old = self.state.current_index
        self._select(wrap_index(old - 1, len(self.images)))
        debug(f"[VIEWER] Prev: {old} -> {self.state.current_index}")
        return True

    def go_to(self, index: int) -> bool:
        """Jump to index (thumbnail click). Out-of-range requests are ignored."""
        if not self._open or not in_bounds(index, len(self.images)):
            return False
        if index == self.state.current_index:
            return False
        debug(f"[VIEWER] Jump: {self.state.current_index} -> {index}")
        self._select(index)
        return True

    # ═══════════════════════════════════════════════════════════════════════
    # Swipe
    # ═══════════════════════════════════════════════════════════════════════

    def touch_start(self, x: float, y: float = 0.0) -> None:
        if self._open:
            self.state.touch.begin(x, y)

    def touch_move(self, x: float) -> bool:
        """Feed a touch sample; navigates once the swipe passes the threshold."""
        if not self.state.touch.active or not self.has_multiple:
            return False
        diff = self.state.touch.horizontal_delta(x)
        if abs(diff) <= SWIPE_THRESHOLD_PX:
            return False
        self.state.touch.clear()
        return self.next() if diff > 0 else self.prev()

    def touch_end(self) -> None:
        self.state.touch.clear()

    # ═══════════════════════════════════════════════════════════════════════
    # Keyboard and fullscreen
    # ═══════════════════════════════════════════════════════════════════════

    def handle_key(self, key: int) -> bool:
        if not self._open:
            return False
        if key == KEY_CLOSE:
            self.dismiss()
            return True
        if key == KEY_PREV_IMAGE:
            return self.prev()
        if key == KEY_NEXT_IMAGE:
            return self.next()
        if key == KEY_TOGGLE_FULLSCREEN:
            self.toggle_fullscreen()
            return True
        return False

    def _on_key_event(self, event: KeyPressed) -> None:
        self.handle_key(event.key)

    def toggle_fullscreen(self) -> None:
        if not self.fullscreen.is_fullscreen():
            self.state.is_fullscreen = True
            try:
                self.fullscreen.request_fullscreen()
                self._entered_fullscreen = True
            except Exception as e:
                log(f"[VIEWER][FULLSCREEN][ERR] request failed: {e!r}")
                self.state.is_fullscreen = self.fullscreen.is_fullscreen()
        else:
            self.state.is_fullscreen = False
            try:
                self.fullscreen.exit_fullscreen()
                self._entered_fullscreen = False
            except Exception as e:
                log(f"[VIEWER][FULLSCREEN][ERR] exit failed: {e!r}")
                self.state.is_fullscreen = self.fullscreen.is_fullscreen()

    def on_fullscreen_change(self, is_fullscreen: bool) -> None:
        """Platform notification; the platform is always right."""
        self.state.is_fullscreen = bool(is_fullscreen)
        if not is_fullscreen:
            self._entered_fullscreen = False

    def _on_fullscreen_event(self, event: FullscreenChanged) -> None:
        self.on_fullscreen_change(event.is_fullscreen)

    # ═══════════════════════════════════════════════════════════════════════
    # Loading
    # ═══════════════════════════════════════════════════════════════════════

    def _show_current(self) -> None:
        img = self.current_image
        if img is None or not self._open:
            return
        self.image_source.load(img.source, self._on_load_result)
        self._preload_neighbors()

    def _preload_neighbors(self) -> None:
        current = self.current_image
        for j in self.neighbor_indices():
            src = self.images[j].source
            if current is None or src != current.source:
                self.image_source.preload(src)

    def _on_load_result(self, source: str, result, error: Optional[Exception]) -> None:
        if error is not None:
            self.image_failed(source, error)
        else:
            self.image_loaded(source)

    def image_loaded(self, source: str) -> None:
        img = self.current_image
        if img is None or img.source != source:
            debug(f"[VIEWER] Stale load ignored: {source}")
            return
        self.state.is_loading = False
        self.state.load_failed = False

    def image_failed(self, source: str, error: Optional[Exception] = None) -> None:
        img = self.current_image
        if img is None or img.source != source:
            return
        log(f"[VIEWER][LOAD][ERR] {source}: {error!r}")
        self.state.is_loading = False
        self.state.load_failed = True

    # ═══════════════════════════════════════════════════════════════════════
    # Content protection
    # ═══════════════════════════════════════════════════════════════════════

    def guard_allows(self, kind: Interaction) -> bool:
        """Context menu, drag and selection never proceed on viewer surfaces."""
        if not self._open:
            return True
        self.suppressed[kind] += 1
        debug(f"[VIEWER][GUARD] Suppressed {kind.value}")
        return False
