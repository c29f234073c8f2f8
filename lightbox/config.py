"""Application configuration constants."""

from __future__ import annotations
import os


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


# Performance
TARGET_FPS = 60
ASYNC_WORKERS = _env_int("LIGHTBOX_WORKERS", 4)
UI_EVENTS_PER_FRAME = 100

# Window
WINDOW_TITLE = "Gallery"
WINDOW_W = 1280
WINDOW_H = 800
START_FULLSCREEN = _env_flag("LIGHTBOX_FULLSCREEN")
DEBUG = _env_flag("LIGHTBOX_DEBUG")

# Viewer behaviour
SWIPE_THRESHOLD_PX = 50
DRAG_START_PX = 4          # mouse travel before a press counts as a drag
CLOSE_RESET_DELAY_MS = 300
DEFAULT_ALT_TEXT = "Gallery image"
MEMORY_ALT_TEXT = "Memory"

# Viewer layout
HEADER_H = 72
HEADER_BTN_RADIUS = 20
HEADER_PADDING = 16
NAV_BTN_RADIUS = 28
NAV_BTN_MARGIN = 16
CAPTION_H = 56
THUMB_SIZE = 64
THUMB_SPACING = 8
THUMB_STRIP_PADDING = 8
IMAGE_PADDING = 16
VIEWER_MAX_W = 1024      # windowed dialog width cap
VIEWER_HEIGHT_FRAC = 0.9

# Page grid
GRID_TILE_MIN = 240
GRID_SPACING = 24
GRID_MARGIN = 32
GRID_TITLE_H = 96
GRID_SCROLL_STEP = 60
EMPTY_GALLERY_TEXT = "No memories have been shared yet."

# Image limits
MAX_IMAGE_DIMENSION = 8192
MAX_FILE_SIZE_MB = 200
IMAGE_CACHE_LIMIT = 64
HTTP_TIMEOUT_S = float(_env_int("LIGHTBOX_HTTP_TIMEOUT", 15))

# Thumbnails
THUMB_CACHE_DIR = ".lightbox_cache"
THUMB_GRID_PX = 400

# Font / colours
FONT_SIZE = 20
COUNTER_FONT_SIZE = 18
BACKDROP_ALPHA = 0.9

# Hotkeys (raylib key codes)
# See: https://github.com/raysan5/raylib/blob/master/src/raylib.h
KEY_CLOSE = 256             # KEY_ESCAPE
KEY_NEXT_IMAGE = 262        # KEY_RIGHT
KEY_PREV_IMAGE = 263        # KEY_LEFT
KEY_TOGGLE_FULLSCREEN = 70  # KEY_F
KEY_COPY = 67               # KEY_C
KEY_LEFT_CONTROL = 341
KEY_RIGHT_CONTROL = 345

# Supported image extensions
IMG_EXTS = frozenset({".png", ".jpg", ".jpeg", ".bmp", ".tga", ".gif", ".qoi"})
MANIFEST_EXTS = frozenset({".json"})
