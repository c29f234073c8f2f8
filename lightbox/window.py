"""Window setup and raylib-backed fullscreen control."""

from __future__ import annotations
from typing import Tuple

from .config import WINDOW_TITLE, WINDOW_W, WINDOW_H, TARGET_FPS
from .logging import log
from .platform import FullscreenController
from .rl_compat import rl, RL_VERSION, init_window, is_window_fullscreen


class RaylibFullscreen(FullscreenController):
    """Fullscreen through raylib's toggle; state is read back from the window."""

    def is_fullscreen(self) -> bool:
        return is_window_fullscreen()

    def request_fullscreen(self) -> None:
        if not is_window_fullscreen():
            rl.ToggleFullscreen()
        if not is_window_fullscreen():
            raise RuntimeError("window did not enter fullscreen")

    def exit_fullscreen(self) -> None:
        if is_window_fullscreen():
            rl.ToggleFullscreen()


def open_window(title: str = WINDOW_TITLE, w: int = WINDOW_W, h: int = WINDOW_H) -> Tuple[int, int]:
    """Create the window. Returns the actual screen size."""
    log(f"[INIT] Creating window: {w}x{h}")
    rl.SetConfigFlags(rl.FLAG_WINDOW_RESIZABLE | rl.FLAG_MSAA_4X_HINT)
    init_window(w, h, title)
    # Esc belongs to the viewer, not to raylib's quit handling
    rl.SetExitKey(0)
    rl.SetTargetFPS(TARGET_FPS)
    size = (rl.GetScreenWidth(), rl.GetScreenHeight())
    log(f"[INIT] RL_VER={RL_VERSION} window={size[0]}x{size[1]}")
    return size


def screen_size() -> Tuple[int, int]:
    return (rl.GetScreenWidth(), rl.GetScreenHeight())


def close_window() -> None:
    try:
        rl.CloseWindow()
    except Exception as e:
        log(f"[CLEANUP][ERR] CloseWindow: {e!r}")
