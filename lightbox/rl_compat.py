"""Raylib binding shim - lets the drawing and input code run on raylibpy or python-raylib."""

from __future__ import annotations
from typing import Any, Tuple

try:
    import raylibpy as rl
    RL_VERSION = "raylibpy"
except Exception:
    import raylib as rl
    RL_VERSION = "python-raylib"

# python-raylib exposes C strings as bytes; raylibpy takes str
_NEEDS_BYTES = RL_VERSION == "python-raylib"


def _c_str(text: str) -> Any:
    return text.encode("utf-8") if _NEEDS_BYTES else text


def make_rect(x: float, y: float, w: float, h: float) -> Any:
    """Rectangle value for the active binding."""
    if hasattr(rl, "ffi"):
        r = rl.ffi.new("Rectangle *")
        r[0].x, r[0].y = float(x), float(y)
        r[0].width, r[0].height = float(w), float(h)
        return r[0]
    return rl.Rectangle(float(x), float(y), float(w), float(h))


def make_vec2(x: float, y: float) -> Any:
    if hasattr(rl, "ffi"):
        v = rl.ffi.new("Vector2 *")
        v[0].x, v[0].y = float(x), float(y)
        return v[0]
    return rl.Vector2(float(x), float(y))


def make_color(r: int, g: int, b: int, alpha: float = 1.0) -> Any:
    """Color from RGB plus an opacity in 0..1."""
    a = int(255 * max(0.0, min(1.0, alpha)))
    if hasattr(rl, "ffi"):
        c = rl.ffi.new("Color *")
        c[0].r, c[0].g, c[0].b, c[0].a = int(r), int(g), int(b), a
        return c[0]
    return rl.Color(int(r), int(g), int(b), a)


def draw_text(text: str, x: float, y: float, size: int, color: Any) -> None:
    rl.DrawText(_c_str(text), int(x), int(y), int(size), color)


def draw_text_centered(text: str, cx: float, cy: float, size: int, color: Any) -> None:
    """Draw text centred on a point."""
    w = measure_text(text, size)
    draw_text(text, cx - w / 2.0, cy - size / 2.0, size, color)


def measure_text(text: str, size: int) -> int:
    return rl.MeasureText(_c_str(text), int(size))


def load_image(path: str) -> Any:
    return rl.LoadImage(_c_str(path))


def set_window_title(title: str) -> None:
    rl.SetWindowTitle(_c_str(title))


def init_window(w: int, h: int, title: str) -> None:
    rl.InitWindow(int(w), int(h), _c_str(title))


def texture_id(tex: Any) -> int:
    return getattr(tex, "id", 0) or 0


def is_texture_valid(tex: Any) -> bool:
    return texture_id(tex) > 0


def mouse_position() -> Tuple[float, float]:
    pos = rl.GetMousePosition()
    return (pos.x, pos.y)


def touch_count() -> int:
    return int(rl.GetTouchPointCount())


def touch_position(i: int = 0) -> Tuple[float, float]:
    pos = rl.GetTouchPosition(i)
    return (pos.x, pos.y)


def is_window_fullscreen() -> bool:
    return bool(rl.IsWindowFullscreen())


__all__ = [
    "rl",
    "RL_VERSION",
    "make_rect",
    "make_vec2",
    "make_color",
    "draw_text",
    "draw_text_centered",
    "measure_text",
    "load_image",
    "set_window_title",
    "init_window",
    "texture_id",
    "is_texture_valid",
    "mouse_position",
    "touch_count",
    "touch_position",
    "is_window_fullscreen",
]
