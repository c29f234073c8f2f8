"""Pure math utilities - no external dependencies."""

from __future__ import annotations
from typing import Tuple


def clamp(v: float, a: float, b: float) -> float:
    """Clamp value v to range [a, b]."""
    return a if v < a else b if v > b else v


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation from a to b by factor t (clamped to [0, 1])."""
    t = clamp(t, 0.0, 1.0)
    return a + (b - a) * t


def wrap_index(i: int, n: int) -> int:
    """Index i folded into [0, n). n must be positive."""
    return i % n


def in_bounds(i: int, n: int) -> bool:
    """True if i is a valid position in a sequence of length n."""
    return isinstance(i, int) and not isinstance(i, bool) and 0 <= i < n


def fit_size(img_w: int, img_h: int, box_w: float, box_h: float,
             upscale: bool = False) -> Tuple[float, float]:
    """Largest size with the image's aspect ratio that fits the box."""
    if img_w <= 0 or img_h <= 0 or box_w <= 0 or box_h <= 0:
        return (0.0, 0.0)
    scale = min(box_w / img_w, box_h / img_h)
    if not upscale:
        scale = min(scale, 1.0)
    return (img_w * scale, img_h * scale)
