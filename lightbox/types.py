"""Core data types for Lightbox."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple, Optional, Callable, Any
from enum import IntEnum

from .config import DEFAULT_ALT_TEXT


class LightboxError(Exception):
    """Base class for all Lightbox errors."""


class DescriptorError(LightboxError):
    """Raised when an images input cannot be normalised."""


class CatalogError(LightboxError):
    """Raised when a gallery manifest is malformed."""


class ImageLoadError(LightboxError):
    """Raised by loader functions when an image cannot be produced."""


@dataclass(frozen=True)
class ImageDescriptor:
    """One displayable image: where it lives and how to describe it."""
    source: str
    alt_text: str = DEFAULT_ALT_TEXT
    caption: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.source, str) or not self.source:
            raise DescriptorError(f"image source must be a non-empty string, got {self.source!r}")
        if not self.alt_text:
            object.__setattr__(self, "alt_text", DEFAULT_ALT_TEXT)
        if not self.caption:
            object.__setattr__(self, "caption", None)


class LoadPriority(IntEnum):
    """Priority levels for async image loading."""
    CURRENT = 0    # Image on screen
    NEIGHBOR = 1   # Preloaded previous/next image
    THUMBNAIL = 2  # Strip and grid tiles


@dataclass
class LoadTask:
    """A task for the async image loader."""
    source: str
    priority: LoadPriority
    callback: Callable
    timestamp: float = 0.0
    func: Optional[Callable[[str], Any]] = None  # overrides the loader's default

    def __lt__(self, other: LoadTask) -> bool:
        if self.priority != other.priority:
            return self.priority < other.priority
        return self.timestamp < other.timestamp


@dataclass
class UIEvent:
    """An event to be processed on the main/UI thread."""
    callback: Callable
    args: tuple


@dataclass
class TextureInfo:
    """A GPU texture together with the size it was uploaded at."""
    tex: Any  # rl.Texture2D - using Any to avoid raylib import
    w: int
    h: int
    source: str = ""


@dataclass
class Rect:
    """Axis-aligned rectangle in window coordinates."""
    x: float
    y: float
    w: float
    h: float

    def contains(self, px: float, py: float) -> bool:
        return self.x <= px <= self.x + self.w and self.y <= py <= self.y + self.h

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.w / 2.0, self.y + self.h / 2.0)


@dataclass
class Circle:
    """Round button hit area."""
    cx: float
    cy: float
    r: float

    def contains(self, px: float, py: float) -> bool:
        dx = px - self.cx
        dy = py - self.cy
        return (dx * dx + dy * dy) <= self.r * self.r

