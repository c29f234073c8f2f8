"""Seams between the viewer and the window system.

The viewer talks to fullscreen control and image loading only through the
interfaces here, which keeps it free of raylib. ``window.py`` and
``loader.py`` provide the real implementations.
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from .events import EventBus, FullscreenChanged
from .logging import log

# callback(source, result, error) - exactly one of result/error is None
LoadCallback = Callable[[str, Any, Optional[Exception]], None]


class FullscreenController(ABC):
    """Fullscreen switching for the viewer's root surface."""

    @abstractmethod
    def is_fullscreen(self) -> bool:
        """Actual platform state, not what anyone last asked for."""

    @abstractmethod
    def request_fullscreen(self) -> None:
        """Enter fullscreen. May raise if the platform refuses."""

    @abstractmethod
    def exit_fullscreen(self) -> None:
        """Leave fullscreen. May raise if the platform refuses."""


class HeadlessFullscreen(FullscreenController):
    """In-memory controller for running without a window."""

    def __init__(self, fullscreen: bool = False, allowed: bool = True):
        self.fullscreen = fullscreen
        self.allowed = allowed

    def is_fullscreen(self) -> bool:
        return self.fullscreen

    def request_fullscreen(self) -> None:
        if not self.allowed:
            raise RuntimeError("fullscreen request denied")
        self.fullscreen = True

    def exit_fullscreen(self) -> None:
        self.fullscreen = False


class ImageSource(ABC):
    """Where the viewer gets image bytes from."""

    @abstractmethod
    def load(self, source: str, callback: LoadCallback) -> None:
        """Load for display; callback fires on the UI thread, possibly at once."""

    @abstractmethod
    def preload(self, source: str) -> None:
        """Start fetching without tracking the result."""


class NullImageSource(ImageSource):
    """Reports every image as loaded immediately."""

    def load(self, source: str, callback: LoadCallback) -> None:
        callback(source, source, None)

    def preload(self, source: str) -> None:
        pass


class FullscreenWatcher:
    """Turns fullscreen state changes into ``FullscreenChanged`` events.

    The window system has no change callback, so the main loop calls
    :meth:`poll` once per frame and an event goes out whenever the observed
    state differs from the last one seen.
    """

    def __init__(self, controller: FullscreenController, bus: EventBus):
        self.controller = controller
        self.bus = bus
        self._last = controller.is_fullscreen()

    def poll(self) -> bool:
        """Publish if the state moved. Returns True when an event went out."""
        current = self.controller.is_fullscreen()
        if current == self._last:
            return False
        self._last = current
        log(f"[FULLSCREEN] Platform state changed: fullscreen={current}")
        self.bus.publish(FullscreenChanged(current))
        return True
