"""Shared fixtures: a manual clock, an in-memory image source and a headless window."""

from __future__ import annotations

from typing import Dict, List, Optional

import pytest

from lightbox.events import EventBus
from lightbox.platform import HeadlessFullscreen, ImageSource, LoadCallback
from lightbox.scheduler import Scheduler
from lightbox.viewer import GalleryViewer


class ManualClock:
    """Clock that only moves when told to."""

    def __init__(self, start: float = 100.0):
        self.t = start

    def __call__(self) -> float:
        return self.t

    def advance_ms(self, ms: float) -> None:
        self.t += ms / 1000.0


class FakeImageSource(ImageSource):
    """Records requests; loads complete only when the test says so."""

    def __init__(self, auto: bool = False):
        self.auto = auto
        self.loads: List[str] = []
        self.preloads: List[str] = []
        self._callbacks: Dict[str, List[LoadCallback]] = {}

    def load(self, source: str, callback: LoadCallback) -> None:
        self.loads.append(source)
        if self.auto:
            callback(source, f"pixels:{source}", None)
            return
        self._callbacks.setdefault(source, []).append(callback)

    def preload(self, source: str) -> None:
        self.preloads.append(source)

    def complete(self, source: str) -> None:
        for cb in self._callbacks.pop(source, []):
            cb(source, f"pixels:{source}", None)

    def fail(self, source: str, error: Optional[Exception] = None) -> None:
        for cb in self._callbacks.pop(source, []):
            cb(source, None, error or OSError("broken"))


@pytest.fixture()
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture()
def scheduler(clock: ManualClock) -> Scheduler:
    return Scheduler(clock=clock)


@pytest.fixture()
def bus() -> EventBus:
    return EventBus()


@pytest.fixture()
def fullscreen() -> HeadlessFullscreen:
    return HeadlessFullscreen()


@pytest.fixture()
def source() -> FakeImageSource:
    return FakeImageSource()


@pytest.fixture()
def thumbs() -> FakeImageSource:
    return FakeImageSource()


@pytest.fixture()
def make_viewer(bus, scheduler, fullscreen, source):
    """Factory for viewers wired to the shared fakes."""

    def _make(images=("a.jpg", "b.jpg", "c.jpg"), **kwargs) -> GalleryViewer:
        kwargs.setdefault("bus", bus)
        kwargs.setdefault("scheduler", scheduler)
        kwargs.setdefault("fullscreen", fullscreen)
        kwargs.setdefault("image_source", source)
        return GalleryViewer(list(images), **kwargs)

    return _make


class Host:
    """Minimal hosting page: keeps the open flag in sync with on_close."""

    def __init__(self, make_viewer, images=("a.jpg", "b.jpg", "c.jpg")):
        self.closed = 0
        self.indices: List[int] = []
        self.viewer = make_viewer(images, on_close=self.close,
                                  on_index_change=self.indices.append)

    def open(self, index: int = 0) -> None:
        self.viewer.set_open(True, initial_index=index)

    def close(self) -> None:
        self.closed += 1
        self.viewer.set_open(False)


@pytest.fixture()
def host(make_viewer) -> Host:
    return Host(make_viewer)
