"""Window-wide event bus with scoped listener ownership."""

from __future__ import annotations
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Type

from .logging import log


@dataclass(frozen=True)
class Event:
    """Base class for bus events."""


@dataclass(frozen=True)
class KeyPressed(Event):
    """A key went down. ``key`` is a raylib key code."""
    key: int


@dataclass(frozen=True)
class FullscreenChanged(Event):
    """The window entered or left fullscreen, whoever caused it."""
    is_fullscreen: bool


Handler = Callable[[Event], None]


class Subscription:
    """Registration of one handler; unsubscribing twice is harmless."""

    def __init__(self, bus: "EventBus", event_type: Type[Event], handler: Handler):
        self._bus = bus
        self.event_type = event_type
        self.handler = handler
        self.active = True

    def unsubscribe(self) -> None:
        if self.active:
            self.active = False
            self._bus._remove(self)


class EventBus:
    """Synchronous publish/subscribe keyed by event class."""

    def __init__(self):
        self._handlers: Dict[Type[Event], List[Subscription]] = {}

    def subscribe(self, event_type: Type[Event], handler: Handler) -> Subscription:
        sub = Subscription(self, event_type, handler)
        self._handlers.setdefault(event_type, []).append(sub)
        return sub

    def _remove(self, sub: Subscription) -> None:
        subs = self._handlers.get(sub.event_type)
        if subs and sub in subs:
            subs.remove(sub)
            if not subs:
                del self._handlers[sub.event_type]

    def publish(self, event: Event) -> int:
        """Deliver event to every handler of its type. Returns handler count."""
        delivered = 0
        for sub in list(self._handlers.get(type(event), ())):
            if not sub.active:
                continue
            try:
                sub.handler(event)
            except Exception as e:
                log(f"[BUS][ERR] {type(event).__name__} handler failed: {e!r}")
            delivered += 1
        return delivered

    def listener_count(self, event_type: Optional[Type[Event]] = None) -> int:
        if event_type is not None:
            return len(self._handlers.get(event_type, ()))
        return sum(len(subs) for subs in self._handlers.values())


class ListenerScope:
    """A group of subscriptions released together.

    Usable as a context manager; leaving the block releases every listener
    acquired inside it, whether the block finished or raised.
    """

    def __init__(self, bus: EventBus):
        self._bus = bus
        self._subs: List[Subscription] = []

    def listen(self, event_type: Type[Event], handler: Handler) -> Subscription:
        sub = self._bus.subscribe(event_type, handler)
        self._subs.append(sub)
        return sub

    @property
    def held(self) -> int:
        return sum(1 for s in self._subs if s.active)

    def release(self) -> None:
        subs, self._subs = self._subs, []
        for sub in subs:
            sub.unsubscribe()

    def __enter__(self) -> "ListenerScope":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
