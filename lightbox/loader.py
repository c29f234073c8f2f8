"""Asynchronous image loading, caching and preloading.

Worker threads do everything that does not need the GPU (fetching and
decoding). Results are queued and handed back on the UI thread by
``poll_ui_events``, where :class:`ImageStore` turns them into textures.
"""

from __future__ import annotations
import os
from collections import OrderedDict, deque
from queue import PriorityQueue, Empty
from threading import Thread, Lock
from typing import Any, Callable, Dict, List, Optional

import httpx

from .config import ASYNC_WORKERS, HTTP_TIMEOUT_S, MAX_FILE_SIZE_MB, IMAGE_CACHE_LIMIT
from .image_utils import is_remote
from .logging import log, debug, now
from .platform import ImageSource, LoadCallback
from .types import LoadPriority, LoadTask, UIEvent, ImageLoadError


def fetch_bytes(source: str, client: Optional[httpx.Client] = None) -> bytes:
    """Read the encoded bytes of an image from disk or over HTTP."""
    limit = MAX_FILE_SIZE_MB * 1024 * 1024
    if is_remote(source):
        try:
            if client is not None:
                response = client.get(source)
            else:
                response = httpx.get(source, timeout=HTTP_TIMEOUT_S, follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            raise ImageLoadError(f"fetch failed: {e}") from e
        data = response.content
    else:
        try:
            if os.path.getsize(source) > limit:
                raise ImageLoadError(f"file too large: {source}")
            with open(source, "rb") as f:
                data = f.read()
        except OSError as e:
            raise ImageLoadError(f"cannot read {source}: {e}") from e
    if len(data) > limit:
        raise ImageLoadError(f"file too large: {len(data) / (1024 * 1024):.1f}MB")
    return data


class AsyncImageLoader:
    """Priority queue of load tasks served by a pool of worker threads."""

    def __init__(self, loader_func: Callable[[str], Any], workers: int = ASYNC_WORKERS):
        self.task_queue: PriorityQueue = PriorityQueue()
        self.loader_func = loader_func
        self.running = True
        self.ui_events: deque = deque()
        self.ui_lock = Lock()
        self.workers: List[Thread] = []

        for _ in range(max(1, workers)):
            worker = Thread(target=self._worker_loop, daemon=True)
            worker.start()
            self.workers.append(worker)

    def _worker_loop(self) -> None:
        while self.running:
            try:
                task = self.task_queue.get(timeout=0.1)
            except Empty:
                continue

            result = None
            error = None
            func = task.func or self.loader_func
            try:
                result = func(task.source)
            except Exception as e:
                error = e

            self._push_ui_event(task.callback, (task.source, result, error))
            self.task_queue.task_done()

    def _push_ui_event(self, callback: Callable, args: tuple) -> None:
        with self.ui_lock:
            self.ui_events.append(UIEvent(callback, args))

    def poll_ui_events(self, max_events: int = 100) -> int:
        """Run queued completion callbacks on the calling (UI) thread."""
        events_to_process = []
        with self.ui_lock:
            while self.ui_events and len(events_to_process) < max_events:
                events_to_process.append(self.ui_events.popleft())

        for event in events_to_process:
            try:
                event.callback(*event.args)
            except Exception as e:
                log(f"[UI_EVENT][ERR] {e!r}")
        return len(events_to_process)

    def submit(self, source: str, priority: LoadPriority, callback: Callable,
               func: Optional[Callable[[str], Any]] = None) -> None:
        self.task_queue.put(LoadTask(source, priority, callback, now(), func))

    def wait_idle(self) -> None:
        """Block until every submitted task has produced its UI event."""
        self.task_queue.join()

    def shutdown(self) -> None:
        self.running = False
        for worker in self.workers:
            worker.join(timeout=1.0)


class ImageStore(ImageSource):
    """Source-keyed cache of uploaded images in front of the async loader.

    ``decode`` runs on a worker and produces CPU-side pixels; ``upload``
    runs on the UI thread and produces whatever the renderer draws;
    ``release`` frees an evicted upload.
    """

    def __init__(
        self,
        loader: AsyncImageLoader,
        decode: Optional[Callable[[str], Any]] = None,
        upload: Callable[[Any], Any] = lambda img: img,
        release: Callable[[Any], None] = lambda tex: None,
        priority: LoadPriority = LoadPriority.CURRENT,
        preload_priority: LoadPriority = LoadPriority.NEIGHBOR,
        limit: int = IMAGE_CACHE_LIMIT,
        name: str = "IMG",
    ):
        self.loader = loader
        self.decode = decode
        self.upload = upload
        self.release = release
        self.priority = priority
        self.preload_priority = preload_priority
        self.limit = limit
        self.name = name
        self._items: "OrderedDict[str, Any]" = OrderedDict()
        self._waiting: Dict[str, List[LoadCallback]] = {}
        self.failed: Dict[str, Exception] = {}

    def get(self, source: str) -> Optional[Any]:
        """Cached upload for source, or None. Counts as a use for eviction."""
        item = self._items.get(source)
        if item is not None:
            self._items.move_to_end(source)
        return item

    def is_pending(self, source: str) -> bool:
        return source in self._waiting

    def load(self, source: str, callback: LoadCallback) -> None:
        cached = self.get(source)
        if cached is not None:
            callback(source, cached, None)
            return
        if source in self._waiting:
            self._waiting[source].append(callback)
            return
        self._waiting[source] = [callback]
        self.failed.pop(source, None)
        self.loader.submit(source, self.priority, self._on_loaded, self.decode)

    def preload(self, source: str) -> None:
        """Fetch in the background. Failed sources are retried only by load()."""
        if source in self._items or source in self._waiting or source in self.failed:
            return
        self._waiting[source] = []
        debug(f"[{self.name}][PRELOAD] {source}")
        self.loader.submit(source, self.preload_priority, self._on_loaded, self.decode)

    def _on_loaded(self, source: str, result: Any, error: Optional[Exception]) -> None:
        callbacks = self._waiting.pop(source, [])
        if error is None:
            try:
                item = self.upload(result)
            except Exception as e:
                error = e
        if error is not None:
            log(f"[{self.name}][ERR] {os.path.basename(source) or source}: {error!r}")
            self.failed[source] = error
            for cb in callbacks:
                cb(source, None, error)
            return

        self._items[source] = item
        self._items.move_to_end(source)
        self._evict()
        for cb in callbacks:
            cb(source, item, None)

    def _evict(self) -> None:
        while len(self._items) > self.limit:
            old_source, old = self._items.popitem(last=False)
            debug(f"[{self.name}][EVICT] {old_source}")
            try:
                self.release(old)
            except Exception as e:
                log(f"[{self.name}][EVICT][ERR] {e!r}")

    def __len__(self) -> int:
        return len(self._items)

    def clear(self) -> None:
        """Release every cached upload."""
        while self._items:
            _, item = self._items.popitem(last=False)
            try:
                self.release(item)
            except Exception as e:
                log(f"[{self.name}][UNLOAD][ERR] {e!r}")
        self._waiting.clear()
