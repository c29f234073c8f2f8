"""Tests for the async loader, the image store and byte fetching."""

from __future__ import annotations

import httpx
import pytest

from lightbox.loader import AsyncImageLoader, ImageStore, fetch_bytes
from lightbox.types import ImageLoadError, LoadPriority


class RecordingLoader:
    """Stands in for AsyncImageLoader; tasks finish when the test says so."""

    def __init__(self):
        self.submitted = []

    def submit(self, source, priority, callback, func=None):
        self.submitted.append((source, priority, callback, func))

    def finish(self, source, result=None, error=None):
        for i, (src, _, cb, _) in enumerate(self.submitted):
            if src == source:
                del self.submitted[i]
                cb(source, result, error)
                return
        raise AssertionError(f"{source} was never submitted")


@pytest.fixture()
def loader() -> RecordingLoader:
    return RecordingLoader()


class TestImageStore:
    def test_load_then_cache_hit(self, loader) -> None:
        store = ImageStore(loader, upload=lambda img: f"tex:{img}")
        results = []
        store.load("a", lambda s, r, e: results.append((s, r, e)))
        assert store.is_pending("a")
        loader.finish("a", "pixels")
        assert results == [("a", "tex:pixels", None)]
        store.load("a", lambda s, r, e: results.append((s, r, e)))
        assert results[-1] == ("a", "tex:pixels", None)
        assert len(loader.submitted) == 0

    def test_concurrent_loads_share_one_task(self, loader) -> None:
        store = ImageStore(loader)
        hits = []
        store.load("a", lambda s, r, e: hits.append(1))
        store.load("a", lambda s, r, e: hits.append(2))
        assert len(loader.submitted) == 1
        loader.finish("a", "px")
        assert hits == [1, 2]

    def test_preload_uses_lower_priority(self, loader) -> None:
        store = ImageStore(loader)
        store.preload("b")
        store.preload("b")
        assert [(s, p) for s, p, _, _ in loader.submitted] == [("b", LoadPriority.NEIGHBOR)]

    def test_load_joins_running_preload(self, loader) -> None:
        store = ImageStore(loader)
        got = []
        store.preload("b")
        store.load("b", lambda s, r, e: got.append(r))
        assert len(loader.submitted) == 1
        loader.finish("b", "px")
        assert got == ["px"]

    def test_error_reaches_callbacks(self, loader) -> None:
        store = ImageStore(loader)
        errors = []
        store.load("bad", lambda s, r, e: errors.append(e))
        loader.finish("bad", error=ImageLoadError("nope"))
        assert isinstance(errors[0], ImageLoadError)
        assert "bad" in store.failed
        assert store.get("bad") is None

    def test_failed_source_not_preloaded_again(self, loader) -> None:
        store = ImageStore(loader)
        store.preload("bad")
        loader.finish("bad", error=ImageLoadError("nope"))
        store.preload("bad")
        assert loader.submitted == []
        store.load("bad", lambda s, r, e: None)
        assert len(loader.submitted) == 1

    def test_upload_failure_is_an_error(self, loader) -> None:
        def upload(img):
            raise RuntimeError("gpu gone")

        store = ImageStore(loader, upload=upload)
        errors = []
        store.load("a", lambda s, r, e: errors.append(e))
        loader.finish("a", "px")
        assert isinstance(errors[0], RuntimeError)

    def test_lru_eviction_releases(self, loader) -> None:
        released = []
        store = ImageStore(loader, release=released.append, limit=2)
        for src in ("a", "b"):
            store.preload(src)
            loader.finish(src, src)
        store.get("a")
        store.preload("c")
        loader.finish("c", "c")
        assert released == ["b"]
        assert len(store) == 2

    def test_clear_releases_everything(self, loader) -> None:
        released = []
        store = ImageStore(loader, release=released.append)
        store.preload("a")
        loader.finish("a", "A")
        store.clear()
        assert released == ["A"]
        assert len(store) == 0

    def test_decode_passed_to_loader(self, loader) -> None:
        decode = lambda s: s
        store = ImageStore(loader, decode=decode)
        store.preload("a")
        assert loader.submitted[0][3] is decode


class TestAsyncImageLoader:
    def test_results_delivered_on_poll(self) -> None:
        loader = AsyncImageLoader(lambda src: src.upper(), workers=2)
        try:
            got = []
            loader.submit("a", LoadPriority.CURRENT, lambda s, r, e: got.append((s, r, e)))
            loader.submit("b", LoadPriority.NEIGHBOR, lambda s, r, e: got.append((s, r, e)))
            loader.wait_idle()
            assert got == []
            assert loader.poll_ui_events() == 2
            assert sorted(got) == [("a", "A", None), ("b", "B", None)]
        finally:
            loader.shutdown()

    def test_errors_delivered_as_values(self) -> None:
        def boom(src):
            raise ImageLoadError(src)

        loader = AsyncImageLoader(boom, workers=1)
        try:
            got = []
            loader.submit("x", LoadPriority.CURRENT, lambda s, r, e: got.append(e))
            loader.wait_idle()
            loader.poll_ui_events()
            assert isinstance(got[0], ImageLoadError)
        finally:
            loader.shutdown()

    def test_task_func_overrides_default(self) -> None:
        loader = AsyncImageLoader(lambda src: "default", workers=1)
        try:
            got = []
            loader.submit("x", LoadPriority.THUMBNAIL, lambda s, r, e: got.append(r),
                          func=lambda src: "thumb")
            loader.wait_idle()
            loader.poll_ui_events()
            assert got == ["thumb"]
        finally:
            loader.shutdown()


class TestFetchBytes:
    def test_local_file(self, tmp_path) -> None:
        path = tmp_path / "a.bin"
        path.write_bytes(b"\x89PNG data")
        assert fetch_bytes(str(path)) == b"\x89PNG data"

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(ImageLoadError):
            fetch_bytes(str(tmp_path / "missing.png"))

    def test_remote_ok(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(200, content=b"img"))
        with httpx.Client(transport=transport) as client:
            assert fetch_bytes("https://example.com/a.jpg", client) == b"img"

    def test_remote_http_error(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(404))
        with httpx.Client(transport=transport) as client:
            with pytest.raises(ImageLoadError):
                fetch_bytes("https://example.com/missing.jpg", client)
