"""Tests for Pillow-backed image helpers."""

from __future__ import annotations

import io
import os

import pytest
from PIL import Image

from lightbox.image_utils import (
    is_remote, is_supported_image, list_images, probe_image_dimensions,
    needs_normalizing, normalize_image_bytes, make_thumbnail, cache_key, cache_path,
)
from lightbox.types import ImageLoadError


def _png_bytes(w: int, h: int, mode: str = "RGB") -> bytes:
    buf = io.BytesIO()
    Image.new(mode, (w, h)).save(buf, format="PNG")
    return buf.getvalue()


class TestClassification:
    @pytest.mark.parametrize("src, remote", [
        ("https://cdn.example.com/a.jpg", True),
        ("HTTP://example.com/a.jpg", True),
        ("/home/me/a.jpg", False),
        ("ftp://example.com/a.jpg", False),
    ])
    def test_is_remote(self, src, remote) -> None:
        assert is_remote(src) is remote

    def test_supported_extensions(self) -> None:
        assert is_supported_image("a.JPG")
        assert not is_supported_image("a.webp")

    def test_list_images_sorted_and_filtered(self, tmp_path) -> None:
        for name in ("b.png", "a.jpg", "c.txt"):
            (tmp_path / name).write_bytes(b"x")
        (tmp_path / "sub.png").mkdir()
        names = [os.path.basename(p) for p in list_images(str(tmp_path))]
        assert names == ["a.jpg", "b.png"]

    def test_list_missing_dir(self, tmp_path) -> None:
        assert list_images(str(tmp_path / "nope")) == []


class TestProbe:
    def test_dimensions(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        path.write_bytes(_png_bytes(30, 20))
        assert probe_image_dimensions(str(path)) == (30, 20)

    def test_garbage(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        path.write_bytes(b"not an image")
        assert probe_image_dimensions(str(path)) is None
        assert needs_normalizing(str(path))

    def test_plain_png_needs_nothing(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        path.write_bytes(_png_bytes(8, 8))
        assert not needs_normalizing(str(path))

    def test_unsupported_format_needs_normalizing(self, tmp_path) -> None:
        path = tmp_path / "a.webp"
        path.write_bytes(b"whatever")
        assert needs_normalizing(str(path))


class TestNormalize:
    def test_downscales_large_images(self) -> None:
        png, w, h = normalize_image_bytes(_png_bytes(400, 100), max_dim=200)
        assert (w, h) == (200, 50)
        with Image.open(io.BytesIO(png)) as img:
            assert img.format == "PNG"
            assert img.size == (200, 50)

    def test_palette_converted(self) -> None:
        png, _, _ = normalize_image_bytes(_png_bytes(10, 10, mode="P"))
        with Image.open(io.BytesIO(png)) as img:
            assert img.mode == "RGBA"

    def test_undecodable(self) -> None:
        with pytest.raises(ImageLoadError):
            normalize_image_bytes(b"garbage")

    def test_thumbnail_is_square_crop(self) -> None:
        thumb = make_thumbnail(_png_bytes(300, 100), 64)
        with Image.open(io.BytesIO(thumb)) as img:
            assert img.size == (64, 64)


class TestCache:
    def test_key_depends_on_variant(self) -> None:
        assert cache_key("a.jpg", "full") != cache_key("a.jpg", "thumb")
        assert cache_key("a.jpg", "full") == cache_key("a.jpg", "full")

    def test_key_changes_with_file_content(self, tmp_path) -> None:
        path = tmp_path / "a.png"
        path.write_bytes(b"one")
        first = cache_key(str(path))
        path.write_bytes(b"longer content")
        assert cache_key(str(path)) != first

    def test_path_inside_cache_dir(self, tmp_path) -> None:
        p = cache_path("https://x/a.jpg", "full", str(tmp_path / "cache"))
        assert p.startswith(str(tmp_path / "cache"))
        assert p.endswith(".png")
        assert os.path.isdir(tmp_path / "cache")
