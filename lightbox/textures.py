"""Image decoding (worker threads) and texture upload (UI thread).

raylib decodes local files it understands directly. Everything else (remote
URLs, formats raylib lacks, oversized images, thumbnails) goes through Pillow
into a PNG under the cache directory first.
"""

from __future__ import annotations
import os
from typing import Any, Callable

from .config import THUMB_CACHE_DIR, THUMB_GRID_PX
from .image_utils import (
    is_remote, needs_normalizing, normalize_image_bytes, make_thumbnail, cache_path,
)
from .loader import fetch_bytes
from .logging import log, debug
from .rl_compat import rl, load_image, is_texture_valid, texture_id
from .types import ImageLoadError, TextureInfo

TEXTURE_FILTER_BILINEAR = 1


def _write_cached(path: str, data: bytes) -> None:
    tmp = f"{path}.{os.getpid()}.tmp"
    with open(tmp, "wb") as f:
        f.write(data)
    os.replace(tmp, path)


def _load_checked(path: str, source: str) -> Any:
    img = load_image(path)
    if img.width <= 0 or img.height <= 0:
        raise ImageLoadError(f"raylib could not decode {source}")
    return img


def _cached_png(source: str, variant: str, produce: Callable[[bytes], bytes],
                cache_dir: str) -> str:
    path = cache_path(source, variant, cache_dir)
    if not os.path.exists(path):
        png = produce(fetch_bytes(source))
        _write_cached(path, png)
        debug(f"[CACHE][WRITE] {variant} {os.path.basename(path)}")
    return path


def decode_image(source: str, cache_dir: str = THUMB_CACHE_DIR) -> Any:
    """Decode a full-size image into a CPU-side raylib Image."""
    if not is_remote(source) and not needs_normalizing(source):
        return _load_checked(source, source)
    path = _cached_png(source, "full", lambda data: normalize_image_bytes(data)[0], cache_dir)
    return _load_checked(path, source)


def decode_thumbnail(source: str, cache_dir: str = THUMB_CACHE_DIR) -> Any:
    """Decode a square, cropped grid thumbnail into a raylib Image."""
    path = _cached_png(source, f"thumb{THUMB_GRID_PX}",
                       lambda data: make_thumbnail(data, THUMB_GRID_PX), cache_dir)
    return _load_checked(path, source)


def upload_texture(img: Any) -> TextureInfo:
    """Move a decoded Image to the GPU. Must run on the UI thread."""
    tex = rl.LoadTextureFromImage(img)
    w, h = img.width, img.height
    rl.UnloadImage(img)
    if not is_texture_valid(tex):
        raise ImageLoadError("texture upload failed")
    rl.SetTextureFilter(tex, TEXTURE_FILTER_BILINEAR)
    return TextureInfo(tex=tex, w=w, h=h)


def unload_texture(ti: TextureInfo) -> None:
    if ti is None or not is_texture_valid(ti.tex):
        return
    tex_id = texture_id(ti.tex)
    rl.UnloadTexture(ti.tex)
    log(f"[UNLOAD] Texture id={tex_id}")
