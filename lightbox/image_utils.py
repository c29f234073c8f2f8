"""Image utilities - listing, probing, normalising and thumbnails."""

from __future__ import annotations
import io
import os
import hashlib
from typing import Optional, Tuple, List

from PIL import Image, ImageOps, UnidentifiedImageError

from .config import (
    IMG_EXTS,
    MAX_FILE_SIZE_MB,
    MAX_IMAGE_DIMENSION,
    THUMB_CACHE_DIR,
)
from .types import ImageLoadError


def is_remote(source: str) -> bool:
    """True for http(s) URLs."""
    return source.lower().startswith(("http://", "https://"))


def is_supported_image(filepath: str) -> bool:
    """Check if file has a supported image extension."""
    ext = os.path.splitext(filepath)[1].lower()
    return ext in IMG_EXTS


def list_images(dirpath: str) -> List[str]:
    """List all supported image files in directory, sorted by name.

    Args:
        dirpath: Directory path to scan.

    Returns:
        List of full paths to image files.
    """
    try:
        names = sorted(os.listdir(dirpath))
    except OSError:
        return []

    result = []
    for name in names:
        path = os.path.join(dirpath, name)
        if os.path.isfile(path) and is_supported_image(name):
            result.append(path)
    return result


def probe_image_dimensions(filepath: str) -> Optional[Tuple[int, int]]:
    """Read image dimensions from the header without decoding pixels."""
    try:
        with Image.open(filepath) as img:
            return img.size
    except (OSError, UnidentifiedImageError):
        return None


def needs_normalizing(filepath: str) -> bool:
    """Check whether a local file must be re-encoded before raylib can show it.

    Files raylib cannot decode, and files larger than the texture limit, go
    through :func:`normalize_image_bytes` first.
    """
    if not is_supported_image(filepath):
        return True
    dims = probe_image_dimensions(filepath)
    if dims is None:
        return True
    w, h = dims
    return w > MAX_IMAGE_DIMENSION or h > MAX_IMAGE_DIMENSION


def _open_bytes(data: bytes) -> Image.Image:
    if len(data) / (1024 * 1024) > MAX_FILE_SIZE_MB:
        raise ImageLoadError(f"file too large: {len(data) / (1024 * 1024):.1f}MB")
    try:
        img = Image.open(io.BytesIO(data))
        img.load()
    except (OSError, UnidentifiedImageError) as e:
        raise ImageLoadError(f"cannot decode image: {e}") from e
    img = ImageOps.exif_transpose(img)
    if img.mode not in ("RGB", "RGBA"):
        img = img.convert("RGBA")
    return img


def _encode_png(img: Image.Image) -> bytes:
    buf = io.BytesIO()
    img.save(buf, format="PNG", compress_level=1)
    return buf.getvalue()


def normalize_image_bytes(data: bytes, max_dim: int = MAX_IMAGE_DIMENSION) -> Tuple[bytes, int, int]:
    """Decode any Pillow-readable image and re-encode it as PNG.

    Args:
        data: Encoded image bytes.
        max_dim: Longest allowed side; larger images are scaled down.

    Returns:
        Tuple of (png_bytes, width, height).
    """
    img = _open_bytes(data)
    w, h = img.size
    if w <= 0 or h <= 0:
        raise ImageLoadError("empty image")
    if w > max_dim or h > max_dim:
        img.thumbnail((max_dim, max_dim), Image.Resampling.LANCZOS)
    return _encode_png(img), img.size[0], img.size[1]


def make_thumbnail(data: bytes, size: int) -> bytes:
    """Square, center-cropped PNG thumbnail (object-cover)."""
    img = _open_bytes(data)
    thumb = ImageOps.fit(img, (size, size), Image.Resampling.LANCZOS)
    return _encode_png(thumb)


def cache_key(source: str, variant: str = "") -> str:
    """Stable key for a source, including file identity for local paths."""
    try:
        stat = os.stat(source)
        key_data = f"{source}|{stat.st_mtime_ns}|{stat.st_size}|{variant}"
    except OSError:
        key_data = f"{source}|{variant}"
    return hashlib.sha1(key_data.encode("utf-8")).hexdigest()


def cache_path(source: str, variant: str = "", cache_dir: str = THUMB_CACHE_DIR) -> str:
    """Path where a derived PNG for source is cached."""
    os.makedirs(cache_dir, exist_ok=True)
    return os.path.join(cache_dir, f"{cache_key(source, variant)}.png")
