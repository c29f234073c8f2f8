"""Gallery content: manifest records and directory listings.

A manifest is a JSON export of the gallery table, either a bare list of
records or an object with an ``images`` list::

    [{"id": "1", "image_url": "photos/a.jpg", "caption": "Opening day",
      "display_order": 0, "is_active": true,
      "uploaded_at": "2024-05-01T10:00:00Z"}]

Relative ``image_url`` values are resolved against the manifest's folder.
"""

from __future__ import annotations
import json
import os
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Iterable, List, Mapping, Optional, Tuple

from .config import MANIFEST_EXTS, MEMORY_ALT_TEXT
from .image_utils import is_remote, is_supported_image, list_images
from .logging import log
from .types import CatalogError, ImageDescriptor

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# fromisoformat before 3.11 only takes 3 or 6 fraction digits and a colon in the offset
_FRACTION_RE = re.compile(r"\.(\d+)")
_OFFSET_RE = re.compile(r"([+-]\d\d)(\d\d)$")


@dataclass
class GalleryRecord:
    """One row of the gallery content store."""
    id: str
    image_url: str
    caption: Optional[str] = None
    display_order: int = 0
    is_active: bool = True
    uploaded_at: datetime = _EPOCH

    def to_descriptor(self) -> ImageDescriptor:
        return ImageDescriptor(
            source=self.image_url,
            alt_text=self.caption or MEMORY_ALT_TEXT,
            caption=self.caption or None,
        )


@dataclass
class Catalog:
    """What to show and where to start."""
    images: Tuple[ImageDescriptor, ...] = ()
    start_index: int = -1
    origin: str = ""
    title: str = "Gallery"
    records: List[GalleryRecord] = field(default_factory=list)


def _parse_time(value: Any) -> datetime:
    if value in (None, ""):
        return _EPOCH
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
    text = _OFFSET_RE.sub(r"\1:\2", text)
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError as e:
        raise CatalogError(f"bad uploaded_at value: {value!r}") from e
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


_TRUE_WORDS = ("true", "yes", "1")
_FALSE_WORDS = ("false", "no", "0")


def _parse_flag(value: Any, position: int) -> bool:
    if value is None:
        return True
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    if isinstance(value, str):
        word = value.strip().lower()
        if word in _TRUE_WORDS:
            return True
        if word in _FALSE_WORDS:
            return False
    raise CatalogError(f"record #{position} has bad is_active value: {value!r}")


def parse_record(raw: Mapping[str, Any], base_dir: str = "", position: int = 0) -> GalleryRecord:
    """Validate one manifest entry."""
    if not isinstance(raw, Mapping):
        raise CatalogError(f"record #{position} is not an object: {raw!r}")
    url = raw.get("image_url") or raw.get("src") or raw.get("source")
    if not url or not isinstance(url, str):
        raise CatalogError(f"record #{position} has no image_url")
    if base_dir and not is_remote(url) and not os.path.isabs(url):
        url = os.path.normpath(os.path.join(base_dir, url))
    try:
        order = int(raw.get("display_order", 0) or 0)
    except (TypeError, ValueError) as e:
        raise CatalogError(f"record #{position} has bad display_order") from e
    caption = raw.get("caption")
    return GalleryRecord(
        id=str(raw.get("id", position)),
        image_url=url,
        caption=str(caption) if caption else None,
        display_order=order,
        is_active=_parse_flag(raw.get("is_active"), position),
        uploaded_at=_parse_time(raw.get("uploaded_at")),
    )


def parse_manifest(data: Any, base_dir: str = "") -> List[GalleryRecord]:
    if isinstance(data, Mapping):
        data = data.get("images")
    if not isinstance(data, list):
        raise CatalogError("manifest must be a list of records or an object with an 'images' list")
    return [parse_record(raw, base_dir, i) for i, raw in enumerate(data)]


def load_manifest(path: str) -> List[GalleryRecord]:
    """Read and validate a JSON manifest file."""
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise CatalogError(f"cannot read manifest {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise CatalogError(f"manifest {path} is not valid JSON: {e}") from e
    return parse_manifest(data, os.path.dirname(os.path.abspath(path)))


def active_records(records: Iterable[GalleryRecord]) -> List[GalleryRecord]:
    """Active records, by display_order ascending, newest upload first on ties."""
    result = [r for r in records if r.is_active]
    result.sort(key=lambda r: r.uploaded_at, reverse=True)
    result.sort(key=lambda r: r.display_order)
    return result


def active_descriptors(records: Iterable[GalleryRecord]) -> Tuple[ImageDescriptor, ...]:
    return tuple(r.to_descriptor() for r in active_records(records))


def catalog_from_path(path: Optional[str]) -> Catalog:
    """Resolve a command-line path into a catalog.

    A manifest yields its active records; a directory yields its images; an
    image file yields its directory with the viewer opened on that file.
    """
    if not path:
        path = os.getcwd()
    path = os.path.abspath(path)

    if os.path.isfile(path) and os.path.splitext(path)[1].lower() in MANIFEST_EXTS:
        records = load_manifest(path)
        images = active_descriptors(records)
        log(f"[CATALOG] Manifest {os.path.basename(path)}: {len(records)} records, {len(images)} active")
        return Catalog(images=images, origin=path, records=records)

    if os.path.isdir(path):
        files = list_images(path)
        log(f"[CATALOG] Found {len(files)} images in {path}")
        return Catalog(images=tuple(ImageDescriptor(source=p) for p in files),
                       origin=path, title=os.path.basename(path) or path)

    if os.path.isfile(path) and is_supported_image(path):
        dirpath = os.path.dirname(path)
        files = list_images(dirpath)
        try:
            start = files.index(path)
        except ValueError:
            start = 0
        log(f"[CATALOG] Found {len(files)} images in {dirpath}, start={start}")
        return Catalog(images=tuple(ImageDescriptor(source=p) for p in files),
                       start_index=start, origin=dirpath,
                       title=os.path.basename(dirpath) or dirpath)

    raise CatalogError(f"not an image, directory or manifest: {path}")
