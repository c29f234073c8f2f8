"""Conversion of the accepted ``images`` inputs into ImageDescriptor tuples.

Hosts may hand the viewer a single source string, a list of source strings,
a list of descriptors, or a list of mapping records as they come out of a
content store. All of them pass through :func:`normalize_images` once, and
the viewer only ever deals with the canonical tuple afterwards.
"""

from __future__ import annotations
from typing import Any, Iterable, Mapping, Tuple, Union

from .config import DEFAULT_ALT_TEXT
from .types import ImageDescriptor, DescriptorError

ImagesInput = Union[None, str, ImageDescriptor, Iterable[Any]]

_SOURCE_KEYS = ("source", "src", "image_url", "url")
_ALT_KEYS = ("alt_text", "alt")


def descriptor_from_mapping(record: Mapping[str, Any]) -> ImageDescriptor:
    """Build a descriptor from a dict-like record."""
    source = next((record[k] for k in _SOURCE_KEYS if record.get(k)), None)
    if source is None:
        raise DescriptorError(f"record has no image source: {dict(record)!r}")
    alt = next((record[k] for k in _ALT_KEYS if record.get(k)), DEFAULT_ALT_TEXT)
    return ImageDescriptor(source=str(source), alt_text=str(alt),
                           caption=record.get("caption") or None)


def _to_descriptor(item: Any) -> ImageDescriptor:
    if isinstance(item, ImageDescriptor):
        return item
    if isinstance(item, str):
        return ImageDescriptor(source=item)
    if isinstance(item, Mapping):
        return descriptor_from_mapping(item)
    raise DescriptorError(f"unsupported image item: {item!r}")


def normalize_images(images: ImagesInput) -> Tuple[ImageDescriptor, ...]:
    """Convert any accepted ``images`` shape to a tuple of descriptors."""
    if images is None:
        return ()
    if isinstance(images, (str, ImageDescriptor)):
        return (_to_descriptor(images),)
    if isinstance(images, Mapping):
        return (descriptor_from_mapping(images),)
    try:
        items = list(images)
    except TypeError:
        raise DescriptorError(f"unsupported images input: {images!r}") from None
    return tuple(_to_descriptor(item) for item in items)
