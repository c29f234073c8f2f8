"""Lightbox - a gallery page with a modal image viewer."""

__version__ = "0.1.0"
