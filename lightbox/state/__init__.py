"""State management submodules for Lightbox."""

from .viewer import ViewerState
from .input import TouchState
from .page import GridState, StripState

__all__ = [
    'ViewerState',
    'TouchState',
    'GridState',
    'StripState',
]
