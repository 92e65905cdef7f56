"""Coordinate math for region requests.

Pure functions and value types, no I/O.
"""

from .region_validator import (
    ValidatedRegion,
    clip_to_boundaries,
    is_within_bounds,
    validate_coordinates,
)
from .virtual_desktop import VirtualDesktopBounds

__all__ = [
    "ValidatedRegion",
    "VirtualDesktopBounds",
    "clip_to_boundaries",
    "is_within_bounds",
    "validate_coordinates",
]
